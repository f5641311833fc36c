"""
Artifact handling — unpack release archives and place executables.

Extraction refuses members that would land outside the scratch
directory. Zip members keep their Unix permission bits (the AWS
bundle's installer and embedded interpreter must stay executable).
"""

from __future__ import annotations

import logging
import os
import stat
import tarfile
import zipfile
from pathlib import Path

from eks_toolbox.adapters.base import CommandResult, Runner
from eks_toolbox.core.errors import ArtifactError

logger = logging.getLogger(__name__)


def _inside(base: Path, target: Path) -> bool:
    try:
        target.resolve().relative_to(base.resolve())
    except ValueError:
        return False
    return True


def _extract_member(zf: zipfile.ZipFile, info: zipfile.ZipInfo, dest: Path, target: Path) -> None:
    mode = info.external_attr >> 16
    if info.is_dir():
        target.mkdir(parents=True, exist_ok=True)
        return

    target.parent.mkdir(parents=True, exist_ok=True)
    if stat.S_ISLNK(mode):
        link = zf.read(info).decode("utf-8")
        if not _inside(dest, target.parent / link):
            raise ArtifactError(f"Refusing symlink outside destination: {info.filename} -> {link}")
        target.symlink_to(link)
        return

    with zf.open(info) as src, open(target, "wb") as out:
        while chunk := src.read(1024 * 1024):
            out.write(chunk)
    if mode & 0o777:
        os.chmod(target, mode & 0o777)


def extract_zip(archive: Path, dest: Path) -> Path:
    """Extract ``archive`` into ``dest`` preserving modes and symlinks."""
    try:
        zf = zipfile.ZipFile(archive)
    except (zipfile.BadZipFile, OSError) as e:
        raise ArtifactError(f"{archive.name} is not a valid zip archive: {e}") from e

    with zf:
        for info in zf.infolist():
            target = dest / info.filename
            if not _inside(dest, target):
                raise ArtifactError(f"Refusing zip entry outside destination: {info.filename}")
            try:
                _extract_member(zf, info, dest, target)
            except (OSError, zipfile.BadZipFile, UnicodeDecodeError) as e:
                raise ArtifactError(f"Failed to extract {info.filename} from {archive.name}: {e}") from e

    logger.debug("Extracted %s into %s", archive.name, dest)
    return dest


def extract_tar(archive: Path, dest: Path) -> Path:
    """Extract a gzip tarball into ``dest`` with the ``data`` filter."""
    try:
        with tarfile.open(archive, "r:gz") as tar:
            tar.extractall(path=dest, filter="data")
    except tarfile.FilterError as e:
        raise ArtifactError(f"Refusing unsafe tar entry in {archive.name}: {e}") from e
    except (tarfile.TarError, OSError, EOFError) as e:
        raise ArtifactError(f"{archive.name} is not a valid tar.gz archive: {e}") from e

    logger.debug("Extracted %s into %s", archive.name, dest)
    return dest


def unpack(archive: Path, archive_format: str, member: str, dest: Path) -> Path:
    """Unpack ``archive`` (if it is one) and return the path of ``member``.

    Raises:
        ArtifactError: Unknown format, corrupt archive, or missing member.
    """
    if archive_format == "zip":
        extract_zip(archive, dest)
    elif archive_format == "tar.gz":
        extract_tar(archive, dest)
    elif archive_format != "binary":
        raise ArtifactError(f"Unknown archive format: {archive_format!r}")

    path = dest / member
    if not path.is_file():
        raise ArtifactError(f"{member} not found in {archive.name}")
    try:
        path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    except OSError as e:
        raise ArtifactError(f"Cannot make {member} executable: {e}") from e
    return path


def place_binary(runner: Runner, source: Path, bin_dir: Path, name: str) -> CommandResult:
    """Install ``source`` as ``bin_dir/name`` with mode 0755 (privileged)."""
    target = bin_dir / name
    logger.debug("Placing %s at %s", source, target)
    return runner.run(
        ["install", "-m", "0755", str(source), str(target)],
        privileged=True,
    )
