"""
Mock adapters — test doubles for the runner and the fetcher.

Used by the test suite to simulate package managers, installers and
release hosts without touching the machine. Both record every call
and return success unless told otherwise.
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

from eks_toolbox.adapters.base import CommandResult, Fetcher, Runner
from eks_toolbox.core.errors import DownloadError


class MockRunner(Runner):
    """Universal mock runner.

    Responses are matched by argv prefix, longest prefix first, so
    ``("yum", "install", "-y", "curl")`` can fail while every other
    ``yum`` call succeeds. A response may be a ``CommandResult`` or a
    callable receiving the argv (to emulate side effects).
    """

    def __init__(
        self,
        default_stdout: str = "",
        on_unmatched: Callable[[list[str]], CommandResult] | None = None,
    ) -> None:
        self._default_stdout = default_stdout
        self.on_unmatched = on_unmatched
        self._responses: dict[tuple[str, ...], CommandResult | Callable] = {}
        self._calls: list[dict] = []

    @property
    def calls(self) -> list[dict]:
        """Every call as ``{"argv", "privileged", "cwd"}``."""
        return self._calls

    @property
    def argvs(self) -> list[list[str]]:
        return [c["argv"] for c in self._calls]

    @property
    def call_count(self) -> int:
        return len(self._calls)

    def set_response(self, prefix: tuple[str, ...], response: CommandResult | Callable) -> None:
        self._responses[tuple(prefix)] = response

    def set_failure(self, prefix: tuple[str, ...], stderr: str = "Mock failure", returncode: int = 1) -> None:
        self._responses[tuple(prefix)] = CommandResult.failure(
            list(prefix), returncode=returncode, stderr=stderr,
        )

    def set_output(self, prefix: tuple[str, ...], stdout: str) -> None:
        self._responses[tuple(prefix)] = CommandResult.success(list(prefix), stdout=stdout)

    def run(
        self,
        argv: list[str],
        *,
        privileged: bool = False,
        cwd: Path | None = None,
        timeout: int | None = None,
    ) -> CommandResult:
        self._calls.append({"argv": list(argv), "privileged": privileged, "cwd": cwd})

        for prefix in sorted(self._responses, key=len, reverse=True):
            if tuple(argv[: len(prefix)]) == prefix:
                response = self._responses[prefix]
                if callable(response):
                    return response(list(argv))
                return response.model_copy(update={"argv": list(argv)})

        if self.on_unmatched is not None:
            return self.on_unmatched(list(argv))
        return CommandResult.success(list(argv), stdout=self._default_stdout)

    def reset(self) -> None:
        self._calls.clear()
        self._responses.clear()


class MockFetcher(Fetcher):
    """Serves canned bodies per URL; unknown URLs raise ``DownloadError``."""

    def __init__(self, bodies: dict[str, bytes | str] | None = None) -> None:
        self._bodies: dict[str, bytes | str] = dict(bodies or {})
        self.requested: list[str] = []

    def set_body(self, url: str, body: bytes | str) -> None:
        self._bodies[url] = body

    def remove_body(self, url: str) -> None:
        self._bodies.pop(url, None)

    def _get(self, url: str) -> bytes:
        self.requested.append(url)
        if url not in self._bodies:
            raise DownloadError(f"HTTP 404 fetching {url}")
        body = self._bodies[url]
        return body.encode() if isinstance(body, str) else body

    def fetch_text(self, url: str) -> str:
        return self._get(url).decode().strip()

    def download(self, url: str, dest: Path) -> Path:
        data = self._get(url)
        dest.parent.mkdir(parents=True, exist_ok=True)
        dest.write_bytes(data)
        return dest
