"""
Installer services — one module per step of the run.

    os_detect        → HostProfile from /etc/os-release
    package_install  → prerequisite packages + download-tool fallback
    artifacts        → unpack archives, place executables
    tool_install     → fetch/install/verify one CLI
    tool_version     → presence + version probes
    summary          → final presence report
    orchestrator     → the linear run
"""
