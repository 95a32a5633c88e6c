import logging
import subprocess
from pathlib import Path

logger = logging.getLogger(__name__)


def run_command(
    cmd: list[str],
    cwd: Path | str | None = None,
    show_logs: bool = False,
    input_text: str | None = None,
) -> subprocess.CompletedProcess:
    """Run a command, raising RuntimeError if it exits non-zero."""
    logger.debug(f"Running: {' '.join(cmd)}")
    result = subprocess.run(
        cmd,
        cwd=cwd,
        capture_output=not show_logs,
        text=True,
        input=input_text,
    )
    if result.returncode != 0:
        stderr = (result.stderr or "").strip()
        raise RuntimeError(f"Command failed: {' '.join(cmd)}: {stderr}")
    return result


def command_succeeds(cmd: list[str], cwd: Path | str | None = None) -> bool:
    """Return True if the command exits zero. A missing binary is False."""
    try:
        result = subprocess.run(cmd, cwd=cwd, capture_output=True, text=True)
    except FileNotFoundError:
        return False
    return result.returncode == 0
