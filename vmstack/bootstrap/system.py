"""Host level setup on the VM: packages, docker, logrotate, cron."""

import logging
import os
import shutil
import tempfile
from pathlib import Path

import requests

from vmstack.bootstrap.defaults import (
    COMPOSE_PLUGIN_PACKAGE,
    DOCKER_INSTALL_URL,
    ESSENTIAL_PACKAGES,
    LOGROTATE_CONFIG,
    LOGROTATE_TEMPLATE,
)
from vmstack.utils.commands import command_succeeds, run_command

logger = logging.getLogger(__name__)


def apt_update() -> None:
    logger.info("Updating system packages...")
    run_command(["apt-get", "update"])


def install_packages(packages: list[str]) -> None:
    logger.info(f"Installing packages: {' '.join(packages)}")
    run_command(["apt-get", "install", "-y", *packages])


def install_essential_tools() -> None:
    install_packages(ESSENTIAL_PACKAGES)


def ensure_docker() -> bool:
    """Install docker with the upstream convenience script if missing.

    Returns:
        True if docker was installed by this call
    """
    if shutil.which("docker"):
        logger.info("Docker already installed")
        return False

    logger.info("Installing Docker...")
    response = requests.get(DOCKER_INSTALL_URL, timeout=60)
    response.raise_for_status()

    fd, script_path = tempfile.mkstemp(prefix="get-docker-", suffix=".sh")
    try:
        with os.fdopen(fd, "w") as f:
            f.write(response.text)
        run_command(["sh", script_path])
    finally:
        os.unlink(script_path)
    return True


def ensure_compose_plugin() -> bool:
    if command_succeeds(["docker", "compose", "version"]):
        logger.info("Docker Compose plugin already installed")
        return False

    logger.info("Installing Docker Compose plugin...")
    install_packages([COMPOSE_PLUGIN_PACKAGE])
    return True


def write_logrotate_config(path: Path = LOGROTATE_CONFIG) -> None:
    logger.info("Setting up log rotation...")
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(LOGROTATE_TEMPLATE)


def read_crontab() -> str:
    """Current user's crontab. No crontab yet reads as empty."""
    try:
        return run_command(["crontab", "-l"]).stdout
    except RuntimeError:
        return ""


def install_cron_entry(schedule: str, command: str) -> bool:
    """Add `schedule command` to the crontab unless the command is present.

    Returns:
        True if the crontab was changed
    """
    current = read_crontab()
    if any(command in line for line in current.splitlines()):
        logger.info("Cron entry already installed")
        return False

    logger.info(f"Installing cron entry: {schedule} {command}")
    lines = [line for line in current.splitlines() if line.strip()]
    lines.append(f"{schedule} {command}")
    run_command(["crontab", "-"], input_text="\n".join(lines) + "\n")
    return True


def install_script(path: Path, body: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(body)
    path.chmod(0o755)
    logger.info(f"Installed {path}")
