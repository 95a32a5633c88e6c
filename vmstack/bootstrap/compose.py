"""Thin wrapper over the `docker compose` CLI for one project directory."""

import logging
from pathlib import Path

from vmstack.utils.commands import run_command

logger = logging.getLogger(__name__)


class ComposeProject:
    def __init__(self, project_dir: Path, show_logs: bool = False):
        self.project_dir = project_dir
        self.show_logs = show_logs

    def _run(self, *args: str, show_logs: bool | None = None):
        if show_logs is None:
            show_logs = self.show_logs
        return run_command(
            ["docker", "compose", *args],
            cwd=self.project_dir,
            show_logs=show_logs,
        )

    def down(self) -> None:
        """Stop running containers. Nothing running is not an error."""
        logger.info("Stopping any existing containers...")
        try:
            self._run("down")
        except RuntimeError as e:
            logger.warning(f"docker compose down failed: {e}")

    def pull(self) -> None:
        logger.info("Pulling latest Docker images...")
        self._run("pull")

    def up(self, build: bool = False) -> None:
        logger.info("Starting Docker Compose services...")
        args = ["up", "-d"]
        if build:
            args.append("--build")
        self._run(*args)

    def restart(self, service: str) -> None:
        logger.info(f"Restarting {service}")
        self._run("restart", service)

    def run_once(self, service: str) -> None:
        """Run a one-off service container and remove it afterwards."""
        self._run("run", "--rm", service)

    def running_services(self) -> set[str]:
        result = self._run(
            "ps", "--services", "--filter", "status=running", show_logs=False
        )
        return {line.strip() for line in result.stdout.splitlines() if line.strip()}

    def status(self) -> str:
        return self._run("ps", show_logs=False).stdout
