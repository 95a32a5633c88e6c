"""Boot-time bootstrapper: runs once per VM boot under the guest init."""

import logging
import shlex
import time

from vmstack.bootstrap import system
from vmstack.bootstrap.compose import ComposeProject
from vmstack.bootstrap.defaults import (
    BOOT_COMMAND,
    CHECK_SCRIPT,
    HEALTH_CHECK_SCHEDULE,
    MONITOR_LOG,
    OLLAMA_CONTAINER,
    OLLAMA_INIT_SERVICE,
    OLLAMA_SERVICE,
    STARTUP_LOG,
    UPDATE_SCRIPT,
)
from vmstack.bootstrap.env_file import ensure_env_file
from vmstack.bootstrap.repo import clone_or_update, pull
from vmstack.config import BootConfigs
from vmstack.utils.commands import run_command

logger = logging.getLogger(__name__)


class Bootstrapper:
    def __init__(self, configs: BootConfigs, show_logs: bool = False):
        self.configs = configs
        self.compose = ComposeProject(configs.app_dir, show_logs=show_logs)

    def run(self) -> None:
        """Bring the host and the compose stack up."""
        logger.info(f"Starting deployment of {self.configs.app.repo_name}")

        system.apt_update()
        system.ensure_docker()
        system.ensure_compose_plugin()
        system.install_essential_tools()

        clone_or_update(
            self.configs.app.repo_url,
            self.configs.app.branch,
            self.configs.app_dir,
        )
        ensure_env_file(self.configs)

        self.compose.down()
        self.compose.pull()
        self.compose.up()

        logger.info("Waiting for services to initialize...")
        time.sleep(self.configs.settle_seconds)
        self.pull_model()

        logger.info(f"Service status:\n{self.compose.status()}")

        system.write_logrotate_config()
        self.install_operational_scripts()

        logger.info("Deployment completed successfully")
        self.log_summary()

    def pull_model(self) -> None:
        """Pull the Ollama model. Failures are left for the operator."""
        if OLLAMA_SERVICE not in self.compose.running_services():
            logger.info("Ollama service not found, skipping model pull")
            return

        logger.info("Pulling Ollama model...")
        try:
            self.compose.run_once(OLLAMA_INIT_SERVICE)
            return
        except RuntimeError as e:
            logger.warning(
                f"Failed to pull model via init service, "
                f"trying direct approach: {e}"
            )

        try:
            run_command(
                [
                    "docker",
                    "exec",
                    OLLAMA_CONTAINER,
                    "ollama",
                    "pull",
                    self.configs.ollama_model,
                ]
            )
        except RuntimeError as e:
            logger.warning(
                f"Failed to pull Ollama model, please do it manually later: {e}"
            )

    def install_operational_scripts(self) -> None:
        app_dir = shlex.quote(str(self.configs.app_dir))
        branch = shlex.quote(self.configs.app.branch)

        system.install_script(
            CHECK_SCRIPT,
            "#!/bin/bash\n"
            f"exec {BOOT_COMMAND} check --app-dir {app_dir} \"$@\"\n",
        )
        system.install_script(
            UPDATE_SCRIPT,
            "#!/bin/bash\n"
            f"exec {BOOT_COMMAND} update --app-dir {app_dir} "
            f"--branch {branch} \"$@\"\n",
        )
        system.install_cron_entry(
            HEALTH_CHECK_SCHEDULE,
            f"{CHECK_SCRIPT} >> {MONITOR_LOG} 2>&1",
        )

    def update(self) -> None:
        """Redeploy on demand: pull, rebuild and restart the stack.

        A failed pull leaves the current checkout in place and the stack
        is rebuilt from it.
        """
        logger.info("Pulling latest changes...")
        try:
            pull(self.configs.app.branch, self.configs.app_dir)
        except RuntimeError as e:
            logger.warning(f"Pull failed, rebuilding the current checkout: {e}")

        logger.info("Rebuilding and restarting services...")
        self.compose.down()
        self.compose.up(build=True)

        logger.info("Update complete!")
        logger.info(f"Service status:\n{self.compose.status()}")

    def log_summary(self) -> None:
        app_dir = self.configs.app_dir
        logger.info(
            "\n".join(
                [
                    "Important files:",
                    f"  - Application: {app_dir}",
                    f"  - Environment: {self.configs.env_file}",
                    f"  - Logs: {STARTUP_LOG}",
                    "Useful commands:",
                    "  - Check services: docker compose ps",
                    "  - View logs: docker compose logs -f",
                    f"  - Update app: {UPDATE_SCRIPT}",
                    f"  - Check health: {CHECK_SCRIPT}",
                ]
            )
        )
