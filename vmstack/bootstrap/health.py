"""Periodic health check run from cron on the VM."""

import logging

from vmstack.bootstrap.compose import ComposeProject
from vmstack.bootstrap.defaults import MONITORED_SERVICES

logger = logging.getLogger(__name__)


def check_services(
    compose: ComposeProject,
    services: list[str] | None = None,
) -> dict[str, bool]:
    """Restart every monitored service that is not running.

    Each invocation is independent: the only input is the current container
    status.

    Returns:
        Mapping of service name to whether it was running when checked
    """
    if services is None:
        services = MONITORED_SERVICES

    running = compose.running_services()
    report = {}
    for service in services:
        if service in running:
            logger.info(f"{service} is running")
            report[service] = True
            continue

        logger.warning(f"{service} is down")
        report[service] = False
        try:
            compose.restart(service)
        except RuntimeError as e:
            logger.error(f"Failed to restart {service}: {e}")
    return report
