"""Desired firewall rule set for the application VM."""

import logging
from dataclasses import dataclass

from vmstack.cloud.gcp.defaults import (
    BACKEND_PORT,
    FRONTEND_PORT,
    NGINX_PORT,
    OLLAMA_PORT,
    OPEN_SOURCE_RANGE,
    POSTGRES_PORT,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FirewallRule:
    name: str
    ports: tuple[str, ...]
    target_tags: tuple[str, ...]
    source_ranges: tuple[str, ...]
    description: str
    protocol: str = "tcp"
    restricted: bool = False

    def differs_from(self, live: "FirewallRule") -> bool:
        """True if the live rule exposes other ports, sources or targets."""
        return (
            self.protocol != live.protocol
            or sorted(self.ports) != sorted(live.ports)
            or sorted(self.source_ranges) != sorted(live.source_ranges)
            or sorted(self.target_tags) != sorted(live.target_tags)
        )

    @property
    def is_open(self) -> bool:
        return OPEN_SOURCE_RANGE in self.source_ranges

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "protocol": self.protocol,
            "ports": list(self.ports),
            "targetTags": list(self.target_tags),
            "sourceRanges": list(self.source_ranges),
        }


def standard_firewall_rules(
    restricted_ranges: tuple[str, ...] = (OPEN_SOURCE_RANGE,),
) -> list[FirewallRule]:
    """Return the inbound rules the compose stack needs.

    The database and model API rules take `restricted_ranges`; everything
    else is open to the internet.
    """
    everyone = (OPEN_SOURCE_RANGE,)
    return [
        FirewallRule(
            name="allow-http",
            ports=("80",),
            target_tags=("web",),
            source_ranges=everyone,
            description="Allow HTTP traffic",
        ),
        FirewallRule(
            name="allow-https",
            ports=("443",),
            target_tags=("web",),
            source_ranges=everyone,
            description="Allow HTTPS traffic",
        ),
        FirewallRule(
            name="allow-app-ports",
            ports=(str(BACKEND_PORT), str(FRONTEND_PORT), str(NGINX_PORT)),
            target_tags=("web",),
            source_ranges=everyone,
            description="Allow application ports",
        ),
        FirewallRule(
            name="allow-postgres",
            ports=(str(POSTGRES_PORT),),
            target_tags=("db",),
            source_ranges=tuple(restricted_ranges),
            description="Allow PostgreSQL (RESTRICT IN PRODUCTION!)",
            restricted=True,
        ),
        FirewallRule(
            name="allow-ollama",
            ports=(str(OLLAMA_PORT),),
            target_tags=("ai",),
            source_ranges=tuple(restricted_ranges),
            description="Allow Ollama API (RESTRICT IN PRODUCTION!)",
            restricted=True,
        ),
    ]


def warn_open_rules(rules: list[FirewallRule]) -> None:
    for rule in rules:
        if rule.restricted and rule.is_open:
            logger.warning(
                f"Firewall rule {rule.name} exposes ports "
                f"{', '.join(rule.ports)} to {OPEN_SOURCE_RANGE}. "
                "Set RESTRICTED_SOURCE_RANGES before production use."
            )
