"""Domain configuration dataclass."""

import os
from collections.abc import Mapping
from dataclasses import dataclass

from vmstack.cloud.gcp.defaults import DEFAULT_SUBDOMAIN, DNS_ZONE_NAME
from vmstack.config.utils import get_env


@dataclass
class DomainConfig:
    name: str | None
    subdomain: str = DEFAULT_SUBDOMAIN
    zone_name: str = DNS_ZONE_NAME

    @staticmethod
    def from_env(env: Mapping[str, str] | None = None) -> "DomainConfig":
        if env is None:
            env = os.environ
        name = get_env(env, "GCP_DOMAIN", "").rstrip(".") or None
        return DomainConfig(
            name=name,
            subdomain=get_env(env, "GCP_SUBDOMAIN", DEFAULT_SUBDOMAIN),
        )

    @property
    def enabled(self) -> bool:
        return bool(self.name)

    @property
    def dns_name(self) -> str:
        """Zone DNS name, with the trailing dot Cloud DNS requires."""
        return f"{self.name}."

    @property
    def record_name(self) -> str:
        return f"{self.subdomain}.{self.name}."

    @property
    def host(self) -> str:
        return f"{self.subdomain}.{self.name}"

    def to_dict(self) -> dict[str, str | None]:
        if not self.enabled:
            return {"name": None}
        return {
            "url": f"http://{self.host}",
            "record": self.subdomain,
            "name": self.name,
            "zone": self.zone_name,
        }
