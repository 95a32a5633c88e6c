#!/usr/bin/env python3
"""
Base Cloud API abstraction.
Defines the provider operations the setup and cleanup commands reconcile
against. Lookups report absence as None/False; creates treat an existing
resource as success.
"""

import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from vmstack.cloud.firewall import FirewallRule

if TYPE_CHECKING:
    from vmstack.config.deploy_config import DeployConfigs

logger = logging.getLogger(__name__)


class CloudApi(ABC):
    """Abstract base class for cloud provider APIs."""

    @classmethod
    @abstractmethod
    def check_dependencies(cls) -> None:
        """Check that credentials and client libraries are usable."""
        raise NotImplementedError

    @classmethod
    @abstractmethod
    def enable_services(cls, project: str, services: list[str]) -> None:
        """Enable the given service APIs on the project."""
        raise NotImplementedError

    # Service accounts / IAM
    @classmethod
    @abstractmethod
    def service_account_exists(cls, project: str, email: str) -> bool:
        raise NotImplementedError

    @classmethod
    @abstractmethod
    def create_service_account(
        cls, project: str, name: str, display_name: str
    ) -> str:
        """Create a service account and return its email."""
        raise NotImplementedError

    @classmethod
    @abstractmethod
    def delete_service_account(cls, project: str, email: str) -> None:
        raise NotImplementedError

    @classmethod
    @abstractmethod
    def add_iam_binding(cls, project: str, role: str, member: str) -> bool:
        """Grant `role` to `member`. Returns False if already granted."""
        raise NotImplementedError

    @classmethod
    @abstractmethod
    def remove_iam_binding(cls, project: str, role: str, member: str) -> bool:
        """Revoke `role` from `member`. Returns False if not granted."""
        raise NotImplementedError

    # Firewall rules
    @classmethod
    @abstractmethod
    def get_firewall_rule(cls, project: str, name: str) -> FirewallRule | None:
        raise NotImplementedError

    @classmethod
    @abstractmethod
    def create_firewall_rule(cls, project: str, rule: FirewallRule) -> None:
        raise NotImplementedError

    @classmethod
    @abstractmethod
    def update_firewall_rule(cls, project: str, rule: FirewallRule) -> None:
        """Overwrite ports, sources and targets of an existing rule."""
        raise NotImplementedError

    @classmethod
    @abstractmethod
    def delete_firewall_rule(cls, project: str, name: str) -> None:
        raise NotImplementedError

    # Static IP
    @classmethod
    @abstractmethod
    def get_static_ip(cls, project: str, region: str, name: str) -> str | None:
        """Return the reserved address, or None if it does not exist."""
        raise NotImplementedError

    @classmethod
    @abstractmethod
    def create_static_ip(
        cls, project: str, region: str, name: str, description: str
    ) -> str:
        """Reserve a static external address and return it."""
        raise NotImplementedError

    @classmethod
    @abstractmethod
    def delete_static_ip(cls, project: str, region: str, name: str) -> None:
        raise NotImplementedError

    # VM
    @classmethod
    @abstractmethod
    def instance_exists(cls, project: str, zone: str, name: str) -> bool:
        raise NotImplementedError

    @classmethod
    @abstractmethod
    def create_instance(
        cls,
        config: "DeployConfigs",
        static_ip: str,
        startup_script: str,
    ) -> None:
        """Create the VM with the startup script as metadata."""
        raise NotImplementedError

    @classmethod
    @abstractmethod
    def delete_instance(cls, project: str, zone: str, name: str) -> None:
        raise NotImplementedError

    @classmethod
    @abstractmethod
    def get_instance_ip(cls, project: str, zone: str, name: str) -> str:
        """Get the external IP address of a VM.

        Raises:
            ValueError: If the instance has no external address
        """
        raise NotImplementedError

    # DNS
    @classmethod
    @abstractmethod
    def dns_zone_exists(cls, project: str, zone_name: str) -> bool:
        raise NotImplementedError

    @classmethod
    @abstractmethod
    def create_dns_zone(
        cls, project: str, zone_name: str, dns_name: str, description: str
    ) -> None:
        raise NotImplementedError

    @classmethod
    @abstractmethod
    def upsert_a_record(
        cls,
        project: str,
        zone_name: str,
        record_name: str,
        ip_address: str,
        ttl: int,
    ) -> None:
        """Point `record_name` at `ip_address`, replacing any old A record."""
        raise NotImplementedError

    @classmethod
    @abstractmethod
    def delete_dns_zone(cls, project: str, zone_name: str) -> None:
        """Delete every record set except SOA and NS, then the zone."""
        raise NotImplementedError
