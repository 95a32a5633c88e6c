"""Deployment configuration dataclass."""

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from vmstack.cloud.firewall import FirewallRule, standard_firewall_rules
from vmstack.cloud.gcp.defaults import (
    LABELS,
    NETWORK_TAGS,
    OPEN_SOURCE_RANGE,
    SERVICE_ACCOUNT_NAME,
    STATIC_IP_NAME,
    service_account_email,
)
from vmstack.config.app_config import AppConfigs
from vmstack.config.domain_config import DomainConfig
from vmstack.config.utils import get_list
from vmstack.config.vm_config import VmConfigs


@dataclass
class DeployConfigs:
    vm: VmConfigs
    app: AppConfigs
    domain: DomainConfig
    restricted_ranges: tuple[str, ...] = (OPEN_SOURCE_RANGE,)
    static_ip_name: str = STATIC_IP_NAME
    service_account_name: str = SERVICE_ACCOUNT_NAME
    network_tags: list[str] = field(default_factory=lambda: list(NETWORK_TAGS))
    labels: dict[str, str] = field(default_factory=lambda: dict(LABELS))

    @staticmethod
    def from_env(env: Mapping[str, str] | None = None) -> "DeployConfigs":
        if env is None:
            env = os.environ
        return DeployConfigs(
            vm=VmConfigs.from_env(env),
            app=AppConfigs.from_env(env),
            domain=DomainConfig.from_env(env),
            restricted_ranges=get_list(
                env, "RESTRICTED_SOURCE_RANGES", OPEN_SOURCE_RANGE
            ),
        )

    @property
    def project(self) -> str:
        return self.vm.project

    @property
    def service_account_email(self) -> str:
        return service_account_email(self.project, self.service_account_name)

    @property
    def service_account_member(self) -> str:
        return f"serviceAccount:{self.service_account_email}"

    @property
    def firewall_rules(self) -> list[FirewallRule]:
        return standard_firewall_rules(self.restricted_ranges)

    def to_dict(self) -> dict[str, Any]:
        return {
            "vm": self.vm.to_dict(),
            "app": self.app.to_dict(),
            "domain": self.domain.to_dict(),
            "staticIp": self.static_ip_name,
            "serviceAccount": self.service_account_email,
            "restrictedSourceRanges": list(self.restricted_ranges),
        }
