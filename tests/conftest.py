"""Shared test fixtures for vmstack."""

from __future__ import annotations

from pathlib import Path

import pytest

from vmstack.cloud.cloud_api import CloudApi
from vmstack.cloud.firewall import FirewallRule
from vmstack.config import AppConfigs, BootConfigs, DeployConfigs

BOOTSTRAP_PACKAGE = "vmstack @ git+https://github.com/example/vmstack.git@v0.1.0"


class FakeCloud(CloudApi):
    """In-memory project state with the same absent/exists semantics as GCP."""

    def __init__(self) -> None:
        self.services: set[str] = set()
        self.service_accounts: set[str] = set()
        self.bindings: dict[str, set[str]] = {}
        self.firewalls: dict[str, FirewallRule] = {}
        self.addresses: dict[str, str] = {}
        self.instances: dict[str, str] = {}
        self.dns_zones: dict[str, dict[str, str]] = {}
        self.calls: list[str] = []

    def check_dependencies(self) -> None:
        self.calls.append("check_dependencies")

    def enable_services(self, project, services) -> None:
        self.calls.append("enable_services")
        self.services.update(services)

    def service_account_exists(self, project, email) -> bool:
        return email in self.service_accounts

    def create_service_account(self, project, name, display_name) -> str:
        self.calls.append(f"create_service_account:{name}")
        email = f"{name}@{project}.iam.gserviceaccount.com"
        self.service_accounts.add(email)
        return email

    def delete_service_account(self, project, email) -> None:
        self.calls.append(f"delete_service_account:{email}")
        self.service_accounts.discard(email)

    def add_iam_binding(self, project, role, member) -> bool:
        members = self.bindings.setdefault(role, set())
        if member in members:
            return False
        self.calls.append(f"add_iam_binding:{role}")
        members.add(member)
        return True

    def remove_iam_binding(self, project, role, member) -> bool:
        members = self.bindings.get(role, set())
        if member not in members:
            return False
        self.calls.append(f"remove_iam_binding:{role}")
        members.discard(member)
        return True

    def get_firewall_rule(self, project, name):
        return self.firewalls.get(name)

    def create_firewall_rule(self, project, rule) -> None:
        self.calls.append(f"create_firewall_rule:{rule.name}")
        self.firewalls[rule.name] = rule

    def update_firewall_rule(self, project, rule) -> None:
        self.calls.append(f"update_firewall_rule:{rule.name}")
        self.firewalls[rule.name] = rule

    def delete_firewall_rule(self, project, name) -> None:
        self.calls.append(f"delete_firewall_rule:{name}")
        self.firewalls.pop(name, None)

    def get_static_ip(self, project, region, name):
        return self.addresses.get(name)

    def create_static_ip(self, project, region, name, description) -> str:
        self.calls.append(f"create_static_ip:{name}")
        self.addresses[name] = "203.0.113.10"
        return self.addresses[name]

    def delete_static_ip(self, project, region, name) -> None:
        self.calls.append(f"delete_static_ip:{name}")
        self.addresses.pop(name, None)

    def instance_exists(self, project, zone, name) -> bool:
        return name in self.instances

    def create_instance(self, config, static_ip, startup_script) -> None:
        self.calls.append(f"create_instance:{config.vm.name}")
        self.instances[config.vm.name] = startup_script

    def delete_instance(self, project, zone, name) -> None:
        self.calls.append(f"delete_instance:{name}")
        self.instances.pop(name, None)

    def get_instance_ip(self, project, zone, name) -> str:
        return "203.0.113.10"

    def dns_zone_exists(self, project, zone_name) -> bool:
        return zone_name in self.dns_zones

    def create_dns_zone(self, project, zone_name, dns_name, description) -> None:
        self.calls.append(f"create_dns_zone:{zone_name}")
        self.dns_zones[zone_name] = {}

    def upsert_a_record(self, project, zone_name, record_name, ip_address, ttl):
        if self.dns_zones[zone_name].get(record_name) == ip_address:
            return
        self.calls.append(f"upsert_a_record:{record_name}")
        self.dns_zones[zone_name][record_name] = ip_address

    def delete_dns_zone(self, project, zone_name) -> None:
        self.calls.append(f"delete_dns_zone:{zone_name}")
        self.dns_zones.pop(zone_name, None)

    def mutations(self) -> list[str]:
        return [c for c in self.calls if c not in ("check_dependencies", "enable_services")]


@pytest.fixture
def base_env() -> dict[str, str]:
    return {"GCP_PROJECT_ID": "demo-project", "BOOTSTRAP_PACKAGE": BOOTSTRAP_PACKAGE}


@pytest.fixture
def deploy_configs(base_env: dict[str, str]) -> DeployConfigs:
    return DeployConfigs.from_env(base_env)


@pytest.fixture
def domain_configs(base_env: dict[str, str]) -> DeployConfigs:
    return DeployConfigs.from_env({**base_env, "GCP_DOMAIN": "example.com"})


@pytest.fixture
def fake_cloud() -> FakeCloud:
    return FakeCloud()


@pytest.fixture
def boot_configs(tmp_path: Path) -> BootConfigs:
    """Boot config whose checkout lives under a temporary directory."""
    app_dir = tmp_path / "app" / "ethtokyo2025-sandbox"
    app_dir.mkdir(parents=True)
    return BootConfigs(
        app=AppConfigs(),
        app_dir=app_dir,
        external_host="203.0.113.10",
        settle_seconds=0,
    )
