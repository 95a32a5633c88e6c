"""Tests for the imperative reconciler.

The cloud is an in-memory fake, so these exercise the reconciliation
properties rather than any SDK call shape.
"""

from __future__ import annotations

import dataclasses
from unittest.mock import patch

import pytest

from vmstack.config import DeployConfigs
from vmstack.deployment import Provisioner

from conftest import FakeCloud


def provision(configs: DeployConfigs, cloud: FakeCloud, **kwargs) -> Provisioner:
    return Provisioner(configs, cloud, **kwargs)


class TestSetup:
    def test_creates_everything(self, deploy_configs, fake_cloud) -> None:
        output = provision(deploy_configs, fake_cloud).setup(wait=False)

        assert output.public_ip == "203.0.113.10"
        assert output.created_instance
        assert set(fake_cloud.firewalls) == {
            "allow-http",
            "allow-https",
            "allow-app-ports",
            "allow-postgres",
            "allow-ollama",
        }
        assert "tidequest-static-ip" in fake_cloud.addresses
        assert "zksteam-app-vm" in fake_cloud.instances
        assert deploy_configs.service_account_email in fake_cloud.service_accounts
        assert fake_cloud.bindings["roles/logging.logWriter"] == {
            deploy_configs.service_account_member
        }
        assert "compute.googleapis.com" in fake_cloud.services
        assert fake_cloud.dns_zones == {}

    def test_step_order(self, deploy_configs, fake_cloud) -> None:
        provision(deploy_configs, fake_cloud).setup(wait=False)
        calls = fake_cloud.calls
        assert calls.index("check_dependencies") < calls.index("enable_services")
        assert calls.index("enable_services") < calls.index(
            "create_service_account:vm-service-account"
        )
        assert calls.index("create_firewall_rule:allow-ollama") < calls.index(
            "create_static_ip:tidequest-static-ip"
        )
        assert calls.index("create_static_ip:tidequest-static-ip") < calls.index(
            "create_instance:zksteam-app-vm"
        )

    def test_second_run_creates_nothing(self, deploy_configs, fake_cloud) -> None:
        """Re-running setup against the same project is a no-op."""
        provision(deploy_configs, fake_cloud, keep_vm=True).setup(wait=False)
        fake_cloud.calls.clear()

        output = provision(deploy_configs, fake_cloud, keep_vm=True).setup(wait=False)

        assert fake_cloud.mutations() == []
        assert not output.created_instance

    def test_existing_vm_prompt_declined(self, deploy_configs, fake_cloud) -> None:
        fake_cloud.instances["zksteam-app-vm"] = "old"
        with patch("vmstack.deployment.deploy.ask", return_value=False) as mock_ask:
            output = provision(deploy_configs, fake_cloud).setup(wait=False)
        mock_ask.assert_called_once()
        assert not output.created_instance
        assert fake_cloud.instances["zksteam-app-vm"] == "old"

    def test_existing_vm_recreated_with_yes(self, deploy_configs, fake_cloud) -> None:
        fake_cloud.instances["zksteam-app-vm"] = "old"
        with patch("vmstack.deployment.deploy.ask") as mock_ask:
            output = provision(deploy_configs, fake_cloud, assume_yes=True).setup(
                wait=False
            )
        mock_ask.assert_not_called()
        assert output.created_instance
        assert "delete_instance:zksteam-app-vm" in fake_cloud.calls
        assert fake_cloud.instances["zksteam-app-vm"] != "old"

    def test_keep_vm_wins_over_yes(self, deploy_configs, fake_cloud) -> None:
        fake_cloud.instances["zksteam-app-vm"] = "old"
        output = provision(
            deploy_configs, fake_cloud, assume_yes=True, keep_vm=True
        ).setup(wait=False)
        assert not output.created_instance
        assert fake_cloud.instances["zksteam-app-vm"] == "old"

    def test_startup_script_points_at_static_ip(self, deploy_configs, fake_cloud) -> None:
        provision(deploy_configs, fake_cloud).setup(wait=False)
        script = fake_cloud.instances["zksteam-app-vm"]
        assert "--external-host 203.0.113.10" in script

    def test_firewall_drift_is_patched(self, deploy_configs, fake_cloud) -> None:
        """A rule edited out of band is reset to the documented ports."""
        rules = {rule.name: rule for rule in deploy_configs.firewall_rules}
        drifted = dataclasses.replace(rules["allow-postgres"], ports=("5432", "22"))
        fake_cloud.firewalls["allow-postgres"] = drifted

        results = provision(deploy_configs, fake_cloud).ensure_firewall_rules()

        assert results["allow-postgres"] == "updated"
        assert results["allow-http"] == "created"
        assert fake_cloud.firewalls["allow-postgres"].ports == ("5432",)

    def test_unchanged_rule_left_alone(self, deploy_configs, fake_cloud) -> None:
        rule = deploy_configs.firewall_rules[0]
        fake_cloud.firewalls[rule.name] = rule
        provisioner = provision(deploy_configs, fake_cloud)
        assert provisioner.reconcile_firewall_rule(rule) == "unchanged"
        assert fake_cloud.mutations() == []

    def test_domain_creates_zone_and_record(self, domain_configs, fake_cloud) -> None:
        output = provision(domain_configs, fake_cloud).setup(wait=False)
        assert fake_cloud.dns_zones["tidequest-zone"] == {
            "app.example.com.": "203.0.113.10"
        }
        assert output.to_dict()["domainUrl"] == "http://app.example.com"
        assert (
            "--external-url http://app.example.com"
            in fake_cloud.instances["zksteam-app-vm"]
        )

    def test_waits_only_for_new_vm(self, deploy_configs, fake_cloud) -> None:
        with patch("vmstack.deployment.deploy.wait_for_http") as mock_wait:
            provision(deploy_configs, fake_cloud, keep_vm=True).setup()
            provision(deploy_configs, fake_cloud, keep_vm=True).setup()
        mock_wait.assert_called_once_with("http://203.0.113.10:5173", timeout=150)

    def test_provider_error_aborts(self, deploy_configs, fake_cloud) -> None:
        """Fail fast: later steps do not run after an error."""
        with patch.object(
            fake_cloud, "create_static_ip", side_effect=RuntimeError("quota")
        ):
            with pytest.raises(RuntimeError, match="quota"):
                provision(deploy_configs, fake_cloud).setup(wait=False)
        assert fake_cloud.instances == {}


class TestCleanup:
    def test_removes_everything(self, domain_configs, fake_cloud) -> None:
        provision(domain_configs, fake_cloud).setup(wait=False)

        assert provision(domain_configs, fake_cloud, assume_yes=True).cleanup()

        assert fake_cloud.instances == {}
        assert fake_cloud.addresses == {}
        assert fake_cloud.firewalls == {}
        assert fake_cloud.service_accounts == set()
        assert fake_cloud.bindings["roles/logging.logWriter"] == set()
        assert fake_cloud.dns_zones == {}

    def test_reverse_order(self, deploy_configs, fake_cloud) -> None:
        provision(deploy_configs, fake_cloud).setup(wait=False)
        fake_cloud.calls.clear()

        provision(deploy_configs, fake_cloud, assume_yes=True).cleanup()

        calls = fake_cloud.calls
        assert calls[0] == "delete_instance:zksteam-app-vm"
        assert calls[1] == "delete_static_ip:tidequest-static-ip"
        assert calls.index("remove_iam_binding:roles/logging.logWriter") < calls.index(
            f"delete_service_account:{deploy_configs.service_account_email}"
        )

    def test_safe_when_nothing_exists(self, deploy_configs, fake_cloud) -> None:
        assert provision(deploy_configs, fake_cloud, assume_yes=True).cleanup()
        assert fake_cloud.mutations() == []

    def test_partial_state(self, deploy_configs, fake_cloud) -> None:
        provision(deploy_configs, fake_cloud).setup(wait=False)
        del fake_cloud.instances["zksteam-app-vm"]
        del fake_cloud.firewalls["allow-https"]

        assert provision(deploy_configs, fake_cloud, assume_yes=True).cleanup()
        assert fake_cloud.firewalls == {}
        assert fake_cloud.addresses == {}

    def test_cancelled(self, deploy_configs, fake_cloud) -> None:
        """Anything but 'yes' leaves the project untouched."""
        provision(deploy_configs, fake_cloud).setup(wait=False)
        fake_cloud.calls.clear()

        with patch("builtins.input", return_value="no"):
            assert not provision(deploy_configs, fake_cloud).cleanup()
        assert fake_cloud.mutations() == []

    def test_dns_zone_kept_when_declined(self, domain_configs, fake_cloud) -> None:
        provision(domain_configs, fake_cloud).setup(wait=False)

        with patch("builtins.input", side_effect=["yes", "n"]):
            assert provision(domain_configs, fake_cloud).cleanup()
        assert "tidequest-zone" in fake_cloud.dns_zones
        assert fake_cloud.instances == {}
