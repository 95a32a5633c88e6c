"""Tests for the `vmstack-setup` and `vmstack-cleanup` entry points."""

from __future__ import annotations

import json
from unittest.mock import MagicMock, patch

import pytest

from vmstack.cli import cleanup_main, setup_main
from vmstack.deployment import DeployOutput

from conftest import BOOTSTRAP_PACKAGE, FakeCloud

CONFIG_VARS = (
    "GCP_REGION",
    "GCP_ZONE",
    "INSTANCE_NAME",
    "GCP_DOMAIN",
    "RESTRICTED_SOURCE_RANGES",
    "BOOTSTRAP_PACKAGE",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch) -> None:
    for name in CONFIG_VARS:
        monkeypatch.delenv(name, raising=False)


class TestSetupMain:
    @patch("vmstack.cli.GcpApi", new_callable=FakeCloud)
    def test_success(self, fake: FakeCloud, monkeypatch, capsys) -> None:
        monkeypatch.setenv("GCP_PROJECT_ID", "demo-project")
        monkeypatch.setenv("BOOTSTRAP_PACKAGE", BOOTSTRAP_PACKAGE)
        monkeypatch.setattr("sys.argv", ["vmstack-setup", "--no-wait"])

        assert setup_main() == 0

        out = capsys.readouterr().out
        assert "Access Information:" in out
        assert "gcloud compute ssh zksteam-app-vm --zone=us-central1-a" in out
        assert "zksteam-app-vm" in fake.instances

    @patch("vmstack.cli.GcpApi", new_callable=FakeCloud)
    def test_missing_bootstrap_package(self, fake: FakeCloud, monkeypatch) -> None:
        """Setup stops before creating anything the VM could not boot from."""
        monkeypatch.setenv("GCP_PROJECT_ID", "demo-project")
        monkeypatch.setattr("sys.argv", ["vmstack-setup", "--no-wait"])

        assert setup_main() == 1
        assert fake.mutations() == []
        assert fake.services == set()

    def test_missing_project(self, monkeypatch) -> None:
        """Configuration errors exit 1 before anything is provisioned."""
        monkeypatch.delenv("GCP_PROJECT_ID", raising=False)
        monkeypatch.setattr("sys.argv", ["vmstack-setup"])
        with patch("vmstack.cli.Provisioner") as mock_provisioner:
            assert setup_main() == 1
        mock_provisioner.assert_not_called()

    @patch("vmstack.cli.Provisioner")
    def test_flags_reach_provisioner(self, mock_provisioner: MagicMock, monkeypatch) -> None:
        monkeypatch.setenv("GCP_PROJECT_ID", "demo-project")
        monkeypatch.setattr("sys.argv", ["vmstack-setup", "--yes", "--keep-vm", "--no-wait"])
        mock_provisioner.return_value.setup.return_value = MagicMock(spec=DeployOutput)
        mock_provisioner.return_value.setup.return_value.to_dict.return_value = {}

        with patch("vmstack.cli.print_next_steps"):
            assert setup_main() == 0

        kwargs = mock_provisioner.call_args.kwargs
        assert kwargs["assume_yes"] is True
        assert kwargs["keep_vm"] is True
        mock_provisioner.return_value.setup.assert_called_once_with(wait=False)


class TestCleanupMain:
    @patch("vmstack.cli.GcpApi", new_callable=FakeCloud)
    def test_cancel_is_not_failure(self, fake: FakeCloud, monkeypatch) -> None:
        monkeypatch.setenv("GCP_PROJECT_ID", "demo-project")
        monkeypatch.setattr("sys.argv", ["vmstack-cleanup"])
        monkeypatch.setattr("builtins.input", lambda _: "no")

        assert cleanup_main() == 0
        assert fake.mutations() == []

    @patch("vmstack.cli.Provisioner")
    def test_provider_error(self, mock_provisioner: MagicMock, monkeypatch) -> None:
        monkeypatch.setenv("GCP_PROJECT_ID", "demo-project")
        monkeypatch.setattr("sys.argv", ["vmstack-cleanup", "-y"])
        mock_provisioner.return_value.cleanup.side_effect = RuntimeError("permission denied")

        assert cleanup_main() == 1


class TestDeployOutput:
    def test_access_information(self, domain_configs) -> None:
        output = DeployOutput(domain_configs, "203.0.113.10", created_instance=True)
        data = json.loads(json.dumps(output.to_dict()))
        assert data["externalIp"] == "203.0.113.10"
        assert data["appUrl"] == "http://203.0.113.10:8080"
        assert data["ollamaUrl"] == "http://203.0.113.10:11434"
        assert data["domainUrl"] == "http://app.example.com"
