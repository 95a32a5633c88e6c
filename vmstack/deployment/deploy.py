import logging
from dataclasses import dataclass

from vmstack.bootstrap.startup_script import render_startup_script
from vmstack.cloud.cloud_api import CloudApi
from vmstack.cloud.cloud_parser import ask, confirm
from vmstack.cloud.firewall import FirewallRule, warn_open_rules
from vmstack.cloud.gcp.defaults import (
    BACKEND_PORT,
    DNS_TTL,
    FRONTEND_PORT,
    LOG_WRITER_ROLE,
    NGINX_PORT,
    OLLAMA_PORT,
    REQUIRED_SERVICES,
    SERVICE_ACCOUNT_DISPLAY_NAME,
)
from vmstack.config import DeployConfigs
from vmstack.deployment.readiness import wait_for_http

logger = logging.getLogger(__name__)


@dataclass
class DeployOutput:
    configs: DeployConfigs
    public_ip: str
    created_instance: bool

    @property
    def frontend_url(self) -> str:
        return f"http://{self.public_ip}:{FRONTEND_PORT}"

    @property
    def backend_url(self) -> str:
        return f"http://{self.public_ip}:{BACKEND_PORT}"

    @property
    def app_url(self) -> str:
        return f"http://{self.public_ip}:{NGINX_PORT}"

    @property
    def ssh_command(self) -> str:
        vm = self.configs.vm
        return f"gcloud compute ssh {vm.name} --zone={vm.zone}"

    def to_dict(self) -> dict[str, str]:
        vm = self.configs.vm
        output = {
            "instanceName": vm.name,
            "zone": vm.zone,
            "externalIp": self.public_ip,
            "sshCommand": self.ssh_command,
            "frontendUrl": self.frontend_url,
            "backendUrl": self.backend_url,
            "appUrl": self.app_url,
            "ollamaUrl": f"http://{self.public_ip}:{OLLAMA_PORT}",
        }
        if self.configs.domain.enabled:
            output["domainUrl"] = f"http://{self.configs.domain.host}"
        return output


class Provisioner:
    """Reconcile the project against the desired resource set.

    Every step checks live state first, so an interrupted run is recovered
    by running setup again. Provider errors other than "already exists"
    abort the run.
    """

    def __init__(
        self,
        configs: DeployConfigs,
        cloud_api: CloudApi,
        assume_yes: bool = False,
        keep_vm: bool = False,
        wait_timeout: int = 150,
    ):
        self.configs = configs
        self.cloud = cloud_api
        self.assume_yes = assume_yes
        self.keep_vm = keep_vm
        self.wait_timeout = wait_timeout

    @property
    def project(self) -> str:
        return self.configs.project

    # Setup steps, in order
    def check_requirements(self) -> None:
        logger.info("Checking requirements")
        self.configs.app.require_bootstrap_package()
        self.cloud.check_dependencies()
        logger.info(f"Using project {self.project}")

    def enable_services(self) -> None:
        self.cloud.enable_services(self.project, REQUIRED_SERVICES)

    def ensure_service_account(self) -> None:
        email = self.configs.service_account_email
        if self.cloud.service_account_exists(self.project, email):
            logger.warning("Service account already exists, skipping creation")
        else:
            self.cloud.create_service_account(
                self.project,
                self.configs.service_account_name,
                SERVICE_ACCOUNT_DISPLAY_NAME,
            )
            logger.info(f"Service account {email} created")

        self.cloud.add_iam_binding(
            self.project, LOG_WRITER_ROLE, self.configs.service_account_member
        )

    def reconcile_firewall_rule(self, rule: FirewallRule) -> str:
        """Create, patch or keep one rule.

        Returns:
            "created", "updated" or "unchanged"
        """
        live = self.cloud.get_firewall_rule(self.project, rule.name)
        if live is None:
            self.cloud.create_firewall_rule(self.project, rule)
            return "created"
        if rule.differs_from(live):
            logger.info(
                f"Firewall rule '{rule.name}' drifted: "
                f"{live.to_dict()} -> {rule.to_dict()}"
            )
            self.cloud.update_firewall_rule(self.project, rule)
            return "updated"
        logger.warning(f"Firewall rule '{rule.name}' already exists")
        return "unchanged"

    def ensure_firewall_rules(self) -> dict[str, str]:
        rules = self.configs.firewall_rules
        results = {rule.name: self.reconcile_firewall_rule(rule) for rule in rules}
        warn_open_rules(rules)
        return results

    def ensure_static_ip(self) -> str:
        vm = self.configs.vm
        name = self.configs.static_ip_name
        existing = self.cloud.get_static_ip(self.project, vm.region, name)
        if existing:
            logger.warning(f"Static IP already exists: {existing}")
            return existing

        address = self.cloud.create_static_ip(
            self.project,
            vm.region,
            name,
            "Static IP for zksteam application",
        )
        logger.info(f"Static IP reserved: {address}")
        return address

    def render_startup_script(self, static_ip: str) -> str:
        domain = self.configs.domain
        external_url = f"http://{domain.host}" if domain.enabled else None
        return render_startup_script(
            self.configs.app,
            external_host=static_ip,
            external_url=external_url,
        )

    def ensure_instance(self, static_ip: str) -> bool:
        """Create the VM unless it exists and the operator keeps it.

        Returns:
            True if a VM was created by this call
        """
        vm = self.configs.vm
        if self.cloud.instance_exists(self.project, vm.zone, vm.name):
            if not self.should_recreate_instance():
                logger.warning("Skipping VM creation")
                return False
            logger.info("Deleting existing instance...")
            self.cloud.delete_instance(self.project, vm.zone, vm.name)

        self.cloud.create_instance(
            self.configs,
            static_ip,
            self.render_startup_script(static_ip),
        )
        return True

    def should_recreate_instance(self) -> bool:
        if self.keep_vm:
            return False
        if self.assume_yes:
            return True
        return ask(
            f"Instance {self.configs.vm.name} already exists. "
            "Do you want to delete and recreate it?"
        )

    def ensure_dns(self, static_ip: str) -> None:
        domain = self.configs.domain
        if not domain.enabled:
            return
        if not self.cloud.dns_zone_exists(self.project, domain.zone_name):
            self.cloud.create_dns_zone(
                self.project,
                domain.zone_name,
                domain.dns_name,
                "DNS zone for application",
            )
        self.cloud.upsert_a_record(
            self.project,
            domain.zone_name,
            domain.record_name,
            static_ip,
            DNS_TTL,
        )

    def setup(self, wait: bool = True) -> DeployOutput:
        self.check_requirements()
        self.enable_services()
        self.ensure_service_account()
        self.ensure_firewall_rules()
        static_ip = self.ensure_static_ip()
        created = self.ensure_instance(static_ip)
        self.ensure_dns(static_ip)

        output = DeployOutput(
            configs=self.configs,
            public_ip=static_ip,
            created_instance=created,
        )
        if wait and created:
            logger.info(
                "Monitor the startup script with:\n"
                f"  {output.ssh_command} "
                "--command='tail -f /var/log/startup-script.log'"
            )
            wait_for_http(output.frontend_url, timeout=self.wait_timeout)
        return output

    # Teardown, in reverse order of creation
    def confirm_cleanup(self) -> bool:
        if self.assume_yes:
            return True
        rules = ", ".join(rule.name for rule in self.configs.firewall_rules)
        logger.warning(
            "This will delete all GCP resources created for the application:\n"
            f"  - VM Instance: {self.configs.vm.name}\n"
            f"  - Static IP: {self.configs.static_ip_name}\n"
            f"  - Firewall rules: {rules}\n"
            f"  - Service Account: {self.configs.service_account_name}"
        )
        try:
            return confirm("delete these resources")
        except ValueError:
            logger.info("Cleanup cancelled.")
            return False

    def delete_instance(self) -> None:
        vm = self.configs.vm
        if self.cloud.instance_exists(self.project, vm.zone, vm.name):
            self.cloud.delete_instance(self.project, vm.zone, vm.name)
            logger.info("VM instance deleted")
        else:
            logger.warning("VM instance not found")

    def release_static_ip(self) -> None:
        vm = self.configs.vm
        name = self.configs.static_ip_name
        if self.cloud.get_static_ip(self.project, vm.region, name):
            self.cloud.delete_static_ip(self.project, vm.region, name)
            logger.info("Static IP released")
        else:
            logger.warning("Static IP not found")

    def delete_firewall_rules(self) -> None:
        for rule in self.configs.firewall_rules:
            if self.cloud.get_firewall_rule(self.project, rule.name):
                self.cloud.delete_firewall_rule(self.project, rule.name)
                logger.info(f"Deleted firewall rule: {rule.name}")
            else:
                logger.warning(f"Firewall rule not found: {rule.name}")

    def delete_service_account(self) -> None:
        email = self.configs.service_account_email
        if not self.cloud.service_account_exists(self.project, email):
            logger.warning("Service account not found")
            return
        self.cloud.remove_iam_binding(
            self.project, LOG_WRITER_ROLE, self.configs.service_account_member
        )
        self.cloud.delete_service_account(self.project, email)
        logger.info("Service account deleted")

    def delete_dns_zone(self) -> None:
        zone_name = self.configs.domain.zone_name
        if not self.cloud.dns_zone_exists(self.project, zone_name):
            logger.warning("DNS zone not found")
            return
        logger.warning(f"DNS zone '{zone_name}' found")
        if self.assume_yes or ask("Do you want to delete the DNS zone?"):
            self.cloud.delete_dns_zone(self.project, zone_name)
            logger.info("DNS zone deleted")

    def cleanup(self) -> bool:
        if not self.confirm_cleanup():
            return False
        self.delete_instance()
        self.release_static_ip()
        self.delete_firewall_rules()
        self.delete_service_account()
        self.delete_dns_zone()
        return True
