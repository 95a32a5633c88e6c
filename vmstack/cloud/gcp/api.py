#!/usr/bin/env python3
"""
GCP API functionality using Google Cloud Python SDKs.

Compute resources (firewall rules, addresses, instances) and project IAM go
through the google-cloud client libraries. Service usage, IAM service
accounts and Cloud DNS go through the discovery based API client.
"""

import logging
import time

import google.auth
from google.api_core.exceptions import Conflict, NotFound
from google.auth.exceptions import DefaultCredentialsError
from google.cloud import compute_v1, resourcemanager_v3
from googleapiclient import discovery
from googleapiclient.errors import HttpError

from vmstack.cloud.cloud_api import CloudApi
from vmstack.cloud.firewall import FirewallRule
from vmstack.cloud.gcp.defaults import (
    CLOUD_PLATFORM_SCOPE,
    DEFAULT_DISK_TYPE,
    DEFAULT_NETWORK,
    DEFAULT_NETWORK_TIER,
    DEFAULT_ON_HOST_MAINTENANCE,
    DEFAULT_PROVISIONING_MODEL,
)
from vmstack.config import DeployConfigs

logger = logging.getLogger(__name__)

OPERATION_TIMEOUT = 600
OPERATION_POLL_INTERVAL = 5

# Record types Cloud DNS manages itself and refuses to delete
PROTECTED_RECORD_TYPES = {"SOA", "NS"}


def wait_for_extended_operation(
    operation: compute_v1.Operation,
    operation_name: str,
    timeout: int = OPERATION_TIMEOUT,
) -> None:
    """
    Wait for a Compute Engine operation to complete.

    Args:
        operation: The operation object to wait for
        operation_name: Human-readable name for logging
        timeout: Maximum time to wait in seconds
    """
    start_time = time.time()

    while not operation.done():
        if time.time() - start_time > timeout:
            raise TimeoutError(
                f"{operation_name} timed out after {timeout} seconds"
            )

        time.sleep(OPERATION_POLL_INTERVAL)
        logger.info(f"Waiting for {operation_name}...")

    if operation.error_code:
        raise RuntimeError(
            f"{operation_name} failed: "
            f"[{operation.error_code}] {operation.error_message}"
        )


def wait_for_service_operation(
    service,
    operation: dict,
    operation_name: str,
    timeout: int = OPERATION_TIMEOUT,
) -> None:
    """Wait for a long-running operation returned by a discovery API."""
    start_time = time.time()

    while not operation.get("done"):
        if time.time() - start_time > timeout:
            raise TimeoutError(
                f"{operation_name} timed out after {timeout} seconds"
            )

        time.sleep(OPERATION_POLL_INTERVAL)
        logger.info(f"Waiting for {operation_name}...")
        operation = (
            service.operations().get(name=operation["name"]).execute()
        )

    if "error" in operation:
        raise RuntimeError(f"{operation_name} failed: {operation['error']}")


def _http_status(error: HttpError) -> int:
    return int(error.resp.status)


def _build_service(name: str, version: str):
    return discovery.build(name, version, cache_discovery=False)


class GcpApi(CloudApi):
    """GCP implementation of CloudApi."""

    @classmethod
    def check_dependencies(cls) -> None:
        """Check that application default credentials are available.

        The client libraries themselves are imported at module load time.
        """
        try:
            google.auth.default(scopes=[CLOUD_PLATFORM_SCOPE])
        except DefaultCredentialsError as e:
            raise RuntimeError(
                "No Google Cloud credentials found. "
                "Please run: gcloud auth application-default login"
            ) from e

    @classmethod
    def enable_services(cls, project: str, services: list[str]) -> None:
        """Enable service APIs. Enabling an enabled API is a no-op."""
        logger.info(f"Enabling required APIs: {', '.join(services)}")
        service = _build_service("serviceusage", "v1")
        operation = (
            service.services()
            .batchEnable(
                parent=f"projects/{project}",
                body={"serviceIds": services},
            )
            .execute()
        )
        wait_for_service_operation(service, operation, "API enablement")

    # Service accounts / IAM
    @classmethod
    def service_account_exists(cls, project: str, email: str) -> bool:
        service = _build_service("iam", "v1")
        try:
            service.projects().serviceAccounts().get(
                name=f"projects/{project}/serviceAccounts/{email}"
            ).execute()
            return True
        except HttpError as e:
            if _http_status(e) == 404:
                return False
            raise

    @classmethod
    def create_service_account(
        cls, project: str, name: str, display_name: str
    ) -> str:
        logger.info(f"Creating service account: {name}")
        service = _build_service("iam", "v1")
        try:
            account = (
                service.projects()
                .serviceAccounts()
                .create(
                    name=f"projects/{project}",
                    body={
                        "accountId": name,
                        "serviceAccount": {"displayName": display_name},
                    },
                )
                .execute()
            )
        except HttpError as e:
            if _http_status(e) != 409:
                raise
            logger.warning(f"Service account {name} already exists")
            return f"{name}@{project}.iam.gserviceaccount.com"
        return account["email"]

    @classmethod
    def delete_service_account(cls, project: str, email: str) -> None:
        logger.info(f"Deleting service account: {email}")
        service = _build_service("iam", "v1")
        try:
            service.projects().serviceAccounts().delete(
                name=f"projects/{project}/serviceAccounts/{email}"
            ).execute()
        except HttpError as e:
            if _http_status(e) != 404:
                raise
            logger.warning(f"Service account {email} not found")

    @classmethod
    def add_iam_binding(cls, project: str, role: str, member: str) -> bool:
        client = resourcemanager_v3.ProjectsClient()
        resource = f"projects/{project}"
        policy = client.get_iam_policy(request={"resource": resource})

        for binding in policy.bindings:
            if binding.role == role:
                if member in binding.members:
                    logger.info(f"{member} already has {role}")
                    return False
                binding.members.append(member)
                break
        else:
            policy.bindings.add(role=role, members=[member])

        logger.info(f"Granting {role} to {member}")
        client.set_iam_policy(request={"resource": resource, "policy": policy})
        return True

    @classmethod
    def remove_iam_binding(cls, project: str, role: str, member: str) -> bool:
        client = resourcemanager_v3.ProjectsClient()
        resource = f"projects/{project}"
        policy = client.get_iam_policy(request={"resource": resource})

        for binding in policy.bindings:
            if binding.role == role and member in binding.members:
                binding.members.remove(member)
                break
        else:
            logger.info(f"{member} does not have {role}")
            return False

        logger.info(f"Revoking {role} from {member}")
        client.set_iam_policy(request={"resource": resource, "policy": policy})
        return True

    # Firewall rules
    @staticmethod
    def _to_firewall_resource(
        project: str, rule: FirewallRule
    ) -> compute_v1.Firewall:
        allowed = compute_v1.Allowed()
        allowed.I_p_protocol = rule.protocol
        allowed.ports = list(rule.ports)

        firewall = compute_v1.Firewall()
        firewall.name = rule.name
        firewall.description = rule.description
        firewall.direction = "INGRESS"
        firewall.network = (
            f"projects/{project}/global/networks/{DEFAULT_NETWORK}"
        )
        firewall.allowed = [allowed]
        firewall.source_ranges = list(rule.source_ranges)
        firewall.target_tags = list(rule.target_tags)
        return firewall

    @classmethod
    def get_firewall_rule(cls, project: str, name: str) -> FirewallRule | None:
        firewall_client = compute_v1.FirewallsClient()
        try:
            firewall = firewall_client.get(project=project, firewall=name)
        except NotFound:
            return None

        protocol = "tcp"
        ports: list[str] = []
        for allowed in firewall.allowed:
            protocol = allowed.I_p_protocol
            ports.extend(allowed.ports)

        return FirewallRule(
            name=firewall.name,
            ports=tuple(ports),
            target_tags=tuple(firewall.target_tags),
            source_ranges=tuple(firewall.source_ranges),
            description=firewall.description,
            protocol=protocol,
        )

    @classmethod
    def create_firewall_rule(cls, project: str, rule: FirewallRule) -> None:
        logger.info(f"Creating firewall rule {rule.name}")
        firewall_client = compute_v1.FirewallsClient()
        try:
            operation = firewall_client.insert(
                project=project,
                firewall_resource=cls._to_firewall_resource(project, rule),
            )
        except Conflict:
            logger.warning(f"Firewall rule '{rule.name}' already exists")
            return
        wait_for_extended_operation(operation, f"firewall rule {rule.name}")

    @classmethod
    def update_firewall_rule(cls, project: str, rule: FirewallRule) -> None:
        logger.info(f"Updating firewall rule {rule.name}")
        firewall_client = compute_v1.FirewallsClient()
        operation = firewall_client.patch(
            project=project,
            firewall=rule.name,
            firewall_resource=cls._to_firewall_resource(project, rule),
        )
        wait_for_extended_operation(operation, f"firewall update {rule.name}")

    @classmethod
    def delete_firewall_rule(cls, project: str, name: str) -> None:
        logger.info(f"Deleting firewall rule {name}")
        firewall_client = compute_v1.FirewallsClient()
        try:
            operation = firewall_client.delete(project=project, firewall=name)
        except NotFound:
            logger.warning(f"Firewall rule not found: {name}")
            return
        wait_for_extended_operation(operation, f"firewall deletion {name}")

    # Static IP
    @classmethod
    def get_static_ip(cls, project: str, region: str, name: str) -> str | None:
        """Get existing IP address if it exists."""
        address_client = compute_v1.AddressesClient()
        try:
            address = address_client.get(
                project=project,
                region=region,
                address=name,
            )
        except NotFound:
            return None
        return address.address if address.address else None

    @classmethod
    def create_static_ip(
        cls, project: str, region: str, name: str, description: str
    ) -> str:
        """Create a static public IP address and return it."""
        logger.info(f"Creating static public IP address: {name}")

        address_client = compute_v1.AddressesClient()

        address = compute_v1.Address()
        address.name = name
        address.description = description
        address.address_type = "EXTERNAL"
        address.network_tier = DEFAULT_NETWORK_TIER

        try:
            operation = address_client.insert(
                project=project,
                region=region,
                address_resource=address,
            )
            wait_for_extended_operation(operation, "IP address creation")
        except Conflict:
            logger.warning(f"Static IP {name} already exists")

        address_obj = address_client.get(
            project=project,
            region=region,
            address=name,
        )
        return address_obj.address

    @classmethod
    def delete_static_ip(cls, project: str, region: str, name: str) -> None:
        logger.info(f"Releasing static IP address: {name}")
        address_client = compute_v1.AddressesClient()
        try:
            operation = address_client.delete(
                project=project, region=region, address=name
            )
        except NotFound:
            logger.warning(f"Static IP not found: {name}")
            return
        wait_for_extended_operation(operation, "IP address release")

    # VM
    @classmethod
    def instance_exists(cls, project: str, zone: str, name: str) -> bool:
        instance_client = compute_v1.InstancesClient()
        try:
            instance_client.get(project=project, zone=zone, instance=name)
            return True
        except NotFound:
            return False

    @classmethod
    def create_instance(
        cls,
        config: DeployConfigs,
        static_ip: str,
        startup_script: str,
    ) -> None:
        """Create the application VM.

        Args:
            config: Deployment configuration
            static_ip: Reserved address attached as the external NAT IP
            startup_script: Script the guest runs on every boot
        """
        vm = config.vm
        logger.info(f"Creating VM instance {vm.name}...")

        instance_client = compute_v1.InstancesClient()

        # Boot disk from the image family
        initialize_params = compute_v1.AttachedDiskInitializeParams()
        initialize_params.source_image = vm.source_image
        initialize_params.disk_size_gb = vm.disk_size_gb
        initialize_params.disk_type = (
            f"zones/{vm.zone}/diskTypes/{DEFAULT_DISK_TYPE}"
        )

        boot_disk = compute_v1.AttachedDisk()
        boot_disk.boot = True
        boot_disk.auto_delete = True
        boot_disk.device_name = vm.name
        boot_disk.initialize_params = initialize_params

        # Network interface with the reserved external IP
        access_config = compute_v1.AccessConfig()
        access_config.name = "External NAT"
        access_config.type_ = "ONE_TO_ONE_NAT"
        access_config.nat_i_p = static_ip
        access_config.network_tier = DEFAULT_NETWORK_TIER

        network_interface = compute_v1.NetworkInterface()
        network_interface.network = f"global/networks/{DEFAULT_NETWORK}"
        network_interface.access_configs = [access_config]

        service_account = compute_v1.ServiceAccount()
        service_account.email = config.service_account_email
        service_account.scopes = [CLOUD_PLATFORM_SCOPE]

        scheduling = compute_v1.Scheduling()
        scheduling.automatic_restart = True
        scheduling.on_host_maintenance = DEFAULT_ON_HOST_MAINTENANCE
        scheduling.provisioning_model = DEFAULT_PROVISIONING_MODEL
        scheduling.preemptible = False

        metadata = compute_v1.Metadata()
        metadata.items = [
            compute_v1.Items(key="startup-script", value=startup_script),
            compute_v1.Items(key="enable-oslogin", value="TRUE"),
        ]

        # Network tags select the firewall rules that apply
        tags = compute_v1.Tags()
        tags.items = list(config.network_tags)

        instance = compute_v1.Instance()
        instance.name = vm.name
        instance.machine_type = f"zones/{vm.zone}/machineTypes/{vm.machine_type}"
        instance.disks = [boot_disk]
        instance.network_interfaces = [network_interface]
        instance.service_accounts = [service_account]
        instance.scheduling = scheduling
        instance.metadata = metadata
        instance.tags = tags
        instance.labels = dict(config.labels)

        operation = instance_client.insert(
            project=vm.project,
            zone=vm.zone,
            instance_resource=instance,
        )

        wait_for_extended_operation(operation, "VM creation")
        logger.info(f"VM {vm.name} created successfully")

    @classmethod
    def delete_instance(cls, project: str, zone: str, name: str) -> None:
        logger.info(f"Deleting VM {name}. This takes a few minutes...")
        instance_client = compute_v1.InstancesClient()
        try:
            operation = instance_client.delete(
                project=project, zone=zone, instance=name
            )
        except NotFound:
            logger.warning(f"VM instance not found: {name}")
            return
        wait_for_extended_operation(operation, "VM deletion")
        logger.info(f"Successfully deleted VM {name}")

    @classmethod
    def get_instance_ip(cls, project: str, zone: str, name: str) -> str:
        instance_client = compute_v1.InstancesClient()
        instance = instance_client.get(
            project=project,
            zone=zone,
            instance=name,
        )

        # Get the external IP from the first network interface
        if not instance.network_interfaces:
            raise ValueError("Instance has no network interfaces")
        access_configs = instance.network_interfaces[0].access_configs
        if not access_configs:
            raise ValueError("Instance network interface has no access config")

        nat_ip = access_configs[0].nat_i_p
        if not nat_ip:
            raise ValueError("Instance network interface has no nat_ip")
        return nat_ip

    # DNS
    @classmethod
    def dns_zone_exists(cls, project: str, zone_name: str) -> bool:
        service = _build_service("dns", "v1")
        try:
            service.managedZones().get(
                project=project, managedZone=zone_name
            ).execute()
            return True
        except HttpError as e:
            if _http_status(e) == 404:
                return False
            raise

    @classmethod
    def create_dns_zone(
        cls, project: str, zone_name: str, dns_name: str, description: str
    ) -> None:
        logger.info(f"Creating DNS zone {zone_name} for {dns_name}")
        service = _build_service("dns", "v1")
        try:
            service.managedZones().create(
                project=project,
                body={
                    "name": zone_name,
                    "dnsName": dns_name,
                    "description": description,
                },
            ).execute()
        except HttpError as e:
            if _http_status(e) != 409:
                raise
            logger.warning(f"DNS zone {zone_name} already exists")

    @classmethod
    def _get_record_set(
        cls, service, project: str, zone_name: str, name: str, type_: str
    ) -> dict | None:
        try:
            return (
                service.resourceRecordSets()
                .get(
                    project=project,
                    managedZone=zone_name,
                    name=name,
                    type=type_,
                )
                .execute()
            )
        except HttpError as e:
            if _http_status(e) == 404:
                return None
            raise

    @classmethod
    def upsert_a_record(
        cls,
        project: str,
        zone_name: str,
        record_name: str,
        ip_address: str,
        ttl: int,
    ) -> None:
        service = _build_service("dns", "v1")
        desired = {
            "name": record_name,
            "type": "A",
            "ttl": ttl,
            "rrdatas": [ip_address],
        }
        existing = cls._get_record_set(
            service, project, zone_name, record_name, "A"
        )
        if existing and (
            existing.get("rrdatas") == desired["rrdatas"]
            and existing.get("ttl") == ttl
        ):
            logger.info(f"A record {record_name} already points at {ip_address}")
            return

        change = {"additions": [desired]}
        if existing:
            change["deletions"] = [existing]
        logger.info(f"Pointing A record {record_name} at {ip_address}")
        service.changes().create(
            project=project, managedZone=zone_name, body=change
        ).execute()

    @classmethod
    def _list_record_sets(cls, service, project: str, zone_name: str):
        request = service.resourceRecordSets().list(
            project=project, managedZone=zone_name
        )
        while request is not None:
            response = request.execute()
            yield from response.get("rrsets", [])
            request = service.resourceRecordSets().list_next(request, response)

    @classmethod
    def delete_dns_zone(cls, project: str, zone_name: str) -> None:
        service = _build_service("dns", "v1")
        for rrset in list(cls._list_record_sets(service, project, zone_name)):
            if rrset["type"] in PROTECTED_RECORD_TYPES:
                continue
            logger.info(f"Deleting {rrset['type']} record {rrset['name']}")
            try:
                service.resourceRecordSets().delete(
                    project=project,
                    managedZone=zone_name,
                    name=rrset["name"],
                    type=rrset["type"],
                ).execute()
            except HttpError as e:
                # The zone delete below reports anything still left behind
                logger.warning(
                    f"Failed to delete {rrset['type']} record {rrset['name']}: {e}"
                )

        logger.info(f"Deleting DNS zone {zone_name}")
        try:
            service.managedZones().delete(
                project=project, managedZone=zone_name
            ).execute()
        except HttpError as e:
            if _http_status(e) != 404:
                raise
            logger.warning(f"DNS zone not found: {zone_name}")
