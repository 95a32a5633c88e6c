"""
Declarative definition of the application VM and its perimeter.

The resource set mirrors what `vmstack-setup` reconciles imperatively: the
same firewall data, the same startup script and the same fixed names. The
Pulumi engine computes and applies the diff against live state.
"""

from dataclasses import dataclass, field

import pulumi
from pulumi import ResourceOptions
from pulumi_gcp import compute, dns, projects, serviceaccount

from vmstack.bootstrap.startup_script import render_startup_script
from vmstack.cloud.firewall import FirewallRule
from vmstack.cloud.gcp.defaults import (
    BACKEND_PORT,
    CLOUD_PLATFORM_SCOPE,
    DEFAULT_DISK_TYPE,
    DEFAULT_NETWORK,
    DEFAULT_ON_HOST_MAINTENANCE,
    DNS_TTL,
    FRONTEND_PORT,
    LOG_WRITER_ROLE,
    NGINX_PORT,
    SERVICE_ACCOUNT_DISPLAY_NAME,
)
from vmstack.config import DeployConfigs


@dataclass
class StackResources:
    static_ip: compute.Address
    service_account: serviceaccount.Account
    log_writer: projects.IAMMember
    instance: compute.Instance
    firewalls: dict[str, compute.Firewall] = field(default_factory=dict)
    dns_zone: dns.ManagedZone | None = None
    dns_record: dns.RecordSet | None = None
    outputs: dict[str, pulumi.Output] = field(default_factory=dict)


def define_firewall(rule: FirewallRule) -> compute.Firewall:
    return compute.Firewall(
        rule.name,
        name=rule.name,
        network=DEFAULT_NETWORK,
        description=rule.description,
        allows=[
            compute.FirewallAllowArgs(
                protocol=rule.protocol,
                ports=list(rule.ports),
            )
        ],
        source_ranges=list(rule.source_ranges),
        target_tags=list(rule.target_tags),
    )


def define_stack(configs: DeployConfigs) -> StackResources:
    vm = configs.vm
    domain = configs.domain

    static_ip = compute.Address(
        configs.static_ip_name,
        name=configs.static_ip_name,
        region=vm.region,
        address_type="EXTERNAL",
    )

    service_account = serviceaccount.Account(
        configs.service_account_name,
        account_id=configs.service_account_name,
        display_name=SERVICE_ACCOUNT_DISPLAY_NAME,
    )
    log_writer = projects.IAMMember(
        f"{configs.service_account_name}-logging",
        project=configs.project,
        role=LOG_WRITER_ROLE,
        member=pulumi.Output.concat("serviceAccount:", service_account.email),
    )

    firewalls = {rule.name: define_firewall(rule) for rule in configs.firewall_rules}
    for rule in configs.firewall_rules:
        if rule.restricted and rule.is_open:
            pulumi.log.warn(
                f"Firewall rule {rule.name} is open to the internet; "
                "set restrictedSourceRanges before production use."
            )

    external_url = f"http://{domain.host}" if domain.enabled else None
    startup_script = static_ip.address.apply(
        lambda address: render_startup_script(
            configs.app,
            external_host=address,
            external_url=external_url,
        )
    )

    instance = compute.Instance(
        "app-vm",
        name=vm.name,
        machine_type=vm.machine_type,
        zone=vm.zone,
        boot_disk=compute.InstanceBootDiskArgs(
            initialize_params=compute.InstanceBootDiskInitializeParamsArgs(
                image=vm.source_image,
                size=vm.disk_size_gb,
                type=DEFAULT_DISK_TYPE,
            ),
        ),
        network_interfaces=[
            compute.InstanceNetworkInterfaceArgs(
                network=DEFAULT_NETWORK,
                access_configs=[
                    compute.InstanceNetworkInterfaceAccessConfigArgs(
                        nat_ip=static_ip.address,
                    )
                ],
            )
        ],
        tags=list(configs.network_tags),
        service_account=compute.InstanceServiceAccountArgs(
            email=service_account.email,
            scopes=[CLOUD_PLATFORM_SCOPE],
        ),
        metadata={
            "startup-script": startup_script,
            "enable-oslogin": "TRUE",
        },
        scheduling=compute.InstanceSchedulingArgs(
            preemptible=False,
            automatic_restart=True,
            on_host_maintenance=DEFAULT_ON_HOST_MAINTENANCE,
        ),
        labels=dict(configs.labels),
        opts=ResourceOptions(depends_on=list(firewalls.values())),
    )

    resources = StackResources(
        static_ip=static_ip,
        service_account=service_account,
        log_writer=log_writer,
        instance=instance,
        firewalls=firewalls,
    )

    if domain.enabled:
        # Deleting the zone would drop records that live outside this stack
        resources.dns_zone = dns.ManagedZone(
            domain.zone_name,
            name=domain.zone_name,
            dns_name=domain.dns_name,
            description="DNS zone for application",
            opts=ResourceOptions(protect=True),
        )
        resources.dns_record = dns.RecordSet(
            "app-record",
            name=domain.record_name,
            managed_zone=resources.dns_zone.name,
            type="A",
            ttl=DNS_TTL,
            rrdatas=[static_ip.address],
        )
    else:
        pulumi.log.info("No domain configured, skipping Cloud DNS")

    resources.outputs = stack_outputs(resources, configs)
    return resources


def stack_outputs(
    resources: StackResources, configs: DeployConfigs
) -> dict[str, pulumi.Output]:
    instance = resources.instance
    address = resources.static_ip.address
    outputs = {
        "instanceName": instance.name,
        "instanceZone": instance.zone,
        "externalIp": address,
        "sshCommand": pulumi.Output.concat(
            "gcloud compute ssh ", instance.name, " --zone=", instance.zone
        ),
        "appUrl": pulumi.Output.concat("http://", address, f":{NGINX_PORT}"),
        "frontendUrl": pulumi.Output.concat(
            "http://", address, f":{FRONTEND_PORT}"
        ),
        "backendUrl": pulumi.Output.concat("http://", address, f":{BACKEND_PORT}"),
    }
    if configs.domain.enabled:
        outputs["domainUrl"] = pulumi.Output.from_input(
            f"http://{configs.domain.host}"
        )
    return outputs
