"""Configuration dataclasses for vmstack deployments."""

from vmstack.config.app_config import AppConfigs
from vmstack.config.boot_config import BootConfigs
from vmstack.config.deploy_config import DeployConfigs
from vmstack.config.domain_config import DomainConfig
from vmstack.config.vm_config import VmConfigs

__all__ = [
    "AppConfigs",
    "BootConfigs",
    "DeployConfigs",
    "DomainConfig",
    "VmConfigs",
]
