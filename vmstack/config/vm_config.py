"""VM configuration dataclass."""

import os
from collections.abc import Mapping
from dataclasses import dataclass

from vmstack.cloud.gcp.defaults import (
    DEFAULT_DISK_SIZE_GB,
    DEFAULT_IMAGE_FAMILY,
    DEFAULT_IMAGE_PROJECT,
    DEFAULT_INSTANCE_NAME,
    DEFAULT_MACHINE_TYPE,
    DEFAULT_REGION,
    DEFAULT_ZONE,
)
from vmstack.config.utils import get_env, get_positive_int, require_env


@dataclass
class VmConfigs:
    project: str
    name: str
    region: str
    zone: str
    machine_type: str
    disk_size_gb: int = DEFAULT_DISK_SIZE_GB
    image_family: str = DEFAULT_IMAGE_FAMILY
    image_project: str = DEFAULT_IMAGE_PROJECT

    @staticmethod
    def from_env(env: Mapping[str, str] | None = None) -> "VmConfigs":
        if env is None:
            env = os.environ
        return VmConfigs(
            project=require_env(
                env,
                "GCP_PROJECT_ID",
                "Please run: export GCP_PROJECT_ID=your-project-id",
            ),
            name=get_env(env, "INSTANCE_NAME", DEFAULT_INSTANCE_NAME),
            region=get_env(env, "GCP_REGION", DEFAULT_REGION),
            zone=get_env(env, "GCP_ZONE", DEFAULT_ZONE),
            machine_type=get_env(env, "MACHINE_TYPE", DEFAULT_MACHINE_TYPE),
            disk_size_gb=get_positive_int(
                env, "DISK_SIZE", DEFAULT_DISK_SIZE_GB
            ),
            image_family=get_env(env, "IMAGE_FAMILY", DEFAULT_IMAGE_FAMILY),
            image_project=get_env(env, "IMAGE_PROJECT", DEFAULT_IMAGE_PROJECT),
        )

    @property
    def source_image(self) -> str:
        return (
            f"projects/{self.image_project}/global/images/family/"
            f"{self.image_family}"
        )

    def to_dict(self):
        return {
            "project": self.project,
            "name": self.name,
            "region": self.region,
            "zone": self.zone,
            "machineType": self.machine_type,
            "diskSizeGb": self.disk_size_gb,
            "image": f"{self.image_project}/{self.image_family}",
        }
