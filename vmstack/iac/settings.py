"""Resolve stack settings from Pulumi config into DeployConfigs."""

import pulumi

from vmstack.config import DeployConfigs

# Pulumi config key -> environment variable read by DeployConfigs.from_env
CONFIG_KEYS = {
    "region": "GCP_REGION",
    "zone": "GCP_ZONE",
    "instanceName": "INSTANCE_NAME",
    "machineType": "MACHINE_TYPE",
    "diskSize": "DISK_SIZE",
    "imageFamily": "IMAGE_FAMILY",
    "imageProject": "IMAGE_PROJECT",
    "repoUrl": "APP_REPO_URL",
    "branch": "APP_BRANCH",
    "domain": "GCP_DOMAIN",
    "subdomain": "GCP_SUBDOMAIN",
    "restrictedSourceRanges": "RESTRICTED_SOURCE_RANGES",
    "bootstrapPackage": "BOOTSTRAP_PACKAGE",
}


def settings_env(config: pulumi.Config, project: str) -> dict[str, str]:
    env = {"GCP_PROJECT_ID": project}
    for key, env_key in CONFIG_KEYS.items():
        value = config.get(key)
        if value:
            env[env_key] = value
    return env


def configs_from_pulumi(
    config: pulumi.Config | None = None,
    gcp_config: pulumi.Config | None = None,
) -> DeployConfigs:
    """Build DeployConfigs from the stack's config.

    The project comes from `gcp:project`, everything else from the
    project namespace with the same defaults as the setup command.
    `bootstrapPackage` is required.
    """
    config = config or pulumi.Config()
    gcp_config = gcp_config or pulumi.Config("gcp")
    project = gcp_config.require("project")
    configs = DeployConfigs.from_env(settings_env(config, project))
    configs.app.require_bootstrap_package()
    return configs
