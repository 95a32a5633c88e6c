"""
Render the startup-script VM metadata.

The guest runs this shell shim on every boot. It installs the bootstrapper
into a virtualenv and hands over to `vmstack-boot boot`, which does the
actual work in Python.
"""

import shlex

from vmstack.bootstrap.defaults import BOOT_COMMAND, STARTUP_LOG, VENV_DIR
from vmstack.config.app_config import AppConfigs


def boot_arguments(
    app: AppConfigs,
    external_host: str | None = None,
    external_url: str | None = None,
) -> list[str]:
    args = ["boot", "--repo-url", app.repo_url, "--branch", app.branch]
    if external_host:
        args += ["--external-host", external_host]
    if external_url:
        args += ["--external-url", external_url]
    return args


def render_startup_script(
    app: AppConfigs,
    external_host: str | None = None,
    external_url: str | None = None,
) -> str:
    """Render the startup script for the VM metadata.

    Args:
        app: Application repository and bootstrapper package
        external_host: Static IP the application is reachable on
        external_url: Public URL, when a domain points at the VM
    """
    boot_command = shlex.join(
        [str(BOOT_COMMAND), *boot_arguments(app, external_host, external_url)]
    )
    package = shlex.quote(app.require_bootstrap_package())
    return f"""\
#!/bin/bash
set -e

# Log all output
exec > >(tee -a {STARTUP_LOG})
exec 2>&1

echo "Starting deployment at $(date)"
export DEBIAN_FRONTEND=noninteractive

apt-get update
apt-get install -y git python3-venv

if [ ! -x {VENV_DIR}/bin/pip ]; then
    python3 -m venv {VENV_DIR}
fi
{VENV_DIR}/bin/pip install --quiet --upgrade {package}

{boot_command}

echo "Deployment completed at $(date)"
"""
