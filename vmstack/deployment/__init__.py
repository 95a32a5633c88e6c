"""Deployment module: reconcile the GCP project for setup and cleanup."""

from vmstack.deployment.deploy import DeployOutput, Provisioner
from vmstack.deployment.readiness import wait_for_http

__all__ = [
    "DeployOutput",
    "Provisioner",
    "wait_for_http",
]
