"""
GCP deployment utilities.

This package contains all GCP-specific functionality including:
- defaults: Default constants and fixed resource names
- api: GCP API wrapper used by the setup and cleanup commands
"""

from vmstack.cloud.gcp.defaults import (
    DEFAULT_DISK_SIZE_GB,
    DEFAULT_INSTANCE_NAME,
    DEFAULT_MACHINE_TYPE,
    DEFAULT_REGION,
    DEFAULT_ZONE,
    DNS_ZONE_NAME,
    SERVICE_ACCOUNT_NAME,
    STATIC_IP_NAME,
)

__all__ = [
    # Default constants
    "DEFAULT_DISK_SIZE_GB",
    "DEFAULT_INSTANCE_NAME",
    "DEFAULT_MACHINE_TYPE",
    "DEFAULT_REGION",
    "DEFAULT_ZONE",
    "DNS_ZONE_NAME",
    "SERVICE_ACCOUNT_NAME",
    "STATIC_IP_NAME",
]
