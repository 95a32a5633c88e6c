"""Cloud provider abstraction and the GCP implementation."""

from vmstack.cloud.cloud_api import CloudApi
from vmstack.cloud.cloud_parser import ask, confirm, create_cloud_parser
from vmstack.cloud.firewall import FirewallRule, standard_firewall_rules

# Note: GcpApi is NOT imported here to avoid circular imports.
# Import it directly from vmstack.cloud.gcp.api when needed.

__all__ = [
    # Cloud API
    "CloudApi",
    # Desired state
    "FirewallRule",
    "standard_firewall_rules",
    # Cloud Parser
    "ask",
    "confirm",
    "create_cloud_parser",
]
