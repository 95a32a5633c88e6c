"""
Default values for GCP deployments.

Note on regions/zones:
- In GCP, a zone is a deployment area within a region (e.g., us-central1-a)
- DEFAULT_ZONE is used for zonal resources (the VM and its boot disk)
- DEFAULT_REGION is used for regional resources (the static IP)

Resource names below are fixed so that re-running setup against the same
project finds what an earlier run created.
"""

# VM configuration
DEFAULT_REGION = "us-central1"
DEFAULT_ZONE = "us-central1-a"
DEFAULT_INSTANCE_NAME = "zksteam-app-vm"
DEFAULT_MACHINE_TYPE = "e2-medium"  # 2 vCPUs, 4GB RAM
DEFAULT_DISK_SIZE_GB = 50
DEFAULT_DISK_TYPE = "pd-standard"
DEFAULT_IMAGE_FAMILY = "debian-12"
DEFAULT_IMAGE_PROJECT = "debian-cloud"

# GCP-specific settings
DEFAULT_NETWORK = "default"
DEFAULT_NETWORK_TIER = "PREMIUM"
DEFAULT_PROVISIONING_MODEL = "STANDARD"
DEFAULT_ON_HOST_MAINTENANCE = "MIGRATE"
CLOUD_PLATFORM_SCOPE = "https://www.googleapis.com/auth/cloud-platform"

# Fixed resource names
STATIC_IP_NAME = "tidequest-static-ip"
SERVICE_ACCOUNT_NAME = "vm-service-account"
SERVICE_ACCOUNT_DISPLAY_NAME = "VM Service Account for Docker Compose deployment"
DNS_ZONE_NAME = "tidequest-zone"
DEFAULT_SUBDOMAIN = "app"
DNS_TTL = 300

NETWORK_TAGS = ["web", "db", "ai"]
LABELS = {"environment": "production", "app": "zksteam"}

LOG_WRITER_ROLE = "roles/logging.logWriter"
REQUIRED_SERVICES = [
    "compute.googleapis.com",
    "iam.googleapis.com",
    "logging.googleapis.com",
    "dns.googleapis.com",
]

# Application ports exposed by the compose stack
FRONTEND_PORT = 5173
BACKEND_PORT = 3000
NGINX_PORT = 8080
POSTGRES_PORT = 5432
OLLAMA_PORT = 11434

OPEN_SOURCE_RANGE = "0.0.0.0/0"


def service_account_email(project: str, name: str = SERVICE_ACCOUNT_NAME) -> str:
    return f"{name}@{project}.iam.gserviceaccount.com"
