"""Paths and constants used on the VM."""

from pathlib import Path

VENV_DIR = Path("/opt/vmstack/venv")
BOOT_COMMAND = VENV_DIR / "bin" / "vmstack-boot"

STARTUP_LOG = Path("/var/log/startup-script.log")
MONITOR_LOG = Path("/var/log/service-monitor.log")
LOGROTATE_CONFIG = Path("/etc/logrotate.d/docker-containers")
CHECK_SCRIPT = Path("/usr/local/bin/check-services.sh")
UPDATE_SCRIPT = Path("/usr/local/bin/update-app.sh")

DOCKER_INSTALL_URL = "https://get.docker.com"
COMPOSE_PLUGIN_PACKAGE = "docker-compose-plugin"
ESSENTIAL_PACKAGES = ["git", "curl", "wget", "nano", "htop"]

HEALTH_CHECK_SCHEDULE = "*/5 * * * *"
MONITORED_SERVICES = ["db", "ollama", "backend", "frontend"]

OLLAMA_SERVICE = "ollama"
OLLAMA_INIT_SERVICE = "ollama-init"
OLLAMA_CONTAINER = "zksteam_ollama"

LOGROTATE_TEMPLATE = """\
/var/lib/docker/containers/*/*.log {
    rotate 7
    daily
    compress
    size 100M
    missingok
    delaycompress
    copytruncate
}
"""
