"""Default environment file for the compose stack.

The file is written once. Operators edit it in place afterwards, so an
existing file is never read, rewritten or merged.
"""

import logging
import os
import secrets
from pathlib import Path

from vmstack.cloud.gcp.defaults import (
    BACKEND_PORT,
    FRONTEND_PORT,
    OLLAMA_PORT,
    POSTGRES_PORT,
)
from vmstack.config.boot_config import BootConfigs

logger = logging.getLogger(__name__)

POSTGRES_USER = "zksteam_user"
POSTGRES_DB = "zksteam_db"

ENV_KEYS = [
    "POSTGRES_USER",
    "POSTGRES_PASSWORD",
    "POSTGRES_DB",
    "DATABASE_URL",
    "OLLAMA_MODEL",
    "OLLAMA_URL",
    "NODE_ENV",
    "JWT_SECRET",
    "VITE_BACKEND_URL",
    "EXTERNAL_URL",
    "PORT",
    "FRONTEND_PORT",
]


def render_env_file(config: BootConfigs) -> str:
    """Render the default .env with freshly generated secrets."""
    password = f"zksteam_password_{secrets.token_hex(16)}"
    database_url = (
        f"postgresql://{POSTGRES_USER}:{password}"
        f"@db:{POSTGRES_PORT}/{POSTGRES_DB}"
    )
    return f"""\
# Database Configuration
POSTGRES_USER={POSTGRES_USER}
POSTGRES_PASSWORD={password}
POSTGRES_DB={POSTGRES_DB}
DATABASE_URL={database_url}

# Ollama Configuration
OLLAMA_MODEL={config.ollama_model}
OLLAMA_URL=http://ollama:{OLLAMA_PORT}

# Application Configuration
NODE_ENV=production
JWT_SECRET={secrets.token_hex(32)}
VITE_BACKEND_URL={config.backend_url}

# External URL (update with your domain or external IP)
EXTERNAL_URL={config.public_url}

# Additional Settings
PORT={BACKEND_PORT}
FRONTEND_PORT={FRONTEND_PORT}
"""


def ensure_env_file(config: BootConfigs) -> bool:
    """Write the default .env if it does not exist.

    The file is created exclusively with owner-only permissions, so the
    secrets are never readable by other users and an existing file is
    never truncated.

    Returns:
        True if the file was created, False if it was already there
    """
    path: Path = config.env_file
    try:
        fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_EXCL, 0o600)
    except FileExistsError:
        logger.info(f"Keeping existing environment file {path}")
        return False

    logger.info(f"Creating default environment file {path}")
    with os.fdopen(fd, "w") as f:
        f.write(render_env_file(config))
    logger.warning("Default .env created with random passwords")
    logger.warning(f"Please review the passwords and configuration in {path}")
    return True
