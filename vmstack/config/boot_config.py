"""Boot-time configuration for the bootstrapper running on the VM."""

import argparse
from dataclasses import dataclass
from pathlib import Path

from vmstack.cloud.gcp.defaults import BACKEND_PORT, NGINX_PORT
from vmstack.config.app_config import DEFAULT_BRANCH, DEFAULT_REPO_URL, AppConfigs

DEFAULT_APP_ROOT = "/opt/app"
DEFAULT_OLLAMA_MODEL = "llama3.2:1b"
DEFAULT_SETTLE_SECONDS = 30


@dataclass
class BootConfigs:
    app: AppConfigs
    app_dir: Path
    external_host: str | None = None
    external_url: str | None = None
    ollama_model: str = DEFAULT_OLLAMA_MODEL
    settle_seconds: int = DEFAULT_SETTLE_SECONDS

    @staticmethod
    def from_args(args: argparse.Namespace) -> "BootConfigs":
        app = AppConfigs(
            repo_url=args.repo_url or DEFAULT_REPO_URL,
            branch=args.branch or DEFAULT_BRANCH,
        )
        if args.app_dir:
            app_dir = Path(args.app_dir)
        else:
            app_dir = Path(args.app_root or DEFAULT_APP_ROOT) / app.repo_name

        # check and update do not take the boot-only flags
        values = vars(args)
        return BootConfigs(
            app=app,
            app_dir=app_dir,
            external_host=values.get("external_host"),
            external_url=values.get("external_url"),
            ollama_model=values.get("ollama_model") or DEFAULT_OLLAMA_MODEL,
            settle_seconds=values.get("settle_seconds", DEFAULT_SETTLE_SECONDS),
        )

    @property
    def env_file(self) -> Path:
        return self.app_dir / ".env"

    @property
    def backend_url(self) -> str:
        host = self.external_host or "localhost"
        return f"http://{host}:{BACKEND_PORT}"

    @property
    def public_url(self) -> str:
        if self.external_url:
            return self.external_url
        host = self.external_host or "localhost"
        return f"http://{host}:{NGINX_PORT}"

    def to_dict(self) -> dict[str, str | None]:
        return {
            **self.app.to_dict(),
            "appDir": str(self.app_dir),
            "externalHost": self.external_host,
            "externalUrl": self.public_url,
            "ollamaModel": self.ollama_model,
        }
