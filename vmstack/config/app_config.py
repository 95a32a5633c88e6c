"""Application (compose stack) configuration dataclass."""

import os
from collections.abc import Mapping
from dataclasses import dataclass

from vmstack.config.utils import get_env

DEFAULT_REPO_URL = "https://github.com/TideQuest/ethtokyo2025-sandbox.git"
DEFAULT_BRANCH = "main"

BOOTSTRAP_PACKAGE_HINT = (
    "Please run: export BOOTSTRAP_PACKAGE="
    "'vmstack @ git+https://<host>/<org>/vmstack.git@<ref>'"
)


def is_direct_requirement(requirement: str) -> bool:
    """True for a pip requirement that does not resolve against an index.

    Accepts `name @ url` references, bare URLs (git+https://..., https://...)
    and local paths. A bare project name or version specifier is refused,
    since pip would look it up on PyPI.
    """
    requirement = requirement.strip()
    return (
        "@" in requirement
        or "://" in requirement
        or requirement.startswith(("/", "./", "../"))
    )


@dataclass
class AppConfigs:
    repo_url: str = DEFAULT_REPO_URL
    branch: str = DEFAULT_BRANCH
    bootstrap_package: str | None = None

    @staticmethod
    def from_env(env: Mapping[str, str] | None = None) -> "AppConfigs":
        if env is None:
            env = os.environ
        return AppConfigs(
            repo_url=get_env(env, "APP_REPO_URL", DEFAULT_REPO_URL),
            branch=get_env(env, "APP_BRANCH", DEFAULT_BRANCH),
            bootstrap_package=get_env(env, "BOOTSTRAP_PACKAGE", "") or None,
        )

    @property
    def repo_name(self) -> str:
        """Directory name git gives the clone, e.g. ethtokyo2025-sandbox."""
        name = self.repo_url.rstrip("/").rsplit("/", 1)[-1]
        return name.removesuffix(".git")

    def require_bootstrap_package(self) -> str:
        """Return the pip requirement the VM installs the bootstrapper from.

        Raises:
            ValueError: if it is unset or would be looked up on PyPI
        """
        package = self.bootstrap_package
        if not package:
            raise ValueError(
                f"BOOTSTRAP_PACKAGE environment variable is not set. "
                f"{BOOTSTRAP_PACKAGE_HINT}"
            )
        if not is_direct_requirement(package):
            raise ValueError(
                f"BOOTSTRAP_PACKAGE must be a direct reference (VCS URL, archive "
                f"URL or path), got {package!r}. {BOOTSTRAP_PACKAGE_HINT}"
            )
        return package

    def to_dict(self) -> dict[str, str | None]:
        return {
            "repoUrl": self.repo_url,
            "branch": self.branch,
            "bootstrapPackage": self.bootstrap_package,
        }
