import logging
from pathlib import Path

from vmstack.utils.commands import run_command

logger = logging.getLogger(__name__)


def clone_or_update(repo_url: str, branch: str, app_dir: Path) -> bool:
    """
    Clone the application repository, or update an existing checkout.

    Local changes in an existing checkout are stashed before pulling. A
    failed pull leaves the current code in place.

    Returns:
        True if a fresh clone was made, False if an existing one was updated
    """
    app_dir.parent.mkdir(parents=True, exist_ok=True)

    if not app_dir.exists():
        logger.info(f"Cloning {repo_url} into {app_dir}...")
        run_command(
            ["git", "clone", "--branch", branch, repo_url, str(app_dir)]
        )
        return True

    logger.info("Repository exists, pulling latest changes...")
    status = run_command(["git", "status", "--porcelain"], cwd=app_dir)
    if status.stdout.strip():
        logger.info("Stashing local changes")
        run_command(["git", "stash"], cwd=app_dir)

    try:
        pull(branch, app_dir)
    except RuntimeError as e:
        logger.warning(
            f"Failed to pull latest changes, continuing with existing code: {e}"
        )
    return False


def pull(branch: str, app_dir: Path) -> None:
    run_command(["git", "pull", "origin", branch], cwd=app_dir)
    logger.info(f"Pulled origin/{branch}")
