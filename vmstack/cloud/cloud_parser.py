#!/usr/bin/env python3
"""
Argument parser and prompts shared by the setup and cleanup commands.

Resource settings come from environment variables (see vmstack.config);
the flags here only steer how the commands run.
"""

import argparse

__all__ = [
    "create_cloud_parser",
    "confirm",
    "ask",
]

ENVIRONMENT_HELP = """\
environment:
  GCP_PROJECT_ID            project id (required)
  GCP_REGION                region for the static IP (default: us-central1)
  GCP_ZONE                  zone for the VM (default: us-central1-a)
  INSTANCE_NAME             VM name (default: zksteam-app-vm)
  MACHINE_TYPE              machine type (default: e2-medium)
  DISK_SIZE                 boot disk size in GB (default: 50)
  GCP_DOMAIN                optional domain managed in Cloud DNS
  RESTRICTED_SOURCE_RANGES  sources allowed to reach postgres and ollama
  BOOTSTRAP_PACKAGE         pip requirement for the on-VM bootstrapper, as a
                            direct reference (required by setup), e.g.
                            vmstack @ git+https://<host>/<org>/vmstack.git@<ref>
"""


def create_cloud_parser(description: str) -> argparse.ArgumentParser:
    """Create the argument parser for a provisioning command.

    Args:
        description: Description for the parser

    Returns:
        Configured ArgumentParser
    """
    parser = argparse.ArgumentParser(
        description=description,
        epilog=ENVIRONMENT_HELP,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "-y",
        "--yes",
        action="store_true",
        default=False,
        help="Answer yes to every confirmation prompt",
    )

    # Logging
    parser.add_argument(
        "-v",
        "--logs",
        action="store_true",
        help="If flagged, print debug logs as the command runs",
        default=False,
    )

    return parser


def confirm(what: str) -> bool:
    """Ask user for confirmation.

    Args:
        what: Description of the action

    Returns:
        True if user confirms, raises ValueError otherwise
    """
    inp = input(f"Are you sure you want to {what}? Type 'yes' to confirm:\n")
    if not inp.strip().lower() == "yes":
        raise ValueError(f"Aborting; will not {what}")
    return True


def ask(question: str) -> bool:
    """Ask a yes/no question. Anything but 'y' or 'yes' is no."""
    inp = input(f"{question} [y/N]\n")
    return inp.strip().lower() in ("y", "yes")
