"""
`vmstack-boot`: the bootstrapper's command line on the VM.

  boot    install the runtime, sync the repo, start the stack (every boot)
  check   restart monitored services that are down (cron, every 5 minutes)
  update  pull, rebuild and restart the stack (on demand)
"""

import argparse
import json
import logging
import traceback

from vmstack.bootstrap.bootstrapper import Bootstrapper
from vmstack.bootstrap.health import check_services
from vmstack.config import BootConfigs
from vmstack.config.boot_config import (
    DEFAULT_APP_ROOT,
    DEFAULT_OLLAMA_MODEL,
    DEFAULT_SETTLE_SECONDS,
)
from vmstack.utils.logging_setup import setup_logging

logger = logging.getLogger(__name__)


def create_boot_parser() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--repo-url", type=str, help="Application git repository")
    common.add_argument("--branch", type=str, help="Branch to pull (default: main)")
    common.add_argument(
        "--app-root",
        type=str,
        default=DEFAULT_APP_ROOT,
        help=f"Directory the repository is cloned into (default: {DEFAULT_APP_ROOT})",
    )
    common.add_argument(
        "--app-dir",
        type=str,
        help="Checkout directory. Defaults to APP_ROOT/<repository name>",
    )
    common.add_argument(
        "-v",
        "--logs",
        action="store_true",
        default=False,
        help="If flagged, stream command output and debug logs",
    )

    parser = argparse.ArgumentParser(
        description="Bootstrap the compose application on this VM",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    boot = subparsers.add_parser(
        "boot", parents=[common], help="Install, sync and start the stack"
    )
    boot.add_argument(
        "--external-host",
        type=str,
        help="External IP used in the default .env URLs",
    )
    boot.add_argument(
        "--external-url",
        type=str,
        help="Public URL written as EXTERNAL_URL in the default .env",
    )
    boot.add_argument(
        "--ollama-model",
        type=str,
        default=DEFAULT_OLLAMA_MODEL,
        help=f"Model pulled after start (default: {DEFAULT_OLLAMA_MODEL})",
    )
    boot.add_argument(
        "--settle-seconds",
        type=int,
        default=DEFAULT_SETTLE_SECONDS,
        help="Seconds to wait for services before pulling the model",
    )

    subparsers.add_parser(
        "check", parents=[common], help="Restart services that are down"
    )
    subparsers.add_parser(
        "update", parents=[common], help="Pull, rebuild and restart the stack"
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = create_boot_parser().parse_args(argv)
    setup_logging(args.logs)

    configs = BootConfigs.from_args(args)
    logger.debug(f"Config:\n{json.dumps(configs.to_dict(), indent=2)}")
    bootstrapper = Bootstrapper(configs, show_logs=args.logs)

    try:
        if args.command == "boot":
            bootstrapper.run()
        elif args.command == "check":
            report = check_services(bootstrapper.compose)
            if not all(report.values()):
                return 1
        elif args.command == "update":
            bootstrapper.update()
        return 0
    except Exception as e:
        logger.error(f"Failed: {str(e)}\n{traceback.format_exc()}")
        return 1


if __name__ == "__main__":
    exit(main())
