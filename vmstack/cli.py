"""
Entry points for `vmstack-setup` and `vmstack-cleanup`.

Both read their resource settings from the environment (see
vmstack.config) and reconcile the GCP project against them.
"""

import json
import logging
import traceback

from vmstack.cloud.cloud_parser import create_cloud_parser
from vmstack.cloud.gcp.api import GcpApi
from vmstack.config import DeployConfigs
from vmstack.deployment import DeployOutput, Provisioner
from vmstack.utils.logging_setup import setup_logging

logger = logging.getLogger(__name__)


def print_access_info(output: DeployOutput) -> None:
    print(f"Access Information:\n{json.dumps(output.to_dict(), indent=2)}")


def print_next_steps(output: DeployOutput) -> None:
    vm = output.configs.vm
    app_dir = f"/opt/app/{output.configs.app.repo_name}"
    print(
        f"""\
Next Steps:
1. SSH into the VM:
   {output.ssh_command}

2. Check Docker containers:
   sudo docker ps
   cd {app_dir}
   sudo docker compose logs -f

3. Update environment variables:
   sudo nano {app_dir}/.env
   sudo docker compose restart

4. For production, restrict the database and model API ports:
   export RESTRICTED_SOURCE_RANGES="YOUR_IP/32"
   vmstack-setup --keep-vm

5. Serve a domain (optional):
   export GCP_DOMAIN=yourdomain.com
   vmstack-setup --keep-vm

6. Stop the instance when not needed:
   gcloud compute instances stop {vm.name} --zone={vm.zone}"""
    )


def setup_main() -> int:
    parser = create_cloud_parser("Provision the GCP VM for the compose stack")
    parser.add_argument(
        "--keep-vm",
        action="store_true",
        default=False,
        help="Never delete and recreate an existing VM",
    )
    parser.add_argument(
        "--no-wait",
        action="store_true",
        default=False,
        help="Do not wait for the application to answer after creating the VM",
    )
    args = parser.parse_args()
    setup_logging(args.logs)

    try:
        configs = DeployConfigs.from_env()
        print(f"Config:\n{json.dumps(configs.to_dict(), indent=2)}")
        provisioner = Provisioner(
            configs=configs,
            cloud_api=GcpApi,
            assume_yes=args.yes,
            keep_vm=args.keep_vm,
        )
        output = provisioner.setup(wait=not args.no_wait)
    except Exception as e:
        logger.error(f"Failed: {str(e)}\n{traceback.format_exc()}")
        return 1

    print_access_info(output)
    print_next_steps(output)
    logger.info(
        f"Setup complete. The application should be accessible at: "
        f"{output.frontend_url}"
    )
    return 0


def cleanup_main() -> int:
    parser = create_cloud_parser("Delete the GCP resources created by setup")
    args = parser.parse_args()
    setup_logging(args.logs)

    try:
        configs = DeployConfigs.from_env()
        provisioner = Provisioner(
            configs=configs,
            cloud_api=GcpApi,
            assume_yes=args.yes,
        )
        if provisioner.cleanup():
            logger.info("Cleanup complete")
        return 0
    except Exception as e:
        logger.error(f"Failed: {str(e)}\n{traceback.format_exc()}")
        return 1


if __name__ == "__main__":
    exit(setup_main())
