import logging

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"


def setup_logging(verbose: bool = False) -> None:
    """Configure the root logger for the command line tools."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format=LOG_FORMAT, force=True)

    # The google client libraries are chatty at DEBUG
    for name in ("google", "googleapiclient", "urllib3"):
        logging.getLogger(name).setLevel(logging.WARNING)
