import logging
import time

import requests

logger = logging.getLogger(__name__)


def wait_for_http(url: str, timeout: int = 150, interval: int = 10) -> bool:
    """Poll `url` until it answers or `timeout` seconds pass.

    Any HTTP response counts as up; the application decides its own status
    codes. Running out of time is logged, not raised, since the startup
    script keeps running on the VM.
    """
    logger.info(f"Waiting up to {timeout}s for {url}...")
    deadline = time.time() + timeout
    while True:
        try:
            response = requests.get(url, timeout=5)
            logger.info(f"{url} answered with HTTP {response.status_code}")
            return True
        except requests.RequestException as e:
            logger.debug(f"{url} not ready yet: {e}")

        if time.time() >= deadline:
            logger.warning(
                f"{url} did not answer within {timeout}s. "
                "The startup script may still be running."
            )
            return False
        time.sleep(interval)
