"""Delete unpurchased uploads past their retention period.

Meant to be run by an external scheduler (cron, a Kubernetes CronJob, ...):

    printshop-sweep
"""
import logging
import sys

from printshop.bootstrap import build_container
from printshop.config import Settings, configure_logging

logger = logging.getLogger(__name__)


def main() -> int:
    settings = Settings.from_env()
    configure_logging(settings.log_level)
    result = build_container(settings).file_service().sweep_unpurchased_files()
    logger.info("Sweep finished: %d deleted, %d failed", result.deleted, result.failed)
    return 1 if result.failed else 0


if __name__ == "__main__":
    sys.exit(main())
