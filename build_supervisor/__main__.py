"""Command line entry point: ``python -m build_supervisor``."""

import asyncio
import os
import sys

from .app import run
from .config.loader import load_config
from .errors import ConfigurationError
from .logging.config import configure_logging_from_environment, get_logger

logger = get_logger("build_supervisor")


def main() -> int:
    """Configure logging, load configuration and run the supervisor."""
    configure_logging_from_environment(os.environ)

    try:
        config = load_config()
    except ConfigurationError as e:
        logger.error(str(e), field=e.field)
        exit_code = 1
    else:
        logger.info("Initialization complete", phase="start")
        try:
            exit_code = asyncio.run(run(config))
        except KeyboardInterrupt:
            exit_code = 0
        except Exception as e:
            # Start-up failures such as a missing AWS region
            logger.error(str(e), error_type=type(e).__name__, exc_info=e)
            exit_code = 1

    logger.info("Exiting program with exit code %d", exit_code, phase="finish", result=exit_code)
    return exit_code


if __name__ == "__main__":
    sys.exit(main())
