"""Application-wide settings and environment loading."""

import logging
import os
from typing import Optional

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

load_dotenv()
logger.debug("Environment variables loaded from .env if present")


def running_in_actions() -> bool:
    """Return True when executing on a GitHub Actions runner."""
    return os.getenv("GITHUB_ACTIONS") == "true"


def runner_debug_enabled() -> bool:
    """Return True when the runner has step debug logging turned on."""
    return os.getenv("RUNNER_DEBUG") == "1" or os.getenv("ACTIONS_STEP_DEBUG") == "true"


def get_output_file() -> Optional[str]:
    """Return the path of the runner's step output file, if any."""
    output_file = os.getenv("GITHUB_OUTPUT")
    if output_file:
        logger.debug("Step output file configured", extra={"path": output_file})
        return output_file

    logger.debug("GITHUB_OUTPUT not set")
    return None
