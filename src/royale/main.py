"""Process entry point for the GitHub Actions workflow.

Usage:
    # Environment supplies EVENT_NAME, ISSUE_AUTHOR, ISSUE_NUMBER, ...
    github-wars

Exits non-zero only when the state or README could not be written.
"""

from __future__ import annotations

import asyncio
import logging
import sys

from royale.config import Settings
from royale.core.dispatcher import run
from royale.errors import StoreWriteError

logger = logging.getLogger(__name__)


def main() -> None:
    settings = Settings()

    logging.basicConfig(
        level=getattr(logging, settings.royale_log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        asyncio.run(run(settings))
    except StoreWriteError as exc:
        logger.error("invocation_failed error=%s", exc)
        sys.exit(1)


if __name__ == "__main__":
    main()
