from __future__ import annotations

import importlib
import logging
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.timeclock.timeclock.common.log_config import configure_logging
from src.timeclock.timeclock.container import build_container
from src.timeclock.timeclock.users.identity import get_or_create_demo_user

logger = logging.getLogger("timeclock.scripts.seed_db")


def main() -> None:
    """Make sure the shared demo account exists (anonymous scans are recorded for it)."""

    settings = importlib.import_module(get_settings_module())
    configure_logging(level=getattr(settings, "LOG_LEVEL", "INFO"), fmt=getattr(settings, "LOG_FORMAT", "standard"))

    container = build_container(db_config=dict(settings.DB_CONFIG), settings=settings)
    demo = get_or_create_demo_user(container.users_repo)
    logger.info("Demo user ready: id=%s email=%s", demo.user_id, demo.email)


if __name__ == "__main__":
    main()
