"""Flag AM/PM sessions without a time-out as missed.

Chạy cuối ngày (cron), ví dụ: python scripts/close_day.py 2026-02-02
Mặc định là ngày hôm nay.
"""

from __future__ import annotations

import argparse
import importlib
import logging
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from dotenv import load_dotenv

from config import get_settings_module

from src.rfid_dtr.rfid_dtr.common.datetime_utils import now_local, parse_iso_date
from src.rfid_dtr.rfid_dtr.container import build_container
from src.rfid_dtr.rfid_dtr.main import resolve_admin_password_hash


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("date", nargs="?", help="YYYY-MM-DD (default: today)")
    args = parser.parse_args()

    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    logging.basicConfig(level=getattr(settings, "LOG_LEVEL", "INFO"))

    try:
        day = parse_iso_date(args.date) if args.date else now_local().date()
    except ValueError:
        raise SystemExit("Date must be in YYYY-MM-DD format")

    container = build_container(
        db_config=settings.DB_CONFIG,
        admin_username=getattr(settings, "ADMIN_USERNAME", "admin"),
        admin_password_hash=resolve_admin_password_hash(settings),
    )
    changed = container.attendance_service.close_day(day)
    print(f"OK: Closed {day.isoformat()} ({changed} records flagged)")


if __name__ == "__main__":
    main()
