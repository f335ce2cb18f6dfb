from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Callable, Optional, Sequence, Union

from ..common.datetime_utils import format_clock, now_local, to_minute
from ..core.constants import DEFAULT_STORE_WRITE_ATTEMPTS, SCAN_FAILED_MESSAGE, UNREGISTERED_CARD_MESSAGE
from ..core.enums import AttendanceAction
from ..core.exceptions import StoreError
from ..users.repository import UserRepository
from .cache import RecordCache
from .model import RecordKey, ScanResult, TimeRecord
from .repository import TimeRecordRepository
from .rules import rule_for, suggest_action

logger = logging.getLogger(__name__)

SYSTEM_ERROR_MESSAGE = "System error. Please try again or contact administrator."


class AttendanceService:
    """Attendance decision engine.

    Owns every mutation of daily time records. A record is loaded from the
    cache (falling back to one store read on a miss), guarded, written to the
    store as a full document, and only then swapped into the cache.
    """

    def __init__(
        self,
        records: TimeRecordRepository,
        users: UserRepository,
        *,
        cache: RecordCache | None = None,
        write_attempts: int = DEFAULT_STORE_WRITE_ATTEMPTS,
        clock: Callable[[], datetime] = now_local,
    ):
        self._records = records
        self._users = users
        self._cache = cache if cache is not None else RecordCache()
        self._write_attempts = max(int(write_attempts), 1)
        self._clock = clock

    @property
    def cache(self) -> RecordCache:
        return self._cache

    def scan(
        self,
        card_uid: str,
        action: Union[AttendanceAction, str, None] = None,
        *,
        now: datetime | None = None,
        auto_determine: bool = False,
    ) -> ScanResult:
        """Card scan entry point: resolve the card, then run the engine."""

        card = (card_uid or "").strip()
        if not card:
            return ScanResult.failure("Please scan a valid RFID card.")

        try:
            user = self._users.get_by_card_uid(card)
        except Exception:
            logger.exception("User lookup failed for card %s", card)
            return ScanResult.failure(SCAN_FAILED_MESSAGE)

        if not user:
            logger.info("Rejected unregistered card %s", card)
            return ScanResult.failure(UNREGISTERED_CARD_MESSAGE)

        now = now or self._clock()
        if action is None or action == "":
            if not auto_determine:
                return ScanResult.failure("Please select an attendance action.", user_name=user.name)
            try:
                current = self._load(RecordKey(user.user_id, now.date()), user.name)
            except StoreError:
                logger.exception("Could not load today's record for %s", user.user_id)
                return ScanResult.failure(SCAN_FAILED_MESSAGE, user_name=user.name)
            action = suggest_action(current, now)
            if action is None:
                return ScanResult.failure(f"{user.name}, you have completed your DTR for today.", user_name=user.name)

        return self.record_action(user.user_id, user.name, action, now=now)

    def record_action(
        self,
        user_id: str,
        user_name: str,
        action: Union[AttendanceAction, str],
        *,
        now: datetime | None = None,
    ) -> ScanResult:
        try:
            action = action if isinstance(action, AttendanceAction) else AttendanceAction.parse(action)
        except ValueError:
            return ScanResult.failure("Unknown attendance action.", user_name=user_name)

        now = now or self._clock()
        key = RecordKey(str(user_id), now.date())
        rule = rule_for(action)

        try:
            with self._cache.lock_for(key):
                record = self._load(key, user_name)

                if not rule.window_allows(now):
                    logger.info("%s rejected for %s at %s: outside window", action.value, key.document_id, now)
                    return ScanResult.failure(rule.window_message or "", user_name=user_name)

                if rule.already_recorded(record):
                    logger.info("%s rejected for %s: already recorded", action.value, key.document_id)
                    return ScanResult.failure(rule.rejection_for_duplicate(user_name), user_name=user_name)

                stamp = to_minute(now)
                updated = record.with_slot(rule.slot, stamp, user_name=user_name)

                if not self._persist(updated):
                    return ScanResult.failure(SCAN_FAILED_MESSAGE, user_name=user_name)

                self._cache.put(updated)
        except StoreError:
            logger.exception("Store read failed for %s", key.document_id)
            return ScanResult.failure(SCAN_FAILED_MESSAGE, user_name=user_name)
        except Exception:
            logger.exception("Unexpected error recording %s for %s", action.value, key.document_id)
            return ScanResult.failure(SYSTEM_ERROR_MESSAGE, user_name=user_name)

        clock = format_clock(stamp)
        logger.info("%s recorded for %s at %s", action.value, key.document_id, clock)
        return ScanResult(
            success=True,
            message=rule.success_for(user_name, clock),
            action=action,
            time=clock,
            user_name=user_name,
        )

    def get_today_record(self, user_id: str, *, now: datetime | None = None) -> Optional[TimeRecord]:
        """Cache-only read used by the scanner status panel."""

        now = now or self._clock()
        return self._cache.get(RecordKey(str(user_id), now.date()))

    def list_records(self, *, start: date, end: date, user_id: Optional[str] = None) -> Sequence[TimeRecord]:
        # Reports always hit the store; the cache only tracks today's touches.
        return self._records.read_between(start_date=start, end_date=end, user_id=user_id)

    def delete_day(self, user_id: str, work_date: date) -> bool:
        key = RecordKey(str(user_id), work_date)
        with self._cache.lock_for(key):
            deleted = self._records.delete(key)
            self._cache.forget(key)
        logger.info("Deleted record %s (found=%s)", key.document_id, deleted)
        return deleted

    def clear_all(self) -> int:
        removed = self._records.delete_all()
        self._cache.clear()
        logger.warning("All time records cleared (%d rows)", removed)
        return removed

    def close_day(self, work_date: date, *, now: datetime | None = None) -> int:
        """Flag sessions without a time-out as missed for every record of work_date."""

        now = now or self._clock()
        changed = 0
        for snapshot in self._records.read_between(start_date=work_date, end_date=work_date):
            with self._cache.lock_for(snapshot.key):
                # A scan may have landed since the range read.
                record = self._load(snapshot.key, snapshot.user_name)
                missed_am = not record.time_out_am.is_set
                missed_pm = not record.time_out_pm.is_set
                if record.missed_am == missed_am and record.missed_pm == missed_pm:
                    continue

                updated = record.with_missed(missed_am=missed_am, missed_pm=missed_pm, at=to_minute(now))
                self._records.write(updated)
                self._cache.put(updated)
            changed += 1

        logger.info("Closed %s: %d records flagged", work_date, changed)
        return changed

    def _load(self, key: RecordKey, user_name: str) -> TimeRecord:
        record = self._cache.get(key)
        if record is not None:
            return record

        record = self._records.get(key)
        if record is not None:
            self._cache.put(record)
            return record

        # Not cached and not persisted until a slot is set.
        return TimeRecord.empty(key, user_name)

    def _persist(self, record: TimeRecord) -> bool:
        for attempt in range(1, self._write_attempts + 1):
            try:
                self._records.write(record)
                return True
            except StoreError:
                logger.warning(
                    "Store write failed for %s (attempt %d/%d)",
                    record.key.document_id,
                    attempt,
                    self._write_attempts,
                    exc_info=True,
                )
        logger.error("Giving up on store write for %s", record.key.document_id)
        return False
