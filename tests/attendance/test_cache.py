from datetime import date

from src.rfid_dtr.rfid_dtr.attendance.cache import RecordCache
from src.rfid_dtr.rfid_dtr.attendance.model import RecordKey, TimeRecord


def test_lock_is_shared_per_key():
    cache = RecordCache()
    key = RecordKey("u_1", date(2026, 2, 2))

    assert cache.lock_for(key) is cache.lock_for(key)
    assert cache.lock_for(key) is not cache.lock_for(RecordKey("u_1", date(2026, 2, 3)))


def test_clear_drops_records_and_locks():
    cache = RecordCache()
    key = RecordKey("u_1", date(2026, 2, 2))
    cache.put(TimeRecord.empty(key, "Alice"))
    first_lock = cache.lock_for(key)

    cache.clear()

    assert len(cache) == 0
    assert cache._locks == {}
    assert cache.lock_for(key) is not first_lock
