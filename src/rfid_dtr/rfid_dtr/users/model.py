from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class User:
    """Thực thể miền (domain): người dùng gắn với một thẻ RFID.

    Lưu ý: Đây là đối tượng dữ liệu thuần (không chứa code truy cập DB).
    """

    user_id: str
    name: str
    card_uid: str
    department: Optional[str] = None
    email: Optional[str] = None
    created_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": self.user_id,
            "name": self.name,
            "cardUID": self.card_uid,
            "department": self.department,
            "email": self.email,
        }
