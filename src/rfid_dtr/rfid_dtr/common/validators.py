from __future__ import annotations

import re
from typing import Optional

from ..core.exceptions import ValidationError

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def optional_text(value: Optional[str]) -> Optional[str]:
    v = (value or "").strip()
    return v or None


def optional_email(value: Optional[str]) -> Optional[str]:
    v = optional_text(value)
    if v and not _EMAIL_RE.match(v):
        raise ValidationError("Email address is not valid")
    return v
