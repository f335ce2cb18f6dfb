from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, replace
from typing import Optional, Sequence

from werkzeug.security import check_password_hash

from ..common.validators import optional_email, optional_text, require_non_empty
from ..core.exceptions import AuthenticationError, ValidationError
from .model import User
from .repository import UserRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AdminSession:
    """What we store into Flask session after login."""

    username: str
    is_admin: bool = True


class AuthService:
    """Use case: admin login gate (single configured account)."""

    def __init__(self, *, admin_username: str, admin_password_hash: str):
        self._admin_username = admin_username
        self._admin_password_hash = admin_password_hash

    def authenticate(self, username: str, password: str) -> AdminSession:
        if (username or "").strip() != self._admin_username:
            raise AuthenticationError("Invalid username or password")

        # Placeholder hashes such as 'CHANGE_ME' simply never match.
        if not check_password_hash(self._admin_password_hash, password or ""):
            raise AuthenticationError("Invalid username or password")

        logger.info("Admin %s logged in", self._admin_username)
        return AdminSession(username=self._admin_username)


class UserService:
    """Use case: manage the RFID card directory (admin)."""

    def __init__(self, users: UserRepository):
        self._users = users

    def register(
        self,
        *,
        name: str,
        card_uid: str,
        department: Optional[str] = None,
        email: Optional[str] = None,
    ) -> User:
        name = require_non_empty(name, "Name")
        card_uid = require_non_empty(card_uid, "Card UID")

        if self._users.get_by_card_uid(card_uid):
            raise ValidationError(f"Card UID {card_uid} is already registered")

        user = User(
            user_id=uuid.uuid4().hex,
            name=name,
            card_uid=card_uid,
            department=optional_text(department),
            email=optional_email(email),
        )
        self._users.create_user(user)
        logger.info("Registered user %s with card %s", user.name, user.card_uid)
        return user

    def edit(
        self,
        user_id: str,
        *,
        name: Optional[str] = None,
        card_uid: Optional[str] = None,
        department: Optional[str] = None,
        email: Optional[str] = None,
    ) -> User:
        user = self._users.get_by_id(user_id)
        if not user:
            raise ValidationError("User not found")

        changes: dict = {}
        if name is not None:
            changes["name"] = require_non_empty(name, "Name")
        if card_uid is not None:
            card_uid = require_non_empty(card_uid, "Card UID")
            owner = self._users.get_by_card_uid(card_uid)
            if owner and owner.user_id != user.user_id:
                raise ValidationError(f"Card UID {card_uid} is already registered")
            changes["card_uid"] = card_uid
        if department is not None:
            changes["department"] = optional_text(department)
        if email is not None:
            changes["email"] = optional_email(email)

        updated = replace(user, **changes)
        if updated != user and not self._users.update_user(updated):
            raise ValidationError("Failed to update user")
        return updated

    def delete(self, user_id: str) -> None:
        if not self._users.get_by_id(user_id):
            raise ValidationError("User not found")
        if not self._users.delete_by_id(user_id):
            raise ValidationError("Failed to delete user")
        logger.info("Deleted user %s", user_id)

    def list_users(self) -> Sequence[User]:
        return self._users.list_all()

    def reset_directory(self) -> int:
        removed = self._users.delete_all()
        logger.warning("User directory reset (%d users removed)", removed)
        return removed
