from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import User
from .repository import UserRepository


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, user_id: str) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT user_id, name, card_uid, department, email, created_at
                FROM users
                WHERE user_id=%s
                """,
                (user_id,),
            )
            row = fetchone(cur)
            return self._to_user(row) if row else None

    def get_by_card_uid(self, card_uid: str) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT user_id, name, card_uid, department, email, created_at
                FROM users
                WHERE card_uid=%s
                """,
                (card_uid,),
            )
            row = fetchone(cur)
            return self._to_user(row) if row else None

    def list_all(self) -> Sequence[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT user_id, name, card_uid, department, email, created_at
                FROM users
                ORDER BY name ASC
                """
            )
            return [self._to_user(r) for r in fetchall(cur)]

    def create_user(self, user: User) -> str:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO users(user_id, name, card_uid, department, email)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (user.user_id, user.name, user.card_uid, user.department, user.email),
            )
            return user.user_id

    def update_user(self, user: User) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE users
                SET name=%s, card_uid=%s, department=%s, email=%s
                WHERE user_id=%s
                """,
                (user.name, user.card_uid, user.department, user.email, user.user_id),
            )
            return cur.rowcount > 0

    def delete_by_id(self, user_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM users WHERE user_id=%s", (user_id,))
            return cur.rowcount > 0

    def delete_all(self) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM users")
            return int(cur.rowcount or 0)

    @staticmethod
    def _to_user(row: dict) -> User:
        return User(
            user_id=str(row["user_id"]),
            name=row["name"],
            card_uid=row["card_uid"],
            department=row.get("department"),
            email=row.get("email"),
            created_at=row.get("created_at"),
        )
