import aiosqlite

from database import Database
from typing import List, Dict, Any, Optional
import logging

logger = logging.getLogger(__name__)


class UserRepository:

    @staticmethod
    async def get_by_email(email: str) -> Optional[Dict[str, Any]]:
        """Get user row by email (case-insensitive)"""
        return await Database.fetch_one(
            "SELECT * FROM users WHERE lower(email) = lower(?)", (email,)
        )

    @staticmethod
    async def create_user(email: str, password_hash: str, role_name: str) -> Optional[int]:
        """
        Insert a user together with its role link in one transaction.
        Returns None if the email is already registered.
        """
        async with Database.connection() as conn:
            try:
                await conn.execute("INSERT OR IGNORE INTO roles (name) VALUES (?)", (role_name,))
                cursor = await conn.execute(
                    "INSERT INTO users (email, password_hash) VALUES (?, ?)",
                    (email, password_hash)
                )
                user_id = cursor.lastrowid
                await conn.execute(
                    "INSERT INTO user_roles (user_id, role_id) SELECT ?, id FROM roles WHERE name = ?",
                    (user_id, role_name)
                )
                await conn.commit()
            except aiosqlite.IntegrityError as e:
                await conn.rollback()
                logger.warning(f"User {email} not created: {e}")
                return None

        logger.info(f"Created user {email} in role {role_name}")
        return user_id

    @staticmethod
    async def ensure_role(name: str) -> int:
        """Create role if missing, return role id"""
        await Database.execute("INSERT OR IGNORE INTO roles (name) VALUES (?)", (name,))
        row = await Database.fetch_one("SELECT id FROM roles WHERE name = ?", (name,))
        return row['id']

    @staticmethod
    async def get_roles(user_id: int) -> List[str]:
        rows = await Database.fetch_all(
            """
            SELECT r.name FROM roles r
            JOIN user_roles ur ON ur.role_id = r.id
            WHERE ur.user_id = ?
            ORDER BY r.name
            """,
            (user_id,)
        )
        return [row['name'] for row in rows]
