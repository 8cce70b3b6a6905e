import os
import aiosqlite
from contextlib import asynccontextmanager
from typing import Dict, Any, List, Optional
from config import settings
import logging

logger = logging.getLogger(__name__)


class Database:
    _db_path: str = settings.DATABASE_URL

    @classmethod
    async def initialize(cls):
        """Initialize database and create tables if they don't exist"""
        # Ensure directory exists for SQLite file
        db_dir = os.path.dirname(cls._db_path)
        if db_dir:
            os.makedirs(db_dir, exist_ok=True)
        logger.info(f"Initializing database at: {cls._db_path}")

        # Configure SQLite for better concurrency
        async with cls.connection() as conn:
            await conn.execute("PRAGMA journal_mode=WAL")
            await conn.execute("PRAGMA busy_timeout=5000")
            await conn.execute("PRAGMA synchronous=NORMAL")
            await conn.commit()
            logger.info("SQLite WAL mode enabled")

        await cls._create_tables()

    @classmethod
    async def close(cls):
        """Close database connections - placeholder for cleanup if needed"""
        logger.info("Database cleanup completed")

    @classmethod
    @asynccontextmanager
    async def connection(cls):
        """Context manager for database connections"""
        async with aiosqlite.connect(cls._db_path) as conn:
            conn.row_factory = aiosqlite.Row  # Enable dict-like access
            # Foreign key enforcement is per connection in SQLite
            await conn.execute("PRAGMA foreign_keys=ON")
            yield conn

    @classmethod
    async def execute(cls, query: str, params: tuple = None) -> int:
        """Execute a query and return the number of affected rows"""
        async with cls.connection() as conn:
            cursor = await conn.execute(query, params or ())
            await conn.commit()
            logger.debug(f"Executed: {query[:100]}...")
            return cursor.rowcount

    @classmethod
    async def insert(cls, query: str, params: tuple = None) -> int:
        """Execute an INSERT and return the new row id"""
        async with cls.connection() as conn:
            cursor = await conn.execute(query, params or ())
            await conn.commit()
            logger.debug(f"Inserted: {query[:100]}...")
            return cursor.lastrowid

    @classmethod
    async def fetch_one(cls, query: str, params: tuple = None) -> Optional[Dict[str, Any]]:
        """Fetch a single row"""
        async with cls.connection() as conn:
            cursor = await conn.execute(query, params or ())
            row = await cursor.fetchone()
            return dict(row) if row else None

    @classmethod
    async def fetch_all(cls, query: str, params: tuple = None) -> List[Dict[str, Any]]:
        """Fetch multiple rows"""
        async with cls.connection() as conn:
            cursor = await conn.execute(query, params or ())
            rows = await cursor.fetchall()
            return [dict(row) for row in rows]

    @classmethod
    async def health_check(cls) -> bool:
        """Check if database is accessible"""
        try:
            async with cls.connection() as conn:
                await conn.execute("SELECT 1")
            return True
        except Exception as e:
            logger.error(f"Database health check failed: {e}")
            return False

    @classmethod
    async def _create_tables(cls):
        """Create all database tables"""
        tables = [
            """
            CREATE TABLE IF NOT EXISTS authors (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                firstname TEXT NOT NULL,
                lastname TEXT NOT NULL,
                bio TEXT,
                created_at DATETIME DEFAULT CURRENT_TIMESTAMP,
                updated_at DATETIME DEFAULT CURRENT_TIMESTAMP
            );
            """,
            """
            CREATE TABLE IF NOT EXISTS books (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                title TEXT NOT NULL,
                year INTEGER,
                isbn TEXT NOT NULL,
                summary TEXT,
                image TEXT,
                price REAL,
                author_id INTEGER,
                created_at DATETIME DEFAULT CURRENT_TIMESTAMP,
                updated_at DATETIME DEFAULT CURRENT_TIMESTAMP,
                FOREIGN KEY (author_id) REFERENCES authors(id) ON DELETE SET NULL
            );
            """,
            """
            CREATE TABLE IF NOT EXISTS users (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                email TEXT UNIQUE NOT NULL COLLATE NOCASE,
                password_hash TEXT NOT NULL,
                created_at DATETIME DEFAULT CURRENT_TIMESTAMP
            );
            """,
            """
            CREATE TABLE IF NOT EXISTS roles (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                name TEXT UNIQUE NOT NULL
            );
            """,
            """
            CREATE TABLE IF NOT EXISTS user_roles (
                user_id INTEGER NOT NULL,
                role_id INTEGER NOT NULL,
                PRIMARY KEY (user_id, role_id),
                FOREIGN KEY (user_id) REFERENCES users(id) ON DELETE CASCADE,
                FOREIGN KEY (role_id) REFERENCES roles(id) ON DELETE CASCADE
            );
            """,
            "CREATE INDEX IF NOT EXISTS idx_books_author_id ON books(author_id);",
        ]

        async with cls.connection() as conn:
            # Create tables
            for table_sql in tables:
                await conn.execute(table_sql)

            await conn.commit()
            logger.info("All database tables created successfully")
