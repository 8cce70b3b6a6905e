from typing import List, Optional, Dict, Any
from collections import defaultdict
from database import Database
from schemas.responses import AuthorResponse, BookSummary
import logging

logger = logging.getLogger(__name__)


class AuthorRepository:

    @staticmethod
    async def find_all() -> List[AuthorResponse]:
        """Get all authors with their books"""
        rows = await Database.fetch_all("SELECT * FROM authors ORDER BY id ASC")
        book_rows = await Database.fetch_all(
            "SELECT * FROM books WHERE author_id IS NOT NULL ORDER BY id ASC"
        )

        books_by_author = defaultdict(list)
        for book_row in book_rows:
            books_by_author[book_row['author_id']].append(book_row)

        return [
            AuthorRepository._row_to_response(row, books_by_author.get(row['id'], []))
            for row in rows
        ]

    @staticmethod
    async def find_by_id(author_id: int) -> Optional[AuthorResponse]:
        """Get author by ID with their books"""
        row = await Database.fetch_one("SELECT * FROM authors WHERE id = ?", (author_id,))

        if not row:
            return None

        book_rows = await Database.fetch_all(
            "SELECT * FROM books WHERE author_id = ? ORDER BY id ASC", (author_id,)
        )
        return AuthorRepository._row_to_response(row, book_rows)

    @staticmethod
    async def is_exists(author_id: int) -> bool:
        row = await Database.fetch_one("SELECT 1 FROM authors WHERE id = ?", (author_id,))
        return row is not None

    @staticmethod
    async def create(author_data: dict) -> int:
        """Create new author, return author_id"""
        query = "INSERT INTO authors (firstname, lastname, bio) VALUES (?, ?, ?)"
        params = (
            author_data['firstname'],
            author_data['lastname'],
            author_data.get('bio'),
        )
        author_id = await Database.insert(query, params)
        logger.debug(f"Inserted author {author_id}")
        return author_id

    @staticmethod
    async def update(author_id: int, author_data: dict) -> bool:
        """Overwrite author fields, return True if a row changed"""
        query = """
            UPDATE authors
            SET firstname = ?, lastname = ?, bio = ?, updated_at = CURRENT_TIMESTAMP
            WHERE id = ?
        """
        params = (
            author_data['firstname'],
            author_data['lastname'],
            author_data.get('bio'),
            author_id,
        )
        return await Database.execute(query, params) > 0

    @staticmethod
    async def delete(author_id: int) -> bool:
        return await Database.execute("DELETE FROM authors WHERE id = ?", (author_id,)) > 0

    @staticmethod
    def _row_to_response(row: Dict[str, Any], book_rows: List[Dict[str, Any]]) -> AuthorResponse:
        """Convert DB row and its book rows to AuthorResponse"""
        return AuthorResponse(
            id=row['id'],
            firstname=row['firstname'],
            lastname=row['lastname'],
            bio=row['bio'],
            books=[
                BookSummary(
                    id=book['id'],
                    title=book['title'],
                    year=book['year'],
                    isbn=book['isbn'],
                    summary=book['summary'],
                    image=book['image'],
                    price=book['price'],
                    author_id=book['author_id'],
                )
                for book in book_rows
            ]
        )
