from typing import List, Optional, Dict, Any
from database import Database
from schemas.responses import BookResponse, AuthorSummary
import logging

logger = logging.getLogger(__name__)

_SELECT_WITH_AUTHOR = """
    SELECT b.*,
           a.firstname AS author_firstname,
           a.lastname AS author_lastname,
           a.bio AS author_bio
    FROM books b
    LEFT JOIN authors a ON b.author_id = a.id
"""


class BookRepository:

    @staticmethod
    async def find_all() -> List[BookResponse]:
        """Get all books with their author"""
        rows = await Database.fetch_all(_SELECT_WITH_AUTHOR + " ORDER BY b.id ASC")
        return [BookRepository._row_to_response(row) for row in rows]

    @staticmethod
    async def find_by_id(book_id: int) -> Optional[BookResponse]:
        """Get book by ID with its author"""
        row = await Database.fetch_one(_SELECT_WITH_AUTHOR + " WHERE b.id = ?", (book_id,))

        if not row:
            return None

        return BookRepository._row_to_response(row)

    @staticmethod
    async def is_exists(book_id: int) -> bool:
        row = await Database.fetch_one("SELECT 1 FROM books WHERE id = ?", (book_id,))
        return row is not None

    @staticmethod
    async def is_image_in_use(image: str, exclude_book_id: Optional[int] = None) -> bool:
        """Check whether any book, other than exclude_book_id, references the image"""
        row = await Database.fetch_one(
            "SELECT 1 FROM books WHERE image = ? AND id != ?", (image, exclude_book_id or 0)
        )
        return row is not None

    @staticmethod
    async def create(book_data: dict) -> int:
        """Create new book, return book_id"""
        query = """
            INSERT INTO books (title, year, isbn, summary, image, price, author_id)
            VALUES (?, ?, ?, ?, ?, ?, ?)
        """
        params = (
            book_data['title'],
            book_data.get('year'),
            book_data['isbn'],
            book_data.get('summary'),
            book_data.get('image'),
            book_data.get('price'),
            book_data['author_id'],
        )
        book_id = await Database.insert(query, params)
        logger.debug(f"Inserted book {book_id}")
        return book_id

    @staticmethod
    async def update(book_id: int, book_data: dict) -> bool:
        """Overwrite book fields, return True if a row changed"""
        query = """
            UPDATE books
            SET title = ?, year = ?, isbn = ?, summary = ?, image = ?, price = ?, author_id = ?,
                updated_at = CURRENT_TIMESTAMP
            WHERE id = ?
        """
        params = (
            book_data['title'],
            book_data.get('year'),
            book_data['isbn'],
            book_data.get('summary'),
            book_data.get('image'),
            book_data.get('price'),
            book_data['author_id'],
            book_id,
        )
        return await Database.execute(query, params) > 0

    @staticmethod
    async def update_image(book_id: int, image: Optional[str]) -> bool:
        query = "UPDATE books SET image = ?, updated_at = CURRENT_TIMESTAMP WHERE id = ?"
        return await Database.execute(query, (image, book_id)) > 0

    @staticmethod
    async def delete(book_id: int) -> bool:
        return await Database.execute("DELETE FROM books WHERE id = ?", (book_id,)) > 0

    @staticmethod
    def _row_to_response(row: Dict[str, Any]) -> BookResponse:
        """Convert joined DB row to BookResponse"""
        author = None
        if row['author_id'] is not None and row['author_firstname'] is not None:
            author = AuthorSummary(
                id=row['author_id'],
                firstname=row['author_firstname'],
                lastname=row['author_lastname'],
                bio=row['author_bio'],
            )

        return BookResponse(
            id=row['id'],
            title=row['title'],
            year=row['year'],
            isbn=row['isbn'],
            summary=row['summary'],
            image=row['image'],
            price=row['price'],
            author_id=row['author_id'],
            author=author,
        )
