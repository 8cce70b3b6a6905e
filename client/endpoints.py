from typing import Optional

from config import settings


class Endpoints:
    """API URLs, built from API_BASE_URL"""

    def __init__(self, base_url: Optional[str] = None):
        self.base_url = (base_url or settings.API_BASE_URL).rstrip("/")

    @property
    def authors(self) -> str:
        return f"{self.base_url}/api/authors"

    @property
    def books(self) -> str:
        return f"{self.base_url}/api/books"

    @property
    def register(self) -> str:
        return f"{self.base_url}/api/users/register"

    @property
    def login(self) -> str:
        return f"{self.base_url}/api/users/login"

    def book_image(self, book_id: int) -> str:
        return f"{self.books}/{book_id}/image"
