from pydantic import BaseModel, Field
from typing import Optional, List


class HealthResponse(BaseModel):
    status: str
    database: str
    uploads: str


class AuthorSummary(BaseModel):
    id: int
    firstname: str
    lastname: str
    bio: Optional[str] = None


class BookSummary(BaseModel):
    id: int
    title: str
    year: Optional[int] = None
    isbn: str
    summary: Optional[str] = None
    image: Optional[str] = None
    price: Optional[float] = None
    author_id: Optional[int] = None


class AuthorResponse(AuthorSummary):
    books: List[BookSummary] = Field(default_factory=list)


class BookResponse(BookSummary):
    author: Optional[AuthorSummary] = None
    file: Optional[str] = Field(None, description="Base64 encoded cover image, only on single reads")


class TokenResponse(BaseModel):
    token: str


class RegisterResponse(BaseModel):
    succeeded: bool
