from pydantic import BaseModel, EmailStr, Field
from typing import Optional


class AuthorCreateRequest(BaseModel):
    firstname: str = Field(..., min_length=1, max_length=100)
    lastname: str = Field(..., min_length=1, max_length=100)
    bio: Optional[str] = Field(None, max_length=250)


class AuthorUpdateRequest(AuthorCreateRequest):
    id: int = Field(..., description="Must match the id in the route")


class BookCreateRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    year: Optional[int] = Field(None, ge=0, le=9999)
    isbn: str = Field(..., min_length=1, max_length=30)
    summary: Optional[str] = Field(None, max_length=500)
    image: Optional[str] = Field(None, max_length=255, description="Cover image file name")
    file: Optional[str] = Field(None, description="Base64 encoded cover image content")
    price: Optional[float] = Field(None, ge=0)
    author_id: int


class BookUpdateRequest(BookCreateRequest):
    id: int = Field(..., description="Must match the id in the route")


class UserRequest(BaseModel):
    email_address: EmailStr
    password: str = Field(..., min_length=6, max_length=15)
