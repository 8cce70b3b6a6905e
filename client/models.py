from typing import List, Optional

from pydantic import BaseModel, EmailStr, Field, model_validator


class Author(BaseModel):
    id: Optional[int] = None
    firstname: str = Field(..., min_length=1, max_length=100)
    lastname: str = Field(..., min_length=1, max_length=100)
    bio: Optional[str] = Field(None, max_length=250)
    books: List["Book"] = Field(default_factory=list)


class Book(BaseModel):
    id: Optional[int] = None
    title: str = Field(..., min_length=1, max_length=200)
    year: Optional[int] = None
    isbn: str = Field(..., min_length=1, max_length=30)
    summary: Optional[str] = Field(None, max_length=500)
    image: Optional[str] = None
    file: Optional[str] = None
    price: Optional[float] = None
    author_id: Optional[int] = None
    author: Optional[Author] = None


Author.model_rebuild()


class LoginModel(BaseModel):
    email_address: EmailStr
    password: str


class RegistrationModel(BaseModel):
    email_address: EmailStr
    password: str = Field(..., min_length=6, max_length=15)
    confirm_password: str

    @model_validator(mode="after")
    def passwords_match(self):
        if self.password != self.confirm_password:
            raise ValueError("The password and confirmation password do not match")
        return self
