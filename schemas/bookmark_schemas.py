from pydantic import BaseModel, Field, field_validator
from typing import Union


class BookmarkedVerse(BaseModel):
    book: str = Field(..., min_length=1, max_length=100)
    chapter: str = Field(..., min_length=1, max_length=10)
    reference: str = Field(..., min_length=1, max_length=200)  # "{book} {chapter}:{verse}"
    text: str = ''


class BookmarkToggle(BaseModel):
    """Payload of a toggle request: the verse as shown in the reader."""
    book: str = Field(..., min_length=1, max_length=100)
    chapter: Union[int, str]
    verse: int = Field(..., ge=1)
    text: str = ''

    @field_validator('book')
    @classmethod
    def book_not_blank(cls, value):
        if not value.strip():
            raise ValueError('book must not be blank')
        return value

    @field_validator('chapter')
    @classmethod
    def chapter_is_positive(cls, value):
        if not str(value).strip().isdigit() or int(str(value).strip()) < 1:
            raise ValueError('chapter must be a positive integer')
        return str(int(str(value).strip()))
