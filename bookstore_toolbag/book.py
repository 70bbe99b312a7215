# bookstore_toolbag/book.py
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class Book(BaseModel):
    """One document of the books collection."""

    title: str
    author: str
    genre: str
    published_year: int
    price: float = Field(ge=0)
    in_stock: bool = True
    pages: Optional[int] = None
    publisher: Optional[str] = None

    @property
    def decade(self) -> int:
        return (self.published_year // 10) * 10

    def to_document(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)
