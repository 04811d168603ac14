# booksearch/models.py
from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional


class BookRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str = Field(..., description="Listing title")
    author: str = ""
    isbn: str = ""
    price: float = 0.0
    shipping: float = 0.0
    dealer: str = ""
    platform: str = ""
    link: str = Field(..., description="Direct offer URL at the dealer")
    condition: str = ""  # empty means not provided

    @property
    def total_cost(self) -> float:
        """Item price plus shipping."""
        return self.price + self.shipping

    @property
    def has_condition(self) -> bool:
        return bool(self.condition)


class SearchResult(BaseModel):
    query: str  # term actually sent upstream
    original_query: str
    converted_isbn: Optional[str] = None
    books: List[BookRecord] = []
