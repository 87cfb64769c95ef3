from pydantic import BaseModel, Field
from typing import Optional


class SearchResult(BaseModel):
    """Single handbook search hit (policy or category)"""
    id: Optional[int] = None
    title: str
    description: str = ""
    url: str
    category_url: Optional[str] = Field(None, alias="categoryUrl")
    category: str  # "Policy" or "Category"
    type: str  # "policy" or "category"

    class Config:
        populate_by_name = True
