"""Request payload models for the REST API."""

from typing import Annotated

from pydantic import Field, StringConstraints

from food_catalog.domain.analysis import SearchType
from food_catalog.domain.health_profile import CamelModel

SearchQuery = Annotated[
    str, StringConstraints(strip_whitespace=True, min_length=1, max_length=200)
]


class SearchRequest(CamelModel):
    """Body of a food search."""

    search_query: SearchQuery
    search_type: SearchType
    barcode: Annotated[str, StringConstraints(strip_whitespace=True)] | None = None
    product_name: Annotated[str, StringConstraints(strip_whitespace=True)] | None = (
        None
    )


class FeedbackRequest(CamelModel):
    """User feedback on a search result."""

    rating: int = Field(ge=1, le=5)
    helpful: bool | None = None
    comments: str | None = Field(default=None, max_length=1000)
