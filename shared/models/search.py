"""Pydantic models for vector-store search results."""

from pydantic import BaseModel


class SearchHit(BaseModel):
    """A single point returned by a similarity search, in store order.

    Attributes:
        id:      Point identifier assigned at upsert time.
        score:   Similarity score reported by the store.
        payload: Raw payload stored alongside the vector.
    """

    id: str
    score: float
    payload: dict = {}
