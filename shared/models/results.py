"""Pydantic models for pipeline results.

Field names are snake_case in Python and camelCase on the wire
(e.g. chunks_created → chunksCreated).
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class TextIngestResult(CamelModel):
    original_text: str
    processed_text: str
    chunks_created: int
    indexed_at: str


class UrlIngestResult(CamelModel):
    original_url: str
    pages_processed: int
    chunks_created: int
    indexed_at: str


class PdfIngestResult(CamelModel):
    """Result of a PDF upload. documents_processed counts the indexed chunks."""

    documents_processed: int
    filename: str
    file_size: str
    pages_with_text: int = 0
    indexed_at: str


class ChatResult(CamelModel):
    original_query: str
    corrected_query: str
    answer: str
    chunks_found: int
    processed_at: str
