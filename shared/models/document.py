"""Pydantic models for ingested content.

Hierarchy:
  DocumentMeta : common provenance fields (source label, timestamp).
  TextMeta     : free text submitted through the API.
  UrlMeta      : a crawled web page.
  PdfMeta      : a single page of an uploaded PDF.
  Document     : normalised loader output, one per text / page / PDF page.
  Chunk        : fixed-size fragment of a Document, the unit of embedding and retrieval.
"""

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

TEXT_SOURCE = "api_request"


class DocumentMeta(BaseModel):
    """Provenance shared by all metadata variants.

    Attributes:
        source:        Origin of the content (marker, URL or filename).
        timestamp:     ISO-8601 time the content was loaded.
        document_type: Optional display label that takes precedence over source.
    """

    model_config = ConfigDict(frozen=True)

    source: str
    timestamp: str
    document_type: str | None = None


class TextMeta(DocumentMeta):
    kind: Literal["text"] = "text"
    source: str = TEXT_SOURCE
    original_length: int = 0
    processed_length: int = 0


class UrlMeta(DocumentMeta):
    kind: Literal["url"] = "url"
    title: str | None = None
    depth: int = 0


class PdfMeta(DocumentMeta):
    kind: Literal["pdf"] = "pdf"
    page_number: int | None = None
    total_pages: int | None = None


Metadata = Annotated[Union[TextMeta, UrlMeta, PdfMeta], Field(discriminator="kind")]


class Document(BaseModel):
    """Normalised content produced by a loader. Immutable once created."""

    model_config = ConfigDict(frozen=True)

    content: str
    metadata: Metadata


class Chunk(BaseModel):
    """A fragment of a Document.

    Attributes:
        content:      Chunk text.
        metadata:     Metadata inherited unchanged from the parent document.
        chunk_index:  Zero-based position of this chunk within its parent.
        start_offset: Character offset of the chunk inside the parent content.
    """

    model_config = ConfigDict(frozen=True)

    content: str
    metadata: Metadata
    chunk_index: int = 0
    start_offset: int = 0
