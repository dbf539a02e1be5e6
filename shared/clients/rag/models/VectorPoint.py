"""VectorPoint model: a chunk record as persisted in a RAG backend."""

import uuid

from pydantic import BaseModel

from shared.models.document import Chunk


class VectorPoint(BaseModel):
    """A single point upserted into the vector store.

    Once upserted the point is owned by the store; the pipeline keeps no
    reference to it.

    Attributes:
        id:      Deterministic UUID5 built from the chunk's provenance and position.
                 The key includes the ingest timestamp, so retrying an upsert within
                 one request overwrites, while a later re-ingest adds new points.
        vector:  Embedding produced with the "document" role.
        payload: The serialised Chunk (content, metadata, chunk_index, start_offset).
    """

    id: str
    vector: list[float]
    payload: dict

    @classmethod
    def from_chunk(cls, chunk: Chunk, vector: list[float]) -> "VectorPoint":
        meta = chunk.metadata
        page = getattr(meta, "page_number", None) or 0
        key = f"{meta.kind}:{meta.source}:{meta.timestamp}:{page}:{chunk.chunk_index}"
        return cls(
            id=str(uuid.uuid5(uuid.NAMESPACE_URL, key)),
            vector=vector,
            payload=chunk.model_dump(mode="json"),
        )
