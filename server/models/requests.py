from pydantic import BaseModel


class IngestTextRequest(BaseModel):
    text: str | None = None


class IngestUrlRequest(BaseModel):
    url: str | None = None


class ChatRequest(BaseModel):
    query: str | None = None
