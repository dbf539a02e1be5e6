"""
Pytest configuration for the rag_assistant test suite.

Provides:
- a HelperConfig backed by a ColorLogger, reading only the process environment
- in-memory fakes for the LLM, embedding, vector store and crawl clients
- a small PDF builder for loader tests
"""
import logging
import os

# keep test runs from writing logs/app.log into the checkout
os.environ.setdefault("LOG_TO_FILE", "false")

import pytest

from shared.clients.rag.models.VectorPoint import VectorPoint
from shared.helper.HelperConfig import HelperConfig
from shared.logging.logging_setup import ColorLogger
from shared.models.search import SearchHit
from shared.models.web import FetchedPage


@pytest.fixture(autouse=True)
def no_retry_delay(monkeypatch):
    """Retries happen instantly in tests."""
    monkeypatch.setenv("PROVIDER_RETRY_BACKOFF", "0")


@pytest.fixture
def helper_config() -> HelperConfig:
    return HelperConfig(logger=ColorLogger(logging.getLogger("rag_assistant.tests")), load_env_file=False)


class FakeLLM:
    """Replays scripted replies. An Exception in the script is raised instead of returned."""

    def __init__(self, *replies):
        self.replies = list(replies)
        self.calls: list[dict] = []

    async def do_chat(self, messages, temperature=None, timeout=None):
        self.calls.append({"messages": messages, "temperature": temperature, "timeout": timeout})
        reply = self.replies.pop(0) if self.replies else ""
        if isinstance(reply, Exception):
            raise reply
        return reply


class FakeEmbed:
    """Deterministic 3-dimensional vectors; records the role of every call."""

    def __init__(self, fail_with: Exception | None = None):
        self.fail_with = fail_with
        self.calls: list[tuple[list[str], str]] = []

    async def do_embed(self, texts, role="document"):
        texts = [texts] if isinstance(texts, str) else texts
        self.calls.append((texts, role))
        if self.fail_with:
            raise self.fail_with
        return [[float(len(text)), 1.0, 0.0] for text in texts]

    async def do_fetch_embedding_vector_size(self):
        return 3, "Cosine"


class FakeRAG:
    """Keeps upserted points in memory; search returns them in insertion order."""

    def __init__(self, exists: bool = True):
        self.exists = exists
        self.points: dict[str, VectorPoint] = {}
        self.upsert_calls = 0
        self.search_calls: list[int] = []
        self.created: list[tuple[int, str]] = []
        self.search_error: Exception | None = None

    def get_collection(self):
        return "test_collection"

    async def do_existence_check(self):
        return self.exists

    async def do_create_collection(self, vector_size, distance=None):
        self.created.append((vector_size, distance))
        self.exists = True

    async def do_upsert_points(self, points):
        self.upsert_calls += 1
        for point in points:
            self.points[point.id] = point

    async def do_search(self, vector, limit=5):
        self.search_calls.append(limit)
        if self.search_error:
            raise self.search_error
        return [
            SearchHit(id=point.id, score=1.0, payload=point.payload)
            for point in list(self.points.values())[:limit]
        ]


class FakeCrawl:
    """Serves HTML pages from a dict; missing URLs behave like a 404."""

    def __init__(self, pages: dict[str, str], errors: dict[str, Exception] | None = None):
        self.pages = pages
        self.errors = errors or {}
        self.fetched: list[str] = []

    async def do_fetch_page(self, url):
        self.fetched.append(url)
        if url in self.errors:
            raise self.errors[url]
        if url not in self.pages:
            return None
        return FetchedPage(url=url, content_type="text/html; charset=utf-8", text=self.pages[url])


@pytest.fixture
def fake_llm():
    return FakeLLM()


@pytest.fixture
def fake_embed():
    return FakeEmbed()


@pytest.fixture
def fake_rag():
    return FakeRAG()


def make_pdf(page_texts: list[str]) -> bytes:
    """Build a minimal PDF with one Helvetica text line per page ("" for a page without text)."""
    objects: dict[int, bytes] = {
        1: b"<< /Type /Catalog /Pages 2 0 R >>",
        3: b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica >>",
    }
    kids = []
    next_id = 4
    for text in page_texts:
        page_id, content_id = next_id, next_id + 1
        next_id += 2
        kids.append(page_id)
        stream = f"BT /F1 12 Tf 20 50 Td ({text}) Tj ET".encode("latin-1") if text else b""
        objects[page_id] = (
            f"<< /Type /Page /Parent 2 0 R /MediaBox [0 0 400 100] "
            f"/Resources << /Font << /F1 3 0 R >> >> /Contents {content_id} 0 R >>"
        ).encode()
        objects[content_id] = b"<< /Length %d >>\nstream\n" % len(stream) + stream + b"\nendstream"
    objects[2] = ("<< /Type /Pages /Kids [%s] /Count %d >>" % (" ".join(f"{k} 0 R" for k in kids), len(kids))).encode()

    out = bytearray(b"%PDF-1.4\n")
    offsets = {}
    for obj_id in range(1, next_id):
        offsets[obj_id] = len(out)
        out += f"{obj_id} 0 obj\n".encode() + objects[obj_id] + b"\nendobj\n"
    xref_at = len(out)
    out += f"xref\n0 {next_id}\n0000000000 65535 f \n".encode()
    for obj_id in range(1, next_id):
        out += f"{offsets[obj_id]:010d} 00000 n \n".encode()
    out += f"trailer\n<< /Size {next_id} /Root 1 0 R >>\nstartxref\n{xref_at}\n%%EOF\n".encode()
    return bytes(out)
