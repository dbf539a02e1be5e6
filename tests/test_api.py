"""
Tests for server/api_server.py and server/routers
HTTP envelopes and error mapping, with services wired to in-memory providers.
The lifespan is not run, so no real backend is contacted.
"""

import pytest
from fastapi.testclient import TestClient

from conftest import FakeCrawl, FakeEmbed, FakeLLM, FakeRAG, make_pdf
from server.api_server import app
from server.core.ChatService import ChatService
from services.rag_ingest.IngestService import IngestService
from shared.models.errors import ProviderError


@pytest.fixture
def providers():
    return {
        "llm": FakeLLM(),
        "embed": FakeEmbed(),
        "rag": FakeRAG(),
        "crawl": FakeCrawl({}),
    }


@pytest.fixture
def client(helper_config, providers):
    app.state.ingest_service = IngestService(
        helper_config,
        llm_client=providers["llm"],
        embed_client=providers["embed"],
        rag_client=providers["rag"],
        crawl_client=providers["crawl"],
    )
    app.state.chat_service = ChatService(
        helper_config,
        llm_client=providers["llm"],
        embed_client=providers["embed"],
        rag_client=providers["rag"],
    )
    return TestClient(app, raise_server_exceptions=False)


class TestLiveness:
    """Test GET probes."""

    def test_healthz(self, client):
        response = client.get("/healthz")
        assert response.status_code == 200
        assert response.json()["success"] is True

    @pytest.mark.parametrize("path", ["/ingest/text", "/ingest/url", "/ingest/pdf"])
    def test_ingest_endpoints_live(self, client, path):
        response = client.get(path)
        assert response.status_code == 200
        assert path in response.json()["message"]


class TestIngestEndpoints:
    """Test POST /ingest/*."""

    def test_ingest_text(self, client, providers):
        providers["llm"].replies = ["hello world"]
        response = client.post("/ingest/text", json={"text": "helo wrld"})

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["data"]["originalText"] == "helo wrld"
        assert body["data"]["processedText"] == "hello world"
        assert body["data"]["chunksCreated"] == 1
        assert "indexedAt" in body["data"]

    def test_ingest_text_missing(self, client):
        response = client.post("/ingest/text", json={})
        assert response.status_code == 400
        assert response.json() == {
            "success": False,
            "message": "Text is required and must be a string",
            "error": "Text is required and must be a string",
            "retriable": False,
        }

    def test_ingest_text_wrong_type(self, client):
        response = client.post("/ingest/text", json={"text": 42})
        assert response.status_code == 400
        assert response.json()["success"] is False

    def test_ingest_url_invalid(self, client):
        response = client.post("/ingest/url", json={"url": "not-a-url"})
        assert response.status_code == 400
        assert response.json()["message"] == "Invalid URL format"

    def test_ingest_url_no_meaningful_content(self, client, providers):
        providers["crawl"].pages["https://a.example/admin/"] = "<html><body>" + "admin text " * 30 + "</body></html>"
        response = client.post("/ingest/url", json={"url": "https://a.example/admin/"})
        assert response.status_code == 400
        assert response.json()["message"] == "No meaningful content found on the provided URL"

    def test_ingest_pdf(self, client):
        data = make_pdf(["Hello PDF world"])
        response = client.post("/ingest/pdf", files={"file": ("guide.pdf", data, "application/pdf")})

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "File uploaded and indexed successfully!"
        assert body["documentsProcessed"] == 1
        assert body["filename"] == "guide.pdf"
        assert body["fileSize"].endswith(" MB")

    def test_ingest_pdf_without_file(self, client):
        response = client.post("/ingest/pdf")
        assert response.status_code == 400
        assert response.json()["message"] == "No file uploaded. Please select a PDF file."

    def test_ingest_pdf_wrong_type(self, client):
        response = client.post("/ingest/pdf", files={"file": ("notes.txt", b"hello", "text/plain")})
        assert response.status_code == 400
        assert response.json()["message"] == "Only PDF files are supported. Please upload a PDF file."

    def test_ingest_pdf_blank(self, client, providers):
        response = client.post("/ingest/pdf", files={"file": ("blank.pdf", make_pdf([""]), "application/pdf")})
        assert response.status_code == 500
        assert response.json()["message"] == "PDF appears to be empty or corrupted"
        assert providers["rag"].upsert_calls == 0


class TestChatEndpoint:
    """Test POST /chat."""

    def test_missing_query(self, client):
        response = client.post("/chat", json={})
        assert response.status_code == 400
        assert response.json()["message"] == "Valid query is required"

    def test_empty_knowledge_base(self, client, providers):
        providers["llm"].replies = ["what is rag?"]
        response = client.post("/chat", json={"query": "wat is rag"})

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["originalQuery"] == "wat is rag"
        assert data["correctedQuery"] == "what is rag?"
        assert data["chunksFound"] == 0
        assert data["answer"] == "No relevant information found in the knowledge base for this query."

    def test_ingest_then_chat(self, client, providers):
        providers["llm"].replies = ["RAG grounds answers in documents.", "what is rag?", "0", "RAG retrieves context."]
        assert client.post("/ingest/text", json={"text": "rag grounds answers in documents"}).status_code == 200

        response = client.post("/chat", json={"query": "wat is rag"})

        data = response.json()["data"]
        assert data["chunksFound"] == 1
        assert data["answer"] == "RAG retrieves context.\n\n**Sources:**\n- Text Input"

    def test_retrieval_failure(self, client, providers):
        providers["rag"].search_error = ProviderError("Vector store unreachable.", "connect refused", transient=True)
        response = client.post("/chat", json={"query": "anything"})

        assert response.status_code == 500
        body = response.json()
        assert body["success"] is False
        assert body["message"] == "Failed to retrieve relevant information"
        assert body["error"] == "connect refused"
        assert body["retriable"] is True

    def test_unexpected_error_is_500(self, client):
        class BrokenChat:
            async def do_answer(self, query):
                raise RuntimeError("boom")

        app.state.chat_service = BrokenChat()
        response = client.post("/chat", json={"query": "anything"})
        assert response.status_code == 500
        assert response.json()["success"] is False
