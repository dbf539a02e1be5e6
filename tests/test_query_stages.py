"""
Tests for services/rag_query
Corrector, retriever, reranker and synthesizer in isolation.
"""

import pytest

from conftest import FakeEmbed, FakeLLM, FakeRAG
from services.rag_query.QueryCorrector import QueryCorrector
from services.rag_query.Reranker import Reranker, parse_indices, render_candidates
from services.rag_query.Retriever import Retriever
from services.rag_query.Synthesizer import NOT_ENOUGH_INFORMATION, Synthesizer
from shared.clients.rag.models.VectorPoint import VectorPoint
from shared.models.document import Chunk, TextMeta, UrlMeta
from shared.models.errors import ProviderError, ProviderTimeoutError, UnparseableModelOutput
from shared.models.search import SearchHit

TS = "2024-05-01T10:00:00+02:00"


def _chunks(n: int) -> list[Chunk]:
    return [
        Chunk(content=f"chunk body {i}", metadata=UrlMeta(source=f"https://x.example/{i}", timestamp=TS), chunk_index=i)
        for i in range(n)
    ]


class TestQueryCorrector:
    """Test the self-healing query correction."""

    async def test_returns_corrected_query(self, helper_config):
        llm = FakeLLM("  What is the refund policy?  ")
        corrected = await QueryCorrector(helper_config, llm).do_correct("wat is refnd polcy")
        assert corrected == "What is the refund policy?"
        assert llm.calls[0]["messages"][-1]["content"] == "wat is refnd polcy"

    async def test_provider_failure_returns_raw_query(self, helper_config):
        llm = FakeLLM(ProviderError("LLM down", transient=True))
        assert await QueryCorrector(helper_config, llm).do_correct("helo") == "helo"

    async def test_timeout_returns_raw_query(self, helper_config):
        llm = FakeLLM(ProviderTimeoutError("slow"))
        assert await QueryCorrector(helper_config, llm).do_correct("helo") == "helo"

    async def test_empty_reply_returns_raw_query(self, helper_config):
        llm = FakeLLM("   ")
        assert await QueryCorrector(helper_config, llm).do_correct("helo") == "helo"

    async def test_uses_configured_timeout(self, helper_config, monkeypatch):
        monkeypatch.setenv("LLM_CORRECTION_TIMEOUT", "3")
        llm = FakeLLM("fixed")
        await QueryCorrector(helper_config, llm).do_correct("fixd")
        assert llm.calls[0]["timeout"] == 3


class TestRetriever:
    """Test query embedding and payload decoding."""

    async def test_embeds_with_query_role(self, helper_config):
        embed, rag = FakeEmbed(), FakeRAG()
        await Retriever(helper_config, embed, rag).do_retrieve("refund policy")
        assert embed.calls == [(["refund policy"], "query")]

    async def test_returns_chunks_in_store_order(self, helper_config):
        embed, rag = FakeEmbed(), FakeRAG()
        for chunk in _chunks(3):
            await rag.do_upsert_points([VectorPoint.from_chunk(chunk, [0.1, 0.2, 0.3])])

        chunks = await Retriever(helper_config, embed, rag).do_retrieve("query", top_k=2)
        assert [chunk.content for chunk in chunks] == ["chunk body 0", "chunk body 1"]
        assert rag.search_calls == [2]

    async def test_default_top_k_from_env(self, helper_config, monkeypatch):
        monkeypatch.setenv("RETRIEVAL_TOP_K", "7")
        rag = FakeRAG()
        await Retriever(helper_config, FakeEmbed(), rag).do_retrieve("query")
        assert rag.search_calls == [7]

    async def test_empty_store_returns_empty_list(self, helper_config):
        assert await Retriever(helper_config, FakeEmbed(), FakeRAG()).do_retrieve("query") == []

    async def test_invalid_payload_is_skipped(self, helper_config):
        class OddRAG(FakeRAG):
            async def do_search(self, vector, limit=5):
                good = Chunk(content="kept", metadata=TextMeta(timestamp=TS)).model_dump(mode="json")
                return [SearchHit(id="1", score=0.9, payload={"foo": "bar"}), SearchHit(id="2", score=0.8, payload=good)]

        chunks = await Retriever(helper_config, FakeEmbed(), OddRAG()).do_retrieve("query")
        assert [chunk.content for chunk in chunks] == ["kept"]

    async def test_transient_search_failure_retried_once(self, helper_config):
        class FlakyRAG(FakeRAG):
            async def do_search(self, vector, limit=5):
                self.search_calls.append(limit)
                if len(self.search_calls) == 1:
                    raise ProviderError("unreachable", transient=True)
                return []

        rag = FlakyRAG()
        assert await Retriever(helper_config, FakeEmbed(), rag).do_retrieve("query") == []
        assert len(rag.search_calls) == 2

    async def test_persistent_failure_propagates(self, helper_config):
        rag = FakeRAG()
        rag.search_error = ProviderError("collection missing", transient=False)
        with pytest.raises(ProviderError):
            await Retriever(helper_config, FakeEmbed(), rag).do_retrieve("query")
        assert len(rag.search_calls) == 1


class TestRerankerParsing:
    """Test index parsing and candidate rendering."""

    def test_parses_comma_separated_indices(self):
        assert parse_indices("0, 2,3", 5) == {0, 2, 3}

    def test_ignores_out_of_range_and_garbage(self):
        assert parse_indices("[1, 9, -1, two, 2]", 3) == {1, 2}

    def test_nothing_valid_raises(self):
        with pytest.raises(UnparseableModelOutput):
            parse_indices("none of them", 3)

    def test_render_candidates_labels_each_chunk(self):
        rendered = render_candidates(_chunks(2))
        assert "// Chunk [0]\n// Source: https://x.example/0\nchunk body 0" in rendered
        assert "// Chunk [1]" in rendered


class TestReranker:
    """Test relevance filtering and its fallbacks."""

    async def test_keeps_selected_in_candidate_order(self, helper_config):
        candidates = _chunks(4)
        llm = FakeLLM("3, 1")
        reranked = await Reranker(helper_config, llm).do_rerank("q", candidates)
        assert reranked == [candidates[1], candidates[3]]
        assert llm.calls[0]["temperature"] == 0

    async def test_result_is_subset_of_candidates(self, helper_config):
        candidates = _chunks(3)
        reranked = await Reranker(helper_config, FakeLLM("0,1,2,7")).do_rerank("q", candidates)
        assert reranked == candidates

    async def test_provider_failure_keeps_all(self, helper_config):
        candidates = _chunks(3)
        llm = FakeLLM(ProviderTimeoutError("slow"))
        assert await Reranker(helper_config, llm).do_rerank("q", candidates) == candidates

    async def test_unparseable_reply_keeps_all(self, helper_config):
        candidates = _chunks(3)
        assert await Reranker(helper_config, FakeLLM("I think chunk one")).do_rerank("q", candidates) == candidates

    async def test_empty_selection_keeps_all(self, helper_config):
        candidates = _chunks(2)
        assert await Reranker(helper_config, FakeLLM("")).do_rerank("q", candidates) == candidates

    async def test_no_candidates_makes_no_call(self, helper_config):
        llm = FakeLLM("0")
        assert await Reranker(helper_config, llm).do_rerank("q", []) == []
        assert llm.calls == []


class TestSynthesizer:
    """Test grounded summary generation."""

    async def test_blank_context_returns_canned_answer_without_call(self, helper_config):
        llm = FakeLLM("should not be used")
        blank = [Chunk(content="   ", metadata=TextMeta(timestamp=TS))]
        assert await Synthesizer(helper_config, llm).do_synthesize("q", blank) == NOT_ENOUGH_INFORMATION
        assert llm.calls == []

    async def test_context_is_passed_to_model(self, helper_config):
        llm = FakeLLM("## Summary\nRefunds take 5 days.")
        answer = await Synthesizer(helper_config, llm).do_synthesize("refunds?", _chunks(2))
        assert answer == "## Summary\nRefunds take 5 days."
        system_prompt = llm.calls[0]["messages"][0]["content"]
        assert "chunk body 0\n\nchunk body 1" in system_prompt

    async def test_empty_reply_raises(self, helper_config):
        with pytest.raises(ProviderError):
            await Synthesizer(helper_config, FakeLLM("  ")).do_synthesize("q", _chunks(1))

    async def test_transient_failure_retried_once(self, helper_config):
        llm = FakeLLM(ProviderError("503", transient=True), "answer")
        assert await Synthesizer(helper_config, llm).do_synthesize("q", _chunks(1)) == "answer"
        assert len(llm.calls) == 2

    async def test_second_failure_propagates(self, helper_config):
        llm = FakeLLM(ProviderError("503", transient=True), ProviderError("503", transient=True), "late")
        with pytest.raises(ProviderError):
            await Synthesizer(helper_config, llm).do_synthesize("q", _chunks(1))
        assert len(llm.calls) == 2
