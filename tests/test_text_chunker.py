"""
Tests for services/rag_ingest/TextChunker.py
Overlapping chunking of document text.
"""

import pytest

from services.rag_ingest.TextChunker import TextChunker
from shared.models.document import Document, PdfMeta, TextMeta

LOREM = (
    "Retrieval augmented generation grounds a language model in documents. "
    "Each document is split into chunks, embedded and stored in a vector index. "
    "At query time the closest chunks are retrieved and handed to the model as context. "
) * 6

PARAGRAPHS = "\n\n".join([
    "Alpha section intro. " * 9,
    "Beta paragraph words. " * 13,
    "Gamma closing paragraph text.",
])


class TestChunkerConfiguration:
    """Test constructor validation."""

    @pytest.mark.parametrize("size,overlap", [(100, 100), (100, 150), (100, -1), (0, 0)])
    def test_invalid_parameters_rejected(self, size, overlap):
        with pytest.raises(ValueError):
            TextChunker(chunk_size=size, chunk_overlap=overlap)

    def test_zero_overlap_allowed(self):
        chunker = TextChunker(chunk_size=50, chunk_overlap=0)
        assert chunker.chunk_overlap == 0


class TestSplitText:
    """Test the chunking contract on raw text."""

    def test_blank_text_yields_nothing(self):
        chunker = TextChunker(chunk_size=300, chunk_overlap=50)
        assert chunker.split_text("") == []
        assert chunker.split_text("   \n\t ") == []

    def test_short_text_is_single_chunk(self):
        chunker = TextChunker(chunk_size=300, chunk_overlap=50)
        assert chunker.split_text("hello world") == [(0, "hello world")]

    def test_chunks_never_exceed_size(self):
        chunker = TextChunker(chunk_size=120, chunk_overlap=20)
        chunks = chunker.split_text(LOREM)
        assert len(chunks) > 1
        assert all(len(piece) <= 120 for _, piece in chunks)

    def test_consecutive_chunks_overlap(self):
        chunker = TextChunker(chunk_size=120, chunk_overlap=20)
        chunks = chunker.split_text(LOREM)
        for (previous_offset, previous), (offset, _) in zip(chunks, chunks[1:]):
            assert previous_offset < offset < previous_offset + len(previous)

    def test_offsets_point_into_source(self):
        chunker = TextChunker(chunk_size=120, chunk_overlap=20)
        for offset, piece in chunker.split_text(LOREM):
            assert LOREM[offset:offset + len(piece)] == piece

    def test_all_words_are_covered(self):
        chunker = TextChunker(chunk_size=120, chunk_overlap=20)
        covered = " ".join(piece for _, piece in chunker.split_text(LOREM)).split()
        assert set(LOREM.split()) <= set(covered)

    def test_paragraph_breaks_are_preferred(self):
        chunker = TextChunker(chunk_size=300, chunk_overlap=50)
        pieces = [piece for _, piece in chunker.split_text(PARAGRAPHS)]
        assert pieces[-1] == "Gamma closing paragraph text."
        assert all("\n\n" not in piece for piece in pieces)

    def test_unbroken_text_is_cut_hard(self):
        text = "x" * 250
        chunker = TextChunker(chunk_size=100, chunk_overlap=10)
        chunks = chunker.split_text(text)
        assert len(chunks) == 3
        assert all(len(piece) <= 100 for _, piece in chunks)
        assert chunks[0] == (0, "x" * 100)

    def test_final_short_segment_is_kept(self):
        text = "a" * 95 + " tail"
        chunker = TextChunker(chunk_size=60, chunk_overlap=5)
        chunks = chunker.split_text(text)
        assert chunks[-1][1].endswith("tail")

    def test_deterministic(self):
        chunker = TextChunker(chunk_size=80, chunk_overlap=15)
        assert chunker.split_text(LOREM) == chunker.split_text(LOREM)


class TestSplitDocument:
    """Test metadata propagation to chunks."""

    def test_chunks_inherit_metadata_and_index(self):
        meta = PdfMeta(source="manual.pdf", timestamp="2024-01-01T00:00:00", page_number=3, total_pages=9)
        document = Document(content=LOREM, metadata=meta)
        chunks = TextChunker(chunk_size=200, chunk_overlap=30).split_document(document)

        assert [chunk.chunk_index for chunk in chunks] == list(range(len(chunks)))
        assert all(chunk.metadata == meta for chunk in chunks)

    def test_split_documents_keeps_document_order(self):
        first = Document(content="first document", metadata=TextMeta(timestamp="t1"))
        second = Document(content="second document", metadata=TextMeta(timestamp="t2"))
        chunks = TextChunker(chunk_size=300, chunk_overlap=50).split_documents([first, second])

        assert [chunk.content for chunk in chunks] == ["first document", "second document"]
        assert [chunk.chunk_index for chunk in chunks] == [0, 0]
