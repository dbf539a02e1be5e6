"""Overlapping chunking of document text on top of langchain's recursive splitter."""

from langchain_text_splitters import RecursiveCharacterTextSplitter

from shared.models.document import Chunk, Document

SEPARATORS = ["\n\n", "\n", " ", ""]


class TextChunker:
    """Split document text into overlapping chunks of at most chunk_size characters.

    Splitting prefers paragraph breaks, then line breaks, then spaces, and only
    cuts inside a word when nothing coarser fits. Consecutive chunks share up to
    chunk_overlap characters. Chunks are stripped of surrounding whitespace and
    carry their start offset in the source text.

    Args:
        chunk_size (int): Maximum characters per chunk.
        chunk_overlap (int): Characters shared by consecutive chunks. Must be
            smaller than chunk_size.

    Raises:
        ValueError: If chunk_size < 1, chunk_overlap < 0 or chunk_overlap >= chunk_size.
    """

    def __init__(self, chunk_size: int, chunk_overlap: int) -> None:
        if chunk_size < 1:
            raise ValueError(f"chunk_size must be positive, got {chunk_size}.")
        if chunk_overlap < 0 or chunk_overlap >= chunk_size:
            raise ValueError(
                f"chunk_overlap must be in [0, chunk_size), got overlap={chunk_overlap} for size={chunk_size}."
            )
        self.chunk_size = chunk_size
        self.chunk_overlap = chunk_overlap
        self._splitter = RecursiveCharacterTextSplitter(
            chunk_size=chunk_size,
            chunk_overlap=chunk_overlap,
            length_function=len,
            separators=SEPARATORS,
            add_start_index=True,
        )

    def split_text(self, text: str) -> list[tuple[int, str]]:
        """Split raw text.

        Returns:
            list[tuple[int, str]]: (start_offset, chunk_text) pairs in document order.
                Empty or whitespace-only text yields no chunks.
        """
        if not text or not text.strip():
            return []
        return [
            (piece.metadata["start_index"], piece.page_content)
            for piece in self._splitter.create_documents([text])
        ]

    def split_document(self, document: Document) -> list[Chunk]:
        return [
            Chunk(content=piece, metadata=document.metadata, chunk_index=index, start_offset=offset)
            for index, (offset, piece) in enumerate(self.split_text(document.content))
        ]

    def split_documents(self, documents: list[Document]) -> list[Chunk]:
        """Split every document, keeping document order and per-document chunk positions."""
        chunks: list[Chunk] = []
        for document in documents:
            chunks.extend(self.split_document(document))
        return chunks
