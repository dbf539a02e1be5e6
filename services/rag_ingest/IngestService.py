"""Ingestion service.

Turns free text, crawled websites and uploaded PDFs into Documents, splits
them into overlapping chunks, embeds the chunks and upserts them into the
vector store. Each source has its own chunk size: short for rewritten free
text, larger for web pages and documents.
"""

from services.rag_ingest.ChunkIndexer import ChunkIndexer
from services.rag_ingest.TextChunker import TextChunker
from services.rag_ingest.loaders.PdfLoader import PdfLoader
from services.rag_ingest.loaders.TextLoader import TextLoader
from services.rag_ingest.loaders.WebLoader import WebLoader, is_valid_url
from shared.clients.crawl.http.CrawlClientHttp import CrawlClientHttp
from shared.clients.embed.EmbedClientInterface import EmbedClientInterface
from shared.clients.llm.LLMClientInterface import LLMClientInterface
from shared.clients.rag.RAGClientInterface import RAGClientInterface
from shared.helper.HelperConfig import HelperConfig
from shared.helper.time_helper import now_iso
from shared.models.document import Chunk
from shared.models.errors import InputValidationError, LoaderError
from shared.models.results import PdfIngestResult, TextIngestResult, UrlIngestResult

# (chunk size, overlap) in characters per source type
CHUNK_DEFAULTS: dict[str, tuple[int, int]] = {
    "text": (300, 50),
    "url": (1000, 100),
    "pdf": (1000, 200),
}


def format_file_size(size: int) -> str:
    return f"{size / 1024 / 1024:.2f} MB"


class IngestService:
    """Orchestrates loader → chunker → embedder → indexer for each source type."""

    def __init__(
        self,
        helper_config: HelperConfig,
        llm_client: LLMClientInterface,
        embed_client: EmbedClientInterface,
        rag_client: RAGClientInterface,
        crawl_client: CrawlClientHttp,
        indexer: ChunkIndexer | None = None,
    ) -> None:
        self.logging = helper_config.get_logger()
        self._text_loader = TextLoader(helper_config, llm_client)
        self._web_loader = WebLoader(helper_config, crawl_client)
        self._pdf_loader = PdfLoader(helper_config)
        self.indexer = indexer or ChunkIndexer(helper_config, embed_client, rag_client)
        self._chunkers = {
            source: self._build_chunker(helper_config, source, size, overlap)
            for source, (size, overlap) in CHUNK_DEFAULTS.items()
        }

    @staticmethod
    def _build_chunker(helper_config: HelperConfig, source: str, size: int, overlap: int) -> TextChunker:
        return TextChunker(
            chunk_size=int(helper_config.get_number_val(f"INGEST_{source.upper()}_CHUNK_SIZE", default=size)),
            chunk_overlap=int(helper_config.get_number_val(f"INGEST_{source.upper()}_CHUNK_OVERLAP", default=overlap)),
        )

    def get_chunker(self, source: str) -> TextChunker:
        return self._chunkers[source]

    async def _index(self, chunks: list[Chunk]) -> int:
        if not chunks:
            raise LoaderError("The provided content produced no text to index.")
        return await self.indexer.do_index(chunks)

    ##########################################
    ################ SOURCES #################
    ##########################################

    async def do_ingest_text(self, text: str | None) -> TextIngestResult:
        """Rewrite, chunk and index free text.

        Raises:
            InputValidationError: If text is missing, not a string or blank.
            ProviderError: If embedding or indexing fails.
        """
        if not isinstance(text, str) or not text.strip():
            raise InputValidationError("Text is required and must be a string")

        document = await self._text_loader.do_load(text)
        chunks = self.get_chunker("text").split_document(document)
        created = await self._index(chunks)

        self.logging.info("Text processed and indexed: %d chunk(s).", created, color="green")
        return TextIngestResult(
            original_text=text,
            processed_text=document.content,
            chunks_created=created,
            indexed_at=now_iso(),
        )

    async def do_ingest_url(self, url: str | None) -> UrlIngestResult:
        """Crawl a website, then chunk and index every meaningful page.

        Raises:
            InputValidationError: If the URL is missing or not an http(s) URL.
            LoaderError: If no (meaningful) content was found.
            ProviderError: If the seed page, embedding or indexing fails.
        """
        if not isinstance(url, str) or not url.strip():
            raise InputValidationError("Valid URL is required")
        url = url.strip()
        if not is_valid_url(url):
            raise InputValidationError("Invalid URL format")

        documents = await self._web_loader.do_load(url)
        chunks = self.get_chunker("url").split_documents(documents)
        self.logging.info("Total chunks to index: %d", len(chunks))
        created = await self._index(chunks)

        self.logging.info("Web content indexing completed for %s.", url, color="green")
        return UrlIngestResult(
            original_url=url,
            pages_processed=len(documents),
            chunks_created=created,
            indexed_at=now_iso(),
        )

    async def do_ingest_pdf(self, data: bytes, filename: str | None, content_type: str | None) -> PdfIngestResult:
        """Parse, chunk and index an uploaded PDF.

        Raises:
            InputValidationError: If the upload is not a non-empty PDF.
            DocumentParseError: If the file is corrupted or has no extractable text.
            ProviderError: If embedding or indexing fails.
        """
        filename = filename or "upload.pdf"
        documents = await self._pdf_loader.do_load(data, filename, content_type)
        chunks = self.get_chunker("pdf").split_documents(documents)
        created = await self._index(chunks)

        self.logging.info("File '%s' uploaded and indexed: %d chunk(s).", filename, created, color="green")
        return PdfIngestResult(
            documents_processed=created,
            filename=filename,
            file_size=format_file_size(len(data)),
            pages_with_text=len(documents),
            indexed_at=now_iso(),
        )
