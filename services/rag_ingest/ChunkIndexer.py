"""Embeds chunks and writes them to the vector store."""

from shared.clients.embed.EmbedClientInterface import EmbedClientInterface
from shared.clients.rag.RAGClientInterface import RAGClientInterface
from shared.clients.rag.models.VectorPoint import VectorPoint
from shared.helper.HelperConfig import HelperConfig
from shared.helper.retry_helper import RetryPolicy
from shared.models.document import Chunk


class ChunkIndexer:
    """Embedder + Indexer stage of the ingestion pipeline.

    All chunks of one ingestion request are embedded with the "document" role
    and upserted in a single call. Transient provider failures are retried
    once (see RetryPolicy); any remaining failure aborts the request.
    """

    def __init__(
        self,
        helper_config: HelperConfig,
        embed_client: EmbedClientInterface,
        rag_client: RAGClientInterface,
        retry_policy: RetryPolicy | None = None,
    ) -> None:
        self.logging = helper_config.get_logger()
        self._embed_client = embed_client
        self._rag_client = rag_client
        self._retry = retry_policy or RetryPolicy(helper_config)

    async def do_embed_chunks(self, chunks: list[Chunk]) -> list[list[float]]:
        texts = [chunk.content for chunk in chunks]
        return await self._retry.run(
            lambda: self._embed_client.do_embed(texts, role="document"),
            label="Document embedding",
        )

    async def do_index(self, chunks: list[Chunk]) -> int:
        """Embed and upsert chunks.

        Args:
            chunks (list[Chunk]): Chunks of one ingestion request.

        Returns:
            int: Number of records upserted (0 for an empty list, no provider calls made).

        Raises:
            ProviderError: If embedding or upsert fails after the retry.
        """
        if not chunks:
            return 0

        vectors = await self.do_embed_chunks(chunks)
        points = [VectorPoint.from_chunk(chunk, vector) for chunk, vector in zip(chunks, vectors)]

        await self._retry.run(
            lambda: self._rag_client.do_upsert_points(points),
            label="Vector upsert",
        )
        self.logging.info(
            "Indexed %d chunk(s) into collection '%s'.", len(points), self._rag_client.get_collection(),
        )
        return len(points)

    async def do_ensure_collection(self) -> bool:
        """Create the vector collection if missing, sized to the embedding model's output.

        The embedding model is only probed when the collection has to be created.

        Returns:
            bool: True if the collection was created by this call.
        """
        if await self._rag_client.do_existence_check():
            self.logging.info("Collection '%s' already exists.", self._rag_client.get_collection())
            return False
        vector_size, distance = await self._embed_client.do_fetch_embedding_vector_size()
        await self._rag_client.do_create_collection(vector_size, distance)
        return True
