"""Top-k similarity search over the indexed chunks."""

from pydantic import ValidationError

from shared.clients.embed.EmbedClientInterface import EmbedClientInterface
from shared.clients.rag.RAGClientInterface import RAGClientInterface
from shared.helper.HelperConfig import HelperConfig
from shared.helper.retry_helper import RetryPolicy
from shared.models.document import Chunk


class Retriever:
    """Embeds a query with the "query" role and searches the collection.

    Hard-fail stage: provider errors propagate (after one retry on transient
    failures) and must be reported differently from an empty result.
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
        self.top_k = int(helper_config.get_number_val("RETRIEVAL_TOP_K", default=5))

    async def do_retrieve(self, query: str, top_k: int | None = None) -> list[Chunk]:
        """Return the candidate chunks for a query in the store's ranking order.

        Args:
            query (str): The corrected query.
            top_k (int | None): Number of candidates, defaults to RETRIEVAL_TOP_K.

        Returns:
            list[Chunk]: Candidates; empty when nothing is indexed.

        Raises:
            ProviderError: If embedding or search fails.
        """
        limit = top_k or self.top_k
        vectors = await self._retry.run(
            lambda: self._embed_client.do_embed([query], role="query"),
            label="Query embedding",
        )
        hits = await self._retry.run(
            lambda: self._rag_client.do_search(vectors[0], limit=limit),
            label="Similarity search",
        )

        chunks: list[Chunk] = []
        for hit in hits:
            try:
                chunks.append(Chunk.model_validate(hit.payload))
            except ValidationError as exc:
                self.logging.warning("Ignoring point %s with an unexpected payload: %s", hit.id, exc.error_count())
        self.logging.debug("Retrieved %d of %d hit(s) for query.", len(chunks), len(hits))
        return chunks
