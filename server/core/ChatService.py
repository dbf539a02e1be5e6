from services.rag_query.QueryCorrector import QueryCorrector
from services.rag_query.Reranker import Reranker
from services.rag_query.Retriever import Retriever
from services.rag_query.SourceFormatter import format_sources
from services.rag_query.Synthesizer import Synthesizer
from shared.clients.embed.EmbedClientInterface import EmbedClientInterface
from shared.clients.llm.LLMClientInterface import LLMClientInterface
from shared.clients.rag.RAGClientInterface import RAGClientInterface
from shared.helper.HelperConfig import HelperConfig
from shared.helper.time_helper import now_iso
from shared.models.errors import InputValidationError, ProviderError
from shared.models.results import ChatResult

NO_RESULTS_ANSWER = "No relevant information found in the knowledge base for this query."


class ChatService:
    """Answers a query: correct -> retrieve -> rerank -> synthesize -> attach sources."""

    def __init__(
        self,
        helper_config: HelperConfig,
        llm_client: LLMClientInterface,
        embed_client: EmbedClientInterface,
        rag_client: RAGClientInterface,
    ) -> None:
        self.logging = helper_config.get_logger()
        self.corrector = QueryCorrector(helper_config, llm_client)
        self.retriever = Retriever(helper_config, embed_client, rag_client)
        self.reranker = Reranker(helper_config, llm_client)
        self.synthesizer = Synthesizer(helper_config, llm_client)

    ##########################################
    ############### CORE #####################
    ##########################################

    async def do_answer(self, query: str | None) -> ChatResult:
        """Run the full query pipeline for one request.

        A query the index has nothing for is a successful result carrying
        NO_RESULTS_ANSWER; the reranker and synthesizer are not called.

        Args:
            query (str | None): The raw user query.

        Returns:
            ChatResult: Original and corrected query, final answer and chunk count.

        Raises:
            InputValidationError: If the query is missing or blank.
            ProviderError: If retrieval or synthesis fails.
        """
        if not isinstance(query, str) or not query.strip():
            raise InputValidationError("Valid query is required")

        self.logging.info("Processing query: %s", query, color="cyan")
        corrected_query = await self.corrector.do_correct(query)
        self.logging.info("Corrected query: %s", corrected_query)

        try:
            candidates = await self.retriever.do_retrieve(corrected_query)
        except ProviderError as exc:
            raise exc.with_message("Failed to retrieve relevant information") from exc

        if not candidates:
            self.logging.info("No chunks found for query.")
            return ChatResult(
                original_query=query,
                corrected_query=corrected_query,
                answer=NO_RESULTS_ANSWER,
                chunks_found=0,
                processed_at=now_iso(),
            )
        self.logging.info("Retrieved %d chunk(s)", len(candidates))

        reranked = await self.reranker.do_rerank(corrected_query, candidates)
        self.logging.info("Reranked to %d chunk(s)", len(reranked))

        try:
            summary = await self.synthesizer.do_synthesize(corrected_query, reranked)
        except ProviderError as exc:
            raise exc.with_message("Failed to generate answer") from exc

        sources = format_sources(reranked)
        answer = f"{summary}\n\n**Sources:**\n{sources}" if sources else summary

        self.logging.info("Answer generated successfully", color="green")
        return ChatResult(
            original_query=query,
            corrected_query=corrected_query,
            answer=answer,
            chunks_found=len(reranked),
            processed_at=now_iso(),
        )
