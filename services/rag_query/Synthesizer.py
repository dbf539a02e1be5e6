"""Context-grounded summary generation."""

from services.rag_query.prompts import SYNTHESIS_PROMPT
from shared.clients.llm.LLMClientInterface import LLMClientInterface
from shared.helper.HelperConfig import HelperConfig
from shared.helper.retry_helper import RetryPolicy
from shared.models.document import Chunk
from shared.models.errors import ProviderError

NOT_ENOUGH_INFORMATION = "The provided documents do not contain enough information to create a summary for this topic."


def build_context(chunks: list[Chunk]) -> str:
    return "\n\n".join(chunk.content for chunk in chunks)


class Synthesizer:
    """Produces a structured summary strictly grounded in the reranked chunks.

    Hard-fail stage: a failed call (after one retry on transient failures) or
    an empty reply raises ProviderError; no answer text is fabricated.
    """

    def __init__(
        self,
        helper_config: HelperConfig,
        llm_client: LLMClientInterface,
        retry_policy: RetryPolicy | None = None,
    ) -> None:
        self.logging = helper_config.get_logger()
        self._llm_client = llm_client
        self._retry = retry_policy or RetryPolicy(helper_config)
        self._timeout = helper_config.get_number_val("LLM_SYNTHESIS_TIMEOUT", default=60)

    async def do_synthesize(self, query: str, chunks: list[Chunk]) -> str:
        """Summarise the chunks for a query.

        Returns:
            str: The summary, or NOT_ENOUGH_INFORMATION without any LLM call
                when the context is blank.

        Raises:
            ProviderError: If the LLM call fails or returns nothing.
        """
        context = build_context(chunks)
        if not context.strip():
            return NOT_ENOUGH_INFORMATION

        messages = [
            {"role": "system", "content": SYNTHESIS_PROMPT.format(context=context)},
            {"role": "user", "content": query},
        ]
        answer = await self._retry.run(
            lambda: self._llm_client.do_chat(messages=messages, timeout=self._timeout),
            label="Answer synthesis",
        )
        if not answer.strip():
            raise ProviderError("Failed to generate answer", "The LLM returned an empty summary.")
        return answer.strip()
