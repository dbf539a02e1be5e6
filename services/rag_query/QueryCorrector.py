"""Rewrites raw user queries into a retrieval-friendly form."""

from services.rag_query.prompts import CORRECTION_PROMPT
from shared.clients.llm.LLMClientInterface import LLMClientInterface
from shared.helper.HelperConfig import HelperConfig
from shared.models.errors import ProviderError


class QueryCorrector:
    """Fixes typos and grammar of a query with one LLM call.

    Self-healing: a failed call (including a timeout) or an empty reply returns
    the raw query unchanged, so correction never blocks the pipeline. There are
    no retries.
    """

    def __init__(self, helper_config: HelperConfig, llm_client: LLMClientInterface) -> None:
        self.logging = helper_config.get_logger()
        self._llm_client = llm_client
        self._timeout = helper_config.get_number_val("LLM_CORRECTION_TIMEOUT", default=15)

    async def do_correct(self, raw_query: str) -> str:
        """Return the corrected query; never empty for a non-empty input."""
        try:
            reply = await self._llm_client.do_chat(
                messages=[
                    {"role": "system", "content": CORRECTION_PROMPT},
                    {"role": "user", "content": raw_query},
                ],
                timeout=self._timeout,
            )
        except ProviderError as exc:
            self.logging.error("Error correcting query, using it unchanged: %s", exc.detail)
            return raw_query

        corrected = reply.strip()
        if not corrected:
            self.logging.warning("Query correction returned nothing, using the raw query.")
            return raw_query
        return corrected
