"""Loader for free text submitted through the API."""

from shared.clients.llm.LLMClientInterface import LLMClientInterface
from shared.helper.HelperConfig import HelperConfig
from shared.helper.time_helper import now_iso
from shared.models.document import Document, TextMeta
from shared.models.errors import ProviderError

REWRITE_PROMPT = """You are an AI assistant that converts the user's text into proper format.
Correct typos, arrange words properly if they are not, and make the prompt meaningful.
Return only the rewritten text, without any introduction or commentary."""


class TextLoader:
    """Normalises wording and typos of raw text with an LLM before it is indexed.

    The rewrite is best effort: if the LLM call fails, or returns nothing, the
    original text is indexed instead. It never produces an empty document.
    """

    def __init__(self, helper_config: HelperConfig, llm_client: LLMClientInterface) -> None:
        self.logging = helper_config.get_logger()
        self._llm_client = llm_client
        self._timeout = helper_config.get_number_val("LLM_REWRITE_TIMEOUT", default=30)

    async def do_rewrite(self, text: str) -> str:
        """Return the LLM-normalised text, or the input when no usable rewrite was produced."""
        try:
            rewritten = await self._llm_client.do_chat(
                messages=[
                    {"role": "system", "content": REWRITE_PROMPT},
                    {"role": "user", "content": text},
                ],
                timeout=self._timeout,
            )
        except ProviderError as exc:
            self.logging.warning("Text rewrite failed, indexing the original text: %s", exc.detail)
            return text

        rewritten = rewritten.strip()
        if not rewritten:
            self.logging.warning("Text rewrite returned no content, indexing the original text.")
            return text
        return rewritten

    async def do_load(self, text: str) -> Document:
        """Rewrite the text and wrap it in a Document tagged as API input.

        Args:
            text (str): Non-empty raw text, validated by the caller.

        Returns:
            Document: The processed text with TextMeta provenance.
        """
        processed = await self.do_rewrite(text)
        return Document(
            content=processed,
            metadata=TextMeta(
                timestamp=now_iso(),
                original_length=len(text),
                processed_length=len(processed),
            ),
        )
