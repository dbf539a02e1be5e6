"""LLM-based relevance filter over retrieved candidates."""

from services.rag_query.prompts import RERANK_PROMPT
from shared.clients.llm.LLMClientInterface import LLMClientInterface
from shared.helper.HelperConfig import HelperConfig
from shared.models.document import Chunk
from shared.models.errors import ProviderError, UnparseableModelOutput


def render_candidates(chunks: list[Chunk]) -> str:
    return "\n\n".join(
        f"// Chunk [{index}]\n// Source: {chunk.metadata.source or 'unknown'}\n{chunk.content}"
        for index, chunk in enumerate(chunks)
    )


def parse_indices(reply: str, candidate_count: int) -> set[int]:
    """Parse a comma-separated index list, keeping only integers in [0, candidate_count).

    Raises:
        UnparseableModelOutput: If no valid index remains.
    """
    selected: set[int] = set()
    for part in reply.split(","):
        try:
            index = int(part.strip().strip("[]()\"'. "))
        except ValueError:
            continue
        if 0 <= index < candidate_count:
            selected.add(index)
    if not selected:
        raise UnparseableModelOutput(f"No valid chunk index in reranker reply: {reply[:200]!r}")
    return selected


class Reranker:
    """Asks an LLM which candidates are relevant and keeps only those.

    Selected chunks keep their CandidateSet order regardless of the order the
    model listed them in. Self-healing: on a failed call, an unparseable reply
    or a reply selecting no valid index, the full CandidateSet is returned
    unchanged. There are no retries.
    """

    def __init__(self, helper_config: HelperConfig, llm_client: LLMClientInterface) -> None:
        self.logging = helper_config.get_logger()
        self._llm_client = llm_client
        self._timeout = helper_config.get_number_val("LLM_RERANK_TIMEOUT", default=20)

    async def do_rerank(self, query: str, candidates: list[Chunk]) -> list[Chunk]:
        if not candidates:
            return candidates

        prompt = RERANK_PROMPT.format(query=query, chunks=render_candidates(candidates))
        try:
            reply = await self._llm_client.do_chat(
                messages=[
                    {"role": "system", "content": prompt},
                    {"role": "user", "content": query},
                ],
                temperature=0,
                timeout=self._timeout,
            )
            selected = parse_indices(reply, len(candidates))
        except ProviderError as exc:
            self.logging.error("Error reranking chunks, keeping all candidates: %s", exc.detail)
            return candidates
        except UnparseableModelOutput as exc:
            self.logging.warning("Reranker reply unusable, keeping all candidates: %s", exc)
            return candidates

        return [chunk for index, chunk in enumerate(candidates) if index in selected]
