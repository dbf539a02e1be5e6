from abc import abstractmethod
from typing import Literal, Tuple

from shared.clients.ClientInterface import ClientInterface
from shared.helper.HelperConfig import HelperConfig
from shared.models.errors import ProviderError

# "document" for content being indexed, "query" for text being searched with
EmbedRole = Literal["document", "query"]


class EmbedClientInterface(ClientInterface):
    def __init__(self, helper_config: HelperConfig):
        super().__init__(helper_config=helper_config)

        # model and embedding config
        self.embed_distance = helper_config.get_string_val(f"{self.get_client_type().upper()}_DISTANCE", default="Cosine")
        self.embed_model = helper_config.get_string_val(f"{self.get_client_type().upper()}_MODEL", default=self._get_default_model())
        self.embed_batch_size = int(helper_config.get_number_val(f"{self.get_client_type().upper()}_BATCH_SIZE", default=100))

    ##########################################
    ################ GETTER ##################
    ##########################################

    ################ GENERAL ##################
    def _get_client_type(self) -> str:
        """
        Returns the type of the client. E.g. "rag"
        """
        return "embed"

    def _get_default_timeout(self) -> float:
        # large documents are embedded in one go during ingestion
        return 120.0

    def _get_default_model(self) -> str | None:
        """
        Returns the model used when EMBED_MODEL is not set. None makes EMBED_MODEL required.
        """
        return None

    ################ ENDPOINTS ##################
    @abstractmethod
    def get_endpoint_embedding(self) -> str:
        """
        Returns the endpoint path for embedding requests.

        Returns:
            str: The endpoint path for embedding requests (e.g. "/api/embed")
        """
        pass

    ################ PAYLOAD BUILDER ##################
    @abstractmethod
    def get_embed_payload(self, texts: list[str], role: EmbedRole) -> dict:
        """Build the backend-specific request body for an embedding request.

        Args:
            texts (list[str]): The texts to embed.
            role (EmbedRole): Whether the texts are stored content or a search query.

        Returns:
            dict: JSON-serialisable request body.
        """
        pass

    ##########################################
    ################# OTHER ##################
    ##########################################

    @abstractmethod
    def extract_embeddings_from_response(self, response_data: dict) -> list[list[float]]:
        """Extract embedding vectors from a raw embedding API response.

        Args:
            response_data (dict): The parsed JSON response body.

        Returns:
            list[list[float]]: Embedding vectors in the same order as the input texts.

        Raises:
            ValueError: If the response format is invalid or embeddings are empty.
        """
        pass

    ##########################################
    ############### REQUESTS #################
    ##########################################

    async def do_fetch_embedding_vector_size(self) -> Tuple[int, str]:
        """
        Determine the output dimension of the configured model by embedding a probe text.

        The probe uses the "document" role; both roles share one vector space.

        Returns:
            Tuple[int, str]: The vector dimension and the configured distance metric.
        """
        vectors = await self.do_embed(["dimension probe"], role="document")
        return len(vectors[0]), self.embed_distance

    async def do_embed(self, texts: list[str] | str, role: EmbedRole = "document") -> list[list[float]]:
        """Embed one or more texts, batching requests by EMBED_BATCH_SIZE.

        Args:
            texts (list[str] | str): One or more texts to embed.
            role (EmbedRole): "document" at index time, "query" at search time.

        Returns:
            list[list[float]]: Embedding vectors in the same order as the inputs.

        Raises:
            ProviderError: If a request fails or the response holds no usable vectors.
        """
        texts = [texts] if isinstance(texts, str) else texts
        vectors: list[list[float]] = []
        for batch_start in range(0, len(texts), self.embed_batch_size):
            batch = texts[batch_start: batch_start + self.embed_batch_size]
            response = await self.do_request(
                method="POST",
                endpoint=self.get_endpoint_embedding(),
                json=self.get_embed_payload(batch, role),
                raise_on_error=True,
            )
            try:
                batch_vectors = self.extract_embeddings_from_response(response.json())
            except ValueError as exc:
                raise ProviderError("Embedding provider returned an invalid response.", str(exc)) from exc
            if len(batch_vectors) != len(batch):
                raise ProviderError(
                    "Embedding provider returned an invalid response.",
                    f"Expected {len(batch)} vectors, got {len(batch_vectors)}.",
                )
            vectors.extend(batch_vectors)
        self.logging.debug("Embedded %d text(s) with role '%s'.", len(texts), role)
        return vectors
