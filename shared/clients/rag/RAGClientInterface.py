from abc import abstractmethod

import httpx
from shared.clients.ClientInterface import ClientInterface
from shared.clients.rag.models.VectorPoint import VectorPoint
from shared.helper.HelperConfig import HelperConfig
from shared.models.errors import ProviderError
from shared.models.search import SearchHit


class RAGClientInterface(ClientInterface):
    def __init__(self, helper_config: HelperConfig):
        super().__init__(helper_config=helper_config)
        self.distance = helper_config.get_string_val(f"{self.get_client_type().upper()}_DISTANCE", default="Cosine")

    ##########################################
    ################ GETTER ##################
    ##########################################

    ################ GENERAL ##################
    def _get_client_type(self) -> str:
        """
        Returns the type of the client. E.g. "rag"
        """
        return "rag"

    @abstractmethod
    def get_collection(self) -> str:
        """
        Returns the name of the collection all records are written to and searched in.
        """
        pass

    ################ ENDPOINTS ##################
    @abstractmethod
    def _get_endpoint_points(self) -> str:
        """
        Returns the endpoint path for points upsert requests (e.g. "/collections/my_col/points").
        """
        pass

    @abstractmethod
    def _get_endpoint_search(self) -> str:
        """
        Returns the endpoint path for similarity search requests (e.g. "/collections/my_col/points/search").
        """
        pass

    @abstractmethod
    def _get_endpoint_check_collection_existence(self) -> str:
        """
        Returns the endpoint path for collection existence check requests.
        """
        pass

    @abstractmethod
    def _get_endpoint_create_collection(self) -> str:
        """
        Returns the endpoint path for create collection requests.
        """
        pass

    ########### PAYLOAD BUILDER ##############
    @abstractmethod
    def get_create_collection_payload(self, vector_size: int, distance: str) -> dict:
        """
        Builds the backend-specific request payload for creating the collection.
        """
        pass

    @abstractmethod
    def get_upsert_payload(self, points: list[VectorPoint]) -> dict:
        """
        Builds the backend-specific request payload for an upsert of the given points.
        """
        pass

    @abstractmethod
    def get_search_payload(self, vector: list[float], limit: int) -> dict:
        """
        Builds the backend-specific request payload for a top-k similarity search.
        """
        pass

    ########### RESPONSE PARSER ##############
    @abstractmethod
    def extract_search_hits(self, raw_response: dict) -> list[SearchHit]:
        """
        Extracts the ranked hits from a raw search response, keeping the store's order.

        Raises:
            ValueError: If the response format is invalid.
        """
        pass

    ##########################################
    ############### REQUESTS #################
    ##########################################

    async def do_existence_check(self) -> bool:
        """Check if the collection exists in the rag backend.

        Returns:
            bool: True if the collection exists, False otherwise.
        """
        resp = await self.do_request(
            method="GET",
            endpoint=self._get_endpoint_check_collection_existence(),
            raise_on_error=True,
        )
        return bool(resp.json().get("result", {}).get("exists"))

    async def do_create_collection(self, vector_size: int, distance: str | None = None) -> httpx.Response:
        """Create the collection in the rag backend.

        Args:
            vector_size (int): The size of the vectors in the collection.
            distance (str | None): The distance metric, defaults to RAG_DISTANCE.

        Returns:
            httpx.Response: The response from the create collection request.
        """
        self.logging.info(
            "Creating collection '%s' (size=%d, distance=%s).",
            self.get_collection(), vector_size, distance or self.distance,
        )
        return await self.do_request(
            method="PUT",
            json=self.get_create_collection_payload(vector_size, distance or self.distance),
            endpoint=self._get_endpoint_create_collection(),
            raise_on_error=True,
        )

    async def do_upsert_points(self, points: list[VectorPoint]) -> httpx.Response:
        """Upsert points into the collection and wait until they are indexed.

        Inserts new points or replaces existing ones with the same ID. The whole
        list is sent in one request: it is either accepted as a batch or the call fails.

        Args:
            points (list[VectorPoint]): The points to upsert.

        Returns:
            httpx.Response: The response from the upsert request.
        """
        return await self.do_request(
            method="PUT",
            json=self.get_upsert_payload(points),
            params={"wait": "true"},
            endpoint=self._get_endpoint_points(),
            raise_on_error=True,
        )

    async def do_search(self, vector: list[float], limit: int = 5) -> list[SearchHit]:
        """Run a top-k similarity search against the collection.

        Args:
            vector (list[float]): The query embedding.
            limit (int): Maximum number of hits (top-k).

        Returns:
            list[SearchHit]: Hits in the order the store ranked them; empty if nothing is indexed.

        Raises:
            ProviderError: If the store is unreachable, the collection is missing,
                or the response cannot be parsed.
        """
        resp = await self.do_request(
            method="POST",
            json=self.get_search_payload(vector, limit),
            endpoint=self._get_endpoint_search(),
            raise_on_error=True,
        )
        try:
            return self.extract_search_hits(resp.json())
        except ValueError as exc:
            raise ProviderError("Vector store returned an invalid search response.", str(exc)) from exc
