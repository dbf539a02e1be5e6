from shared.clients.embed.EmbedClientInterface import EmbedClientInterface, EmbedRole
from shared.helper.HelperConfig import HelperConfig
from shared.models.config import EnvConfig

_TASK_TYPES: dict[str, str] = {
    "document": "RETRIEVAL_DOCUMENT",
    "query": "RETRIEVAL_QUERY",
}


class EmbedClientGemini(EmbedClientInterface):
    def __init__(self, helper_config: HelperConfig):
        super().__init__(helper_config=helper_config)
        self._base_url = self.get_config_val("BASE_URL", default="https://generativelanguage.googleapis.com/v1beta", val_type="string")
        self._api_key = self.get_config_val("API_KEY", default=None, val_type="string")

    ##########################################
    ################ GETTER ##################
    ##########################################

    ################ GENERAL ##################
    def _get_engine_name(self) -> str:
        return "Gemini"

    def _get_default_model(self) -> str | None:
        return "embedding-001"

    def get_model_path(self) -> str:
        """Returns the resource name of the model, e.g. "models/embedding-001"."""
        return self.embed_model if self.embed_model.startswith("models/") else f"models/{self.embed_model}"

    ################ CONFIG ##################
    def _get_required_config(self) -> list[EnvConfig]:
        return [
            EnvConfig(env_key="BASE_URL", val_type="string", default="https://generativelanguage.googleapis.com/v1beta"),
            EnvConfig(env_key="API_KEY", val_type="string", default=None),
        ]

    ################ AUTH ##################
    def _get_auth_header(self) -> dict:
        return {"x-goog-api-key": self._api_key}

    ################ ENDPOINTS ##################
    def _get_base_url(self) -> str:
        return self._base_url

    def _get_endpoint_healthcheck(self) -> str:
        return f"/{self.get_model_path()}"

    def get_endpoint_embedding(self) -> str:
        return f"/{self.get_model_path()}:batchEmbedContents"

    ################ PAYLOAD BUILDER ##################
    def get_embed_payload(self, texts: list[str], role: EmbedRole) -> dict:
        """Build a batchEmbedContents request body with one request per text.

        Returns:
            dict: {"requests": [{"model": ..., "content": {"parts": [{"text": ...}]}, "taskType": ...}]}
        """
        model = self.get_model_path()
        task_type = _TASK_TYPES[role]
        return {
            "requests": [
                {"model": model, "content": {"parts": [{"text": text}]}, "taskType": task_type}
                for text in texts
            ]
        }

    ##########################################
    ################# OTHER ##################
    ##########################################

    def extract_embeddings_from_response(self, response_data: dict) -> list[list[float]]:
        """Extract vectors from a batchEmbedContents response.

        Response format: {"embeddings": [{"values": [...]}, ...]} in request order.

        Raises:
            ValueError: If any embedding is missing or empty.
        """
        embeddings = response_data.get("embeddings")
        if not embeddings:
            raise ValueError(
                "Gemini response does not contain embeddings. "
                f"Response keys: {list(response_data.keys())}"
            )
        vectors = [item.get("values") for item in embeddings]
        if any(not vector for vector in vectors):
            raise ValueError("Gemini response contains an empty embedding.")
        return vectors
