from shared.clients.ClientInterface import ClientInterface
from shared.helper.HelperConfig import HelperConfig


class ClientManager:
    """
    Instantiates the provider client configured for one client type.

    The engine is read from <TYPE>_ENGINE (e.g. EMBED_ENGINE=gemini) and the
    implementation is imported from shared.clients.<type>.<engine>.<Prefix><Engine>,
    e.g. shared.clients.embed.gemini.EmbedClientGemini.
    """

    _CLASS_PREFIXES: dict[str, str] = {
        "embed": "EmbedClient",
        "llm": "LLMClient",
        "rag": "RAGClient",
        "crawl": "CrawlClient",
    }

    def __init__(self, helper_config: HelperConfig, client_type: str, default_engine: str | None = None):
        self.helper_config = helper_config
        self.logging = helper_config.get_logger()
        self.client_type = client_type.lower()
        if self.client_type not in self._CLASS_PREFIXES:
            raise ValueError(f"Unknown client type '{client_type}'.")
        self.default_engine = default_engine
        self.client = self._initialize_client()

    def _get_engine_from_env(self) -> str:
        """
        Reads the engine name from <TYPE>_ENGINE.

        Returns:
            str: Capitalised engine name (e.g. "Qdrant").

        Raises:
            ValueError: If no engine is configured and there is no default.
        """
        engine = self.helper_config.get_string_val(f"{self.client_type.upper()}_ENGINE", default=self.default_engine)
        if not engine:
            raise ValueError(f"No {self.client_type.upper()} engine specified in configuration.")
        return engine.strip().lower().capitalize()

    def _initialize_client(self) -> ClientInterface:
        """
        Imports and instantiates the client class for the configured engine.

        Returns:
            ClientInterface: The instantiated (not yet booted) client.

        Raises:
            ValueError: If the engine is unsupported or cannot be imported.
        """
        engine = self._get_engine_from_env()
        class_name = f"{self._CLASS_PREFIXES[self.client_type]}{engine}"
        try:
            module = __import__(
                f"shared.clients.{self.client_type}.{engine.lower()}.{class_name}",
                fromlist=[class_name],
            )
            client_class = getattr(module, class_name)
        except (ImportError, AttributeError) as e:
            raise ValueError(f"Unsupported {self.client_type.upper()} engine specified: '{engine}'. Error: {e}")
        client = client_class(helper_config=self.helper_config)
        self.logging.debug("Instantiated %s client for engine: %s", self.client_type.upper(), engine)
        return client

    def get_client(self) -> ClientInterface:
        """
        Returns the instantiated client.
        """
        return self.client
