import httpx

from shared.clients.ClientInterface import ClientInterface
from shared.helper.HelperConfig import HelperConfig
from shared.models.config import EnvConfig
from shared.models.errors import ProviderError, ProviderTimeoutError
from shared.models.web import FetchedPage

_DEFAULT_USER_AGENT = "rag-assistant-crawler/1.0"


class CrawlClientHttp(ClientInterface):
    """Fetches arbitrary web pages for the URL ingestion adapter.

    Unlike the provider clients there is no fixed backend: every request targets
    an absolute URL, so do_fetch_page() bypasses the base-URL handling of do_request().
    """

    def __init__(self, helper_config: HelperConfig):
        super().__init__(helper_config=helper_config)
        self._user_agent = self.get_config_val("USER_AGENT", default=_DEFAULT_USER_AGENT, val_type="string")
        self._max_bytes = int(self.get_config_val("MAX_BYTES", default=5_000_000, val_type="number"))

    ##########################################
    ################ GETTER ##################
    ##########################################

    ################ GENERAL ##################
    def _get_client_type(self) -> str:
        return "crawl"

    def _get_engine_name(self) -> str:
        return "Http"

    def _get_default_timeout(self) -> float:
        return 20.0

    ################ CONFIG ##################
    def _get_required_config(self) -> list[EnvConfig]:
        return [
            EnvConfig(env_key="USER_AGENT", val_type="string", default=_DEFAULT_USER_AGENT),
            EnvConfig(env_key="MAX_BYTES", val_type="number", default=5_000_000),
        ]

    ################ AUTH ##################
    def _get_auth_header(self) -> dict:
        return {"User-Agent": self._user_agent}

    ################ ENDPOINTS ##################
    def _get_base_url(self) -> str:
        return ""

    def _get_endpoint_healthcheck(self) -> str:
        return ""

    ##########################################
    ############### REQUESTS #################
    ##########################################

    async def boot(self) -> None:
        self._client = httpx.AsyncClient(
            timeout=self.timeout,
            follow_redirects=True,
            headers=self._get_auth_header(),
        )

    async def do_fetch_page(self, url: str) -> FetchedPage | None:
        """Fetch a single page.

        Args:
            url (str): Absolute http(s) URL.

        Returns:
            FetchedPage | None: The page, or None when the server answered with a
                non-2xx status or the body exceeds CRAWL_HTTP_MAX_BYTES.

        Raises:
            ProviderTimeoutError: If the request timed out.
            ProviderError: If the client is not booted or the connection failed.
        """
        if self._client is None:
            raise ProviderError("Crawler is not available.", "HTTP client not initialised. Call boot() before making requests.")
        try:
            response = await self._client.get(url)
        except httpx.TimeoutException as exc:
            raise ProviderTimeoutError(f"Fetching '{url}' timed out.", repr(exc)) from exc
        except httpx.HTTPError as exc:
            raise ProviderError(f"Could not fetch '{url}'.", repr(exc), transient=True) from exc

        if not response.is_success:
            self.logging.warning("Fetching %s returned status %d. Skipping.", url, response.status_code)
            return None
        if len(response.content) > self._max_bytes:
            self.logging.warning("Page %s is larger than %d bytes. Skipping.", url, self._max_bytes)
            return None
        return FetchedPage(
            url=str(response.url),
            content_type=response.headers.get("content-type", ""),
            text=response.text,
        )
