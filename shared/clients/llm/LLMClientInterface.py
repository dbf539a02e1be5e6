from abc import abstractmethod

from shared.clients.ClientInterface import ClientInterface
from shared.helper.HelperConfig import HelperConfig
from shared.models.errors import ProviderError


class LLMClientInterface(ClientInterface):
    def __init__(self, helper_config: HelperConfig):
        super().__init__(helper_config=helper_config)

        # chat / completion config
        self.chat_model = helper_config.get_string_val(f"{self.get_client_type().upper()}_CHAT_MODEL", default=self._get_default_chat_model())
        self.chat_temperature = helper_config.get_number_val(f"{self.get_client_type().upper()}_TEMPERATURE", default=0.2)

    ##########################################
    ################ GETTER ##################
    ##########################################

    ################ GENERAL ##################
    def _get_client_type(self) -> str:
        return "llm"

    def _get_default_chat_model(self) -> str | None:
        """Returns the model used when LLM_CHAT_MODEL is not set. None makes it required."""
        return None

    ################ ENDPOINTS ##################
    @abstractmethod
    def _get_endpoint_chat(self) -> str:
        """Returns the endpoint path for chat/completion requests (e.g. "/api/chat")."""
        pass

    ################ PAYLOAD BUILDER ##################
    @abstractmethod
    def get_chat_payload(self, messages: list[dict], temperature: float) -> dict:
        """Build the backend-specific request body for a chat/completion request.

        Args:
            messages (list[dict]): OpenAI-format messages
                (e.g. [{"role": "system", "content": "..."}, {"role": "user", "content": "..."}]).
            temperature (float): Sampling temperature.

        Returns:
            dict: JSON-serialisable request body.
        """
        pass

    ##########################################
    ################# OTHER ##################
    ##########################################

    @abstractmethod
    def extract_chat_response(self, response_data: dict) -> str:
        """Extract the assistant reply text from a raw chat API response.

        Args:
            response_data (dict): The parsed JSON response body.

        Returns:
            str: The assistant reply text (may be empty).

        Raises:
            ValueError: If the response has no assistant message at all.
        """
        pass

    ##########################################
    ############### REQUESTS #################
    ##########################################

    async def do_chat(self, messages: list[dict], temperature: float | None = None, timeout: float | None = None) -> str:
        """Send a chat/completion request and return the assistant reply text.

        Args:
            messages (list[dict]): OpenAI-format messages.
            temperature (float | None): Overrides LLM_TEMPERATURE for this call.
            timeout (float | None): Overrides LLM_TIMEOUT for this call.

        Returns:
            str: The assistant reply text.

        Raises:
            ProviderTimeoutError: If the call timed out.
            ProviderError: If the HTTP request fails or the response holds no reply.
        """
        body = self.get_chat_payload(messages, self.chat_temperature if temperature is None else temperature)
        response = await self.do_request(
            method="POST",
            endpoint=self._get_endpoint_chat(),
            json=body,
            raise_on_error=True,
            timeout=timeout,
        )
        try:
            return self.extract_chat_response(response.json())
        except ValueError as exc:
            raise ProviderError("LLM provider returned an invalid response.", str(exc)) from exc
