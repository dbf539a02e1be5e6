from shared.clients.llm.LLMClientInterface import LLMClientInterface
from shared.helper.HelperConfig import HelperConfig
from shared.models.config import EnvConfig

# Gemini's OpenAI-compatible endpoint; any /chat/completions provider works
_DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com/v1beta/openai"


class LLMClientOpenai(LLMClientInterface):
    def __init__(self, helper_config: HelperConfig):
        super().__init__(helper_config=helper_config)
        self._base_url = self.get_config_val("BASE_URL", default=_DEFAULT_BASE_URL, val_type="string")
        self._api_key = self.get_config_val("API_KEY", default=None, val_type="string")

    ##########################################
    ################ GETTER ##################
    ##########################################

    ################ GENERAL ##################
    def _get_engine_name(self) -> str:
        return "Openai"

    def _get_default_chat_model(self) -> str | None:
        return "gemini-2.0-flash"

    ################ CONFIG ##################
    def _get_required_config(self) -> list[EnvConfig]:
        return [
            EnvConfig(env_key="BASE_URL", val_type="string", default=_DEFAULT_BASE_URL),
            EnvConfig(env_key="API_KEY", val_type="string", default=None),
        ]

    ################ AUTH ##################
    def _get_auth_header(self) -> dict:
        return {"Authorization": f"Bearer {self._api_key}"}

    ################ ENDPOINTS ##################
    def _get_base_url(self) -> str:
        return self._base_url

    def _get_endpoint_healthcheck(self) -> str:
        return "/models"

    def _get_endpoint_chat(self) -> str:
        return "/chat/completions"

    ################ PAYLOAD BUILDER ##################
    def get_chat_payload(self, messages: list[dict], temperature: float) -> dict:
        return {"model": self.chat_model, "messages": messages, "temperature": temperature}

    ##########################################
    ################# OTHER ##################
    ##########################################

    def extract_chat_response(self, response_data: dict) -> str:
        """Extract the first choice's message content from a /chat/completions response.

        Raises:
            ValueError: If the response contains no choices, or the content is not plain text.
        """
        choices = response_data.get("choices") or []
        if not choices:
            raise ValueError(
                "Chat completion response does not contain any choices. "
                "Response keys: %s" % list(response_data.keys())
            )
        message = choices[0].get("message") or {}
        content = message.get("content")
        if content is None:
            return ""
        if not isinstance(content, str):
            raise ValueError("Chat completion content is %s, expected plain text." % type(content).__name__)
        return content
