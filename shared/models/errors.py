"""Error taxonomy shared by the ingestion and query pipelines.

Every error that may reach an HTTP caller derives from AppError and carries the
status code and user-facing message the API renders. UnparseableModelOutput is
the exception: it never leaves the stage that raised it.
"""

import copy


class AppError(Exception):
    """Base class for errors rendered as {success: false, message, error}."""

    status_code: int = 500
    retriable: bool = False

    def __init__(self, message: str, detail: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.detail = detail or message

    def with_message(self, message: str) -> "AppError":
        """Copy of this error with a stage-specific user-facing message; detail and flags are kept."""
        clone = copy.copy(self)
        clone.message = message
        clone.args = (message,)
        return clone


class InputValidationError(AppError):
    """Malformed or missing request input. Never retried."""

    status_code = 400


class LoaderError(AppError):
    """Source content is empty or could not be extracted."""

    status_code = 400


class DocumentParseError(LoaderError):
    """An uploaded document could not be parsed (corrupted or without text)."""

    status_code = 500


class ProviderError(AppError):
    """An embedding, vector-store, LLM or crawl call failed.

    Attributes:
        transient (bool): True when a retry could plausibly succeed
            (connection errors, timeouts, 429 and 5xx responses).
    """

    status_code = 500

    def __init__(self, message: str, detail: str | None = None, transient: bool = False) -> None:
        super().__init__(message, detail)
        self.transient = transient
        self.retriable = transient


class ProviderTimeoutError(ProviderError):
    """A provider call exceeded its timeout. The caller may retry the request."""

    def __init__(self, message: str, detail: str | None = None) -> None:
        super().__init__(message, detail, transient=True)


class UnparseableModelOutput(Exception):
    """An LLM reply did not follow the expected output contract."""
