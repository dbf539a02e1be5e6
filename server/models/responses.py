from shared.models.results import CamelModel, ChatResult, TextIngestResult, UrlIngestResult


class ApiResponse(CamelModel):
    success: bool = True
    message: str | None = None


class TextIngestResponse(ApiResponse):
    data: TextIngestResult


class UrlIngestResponse(ApiResponse):
    data: UrlIngestResult


class PdfIngestResponse(ApiResponse):
    documents_processed: int
    filename: str
    file_size: str


class ChatResponse(ApiResponse):
    data: ChatResult


class ErrorResponse(ApiResponse):
    success: bool = False
    error: str
    retriable: bool = False
