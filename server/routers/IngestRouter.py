from fastapi import APIRouter, File, Request, UploadFile

from server.models.requests import IngestTextRequest, IngestUrlRequest
from server.models.responses import ApiResponse, PdfIngestResponse, TextIngestResponse, UrlIngestResponse
from shared.models.errors import InputValidationError

router = APIRouter(prefix="/ingest", tags=["ingest"])


@router.post("/text", response_model_exclude_none=True)
async def ingest_text(request: Request, body: IngestTextRequest) -> TextIngestResponse:
    """Rewrite, chunk, embed and index free text.

    Args:
        request (Request): FastAPI request (provides app.state.ingest_service).
        body (IngestTextRequest): JSON body with the text to index.

    Returns:
        TextIngestResponse: Original and processed text plus the number of chunks created.
    """
    result = await request.app.state.ingest_service.do_ingest_text(body.text)
    return TextIngestResponse(message="Text processed and indexed successfully", data=result)


@router.post("/url", response_model_exclude_none=True)
async def ingest_url(request: Request, body: IngestUrlRequest) -> UrlIngestResponse:
    """Crawl a website from the given URL and index its meaningful pages."""
    result = await request.app.state.ingest_service.do_ingest_url(body.url)
    return UrlIngestResponse(message="Web content processed and indexed successfully", data=result)


@router.post("/pdf", response_model_exclude_none=True)
async def ingest_pdf(request: Request, file: UploadFile | None = File(default=None)) -> PdfIngestResponse:
    """Index an uploaded PDF (multipart field "file"), one document per page.

    Args:
        request (Request): FastAPI request (provides app.state.ingest_service).
        file (UploadFile | None): The uploaded file.

    Returns:
        PdfIngestResponse: Number of indexed chunks, filename and human-readable size.
    """
    if file is None:
        raise InputValidationError("No file uploaded. Please select a PDF file.")
    try:
        data = await file.read()
    finally:
        await file.close()

    result = await request.app.state.ingest_service.do_ingest_pdf(data, file.filename, file.content_type)
    return PdfIngestResponse(
        message="File uploaded and indexed successfully!",
        documents_processed=result.documents_processed,
        filename=result.filename,
        file_size=result.file_size,
    )


@router.get("/text")
@router.get("/url")
@router.get("/pdf")
async def ingest_liveness(request: Request) -> ApiResponse:
    """Liveness probe for the ingestion endpoints."""
    return ApiResponse(message=f"{request.url.path} endpoint is live")
