"""FastAPI application entry point for the RAG knowledge-base assistant."""

import os
from contextlib import asynccontextmanager
from typing import AsyncGenerator

import httpx
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from shared.logging.logging_setup import setup_logging
from shared.helper.HelperConfig import HelperConfig
from shared.clients.ClientInterface import ClientInterface
from shared.clients.ClientManager import ClientManager
from shared.models.errors import AppError
from services.rag_ingest.IngestService import IngestService
from server.core.ChatService import ChatService
from server.models.responses import ApiResponse, ErrorResponse
from server.routers.ChatRouter import router as chat_router
from server.routers.IngestRouter import router as ingest_router

logging = setup_logging()
app_version = os.getenv("APP_VERSION", "unknown")

DEFAULT_ENGINES = {
    "embed": "gemini",
    "llm": "openai",
    "rag": "qdrant",
    "crawl": "http",
}


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    # when the app starts
    app.state.logging = logging
    app.state.helper_config = HelperConfig(logger=logging)

    clients: dict[str, ClientInterface] = {
        client_type: ClientManager(app.state.helper_config, client_type, default_engine=engine).get_client()
        for client_type, engine in DEFAULT_ENGINES.items()
    }

    logging.info("Booting all clients...")
    for client in clients.values():
        await client.boot()
    logging.info("All clients booted successfully.")

    app.state.clients = clients
    app.state.ingest_service = IngestService(
        helper_config=app.state.helper_config,
        llm_client=clients["llm"],
        embed_client=clients["embed"],
        rag_client=clients["rag"],
        crawl_client=clients["crawl"],
    )
    app.state.chat_service = ChatService(
        helper_config=app.state.helper_config,
        llm_client=clients["llm"],
        embed_client=clients["embed"],
        rag_client=clients["rag"],
    )

    try:
        await check_connections(clients)
        await app.state.ingest_service.indexer.do_ensure_collection()
    except Exception:
        for client in clients.values():
            await client.close()
        raise

    # while the app is running...
    yield

    # when the app shuts down, close all client connections
    logging.info("Shutting down, closing all clients...")
    for client in clients.values():
        await client.close()
    logging.info("All clients closed.")


app = FastAPI(
    title="rag_assistant",
    description=(
        "Knowledge-base assistant: index free text, websites and PDFs into a vector store "
        "via POST /ingest/*, then ask questions via POST /chat. Answers are corrected, "
        "retrieved, reranked and synthesized from the indexed content and cite their sources."
    ),
    version=app_version,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(ingest_router)
app.include_router(chat_router)


##########################################
############ ERROR HANDLERS ##############
##########################################

def _error_response(status_code: int, message: str, error: str, retriable: bool = False) -> JSONResponse:
    body = ErrorResponse(message=message, error=error, retriable=retriable)
    return JSONResponse(status_code=status_code, content=body.model_dump(by_alias=True))


@app.exception_handler(AppError)
async def handle_app_error(request: Request, exc: AppError) -> JSONResponse:
    if exc.status_code >= 500:
        logging.error("%s %s failed: %s (%s)", request.method, request.url.path, exc.message, exc.detail)
    else:
        logging.warning("%s %s rejected: %s", request.method, request.url.path, exc.message)
    return _error_response(exc.status_code, exc.message, exc.detail, exc.retriable)


@app.exception_handler(RequestValidationError)
async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    logging.warning("%s %s rejected: invalid request body", request.method, request.url.path)
    return _error_response(400, "Invalid request body", str(exc.errors()))


@app.exception_handler(Exception)
async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logging.exception("Unhandled error on %s %s", request.method, request.url.path)
    return _error_response(500, "Internal server error", str(exc))


@app.get("/healthz")
async def healthz() -> ApiResponse:
    return ApiResponse(message=f"rag_assistant v{app_version} is running")


##########################################
############### STARTUP ##################
##########################################

async def check_connections(clients: dict[str, ClientInterface]) -> None:
    """Check connectivity to all configured backends on startup.

    Crawl failures are not checked here: the crawler has no fixed backend.
    Vector store, LLM and embedding failures are fatal, as neither ingestion
    nor chat can be served without them.

    Raises:
        Exception: If a critical service is not reachable.
    """
    for client_type in ("rag", "llm", "embed"):
        client = clients[client_type]
        result: httpx.Response = await client.do_healthcheck()
        if not result.is_success:
            raise Exception(
                f"{client_type.upper()} client '{client.__class__.__name__}' is not reachable "
                f"(status {result.status_code})."
            )


if __name__ == "__main__":
    import uvicorn

    port = int(os.getenv("API_PORT", "8000"))
    logging.info(
        "Starting rag_assistant API Server v%s from root dir: %s on port %d...",
        app_version,
        os.environ.get("ROOT_DIR", "unknown"),
        port,
    )
    uvicorn.run(app, host="0.0.0.0", port=port)
