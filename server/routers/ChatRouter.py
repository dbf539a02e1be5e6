from fastapi import APIRouter, Request

from server.models.requests import ChatRequest
from server.models.responses import ChatResponse

router = APIRouter(prefix="/chat", tags=["chat"])


@router.post("", response_model_exclude_none=True)
async def chat(request: Request, body: ChatRequest) -> ChatResponse:
    """Answer a query from the indexed knowledge base.

    Args:
        request (Request): FastAPI request (provides app.state.chat_service).
        body (ChatRequest): JSON body with the raw query.

    Returns:
        ChatResponse: The corrected query, the grounded summary with its sources
            and the number of chunks it is based on.
    """
    result = await request.app.state.chat_service.do_answer(body.query)
    return ChatResponse(message="Answer generated successfully", data=result)
