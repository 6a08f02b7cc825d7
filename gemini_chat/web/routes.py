"""
Web routes for Gemini Chat

This module contains the FastAPI routes: the gemini-chat proxy endpoint
and the chat history endpoints used by the chat screen.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Header, HTTPException, Request, UploadFile
from fastapi.responses import JSONResponse

from ..analytics import capture_event, flush_events
from ..config import Settings, get_settings
from ..errors import ChatHistoryError, SupabaseError, ValidationError
from ..models.chat import ChatErrorResponse, ChatResponse, ProxySuccess
from ..services import ChatHistoryService, ChatProxyService, ImageUpload
from ..services.chat_service import extract_bearer_token
from ..utils.debug_logger import debug_logger

logger = logging.getLogger(__name__)

router = APIRouter()


def get_proxy_service(settings: Settings = Depends(get_settings)) -> ChatProxyService:
    return ChatProxyService(settings)


def get_history_service(settings: Settings = Depends(get_settings)) -> ChatHistoryService:
    return ChatHistoryService(settings)


def require_token(authorization: Optional[str] = Header(None)) -> str:
    """Bearer token of the signed-in user, or 401"""
    token = extract_bearer_token(authorization)
    if not token:
        raise HTTPException(status_code=401, detail="Missing Authorization header")
    return token


@router.post("/gemini-chat")
async def gemini_chat(request: Request, proxy: ChatProxyService = Depends(get_proxy_service)):
    """
    Relay a chat message (and optional stored image) to Gemini

    Returns 200 {"response": ...} or 500 {"error": ...}; nothing in between.
    """
    request_id = getattr(request.state, 'request_id', None)
    authorization = request.headers.get("authorization")

    body = await request.body()
    debug_logger.log_route(request_id, f"Received gemini-chat request ({len(body)} bytes)", request)

    result = await proxy.process(body, authorization, request_id)
    success = isinstance(result, ProxySuccess)

    capture_event("gemini_chat_request", {
        "success": success,
        "has_authorization": authorization is not None,
        "request_id": request_id
    })
    flush_events()

    if success:
        return JSONResponse(status_code=200, content=ChatResponse(response=result.response_text).model_dump())
    return JSONResponse(status_code=500, content=ChatErrorResponse(error=result.error_message).model_dump())


@router.get("/messages")
async def list_messages(
    request: Request,
    token: str = Depends(require_token),
    history: ChatHistoryService = Depends(get_history_service)
):
    """List the signed-in user's chat messages, oldest first"""
    request_id = getattr(request.state, 'request_id', None)
    try:
        messages = await history.list_messages(token, request_id)
    except SupabaseError as e:
        logger.error(f"Error fetching messages: {e}")
        raise HTTPException(status_code=502, detail=f"Failed to load messages: {e}")
    except ChatHistoryError as e:
        raise HTTPException(status_code=500, detail=str(e))
    return {"messages": [m.model_dump() for m in messages]}


@router.post("/messages")
async def send_message(
    request: Request,
    message: str = Form(""),
    image: Optional[UploadFile] = File(None),
    token: str = Depends(require_token),
    history: ChatHistoryService = Depends(get_history_service),
    settings: Settings = Depends(get_settings)
):
    """Send a message (with optional image) and store both it and the AI reply"""
    request_id = getattr(request.state, 'request_id', None)

    upload = None
    if image is not None and image.filename:
        upload = ImageUpload(
            # At most one byte past the limit
            data=await image.read(settings.max_image_bytes + 1),
            content_type=image.content_type or "",
            filename=image.filename
        )

    debug_logger.log_route(
        request_id,
        f"Sending message: '{message[:50]}{'...' if len(message) > 50 else ''}'",
        request,
        has_image=upload is not None
    )

    try:
        user_message, ai_message = await history.send_message(token, message, upload, request_id)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except SupabaseError as e:
        logger.error(f"Error sending message: {e}")
        raise HTTPException(status_code=502, detail=str(e))
    except ChatHistoryError as e:
        logger.error(f"Error sending message: {e}")
        raise HTTPException(status_code=500, detail=str(e))

    return {"messages": [user_message.model_dump(), ai_message.model_dump()]}
