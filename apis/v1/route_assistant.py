import logging

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status
from fastapi.responses import Response
from openai import AsyncOpenAI, OpenAIError

from clients.assistant import AssistantService
from core.config import settings
from db.user import get_current_user
from schemas.assistant import (
    ChatRequest,
    ChatResponse,
    SpeechRequest,
    TranscriptionResponse,
)

logger = logging.getLogger(__name__)

# all assistant routes need a signed-in user
router = APIRouter(dependencies=[Depends(get_current_user)])


def get_assistant() -> AssistantService:
    if not settings.OPENAI_API_KEY:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Assistant is not configured",
        )
    return AssistantService(
        AsyncOpenAI(api_key=settings.OPENAI_API_KEY),
        chat_model=settings.OPENAI_CHAT_MODEL,
        transcribe_model=settings.OPENAI_TRANSCRIBE_MODEL,
        tts_model=settings.OPENAI_TTS_MODEL,
        voice=settings.OPENAI_TTS_VOICE,
    )


def _provider_error(exc: OpenAIError) -> HTTPException:
    logger.exception("Assistant provider error: %s", exc)
    return HTTPException(
        status_code=status.HTTP_502_BAD_GATEWAY, detail="Assistant provider error"
    )


@router.post("/chat", response_model=ChatResponse)
async def chat(
    request: ChatRequest, assistant: AssistantService = Depends(get_assistant)
) -> ChatResponse:
    if not request.prompt.strip():
        raise HTTPException(status_code=400, detail="Prompt is required")
    try:
        text = await assistant.chat(request.prompt, max_tokens=request.max_tokens)
    except OpenAIError as exc:
        raise _provider_error(exc)
    return ChatResponse(response=text)


@router.post("/transcribe", response_model=TranscriptionResponse)
async def transcribe(
    file: UploadFile = File(...), assistant: AssistantService = Depends(get_assistant)
) -> TranscriptionResponse:
    audio = await file.read()
    if not audio:
        raise HTTPException(status_code=400, detail="Audio file is empty")
    try:
        text = await assistant.transcribe(
            file.filename or "audio.webm", audio, file.content_type
        )
    except OpenAIError as exc:
        raise _provider_error(exc)
    return TranscriptionResponse(text=text)


@router.post("/speech")
async def speech(
    request: SpeechRequest, assistant: AssistantService = Depends(get_assistant)
) -> Response:
    if not request.text.strip():
        raise HTTPException(status_code=400, detail="Text is required")
    try:
        audio = await assistant.speech(request.text, voice=request.voice)
    except OpenAIError as exc:
        raise _provider_error(exc)
    return Response(content=audio, media_type="audio/mpeg")
