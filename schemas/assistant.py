from pydantic import BaseModel, Field


class ChatRequest(BaseModel):
    prompt: str
    max_tokens: int = Field(default=1000, ge=1, le=4000)


class ChatResponse(BaseModel):
    response: str


class TranscriptionResponse(BaseModel):
    text: str


class SpeechRequest(BaseModel):
    text: str
    voice: str | None = None
