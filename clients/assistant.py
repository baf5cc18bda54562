"""
AI assistant backed by the OpenAI API: chat completion, speech-to-text
(Whisper) and text-to-speech.
"""

import logging

from openai import AsyncOpenAI

logger = logging.getLogger(__name__)


class AssistantService:
    def __init__(
        self,
        client: AsyncOpenAI,
        chat_model: str = "gpt-3.5-turbo",
        transcribe_model: str = "whisper-1",
        tts_model: str = "tts-1",
        voice: str = "alloy",
        temperature: float = 0.7,
    ):
        self.client = client
        self.chat_model = chat_model
        self.transcribe_model = transcribe_model
        self.tts_model = tts_model
        self.voice = voice
        self.temperature = temperature

    async def chat(self, prompt: str, max_tokens: int = 1000) -> str:
        completion = await self.client.chat.completions.create(
            model=self.chat_model,
            messages=[{"role": "user", "content": prompt}],
            max_tokens=max_tokens,
            temperature=self.temperature,
        )
        content = completion.choices[0].message.content or ""
        return content.strip()

    async def transcribe(self, filename: str, audio: bytes, content_type: str | None) -> str:
        transcription = await self.client.audio.transcriptions.create(
            model=self.transcribe_model,
            file=(filename, audio, content_type or "application/octet-stream"),
        )
        return transcription.text

    async def speech(self, text: str, voice: str | None = None) -> bytes:
        response = await self.client.audio.speech.create(
            model=self.tts_model,
            voice=voice or self.voice,
            input=text,
        )
        return response.content
