from __future__ import annotations

from typing import Any, Optional

from langchain_core.messages import HumanMessage
from langchain_google_genai import ChatGoogleGenerativeAI

from config.settings import Settings, get_settings


def _content_to_text(content: Any) -> str:
    if isinstance(content, str):
        return content
    parts = []
    for item in content or []:
        if isinstance(item, str):
            parts.append(item)
        elif isinstance(item, dict) and item.get("type") == "text":
            parts.append(item.get("text") or "")
    return "".join(parts)


class GeminiAssistant:
    """Assistant backend: one prompt in, one reply out.

    No retries here; a failure propagates to the caller.
    """

    def __init__(self, settings: Settings, llm: Optional[Any] = None) -> None:
        self._settings = settings
        self._llm = llm
        if self._llm is None and settings.google_api_key:
            self._llm = ChatGoogleGenerativeAI(
                model=settings.gemini_model,
                google_api_key=settings.google_api_key,
                temperature=settings.temperature,
                top_p=settings.top_p,
                timeout=settings.assistant_timeout,
            )

    async def send_message(self, prompt: str) -> str:
        if self._llm is None:
            raise RuntimeError(
                "GOOGLE_API_KEY not set. Please configure it in environment or .env"
            )
        result = await self._llm.ainvoke([HumanMessage(content=prompt)])
        return _content_to_text(getattr(result, "content", result)).strip()


def build_assistant(settings: Optional[Settings] = None) -> GeminiAssistant:
    return GeminiAssistant(settings or get_settings())
