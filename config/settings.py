from __future__ import annotations

import json
import os
from functools import lru_cache
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv


load_dotenv()


DEFAULT_INSTRUCTION = (
    "You are a friendly quiz host. Read the question and the player's answer, "
    "say whether the answer is right, and explain briefly."
)


def _load_questions_file(path: Optional[str]) -> dict:
    if not path:
        return {}
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    if isinstance(data, list):
        return {"questions": data}
    if isinstance(data, dict):
        return data
    raise ValueError(f"QUIZ_QUESTIONS_FILE must hold a JSON array or object: {path}")


def _load_questions_env(raw: Optional[str]) -> List[str]:
    if not raw:
        return []
    data = json.loads(raw)
    if not isinstance(data, list):
        raise ValueError("QUIZ_QUESTIONS must be a JSON array of strings")
    return [str(item) for item in data]


class Settings:
    """Application settings loaded from environment variables.

    Keep all credentials and config centralized here. Device messaging is
    considered available only when both its URL and the target device id are
    present.
    """

    def __init__(self) -> None:
        self.app_env: str = os.getenv("APP_ENV", "development")
        self.google_api_key: Optional[str] = os.getenv("GOOGLE_API_KEY")
        self.gemini_model: str = os.getenv("GEMINI_MODEL", "gemini-2.0-flash")
        self.temperature: float = float(os.getenv("MODEL_TEMPERATURE", "0.3"))
        self.top_p: float = float(os.getenv("MODEL_TOP_P", "0.9"))
        self.assistant_timeout: float = float(os.getenv("ASSISTANT_TIMEOUT_SECONDS", "30"))

        quiz_file = _load_questions_file(os.getenv("QUIZ_QUESTIONS_FILE"))
        self.instruction: str = os.getenv(
            "ASSISTANT_INSTRUCTION", quiz_file.get("instruction") or DEFAULT_INSTRUCTION
        )
        self.questions: List[str] = _load_questions_env(os.getenv("QUIZ_QUESTIONS")) or [
            str(q) for q in quiz_file.get("questions", [])
        ]
        self.question_delimiter: str = os.getenv("QUESTION_DELIMITER", "→")

        self.session_ttl: float = float(os.getenv("SESSION_TTL_SECONDS", "1800"))
        self.session_sweep_interval: float = float(
            os.getenv("SESSION_SWEEP_INTERVAL_SECONDS", "300")
        )
        if self.session_ttl <= 0:
            raise ValueError("SESSION_TTL_SECONDS must be positive")
        if self.session_sweep_interval <= 0:
            raise ValueError("SESSION_SWEEP_INTERVAL_SECONDS must be positive")

        self.device_messaging_url: Optional[str] = os.getenv("DEVICE_MESSAGING_URL")
        self.device_messaging_token: Optional[str] = os.getenv("DEVICE_MESSAGING_TOKEN")
        self.device_id: Optional[str] = os.getenv("DEVICE_ID")
        self.device_messaging_timeout: float = float(
            os.getenv("DEVICE_MESSAGING_TIMEOUT_SECONDS", "10")
        )

    @property
    def device_messaging_enabled(self) -> bool:
        return bool(self.device_messaging_url and self.device_id)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
