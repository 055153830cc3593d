from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional
from uuid import uuid4

from agent.core.prompt import compose_prompt
from agent.tools.device_messaging import DisabledDeviceMessaging
from quiz.errors import AssistantUnavailable, NoActiveQuestion
from quiz.question_bank import QuestionBank
from quiz.session_store import SessionStore
from quiz.validation import validate_message_request


logger = logging.getLogger("quizrelay.service")

SESSION_TTL_SECONDS = 30 * 60


@dataclass(frozen=True)
class StartedQuiz:
    question: str
    session_id: str


@dataclass(frozen=True)
class AnswerSubmission:
    text_message: Optional[str]
    session_id: Optional[str]


class QuizSessionService:
    """Starts quiz sessions and relays answers to the assistant.

    A session stays usable for repeated answers until its TTL lapses.
    Publishing the reply to a device is best-effort: failures are logged and
    never change the result returned to the caller.
    """

    def __init__(
        self,
        question_bank: QuestionBank,
        session_store: SessionStore,
        assistant: Any,
        instruction: str,
        device_messaging: Any = None,
        ttl_seconds: float = SESSION_TTL_SECONDS,
        id_factory: Callable[[], str] = lambda: str(uuid4()),
    ) -> None:
        self._bank = question_bank
        self._store = session_store
        self._assistant = assistant
        self._instruction = instruction
        self._device_messaging = device_messaging or DisabledDeviceMessaging()
        self._ttl = ttl_seconds
        self._new_id = id_factory

    @property
    def session_store(self) -> SessionStore:
        return self._store

    def start_quiz(self) -> StartedQuiz:
        question = self._bank.pick_random()
        session_id = self._new_id()
        self._store.put(session_id, question, self._ttl)
        logger.info("Started quiz session=%s", session_id)
        return StartedQuiz(question=question, session_id=session_id)

    async def submit_answer(self, session_id: Optional[str], answer_text: Optional[str]) -> str:
        validate_message_request(AnswerSubmission(text_message=answer_text, session_id=session_id))

        question = self._store.get(session_id)
        if question is None:
            raise NoActiveQuestion(trace="QuizSessionService.submit_answer")

        prompt = compose_prompt(self._instruction, question, answer_text)
        logger.info("Relaying answer: session=%s prompt_len=%s", session_id, len(prompt))
        try:
            reply = await self._assistant.send_message(prompt)
        except Exception as exc:
            logger.exception("Assistant call failed for session=%s", session_id)
            raise AssistantUnavailable(trace="QuizSessionService.submit_answer") from exc

        await self._publish_reply(reply)
        return reply

    async def _publish_reply(self, reply: str) -> None:
        if not self._device_messaging.enabled:
            return
        device_id = self._device_messaging.device_id
        payload = json.dumps({"textMessage": reply}).encode("utf-8")
        try:
            await self._device_messaging.send(device_id, payload)
        except Exception as exc:
            logger.warning("Device delivery to %s failed, continuing: %s", device_id, exc)
