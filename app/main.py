from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager, suppress
from functools import lru_cache
from typing import Optional

from fastapi import APIRouter, Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from agent.assistant import build_assistant
from agent.tools.device_messaging import build_device_messaging
from config.settings import get_settings
from quiz.errors import QuizError
from quiz.question_bank import QuestionBank
from quiz.service import QuizSessionService
from quiz.session_store import SessionStore


logging.basicConfig(level=logging.INFO, format="[%(asctime)s] %(levelname)s - %(message)s")
logger = logging.getLogger("quizrelay")


@lru_cache(maxsize=1)
def get_quiz_service() -> QuizSessionService:
    settings = get_settings()
    bank = QuestionBank(settings.questions, delimiter=settings.question_delimiter)
    if not len(bank):
        logger.warning("No quiz questions configured; start-quiz will fail until QUIZ_QUESTIONS is set")
    device_messaging = build_device_messaging(settings)
    logger.info(
        "Config: model=%s key_set=%s questions=%s device_messaging=%s",
        settings.gemini_model,
        bool(settings.google_api_key),
        len(bank),
        device_messaging.enabled,
    )
    return QuizSessionService(
        question_bank=bank,
        session_store=SessionStore(),
        assistant=build_assistant(settings),
        instruction=settings.instruction,
        device_messaging=device_messaging,
        ttl_seconds=settings.session_ttl,
    )


async def _sweep_sessions(store: SessionStore, interval: float) -> None:
    while True:
        await asyncio.sleep(interval)
        removed = store.sweep()
        if removed:
            logger.info("Swept %s expired quiz sessions", removed)


@asynccontextmanager
async def lifespan(app: FastAPI):
    provider = app.dependency_overrides.get(get_quiz_service, get_quiz_service)
    service = provider()
    sweeper = asyncio.create_task(
        _sweep_sessions(service.session_store, get_settings().session_sweep_interval)
    )
    try:
        yield
    finally:
        sweeper.cancel()
        with suppress(asyncio.CancelledError):
            await sweeper


app = FastAPI(title="Quiz Relay Assistant", version="1.0.0", lifespan=lifespan)

# CORS: allow the chat front end during development
settings = get_settings()
if settings.app_env.lower() in {"dev", "development", "local"}:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


class StartQuizResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    question: str
    session_id: str = Field(..., alias="sessionId")


class MessageRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    text_message: Optional[str] = Field(None, alias="textMessage", description="The player's answer")
    session_id: Optional[str] = Field(None, alias="sessionId", description="Id returned by start-quiz")


class MessageResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    text_message: str = Field(..., alias="textMessage")


class ErrorResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    error_title: str = Field(..., alias="errorTitle")
    error_message: str = Field(..., alias="errorMessage")
    error_trace: Optional[str] = Field(None, alias="errorTrace")


def _error_response(status_code: int, title: str, message: str, trace: Optional[str]) -> JSONResponse:
    body = ErrorResponse(error_title=title, error_message=message, error_trace=trace)
    return JSONResponse(status_code=status_code, content=body.model_dump(by_alias=True))


@app.exception_handler(QuizError)
async def quiz_error_handler(request: Request, exc: QuizError) -> JSONResponse:
    logger.info("Request %s failed: %s", request.url.path, exc.title)
    return _error_response(exc.status_code, exc.title, exc.message, exc.trace or request.url.path)


@app.exception_handler(RequestValidationError)
async def malformed_request_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return _error_response(400, "MalformedRequest", "The request body could not be read.", request.url.path)


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s: %s", request.url.path, exc)
    return _error_response(500, "InternalError", "Something went wrong on our side.", request.url.path)


router = APIRouter()

_error_responses = {400: {"model": ErrorResponse}, 502: {"model": ErrorResponse}}


@router.get("/start-quiz", response_model=StartQuizResponse, responses=_error_responses)
def start_quiz(service: QuizSessionService = Depends(get_quiz_service)) -> StartQuizResponse:
    started = service.start_quiz()
    return StartQuizResponse(question=started.question, session_id=started.session_id)


@router.post("/message", response_model=MessageResponse, responses=_error_responses)
async def post_message(
    req: MessageRequest, service: QuizSessionService = Depends(get_quiz_service)
) -> MessageResponse:
    reply = await service.submit_answer(req.session_id, req.text_message)
    logger.info("Assistant responded: %s chars", len(reply))
    return MessageResponse(text_message=reply)


app.include_router(router)
# Path used by the chat front end.
app.include_router(router, prefix="/AIAssistant", include_in_schema=False)


@app.get("/health")
def health():
    return {"status": "ok"}
