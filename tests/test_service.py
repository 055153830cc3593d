import asyncio
import json

import pytest

from quiz.errors import (
    AssistantUnavailable,
    AtLeastOneNullParameter,
    EmptyBankError,
    MissingSessionId,
    NoActiveQuestion,
)
from tests.stubs import StubAssistant, StubDeviceMessaging


def test_start_quiz_returns_question_and_live_session(make_service):
    service = make_service(id_factory=lambda: "session-1")
    started = service.start_quiz()
    assert started.question == "2+2=?"
    assert started.session_id == "session-1"
    assert service.session_store.get("session-1") == "2+2=?"


def test_start_quiz_mints_unique_ids(make_service):
    service = make_service()
    ids = {service.start_quiz().session_id for _ in range(50)}
    assert len(ids) == 50


def test_start_quiz_on_empty_bank_fails(make_service):
    service = make_service(questions=())
    with pytest.raises(EmptyBankError):
        service.start_quiz()
    assert len(service.session_store) == 0


def test_submit_answer_relays_prompt_and_returns_reply(make_service, assistant):
    service = make_service()
    started = service.start_quiz()

    reply = asyncio.run(service.submit_answer(started.session_id, "4"))

    assert reply == "Correct!"
    assert len(assistant.prompts) == 1
    assert "2+2=?" in assistant.prompts[0]
    assert "4" in assistant.prompts[0]
    assert assistant.prompts[0].startswith("Grade the answer")


def test_session_allows_repeat_answers(make_service, assistant):
    service = make_service()
    session_id = service.start_quiz().session_id

    asyncio.run(service.submit_answer(session_id, "5"))
    asyncio.run(service.submit_answer(session_id, "4"))

    assert len(assistant.prompts) == 2


def test_unknown_session_is_no_active_question(make_service, assistant):
    service = make_service()
    with pytest.raises(NoActiveQuestion):
        asyncio.run(service.submit_answer("never-issued", "4"))
    assert assistant.prompts == []


def test_expired_session_is_no_active_question(make_service, clock, assistant):
    service = make_service(ttl_seconds=1800)
    session_id = service.start_quiz().session_id
    clock.advance(1800)
    with pytest.raises(NoActiveQuestion):
        asyncio.run(service.submit_answer(session_id, "4"))
    assert assistant.prompts == []


def test_session_still_live_just_before_ttl(make_service, clock):
    service = make_service(ttl_seconds=1800)
    session_id = service.start_quiz().session_id
    clock.advance(1799)
    assert asyncio.run(service.submit_answer(session_id, "4")) == "Correct!"


@pytest.mark.parametrize(
    "session_id, answer, error",
    [
        ("abc", None, AtLeastOneNullParameter),
        (None, "4", MissingSessionId),
        (None, None, AtLeastOneNullParameter),
    ],
)
def test_validation_runs_before_assistant(make_service, assistant, session_id, answer, error):
    service = make_service()
    with pytest.raises(error):
        asyncio.run(service.submit_answer(session_id, answer))
    assert assistant.prompts == []


def test_assistant_failure_is_surfaced(make_service):
    failing = StubAssistant(fail=True)
    service = make_service(assistant=failing)
    session_id = service.start_quiz().session_id
    with pytest.raises(AssistantUnavailable) as info:
        asyncio.run(service.submit_answer(session_id, "4"))
    assert isinstance(info.value.__cause__, ConnectionError)
    assert len(failing.prompts) == 1


def test_reply_is_published_to_device(make_service):
    device = StubDeviceMessaging()
    service = make_service(device_messaging=device)
    session_id = service.start_quiz().session_id

    asyncio.run(service.submit_answer(session_id, "4"))

    assert len(device.sent) == 1
    device_id, payload = device.sent[0]
    assert device_id == "quiz-display-01"
    assert json.loads(payload.decode("utf-8")) == {"textMessage": "Correct!"}


def test_device_failure_does_not_fail_answer(make_service, caplog):
    service = make_service(device_messaging=StubDeviceMessaging(fail=True))
    session_id = service.start_quiz().session_id

    with caplog.at_level("WARNING", logger="quizrelay.service"):
        reply = asyncio.run(service.submit_answer(session_id, "4"))

    assert reply == "Correct!"
    assert "Device delivery" in caplog.text


def test_no_publish_when_assistant_fails(make_service):
    device = StubDeviceMessaging()
    service = make_service(assistant=StubAssistant(fail=True), device_messaging=device)
    session_id = service.start_quiz().session_id
    with pytest.raises(AssistantUnavailable):
        asyncio.run(service.submit_answer(session_id, "4"))
    assert device.sent == []
