import random

import pytest

from quiz.question_bank import QuestionBank
from quiz.service import QuizSessionService
from quiz.session_store import SessionStore
from tests.stubs import FakeClock, StubAssistant


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def assistant():
    return StubAssistant()


@pytest.fixture
def make_service(clock, assistant):
    def _make(questions=("2+2=? → 4",), device_messaging=None, ttl_seconds=1800, **kwargs):
        return QuizSessionService(
            question_bank=QuestionBank(list(questions), rng=random.Random(7)),
            session_store=SessionStore(clock=clock),
            assistant=kwargs.pop("assistant", assistant),
            instruction="Grade the answer",
            device_messaging=device_messaging,
            ttl_seconds=ttl_seconds,
            **kwargs,
        )

    return _make
