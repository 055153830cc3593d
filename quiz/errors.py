from __future__ import annotations

from typing import Optional


class QuizError(Exception):
    """Base class for every error the quiz relay reports to a caller.

    ``title`` is the stable error kind sent as ``errorTitle``; ``trace`` names
    the operation that raised it.
    """

    title: str = "QuizError"
    status_code: int = 500
    default_message: str = "The request could not be completed."

    def __init__(self, message: Optional[str] = None, trace: Optional[str] = None) -> None:
        self.message = message or self.default_message
        self.trace = trace
        super().__init__(self.message)


class RequestValidationFailed(QuizError):
    title = "ValidationError"
    status_code = 400
    default_message = "The request is invalid."

    def __init__(self, field: str, message: Optional[str] = None, trace: Optional[str] = None) -> None:
        self.field = field
        super().__init__(message, trace)


class AtLeastOneNullParameter(RequestValidationFailed):
    title = "AtLeastOneNullParameter"
    default_message = "Some parameters are null/missing."


class MissingSessionId(RequestValidationFailed):
    title = "MissingSessionId"
    default_message = "The session id is missing. Start a quiz first."


class SessionError(QuizError):
    status_code = 400


class NoActiveQuestion(SessionError):
    title = "NoActiveQuestion"
    default_message = "There is no active question for this session. Start a new quiz."


class ConfigurationError(QuizError):
    status_code = 400


class EmptyBankError(ConfigurationError):
    title = "EmptyBankError"
    default_message = "No quiz questions are configured."


class UpstreamError(QuizError):
    status_code = 502


class AssistantUnavailable(UpstreamError):
    title = "AssistantUnavailable"
    default_message = "The assistant could not answer right now. Please try again."


class DeliveryWarning(QuizError):
    """Raised by device messaging; always absorbed, never sent to a client."""

    title = "DeliveryWarning"
    default_message = "The reply could not be delivered to the device."
