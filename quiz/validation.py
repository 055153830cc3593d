from __future__ import annotations

from typing import Any

from quiz.errors import AtLeastOneNullParameter, MissingSessionId


def validate_message_request(request: Any) -> None:
    """Reject an answer submission with missing fields.

    ``request`` is anything exposing ``text_message`` and ``session_id``.
    A missing text is reported first; a blank session id counts as missing.
    """
    if request is None or getattr(request, "text_message", None) is None:
        raise AtLeastOneNullParameter(field="textMessage", trace="validate_message_request")

    session_id = getattr(request, "session_id", None)
    if session_id is None or not str(session_id).strip():
        raise MissingSessionId(field="sessionId", trace="validate_message_request")
