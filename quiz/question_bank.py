from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from quiz.errors import EmptyBankError


@dataclass(frozen=True)
class QuestionEntry:
    question_text: str
    # Answer key or other trailing data; kept as-is and not used for grading.
    metadata: Optional[str] = None

    @classmethod
    def parse(cls, raw: str, delimiter: str) -> "QuestionEntry":
        if delimiter and delimiter in raw:
            text, rest = raw.split(delimiter, 1)
            return cls(question_text=text.strip(), metadata=rest.strip())
        return cls(question_text=raw.strip())


class QuestionBank:
    """Configured quiz questions with uniform random selection."""

    def __init__(
        self,
        raw_questions: Iterable[str],
        delimiter: str = "→",
        rng: Optional[random.Random] = None,
    ) -> None:
        entries = (QuestionEntry.parse(raw, delimiter) for raw in raw_questions)
        self._entries: Tuple[QuestionEntry, ...] = tuple(e for e in entries if e.question_text)
        self._rng = rng or random.Random()

    @property
    def entries(self) -> List[QuestionEntry]:
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def pick_random(self) -> str:
        if not self._entries:
            raise EmptyBankError(trace="QuestionBank.pick_random")
        return self._rng.choice(self._entries).question_text
