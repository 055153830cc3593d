from __future__ import annotations

from langchain_core.prompts import PromptTemplate


QUIZ_PROMPT = PromptTemplate.from_template(
    "{instruction}\n\nQuestion: {question}\nAnswer: {answer}"
)


def compose_prompt(instruction: str, question: str, answer: str) -> str:
    return QUIZ_PROMPT.format(instruction=instruction, question=question, answer=answer)
