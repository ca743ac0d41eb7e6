"""Stable question identity.

A question's id is its source ``reference`` when the bank provides one.
Without a reference the id falls back to ``"{category}::{text}"``, so editing
the text of an unreferenced question yields a new identity: mastery and seen
state recorded under the old text no longer applies to it.
"""
from typing import Any

UNCATEGORISED_SENTINEL = "UNCAT"
MISSING_TEXT_SENTINEL = "NOQUESTION"


def _field(question: Any, attr: str, key: str):
    if isinstance(question, dict):
        return question.get(key)
    return getattr(question, attr, None)


def resolve_question_id(question: Any) -> str:
    """Return the stable id for a Question or a raw bank record."""
    reference = _field(question, "reference", "reference")
    if reference is not None and reference != "":
        return str(reference)
    category = _field(question, "category", "category")
    text = _field(question, "text", "question")
    category = str(category) if category else UNCATEGORISED_SENTINEL
    text = str(text) if text else MISSING_TEXT_SENTINEL
    return f"{category}::{text}"


UNCATEGORISED_KEY = "Uncategorised"


def category_key(question: Any) -> str:
    """Category under which a question's stats are stored."""
    category = _field(question, "category", "category")
    return str(category) if category else UNCATEGORISED_KEY
