"""Load the static question bank from JSON or YAML."""
import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from question_trainer.identity import category_key
from question_trainer.models import Question

logger = logging.getLogger(__name__)

CONTENT_DIR = Path(__file__).parent / "content"
DEFAULT_BANK_PATH = os.environ.get(
    "QUESTION_TRAINER_BANK", str(CONTENT_DIR / "questions.json")
)


@dataclass
class QuestionBank:
    questions: list = field(default_factory=list)
    available: bool = False
    source: str = ""

    def categories(self) -> list[str]:
        if not self.available:
            return []
        return sorted({category_key(q) for q in self.questions})

    def __len__(self) -> int:
        return len(self.questions) if self.available else 0


def _coerce_index(value) -> int | None:
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    return None


def question_from_dict(raw: dict) -> Question:
    """Build a Question from a bank record, substituting safe defaults."""
    options = raw.get("options")
    if not isinstance(options, (list, tuple)):
        options = []
    reference = raw.get("reference")
    return Question(
        category=str(raw.get("category") or ""),
        text=str(raw.get("question") or ""),
        options=tuple(str(o) for o in options),
        correct_index=_coerce_index(raw.get("correctIndex")),
        reference=None if reference is None or reference == "" else str(reference),
    )


def questions_from_records(records: list) -> list[Question]:
    questions = []
    for i, raw in enumerate(records):
        if not isinstance(raw, dict):
            logger.warning("Skipping question record %d: not a mapping", i)
            continue
        questions.append(question_from_dict(raw))
    return questions


def read_bank_file(file_path: str):
    path = Path(file_path)
    suffix = path.suffix.lower()
    text = path.read_text(encoding="utf-8-sig")
    if suffix in (".yaml", ".yml"):
        return yaml.safe_load(text)
    return json.loads(text)


def load_bank(file_path: str = DEFAULT_BANK_PATH) -> QuestionBank:
    """Load the bank once. Any failure yields an unavailable, empty bank."""
    try:
        data = read_bank_file(file_path)
    except (OSError, ValueError, yaml.YAMLError) as e:
        logger.warning("Question bank %s unavailable: %s", file_path, e)
        return QuestionBank(source=str(file_path))
    if isinstance(data, dict):
        data = data.get("questions")
    if not isinstance(data, list):
        logger.warning("Question bank %s unavailable: expected a list of questions", file_path)
        return QuestionBank(source=str(file_path))
    questions = questions_from_records(data)
    logger.debug("Loaded %d questions from %s", len(questions), file_path)
    return QuestionBank(questions=questions, available=True, source=str(file_path))
