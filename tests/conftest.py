import json
import random

import pytest

from question_trainer.bank import QuestionBank, questions_from_records
from question_trainer.stats import StatStore


@pytest.fixture
def tmp_db(tmp_path):
    """Provide a temporary SQLite database path for tests."""
    db_path = str(tmp_path / "test_trainer.db")
    return db_path


@pytest.fixture
def store(tmp_db):
    return StatStore(tmp_db)


@pytest.fixture
def rng():
    return random.Random(1234)


def make_records():
    records = []
    for cat, prefix, n in (("X", "X", 3), ("Y", "Y", 5), ("Z", "Z", 2)):
        for i in range(1, n + 1):
            records.append({
                "reference": f"{prefix}-{i}",
                "category": cat,
                "question": f"{cat} question {i}?",
                "options": ["right", "wrong 1", "wrong 2", "wrong 3"],
                "correctIndex": 0,
            })
    return records


@pytest.fixture
def bank():
    return QuestionBank(questions=questions_from_records(make_records()), available=True)


@pytest.fixture
def bank_file(tmp_path):
    path = tmp_path / "questions.json"
    path.write_text(json.dumps(make_records()))
    return str(path)
