"""Durable mastery, seen and failed-question state.

Each slot is a JSON blob in its own row. Every mutation re-reads the slot
immediately before merging, so a second process sharing the database only
loses an update when two writes interleave; the last writer wins.
"""
import json
import logging
from contextlib import closing
from datetime import datetime

from question_trainer.bank import question_from_dict
from question_trainer.db import init_db, get_connection
from question_trainer.identity import resolve_question_id, category_key
from question_trainer.models import Question

logger = logging.getLogger(__name__)

MASTERY_SLOT = "performanceStats"
SEEN_SLOT = "seenStats"
FAILED_SLOT = "failedQuestions"


class SlotRepository:
    """Load/save access to one named slot."""

    def __init__(self, db_path: str, key: str, default_type: type):
        self.db_path = db_path
        self.key = key
        self.default_type = default_type

    def load(self):
        """Fresh read of the slot. Missing or corrupt data gives an empty default."""
        with closing(get_connection(self.db_path)) as conn:
            row = conn.execute(
                "SELECT value FROM stat_slots WHERE key = ?", (self.key,)
            ).fetchone()
        if row is None or row["value"] is None:
            return self.default_type()
        try:
            value = json.loads(row["value"])
        except ValueError:
            logger.debug("Slot %s is corrupt, using empty default", self.key)
            return self.default_type()
        if not isinstance(value, self.default_type):
            logger.debug("Slot %s has unexpected shape, using empty default", self.key)
            return self.default_type()
        return value

    def save(self, value) -> None:
        with closing(get_connection(self.db_path)) as conn:
            conn.execute(
                """INSERT INTO stat_slots (key, value, updated_at) VALUES (?, ?, ?)
                ON CONFLICT(key) DO UPDATE SET value = excluded.value, updated_at = excluded.updated_at""",
                (self.key, json.dumps(value), datetime.now().isoformat()),
            )
            conn.commit()

    def clear(self) -> None:
        with closing(get_connection(self.db_path)) as conn:
            conn.execute("DELETE FROM stat_slots WHERE key = ?", (self.key,))
            conn.commit()


def _category_map(stats: dict, key: str) -> dict:
    entries = stats.get(key)
    if not isinstance(entries, dict):
        entries = {}
        stats[key] = entries
    return entries


class StatStore:
    """Mastery, seen and failed slots behind one interface."""

    def __init__(self, db_path: str):
        init_db(db_path)
        self.db_path = db_path
        self.mastery = SlotRepository(db_path, MASTERY_SLOT, dict)
        self.seen = SlotRepository(db_path, SEEN_SLOT, dict)
        self.failed = SlotRepository(db_path, FAILED_SLOT, list)

    def record_seen(self, question: Question) -> bool:
        """Mark a question as displayed. Returns True when the slot was written."""
        seen = self.seen.load()
        entries = _category_map(seen, category_key(question))
        qid = resolve_question_id(question)
        if entries.get(qid) is True:
            return False
        entries[qid] = True
        self.seen.save(seen)
        return True

    def record_answer(self, question: Question, is_correct: bool) -> None:
        mastery = self.mastery.load()
        failed = self.failed.load()
        entries = _category_map(mastery, category_key(question))
        qid = resolve_question_id(question)

        record = entries.get(qid)
        if not isinstance(record, dict):
            record = {"correct": False}
            entries[qid] = record

        if is_correct:
            # Once correct, stays correct
            record["correct"] = True
            failed = [fq for fq in failed if resolve_question_id(fq) != qid]
        elif not any(resolve_question_id(fq) == qid for fq in failed):
            failed.append(question.to_dict())

        self.mastery.save(mastery)
        self.failed.save(failed)
        logger.debug("Recorded %s answer for %s", "correct" if is_correct else "wrong", qid)

    def reset_mastery(self) -> None:
        """Clear mastery and seen state. The failed-question list is kept."""
        self.mastery.clear()
        self.seen.clear()

    def is_seen(self, question: Question, seen: dict | None = None) -> bool:
        if seen is None:
            seen = self.seen.load()
        entries = seen.get(category_key(question))
        return isinstance(entries, dict) and entries.get(resolve_question_id(question)) is True

    def is_mastered(self, question: Question) -> bool:
        entries = self.mastery.load().get(category_key(question))
        if not isinstance(entries, dict):
            return False
        record = entries.get(resolve_question_id(question))
        return isinstance(record, dict) and record.get("correct") is True

    def mastered_counts(self) -> dict[str, int]:
        """Number of correct mastery records per category key."""
        counts = {}
        for cat, entries in self.mastery.load().items():
            if not isinstance(entries, dict):
                continue
            counts[cat] = sum(
                1 for v in entries.values() if isinstance(v, dict) and v.get("correct")
            )
        return counts

    def failed_questions(self) -> list[Question]:
        questions = []
        ids = set()
        for raw in self.failed.load():
            if not isinstance(raw, dict):
                continue
            q = question_from_dict(raw)
            qid = resolve_question_id(q)
            if qid in ids:
                continue
            ids.add(qid)
            questions.append(q)
        return questions
