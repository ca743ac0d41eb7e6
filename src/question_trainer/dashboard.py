"""Mastery aggregation per category and overall."""
import math

from question_trainer.bank import QuestionBank
from question_trainer.identity import category_key
from question_trainer.models import CategoryRow, OverallSummary
from question_trainer.stats import StatStore


def percent(part: int, whole: int) -> int:
    """Whole-number percentage, halves rounded up. 0 when whole is 0."""
    if not whole:
        return 0
    return math.floor(part * 100 / whole + 0.5)


def get_mastery_status(pct: float) -> str:
    if pct >= 80:
        return "pass"
    elif pct >= 60:
        return "borderline"
    return "fail"


def get_status_color(status: str) -> str:
    return {"pass": "green", "borderline": "yellow"}.get(status, "red")


def _sort_key(row: CategoryRow):
    return (not row.complete, -row.percent, row.category.casefold(), row.category)


def get_category_rows(bank: QuestionBank, store: StatStore) -> list[CategoryRow]:
    """Rows sorted completed first, then by mastery descending, then by name."""
    if not bank.available or not bank.questions:
        return []
    totals = {}
    for q in bank.questions:
        key = category_key(q)
        totals[key] = totals.get(key, 0) + 1
    mastered_raw = store.mastered_counts()

    rows = []
    for cat, total in totals.items():
        # Stale records for questions no longer in the bank must not push past 100%
        mastered = min(mastered_raw.get(cat, 0), total)
        pct = percent(mastered, total)
        rows.append(CategoryRow(
            category=cat,
            mastered=mastered,
            total=total,
            percent=pct,
            complete=total > 0 and mastered == total,
            status=get_mastery_status(pct),
        ))
    rows.sort(key=_sort_key)
    return rows


def get_overall_summary(bank: QuestionBank, store: StatStore) -> OverallSummary:
    rows = get_category_rows(bank, store)
    total = sum(r.total for r in rows)
    mastered = sum(r.mastered for r in rows)
    pct = percent(mastered, total)
    return OverallSummary(
        mastered=mastered, total=total, percent=pct,
        status=get_mastery_status(pct), rows=rows,
    )
