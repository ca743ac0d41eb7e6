from question_trainer.bank import QuestionBank, questions_from_records
from question_trainer.dashboard import (
    get_category_rows, get_mastery_status, get_overall_summary, get_status_color, percent,
)
from question_trainer.models import Question


def test_percent():
    assert percent(0, 0) == 0
    assert percent(4, 5) == 80
    assert percent(1, 8) == 13
    assert percent(1, 3) == 33
    assert percent(2, 3) == 67


def test_mastery_status():
    assert get_mastery_status(100) == "pass"
    assert get_mastery_status(80) == "pass"
    assert get_mastery_status(79) == "borderline"
    assert get_mastery_status(60) == "borderline"
    assert get_mastery_status(59) == "fail"


def test_status_color():
    assert get_status_color("pass") == "green"
    assert get_status_color("borderline") == "yellow"
    assert get_status_color("fail") == "red"


def test_rows_with_no_data(bank, store):
    rows = get_category_rows(bank, store)
    assert [(r.category, r.mastered, r.total, r.percent) for r in rows] == [
        ("X", 0, 3, 0), ("Y", 0, 5, 0), ("Z", 0, 2, 0),
    ]


def test_four_of_five_mastered(bank, store):
    for q in [q for q in bank.questions if q.category == "Y"][:4]:
        store.record_answer(q, True)
    row = next(r for r in get_category_rows(bank, store) if r.category == "Y")
    assert (row.mastered, row.total, row.percent) == (4, 5, 80)
    assert row.status == "pass"
    assert row.complete is False


def test_wrong_answers_do_not_count(bank, store):
    store.record_answer(bank.questions[0], False)
    row = next(r for r in get_category_rows(bank, store) if r.category == "X")
    assert row.mastered == 0


def test_sort_complete_first_then_percent_then_name(bank, store):
    for q in bank.questions:
        if q.category == "Z":
            store.record_answer(q, True)
    store.record_answer(bank.questions[0], True)  # X: 1/3
    rows = get_category_rows(bank, store)
    assert [r.category for r in rows] == ["Z", "X", "Y"]
    assert rows[0].complete


def test_sort_ties_by_name():
    bank = QuestionBank(questions=questions_from_records([
        {"category": "beta", "question": "1"},
        {"category": "Alpha", "question": "2"},
        {"category": "gamma", "question": "3"},
    ]), available=True)

    class Empty:
        def mastered_counts(self):
            return {}

    assert [r.category for r in get_category_rows(bank, Empty())] == ["Alpha", "beta", "gamma"]


def test_stale_mastery_is_clamped(bank, store):
    for i in range(5):
        store.record_answer(Question(category="Z", text=f"Removed {i}", reference=f"OLD-{i}"), True)
    row = next(r for r in get_category_rows(bank, store) if r.category == "Z")
    assert row.mastered == 2
    assert row.percent == 100
    assert row.complete


def test_unavailable_bank_has_no_rows(store):
    assert get_category_rows(QuestionBank(), store) == []
    overall = get_overall_summary(QuestionBank(), store)
    assert (overall.mastered, overall.total, overall.percent) == (0, 0, 0)


def test_overall_summary(bank, store):
    for q in bank.questions[:5]:
        store.record_answer(q, True)
    overall = get_overall_summary(bank, store)
    assert (overall.mastered, overall.total, overall.percent) == (5, 10, 50)
    assert overall.status == "fail"
    assert len(overall.rows) == 3


def test_uncategorised_questions_are_grouped(store):
    bank = QuestionBank(questions=questions_from_records([
        {"question": "Loose", "options": ["a"], "correctIndex": 0},
    ]), available=True)
    store.record_answer(bank.questions[0], True)
    rows = get_category_rows(bank, store)
    assert [(r.category, r.mastered, r.total) for r in rows] == [("Uncategorised", 1, 1)]
