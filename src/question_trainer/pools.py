"""Candidate question pools for each quiz mode."""
from question_trainer.bank import QuestionBank
from question_trainer.identity import category_key
from question_trainer.stats import StatStore


def get_all_pool(bank: QuestionBank) -> list:
    if not bank.available:
        return []
    return list(bank.questions)


def get_category_pool(bank: QuestionBank, category: str) -> list:
    if not bank.available:
        return []
    return [q for q in bank.questions if category_key(q) == category]


def get_unseen_pool_for_category(bank: QuestionBank, store: StatStore, category: str) -> list:
    """Questions in a category never displayed in any session."""
    pool = get_category_pool(bank, category)
    if not pool:
        return []
    # Seen state can change from another session, so read it fresh
    seen = store.seen.load()
    return [q for q in pool if not store.is_seen(q, seen)]


def get_failed_pool(store: StatStore) -> list:
    return store.failed_questions()


def count_unseen(bank: QuestionBank, store: StatStore, category: str) -> int:
    return len(get_unseen_pool_for_category(bank, store, category))
