"""Trainer engine: the bank, the stat store and the current run in one place."""
import logging
import random

from question_trainer.bank import DEFAULT_BANK_PATH, QuestionBank, load_bank
from question_trainer.dashboard import get_category_rows, get_overall_summary
from question_trainer.db import DEFAULT_DB_PATH
from question_trainer.models import AnswerResult, DisplayedQuestion, RunSummary
from question_trainer.pools import (
    count_unseen, get_all_pool, get_category_pool, get_failed_pool,
    get_unseen_pool_for_category,
)
from question_trainer.run import QuizRun, RunState
from question_trainer.selector import ALL, PoolMode, select
from question_trainer.stats import StatStore

logger = logging.getLogger(__name__)


class TrainerEngine:
    def __init__(self, db_path: str = DEFAULT_DB_PATH, bank_path: str = DEFAULT_BANK_PATH,
                 rng: random.Random | None = None):
        self.bank_path = bank_path
        self.bank = QuestionBank()
        self.store = StatStore(db_path)
        self.rng = rng or random.Random()
        self.run: QuizRun | None = None

    def load(self) -> bool:
        """Load the question bank. Returns whether it is available."""
        self.bank = load_bank(self.bank_path)
        return self.bank.available

    @property
    def available(self) -> bool:
        return self.bank.available

    def categories(self) -> list[str]:
        return self.bank.categories()

    def category_size(self, category: str) -> int:
        return len(get_category_pool(self.bank, category))

    def count_unseen(self, category: str) -> int:
        return count_unseen(self.bank, self.store, category)

    def failed_count(self) -> int:
        return len(get_failed_pool(self.store))

    def build_pool(self, mode: PoolMode, category: str | None = None) -> list:
        if mode is PoolMode.ALL:
            return get_all_pool(self.bank)
        if mode is PoolMode.CATEGORY:
            return get_category_pool(self.bank, category) if category else []
        if mode is PoolMode.UNSEEN:
            return get_unseen_pool_for_category(self.bank, self.store, category) if category else []
        return get_failed_pool(self.store)

    def start_run(self, mode: PoolMode, category: str | None = None, count=None) -> QuizRun | None:
        """Build the pool for ``mode`` and start a run over a random selection of it.

        Returns None, leaving any current run untouched, when the request is
        invalid: bank not loaded, no category for a category mode, or a size
        outside ``1..len(pool)``.
        """
        if mode is not PoolMode.FAILED and not self.bank.available:
            logger.debug("Rejecting %s run: question bank unavailable", mode.value)
            return None
        if mode.needs_category and not category:
            logger.debug("Rejecting %s run: no category selected", mode.value)
            return None

        if not mode.negotiates_size or count is None:
            count = ALL
        if count != ALL and (isinstance(count, bool) or not isinstance(count, int)):
            logger.debug("Rejecting %s run: invalid size %r", mode.value, count)
            return None

        pool = self.build_pool(mode, category)
        if pool and count != ALL:
            if not 1 <= count <= len(pool):
                logger.debug("Rejecting %s run: invalid size %r", mode.value, count)
                return None

        run = QuizRun(self.store, self.rng)
        run.start(select(pool, count, self.rng))
        self.run = run
        logger.debug("Started %s run with %d questions", mode.value, run.total)
        return run

    def display_current(self) -> DisplayedQuestion | None:
        return self.run.display_current() if self.run else None

    def submit_answer(self, selected_index) -> AnswerResult | None:
        return self.run.submit_answer(selected_index) if self.run else None

    def advance(self) -> RunState | None:
        return self.run.advance() if self.run else None

    def run_summary(self) -> RunSummary | None:
        return self.run.summary() if self.run else None

    def return_to_start(self) -> None:
        """Abandon the current run. Seen and answered state already recorded stays."""
        self.run = None

    def reset_mastery(self) -> None:
        self.store.reset_mastery()

    def category_rows(self) -> list:
        return get_category_rows(self.bank, self.store)

    def overall_summary(self):
        return get_overall_summary(self.bank, self.store)
