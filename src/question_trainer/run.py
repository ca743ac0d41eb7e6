"""Quiz run state machine.

A run moves NOT_STARTED -> IN_PROGRESS -> FINISHED. Displaying a question
marks it seen; submitting an answer records mastery. The two are separate
calls so a question abandoned after display still counts as seen.
"""
import logging
import random
from enum import Enum

from question_trainer.dashboard import percent
from question_trainer.models import AnswerResult, DisplayedQuestion, OptionChoice, RunSummary
from question_trainer.selector import shuffle
from question_trainer.stats import StatStore

logger = logging.getLogger(__name__)

TIER_FEEDBACK = {
    "perfect": ("Perfect, 100%!", "Category mastery just got easier. Keep going."),
    "pass": ("Well done, you passed!", "Strong result. Push for 100% next run."),
    "near": ("Almost there", "Close to 75%. Retry failed and aim for full mastery."),
    "fail": ("Let's go again", "Practice weak areas and try again."),
}


class RunState(Enum):
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    FINISHED = "finished"


def get_run_tier(pct: int) -> str:
    if pct == 100:
        return "perfect"
    elif pct >= 75:
        return "pass"
    elif pct >= 60:
        return "near"
    return "fail"


def build_option_order(question, rng: random.Random | None = None) -> list[OptionChoice]:
    """Pair each option with its correctness and shuffle; correctness travels with the text."""
    choices = [
        OptionChoice(text=text, is_correct=idx == question.correct_index)
        for idx, text in enumerate(question.options)
    ]
    return shuffle(choices, rng)


class QuizRun:
    def __init__(self, store: StatStore, rng: random.Random | None = None):
        self.store = store
        self.rng = rng or random.Random()
        self.state = RunState.NOT_STARTED
        self.questions: list = []
        self.current_index = 0
        self.score = 0
        self._option_order: list[OptionChoice] | None = None
        self._displayed: DisplayedQuestion | None = None
        self._answered = False
        self._summary: RunSummary | None = None

    @property
    def total(self) -> int:
        return len(self.questions)

    def start(self, questions) -> bool:
        if self.state is not RunState.NOT_STARTED:
            logger.debug("Ignoring start: run is %s", self.state.value)
            return False
        self.questions = list(questions)
        self.current_index = 0
        self.score = 0
        self.state = RunState.IN_PROGRESS
        if not self.questions:
            self._finish()
        return True

    def display_current(self) -> DisplayedQuestion | None:
        """The question at the current position, or None once the run is over."""
        if self.state is not RunState.IN_PROGRESS:
            return None
        if self.current_index >= self.total:
            self._finish()
            return None
        if self._displayed is not None:
            return self._displayed

        question = self.questions[self.current_index]
        self.store.record_seen(question)
        self._option_order = build_option_order(question, self.rng)
        self._answered = False
        self._displayed = DisplayedQuestion(
            question=question,
            options=tuple(choice.text for choice in self._option_order),
            position=self.current_index + 1,
            total=self.total,
        )
        return self._displayed

    def submit_answer(self, selected_index) -> AnswerResult | None:
        if self.state is not RunState.IN_PROGRESS or self._displayed is None:
            logger.debug("Ignoring answer: no question displayed")
            return None
        if self._answered:
            logger.debug("Ignoring answer: question already answered")
            return None
        if (
            not isinstance(selected_index, int)
            or isinstance(selected_index, bool)
            or not 0 <= selected_index < len(self._option_order)
        ):
            logger.debug("Ignoring answer: invalid option %r", selected_index)
            return None

        is_correct = self._option_order[selected_index].is_correct
        self.store.record_answer(self._displayed.question, is_correct)
        self._answered = True
        if is_correct:
            self.score += 1
        correct_option = next(
            (i for i, choice in enumerate(self._option_order) if choice.is_correct), None
        )
        return AnswerResult(
            is_correct=is_correct, selected_index=selected_index, correct_option=correct_option,
        )

    @property
    def answered(self) -> bool:
        return self._answered

    def advance(self) -> RunState:
        if self.state is not RunState.IN_PROGRESS:
            return self.state
        self.current_index += 1
        self._displayed = None
        self._option_order = None
        self._answered = False
        if self.current_index >= self.total:
            self._finish()
        return self.state

    def progress(self) -> tuple[int, int]:
        return min(self.current_index + 1, self.total), self.total

    def summary(self) -> RunSummary | None:
        return self._summary

    def _finish(self) -> None:
        self.state = RunState.FINISHED
        self._displayed = None
        self._option_order = None
        pct = percent(self.score, self.total)
        self._summary = RunSummary(
            score=self.score, total=self.total, percent=pct, tier=get_run_tier(pct),
        )
        logger.debug("Run finished: %d/%d", self.score, self.total)
