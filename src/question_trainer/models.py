"""Data classes for the trainer domain model."""
from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class Question:
    category: str
    text: str
    options: tuple = ()
    correct_index: Optional[int] = None
    reference: Optional[str] = None

    def to_dict(self) -> dict:
        """Serialize back to the question-bank record shape."""
        data = {
            "category": self.category,
            "question": self.text,
            "options": list(self.options),
            "correctIndex": self.correct_index,
        }
        if self.reference is not None:
            data["reference"] = self.reference
        return data


@dataclass(frozen=True)
class OptionChoice:
    text: str
    is_correct: bool


@dataclass(frozen=True)
class DisplayedQuestion:
    """What the presentation layer sees: no correctness flags."""
    question: Question
    options: tuple
    position: int
    total: int


@dataclass(frozen=True)
class AnswerResult:
    is_correct: bool
    selected_index: int
    correct_option: Optional[int] = None


@dataclass(frozen=True)
class RunSummary:
    score: int
    total: int
    percent: int
    tier: str


@dataclass
class CategoryRow:
    category: str
    mastered: int
    total: int
    percent: int = 0
    complete: bool = False
    status: str = "fail"


@dataclass
class OverallSummary:
    mastered: int = 0
    total: int = 0
    percent: int = 0
    status: str = "fail"
    rows: list = field(default_factory=list)
