import pytest
from unittest.mock import patch

from question_trainer.app import (
    SessionExitRequested, session_prompt, session_choice_prompt, run_quiz_session,
    cmd_exam, cmd_failed, cmd_reset, cmd_unseen, cmd_performance,
)
from question_trainer.engine import TrainerEngine
from question_trainer.selector import PoolMode


@pytest.fixture
def engine(tmp_db, bank_file, rng):
    e = TrainerEngine(db_path=tmp_db, bank_path=bank_file, rng=rng)
    e.load()
    return e


def test_session_exit_requested_is_exception():
    with pytest.raises(SessionExitRequested):
        raise SessionExitRequested()


def test_session_prompt_raises_on_q():
    with patch("question_trainer.app.Prompt.ask", return_value="q"):
        with pytest.raises(SessionExitRequested):
            session_prompt("test prompt")


def test_session_prompt_raises_on_menu():
    with patch("question_trainer.app.Prompt.ask", return_value="menu"):
        with pytest.raises(SessionExitRequested):
            session_prompt("test prompt")


def test_session_prompt_returns_normal_input():
    with patch("question_trainer.app.Prompt.ask", return_value="hello"):
        assert session_prompt("test prompt") == "hello"


def test_session_choice_prompt_is_zero_based():
    with patch("question_trainer.app.Prompt.ask", return_value="3"):
        assert session_choice_prompt("answer", 4) == 2


def test_run_quiz_session_exits_on_q(engine):
    """User answers the first question then types 'q' at the next prompt."""
    engine.start_run(PoolMode.CATEGORY, "X", 3)
    first = engine.run.questions[0]
    with patch("question_trainer.app.Prompt.ask", side_effect=["1", "", "q"]):
        with pytest.raises(SessionExitRequested):
            run_quiz_session(engine)
    assert engine.store.is_seen(first)
    assert engine.run.current_index == 1
    assert engine.run.score + len(engine.store.failed_questions()) == 1


def test_run_quiz_session_completes(engine):
    engine.start_run(PoolMode.CATEGORY, "Z", 2)
    with patch("question_trainer.app.Prompt.ask", side_effect=["1", "", "2", ""]):
        run_quiz_session(engine)
    assert engine.run_summary().total == 2


def test_cmd_exam_abandon_returns_to_start(engine):
    with patch("question_trainer.app.Prompt.ask", side_effect=["3", "q"]):
        cmd_exam(engine)
    assert engine.run is None


def test_cmd_exam_invalid_count(engine):
    with patch("question_trainer.app.Prompt.ask", return_value="500"):
        cmd_exam(engine)
    assert engine.run is None


def test_cmd_unseen_with_nothing_left(engine):
    for q in engine.build_pool(PoolMode.CATEGORY, "Z"):
        engine.store.record_seen(q)
    with patch("question_trainer.app.Prompt.ask", return_value="3"):
        cmd_unseen(engine)
    assert engine.run is None


def test_cmd_failed_with_empty_list(engine):
    with patch("question_trainer.app.Prompt.ask") as ask:
        cmd_failed(engine)
    ask.assert_not_called()


def test_cmd_reset_requires_confirmation(engine):
    q = engine.build_pool(PoolMode.ALL)[0]
    engine.store.record_answer(q, True)
    with patch("question_trainer.app.Confirm.ask", return_value=False):
        cmd_reset(engine)
    assert engine.store.is_mastered(q)
    with patch("question_trainer.app.Confirm.ask", return_value=True):
        cmd_reset(engine)
    assert not engine.store.is_mastered(q)


def test_cmd_performance_renders(engine):
    engine.store.record_answer(engine.build_pool(PoolMode.ALL)[0], True)
    cmd_performance(engine)
