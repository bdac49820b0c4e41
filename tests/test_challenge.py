import pytest

from catalog import load_missions
from challenge import (
    ChallengeSession, generate_questions, is_passing, performance_rating,
    PASS_THRESHOLD, TIME_LIMITS,
)
from models import DifficultyLevel


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


def _mission(mission_id):
    return next(m for m in load_missions() if m.id == mission_id)


def _answer_all(session, correct=True):
    for question in list(session.questions):
        idx = question.correct_answer_index
        if not correct:
            idx = (idx + 1) % len(question.answers)
        session.submit_answer(idx)


def test_pass_threshold():
    assert PASS_THRESHOLD == 0.6
    assert is_passing(0.6)
    assert not is_passing(0.59)


@pytest.mark.parametrize("fraction,label", [
    (1.0, "Excellent!"), (0.85, "Great Job!"), (0.7, "Good Work!"),
    (0.65, "Not Bad!"), (0.2, "Keep Learning!"),
])
def test_performance_rating(fraction, label):
    assert performance_rating(fraction) == label


def test_beginner_questions_are_worth_ten():
    questions = generate_questions(_mission("basic_budget"))
    assert len(questions) == 2
    assert all(q.points == 10 for q in questions)


def test_higher_tiers_add_a_twenty_point_question():
    questions = generate_questions(_mission("zero_based_budget"))
    assert [q.points for q in questions] == [15, 15, 20]


def test_question_view_hides_answer():
    question = generate_questions(_mission("emergency_fund"))[0]
    assert "correct_answer_index" not in question.to_dict()


def test_perfect_run_scores_one():
    session = ChallengeSession(_mission("compound_growth"), clock=FakeClock())
    _answer_all(session)
    assert session.is_completed
    assert session.score == session.max_score == 50
    assert session.score_fraction() == 1.0
    assert not session.is_failed()


def test_wrong_answers_fail_and_reset_allows_retry():
    session = ChallengeSession(_mission("debt_snowball"), clock=FakeClock())
    _answer_all(session, correct=False)
    assert session.is_completed
    assert session.is_failed()

    session.reset()
    assert session.attempt == 2
    assert session.score == 0
    assert not session.is_completed
    assert session.current_question() is session.questions[0]


def test_expired_timer_completes_session():
    clock = FakeClock()
    session = ChallengeSession(_mission("family_budget"), clock=clock)
    assert session.time_limit == TIME_LIMITS[DifficultyLevel.EXPERT] == 1200

    clock.now += 1200
    result = session.submit_answer(0)

    assert result["success"] is False
    assert result["completed"] is True
    assert session.is_completed
    assert session.score == 0


def test_answer_index_out_of_range_is_rejected():
    session = ChallengeSession(_mission("basic_budget"), clock=FakeClock())
    result = session.submit_answer(9)
    assert result["success"] is False
    assert session.current_index == 0


def test_no_answers_after_completion():
    session = ChallengeSession(_mission("insurance_basics"), clock=FakeClock())
    _answer_all(session)
    assert session.submit_answer(0)["success"] is False
