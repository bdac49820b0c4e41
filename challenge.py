"""
Galaxy Finance Quest - Mission Challenge Runner
Timed quiz sessions that turn answers into a score fraction in [0, 1].

The runner owns the pass/fail decision: a fraction below PASS_THRESHOLD is a
failed attempt that can be retried and is never handed to settlement.
"""

import time
import logging
from dataclasses import dataclass

from models import Mission, DifficultyLevel, ChallengeType

logger = logging.getLogger("galaxy.challenge")

PASS_THRESHOLD = 0.6

TIME_LIMITS = {
    DifficultyLevel.BEGINNER: 300,
    DifficultyLevel.INTERMEDIATE: 600,
    DifficultyLevel.ADVANCED: 900,
    DifficultyLevel.EXPERT: 1200,
}

# (lower bound, label), checked top down
PERFORMANCE_BANDS = (
    (0.9, "Excellent!"),
    (0.8, "Great Job!"),
    (0.7, "Good Work!"),
    (0.6, "Not Bad!"),
)
FAILED_RATING = "Keep Learning!"


def is_passing(score_fraction: float) -> bool:
    return score_fraction >= PASS_THRESHOLD


def performance_rating(score_fraction: float) -> str:
    for lower, label in PERFORMANCE_BANDS:
        if score_fraction >= lower:
            return label
    return FAILED_RATING


# ─────────────────────────────────────────────────────
# QUESTIONS
# ─────────────────────────────────────────────────────

@dataclass
class QuizQuestion:
    question: str
    answers: list
    correct_answer_index: int
    explanation: str
    category: ChallengeType
    difficulty: DifficultyLevel
    points: int

    def is_correct(self, index: int) -> bool:
        return index == self.correct_answer_index

    def to_dict(self) -> dict:
        """Client view. The correct index is withheld."""
        return {"question": self.question, "answers": list(self.answers),
                "points": self.points}


# category -> list of (question, answers, correct index, explanation)
QUESTION_BANK = {
    ChallengeType.BUDGETING: [
        ("What percentage of income should typically be allocated to needs in a balanced budget?",
         ["30%", "50%", "70%", "90%"], 1,
         "The 50/30/20 rule suggests 50% for needs, 30% for wants, and 20% for "
         "savings and debt repayment."),
        ("Which expense category should be prioritized first when creating a budget?",
         ["Entertainment", "Essential needs", "Luxury items", "Hobbies"], 1,
         "Essential needs like housing, food, and utilities should always be "
         "prioritized first in any budget."),
    ],
    ChallengeType.INVESTING: [
        ("What is compound interest?",
         ["Interest on the principal only", "Interest on principal and accumulated interest",
          "A type of loan", "A banking fee"], 1,
         "Compound interest is earned on both the original principal and the "
         "accumulated interest from previous periods."),
        ("Which investment strategy reduces risk through variety?",
         ["Concentration", "Diversification", "Speculation", "Day trading"], 1,
         "Diversification spreads investments across different assets to reduce "
         "overall risk."),
    ],
    ChallengeType.SAVING: [
        ("How many months of expenses should an emergency fund cover?",
         ["1-2 months", "3-6 months", "12 months", "24 months"], 1,
         "Financial experts recommend saving 3-6 months of living expenses for "
         "emergencies."),
    ],
    ChallengeType.DEBT_MANAGEMENT: [
        ("Which debt repayment strategy focuses on highest interest rates first?",
         ["Debt snowball", "Debt avalanche", "Debt consolidation", "Minimum payments"], 1,
         "The debt avalanche method prioritizes paying off debts with the highest "
         "interest rates first to minimize total interest paid."),
    ],
    ChallengeType.RISK_MANAGEMENT: [
        ("What is the relationship between risk and potential return in investments?",
         ["No relationship", "Higher risk, lower return",
          "Higher risk, higher potential return", "Lower risk, higher return"], 2,
         "Generally, investments with higher risk offer the potential for higher "
         "returns, but also greater potential for losses."),
    ],
    ChallengeType.EMERGENCY_PLANNING: [
        ("What should be the first step in emergency financial planning?",
         ["Invest in stocks", "Build an emergency fund", "Buy insurance",
          "Pay off all debt"], 1,
         "Building an emergency fund should be the foundation of any emergency "
         "financial plan."),
    ],
}

# Extra 20-point questions above the beginner tier.
ADVANCED_QUESTIONS = {
    ChallengeType.BUDGETING: [
        ("What is zero-based budgeting?",
         ["Starting with zero income", "Allocating every dollar of income",
          "Having zero expenses", "Saving zero money"], 1,
         "Zero-based budgeting means every dollar of income is allocated to specific "
         "categories, leaving zero unassigned."),
    ],
    ChallengeType.INVESTING: [
        ("What does P/E ratio measure?",
         ["Price to Earnings", "Profit to Expenses", "Principal to Equity",
          "Performance to Efficiency"], 0,
         "P/E ratio (Price-to-Earnings) compares a company's stock price to its "
         "earnings per share."),
    ],
}


def generate_questions(mission: Mission) -> list:
    """Build the question list for a mission's category and tier."""
    difficulty = mission.difficulty
    category = mission.challenge_type
    base_points = 10 if difficulty == DifficultyLevel.BEGINNER else 15

    questions = [
        QuizQuestion(q, answers, correct, explanation, category, difficulty, base_points)
        for q, answers, correct, explanation in QUESTION_BANK.get(category, [])
    ]
    if difficulty != DifficultyLevel.BEGINNER:
        questions.extend(
            QuizQuestion(q, answers, correct, explanation, category, difficulty, 20)
            for q, answers, correct, explanation in ADVANCED_QUESTIONS.get(category, [])
        )

    if not questions:
        questions = [QuizQuestion(
            question=f"This is a sample question for {mission.title}",
            answers=["Option A", "Option B", "Option C", "Option D"],
            correct_answer_index=0,
            explanation="This is a sample explanation.",
            category=category, difficulty=difficulty, points=10,
        )]
    return questions


# ─────────────────────────────────────────────────────
# SESSION
# ─────────────────────────────────────────────────────

class ChallengeSession:
    """
    One timed attempt at a mission quiz. Answers advance through the
    questions; the last answer or an expired clock completes the session.
    """

    def __init__(self, mission: Mission, clock=time.monotonic):
        self.mission = mission
        self.questions = generate_questions(mission)
        self.time_limit = TIME_LIMITS[mission.difficulty]
        self._clock = clock
        self.attempt = 0
        self.reset()

    def reset(self):
        """Start (or restart) the attempt from the first question."""
        self.current_index = 0
        self.score = 0
        self.answers = []
        self.is_completed = False
        self.started_at = self._clock()
        self.attempt += 1

    @property
    def total_questions(self) -> int:
        return len(self.questions)

    @property
    def max_score(self) -> int:
        return sum(q.points for q in self.questions)

    def time_remaining(self) -> float:
        return max(0.0, self.time_limit - (self._clock() - self.started_at))

    def current_question(self):
        if self.is_completed or self.current_index >= len(self.questions):
            return None
        return self.questions[self.current_index]

    def submit_answer(self, index: int) -> dict:
        if self.is_completed:
            return {"success": False, "error": "Challenge already completed"}
        if self.time_remaining() <= 0:
            self.finish()
            return {"success": False, "error": "Time expired", "completed": True}

        question = self.questions[self.current_index]
        if not 0 <= index < len(question.answers):
            return {"success": False,
                    "error": f"Answer index must be 0-{len(question.answers) - 1}"}

        correct = question.is_correct(index)
        if correct:
            self.score += question.points
        self.answers.append(index)
        self.current_index += 1
        if self.current_index >= len(self.questions):
            self.finish()

        return {
            "success": True,
            "correct": correct,
            "correct_answer_index": question.correct_answer_index,
            "explanation": question.explanation,
            "score": self.score,
            "completed": self.is_completed,
        }

    def finish(self):
        self.is_completed = True
        logger.info(f"Challenge {self.mission.id} attempt {self.attempt} finished: "
                    f"{self.score}/{self.max_score}")

    def score_fraction(self) -> float:
        return self.score / self.max_score if self.max_score > 0 else 0.0

    def is_failed(self) -> bool:
        return not is_passing(self.score_fraction())

    def to_dict(self) -> dict:
        question = self.current_question()
        return {
            "mission": self.mission.id,
            "attempt": self.attempt,
            "question_index": self.current_index,
            "total_questions": self.total_questions,
            "question": question.to_dict() if question else None,
            "score": self.score,
            "max_score": self.max_score,
            "time_remaining": self.time_remaining(),
            "completed": self.is_completed,
            "score_fraction": self.score_fraction(),
            "rating": performance_rating(self.score_fraction()),
        }
