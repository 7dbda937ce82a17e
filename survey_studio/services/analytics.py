"""Analytics over a survey's full response set.

Pure reductions: callers load every response with its answers and pass them
in. Choice-like questions get a value distribution for charting, free-text
questions get their raw answers listed, and responses are bucketed over the
trailing seven days.
"""

from collections import Counter
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, timezone
from typing import Iterable, Optional, Sequence

from survey_studio.models.response import Answer, Response
from survey_studio.models.survey import Question
from survey_studio.schemas.survey import QuestionType
from survey_studio.services.answer_codec import decode, display_value, first_value

TRAILING_DAYS = 7
CHART_LABEL_LENGTH = 20


@dataclass
class ChartEntry:
    """One bar/slice of a question's distribution."""
    answer: str
    count: int
    full_answer: str


@dataclass
class QuestionAnalytics:
    """Per-question summary.

    Attributes:
        question_id: Question id
        question_text: Prompt text
        question_type: Question type value
        response_count: Number of answers given
        chart_data: Distribution for choice-like questions, empty otherwise
        text_answers: Raw answers for free-text questions
    """
    question_id: str
    question_text: str
    question_type: str
    response_count: int
    chart_data: list[ChartEntry] = field(default_factory=list)
    text_answers: list[str] = field(default_factory=list)


@dataclass
class DayCount:
    date: str
    responses: int


@dataclass
class SurveyAnalytics:
    """Whole-survey summary returned to the dashboard."""
    total_responses: int
    completion_rate: int
    responses_by_day: list[DayCount]
    question_analytics: list[QuestionAnalytics]


def day_label(day: date) -> str:
    """Chart label for a calendar day, e.g. 'Oct 18'."""
    return day.strftime("%b %d")


def _submitted_day(submitted_at: datetime) -> date:
    if submitted_at.tzinfo is not None:
        submitted_at = submitted_at.astimezone(timezone.utc)
    return submitted_at.date()


def answer_distribution(answers: Iterable[Answer]) -> dict[str, int]:
    """Tally decoded answers by value, using the first value of multi-selects.

    Example:
        >>> answer_distribution(answers_for(["A", "A", "B"]))
        {'A': 2, 'B': 1}
    """
    counts: Counter = Counter()
    for answer in answers:
        key = first_value(decode(answer.answer_text, answer.answer_choice))
        if key is None:
            continue
        counts[key] += 1
    return dict(counts)


def chart_entries(distribution: dict[str, int]) -> list[ChartEntry]:
    """Distribution as chart entries with labels truncated for display."""
    entries = []
    for value, count in distribution.items():
        label = value[:CHART_LABEL_LENGTH]
        if len(value) > CHART_LABEL_LENGTH:
            label += "..."
        entries.append(ChartEntry(answer=label, count=count, full_answer=value))
    return entries


def responses_by_day(
    responses: Sequence[Response],
    today: Optional[date] = None,
    days: int = TRAILING_DAYS,
) -> list[DayCount]:
    """Count responses per calendar day over the trailing window.

    Days run oldest first and end with ``today``; empty days count 0.
    """
    today = today or datetime.now(timezone.utc).date()
    per_day = Counter(_submitted_day(response.submitted_at) for response in responses)

    window = [today - timedelta(days=offset) for offset in range(days - 1, -1, -1)]
    return [DayCount(date=day_label(day), responses=per_day.get(day, 0)) for day in window]


def question_analytics(question: Question, responses: Sequence[Response]) -> QuestionAnalytics:
    """Summarize every answer given to one question."""
    answers = [
        answer
        for response in responses
        for answer in response.answers
        if answer.question_id == question.id
    ]

    summary = QuestionAnalytics(
        question_id=question.id,
        question_text=question.question_text,
        question_type=question.question_type,
        response_count=len(answers),
    )

    if QuestionType(question.question_type).is_choice:
        summary.chart_data = chart_entries(answer_distribution(answers))
    else:
        summary.text_answers = [
            display_value(decode(answer.answer_text, answer.answer_choice))
            for answer in answers
        ]

    return summary


def build_analytics(
    questions: Sequence[Question],
    responses: Sequence[Response],
    today: Optional[date] = None,
) -> SurveyAnalytics:
    """Build the full analytics summary for a survey.

    Every stored response is a completed submission, so completion rate is
    always 100.
    """
    ordered = sorted(questions, key=lambda q: q.order_index)
    return SurveyAnalytics(
        total_responses=len(responses),
        completion_rate=100,
        responses_by_day=responses_by_day(responses, today=today),
        question_analytics=[question_analytics(question, responses) for question in ordered],
    )
