"""Pure functions that turn raw survey answers into per-question summaries.

Choice questions (multiple-choice, yes-no) get a distribution of counts and
percentages, rating questions get a mean and a 1-5 histogram, and text
questions are left unaggregated. No input, including an empty answer list,
produces a division by zero.
"""

import math
from collections import Counter
from collections.abc import Iterable, Sequence
from typing import Any

NOT_AVAILABLE = "N/A"

RATING_SCALE: tuple[int, ...] = (1, 2, 3, 4, 5)

_CHOICE_TYPES = frozenset({"multiple-choice", "yes-no"})

YES_NO_OPTIONS: tuple[str, ...] = ("Yes", "No")


def collect_answers(answer_sets: Iterable[Sequence[dict[str, Any]]], question_id: str) -> list[Any]:
    """Gather the answers given to one question across all responses.

    Args:
        answer_sets: Each response's ``answers`` list of
            ``{"questionId": ..., "answer": ...}`` items.
        question_id: The question to collect, compared as a string.

    Returns:
        The non-null answers in response order.
    """
    collected: list[Any] = []
    for answers in answer_sets:
        for item in answers:
            if str(item.get("questionId")) == question_id and item.get("answer") is not None:
                collected.append(item["answer"])
                break
    return collected


def percentage(count: int, total: int) -> float:
    """Share of ``count`` in ``total`` as a percentage with one decimal, 0.0 for an empty total."""
    if total <= 0:
        return 0.0
    return round(count / total * 100, 1)


def _choice_key(answer: Any) -> str:
    if isinstance(answer, bool):
        return "Yes" if answer else "No"
    return str(answer)


def summarize_choices(answers: Sequence[Any], options: Sequence[str] = ()) -> dict[str, Any]:
    """Count answers per distinct value.

    Declared options are listed first (with zero counts when unanswered),
    followed by any other values seen, in first-seen order.
    """
    counts = Counter()
    for answer in answers:
        values = answer if isinstance(answer, list) else [answer]
        counts.update(_choice_key(v) for v in values)

    ordered = list(dict.fromkeys([*options, *counts.keys()]))
    total = len(answers)
    return {
        "total": total,
        "distribution": [
            {"answer": value, "count": counts.get(value, 0), "percentage": percentage(counts.get(value, 0), total)}
            for value in ordered
        ],
    }


def _parse_rating(answer: Any) -> float | None:
    if isinstance(answer, bool):
        return None
    try:
        value = float(answer)
    except (TypeError, ValueError):
        return None
    if math.isnan(value) or math.isinf(value):
        return None
    return value


def summarize_ratings(answers: Sequence[Any]) -> dict[str, Any]:
    """Mean and 1-5 histogram of numeric answers; unparseable values are skipped."""
    ratings = [r for r in (_parse_rating(a) for a in answers) if r is not None]
    count = len(ratings)
    average: float | str = round(sum(ratings) / count, 2) if count else NOT_AVAILABLE
    histogram = Counter(int(r) for r in ratings if r.is_integer() and int(r) in RATING_SCALE)
    return {
        "average": average,
        "count": count,
        "distribution": {
            str(value): {"count": histogram.get(value, 0), "percentage": percentage(histogram.get(value, 0), count)}
            for value in RATING_SCALE
        },
    }


def summarize_question(question_type: str, answers: Sequence[Any], options: Sequence[str] = ()) -> dict[str, Any]:
    """Summarize one question's answers according to its type.

    Args:
        question_type: One of multiple-choice, yes-no, rating, text.
        answers: Answers gathered with :func:`collect_answers`.
        options: Declared options (multiple-choice only).

    Returns:
        A summary dict; text questions return ``{"responses": [...]}``.
    """
    if question_type == "yes-no":
        return summarize_choices(answers, options or YES_NO_OPTIONS)
    if question_type in _CHOICE_TYPES:
        return summarize_choices(answers, options)
    if question_type == "rating":
        return summarize_ratings(answers)
    return {"responses": list(answers)}
