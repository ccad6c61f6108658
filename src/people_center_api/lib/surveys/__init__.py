"""Survey result aggregation.

Public API:
    - ``summarize_question``: Per-question statistics for one question type
    - ``collect_answers``: Gather every response's answer to one question
    - ``NOT_AVAILABLE``: Placeholder reported when an average has no inputs
"""

from people_center_api.lib.surveys.aggregator import NOT_AVAILABLE, collect_answers, summarize_question

__all__ = [
    "NOT_AVAILABLE",
    "collect_answers",
    "summarize_question",
]
