"""Tests for survey answer aggregation."""

import pytest

from people_center_api.lib.surveys.aggregator import (
    NOT_AVAILABLE,
    collect_answers,
    percentage,
    summarize_choices,
    summarize_question,
    summarize_ratings,
)


class TestCollectAnswers:
    def test_picks_one_answer_per_response(self) -> None:
        answer_sets = [
            [{"questionId": "q1", "answer": "A"}, {"questionId": "q2", "answer": 4}],
            [{"questionId": "q2", "answer": 5}],
            [{"questionId": "q1", "answer": "B"}],
        ]
        assert collect_answers(answer_sets, "q1") == ["A", "B"]
        assert collect_answers(answer_sets, "q2") == [4, 5]

    def test_skips_null_answers(self) -> None:
        assert collect_answers([[{"questionId": "q1", "answer": None}]], "q1") == []

    def test_empty(self) -> None:
        assert collect_answers([], "q1") == []


class TestPercentage:
    def test_one_decimal(self) -> None:
        assert percentage(1, 3) == 33.3

    def test_zero_total(self) -> None:
        assert percentage(0, 0) == 0.0


class TestSummarizeChoices:
    def test_declared_options_first_with_zero_counts(self) -> None:
        summary = summarize_choices(["Parks", "Parks", "Roads"], ["Roads", "Parks", "Schools"])
        assert summary["total"] == 3
        assert summary["distribution"] == [
            {"answer": "Roads", "count": 1, "percentage": 33.3},
            {"answer": "Parks", "count": 2, "percentage": 66.7},
            {"answer": "Schools", "count": 0, "percentage": 0.0},
        ]

    def test_unknown_values_follow_options(self) -> None:
        summary = summarize_choices(["Other"], ["A", "B"])
        assert [d["answer"] for d in summary["distribution"]] == ["A", "B", "Other"]

    def test_booleans_map_to_yes_no(self) -> None:
        summary = summarize_choices([True, False, True], ["Yes", "No"])
        counts = {d["answer"]: d["count"] for d in summary["distribution"]}
        assert counts == {"Yes": 2, "No": 1}

    def test_list_answers_are_flattened(self) -> None:
        summary = summarize_choices([["A", "B"], ["A"]], ["A", "B"])
        counts = {d["answer"]: d["count"] for d in summary["distribution"]}
        assert counts == {"A": 2, "B": 1}
        assert summary["total"] == 2

    def test_no_answers(self) -> None:
        summary = summarize_choices([], ["A"])
        assert summary == {"total": 0, "distribution": [{"answer": "A", "count": 0, "percentage": 0.0}]}


class TestSummarizeRatings:
    def test_average_and_histogram(self) -> None:
        summary = summarize_ratings([5, 4, "4", 3])
        assert summary["average"] == 4.0
        assert summary["count"] == 4
        assert summary["distribution"]["4"] == {"count": 2, "percentage": 50.0}
        assert summary["distribution"]["1"] == {"count": 0, "percentage": 0.0}

    def test_average_rounded_to_two_places(self) -> None:
        assert summarize_ratings([1, 2, 2])["average"] == 1.67

    def test_no_ratings_is_not_available(self) -> None:
        summary = summarize_ratings([])
        assert summary["average"] == NOT_AVAILABLE
        assert summary["count"] == 0
        assert set(summary["distribution"]) == {"1", "2", "3", "4", "5"}

    @pytest.mark.parametrize("bad", ["abc", None, True, float("nan"), float("inf"), [3]])
    def test_unparseable_values_skipped(self, bad: object) -> None:
        summary = summarize_ratings([bad, 4])
        assert summary["count"] == 1
        assert summary["average"] == 4.0


class TestSummarizeQuestion:
    def test_yes_no_lists_both_options(self) -> None:
        summary = summarize_question("yes-no", ["Yes"])
        assert [d["answer"] for d in summary["distribution"]] == ["Yes", "No"]
        assert summary["distribution"][1]["count"] == 0

    def test_multiple_choice(self) -> None:
        summary = summarize_question("multiple-choice", ["B"], ["A", "B"])
        assert summary["distribution"][1] == {"answer": "B", "count": 1, "percentage": 100.0}

    def test_rating(self) -> None:
        assert summarize_question("rating", [2, 4])["average"] == 3.0

    def test_text_returns_raw_responses(self) -> None:
        assert summarize_question("text", ["Fix the bridge", "More buses"]) == {
            "responses": ["Fix the bridge", "More buses"]
        }
