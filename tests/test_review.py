from itertools import count

import pytest

from employee_dedupe.engine import DetectionEngine
from employee_dedupe.errors import ReviewError
from employee_dedupe.models import EmployeeRecord, PerformanceRating, Salary
from employee_dedupe.review import ReviewAction, ReviewSession, format_value, similarity_band
from employee_dedupe.schema import EmployeeField, FieldKind


def _records() -> list[EmployeeRecord]:
    return [
        EmployeeRecord(id="a1", name="Emma Brown", title="Data Analyst", country="GB", salary=Salary(50_000)),
        EmployeeRecord(id="b1", name="Luke Wilson", title="HR Business Partner", country="IE"),
        EmployeeRecord(id="a2", name="Brown, Emma", title="Data Analyst", country="GB", salary=Salary(52_000)),
        EmployeeRecord(id="b2", name="LUKE WILSON", title="HR Business Partner", country="IE"),
        EmployeeRecord(id="c1", name="Noah Thomas", title="Sales Director", country="US"),
        EmployeeRecord(id="c2", name="Noah Thomas", title="Sales Director", country="US"),
    ]


def _review() -> tuple[DetectionEngine, ReviewSession]:
    counter = count(1)
    engine = DetectionEngine(id_factory=lambda: f"merged_{next(counter)}")
    return engine, ReviewSession(engine, engine.detect_duplicates(_records()))


def test_review_walks_groups_and_summarizes() -> None:
    _, review = _review()
    assert len(review.groups) == 3

    review.merge({EmployeeField.NAME: "Emma Brown"})
    review.keep_separate()
    review.skip()

    assert review.finished
    summary = review.summary()
    assert (summary.total_groups, summary.merged_groups, summary.kept_separate, summary.skipped) == (3, 1, 1, 1)
    assert [decision.action for decision in summary.decisions] == [
        ReviewAction.MERGE,
        ReviewAction.KEEP_SEPARATE,
    ]


def test_apply_executes_only_merge_decisions() -> None:
    _, review = _review()
    records = _records()

    review.merge({"salary": Salary(52_000)})
    review.keep_separate()
    review.merge()
    updated = review.apply(records)

    assert [record.id for record in updated] == ["b1", "b2", "merged_1", "merged_2"]
    assert updated[2].salary == Salary(52_000)
    assert updated[2].merged_from == ("a1", "a2")
    assert updated[3].merged_from == ("c1", "c2")


def test_navigation_and_redecision() -> None:
    _, review = _review()

    review.keep_separate()
    assert review.previous() is review.groups[0]
    review.merge()

    assert review.position == 1
    assert [decision.action for decision in review.decisions()] == [ReviewAction.MERGE]


def test_decision_after_last_group_fails() -> None:
    _, review = _review()
    for _ in review.groups:
        review.skip()

    assert review.current() is None
    with pytest.raises(ReviewError):
        review.merge()


def test_field_options_for_current_group() -> None:
    _, review = _review()

    options = review.field_options(_records())

    assert [(option.value, option.sources) for option in options[EmployeeField.NAME]] == [
        ("Emma Brown", [1]),
        ("Brown, Emma", [2]),
    ]
    assert [option.sources for option in options[EmployeeField.TITLE]] == [[1, 2]]


@pytest.mark.parametrize(("confidence", "band"), [(0.95, "high"), (0.9, "high"), (0.75, "medium"), (0.4, "low")])
def test_similarity_band(confidence: float, band: str) -> None:
    assert similarity_band(confidence) == band


def test_format_value() -> None:
    assert format_value(None, FieldKind.TEXT) == "Not specified"
    assert format_value(Salary(100_000, "USD"), FieldKind.AMOUNT) == "100,000 USD"
    assert format_value(PerformanceRating(4, "Exceeds"), FieldKind.RATING) == "Exceeds"
    assert format_value(PerformanceRating(4), FieldKind.RATING) == "4"
    assert format_value(1.0234, FieldKind.NUMBER) == "1.02"
    assert format_value(False, FieldKind.BOOLEAN) == "No"
