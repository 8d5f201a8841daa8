from itertools import combinations

import pytest

from employee_dedupe.config import MatchingConfig
from employee_dedupe.datasets import EmployeeDatasetGenerator
from employee_dedupe.models import EmployeeRecord, Salary
from employee_dedupe.schema import EmployeeField
from employee_dedupe.steps.scoring import WeightedRecordScorer


def test_score_weights_each_field() -> None:
    left = EmployeeRecord(id="1", name="John Doe", title="Engineer", country="US", salary=Salary(100_000))
    right = EmployeeRecord(id="2", name="Doe, John", title="Engineer", country="US", salary=Salary(102_000))

    result = WeightedRecordScorer().score(left, right)

    assert result.per_field == {
        EmployeeField.NAME: 0.9,
        EmployeeField.TITLE: 1.0,
        EmployeeField.COUNTRY: 1.0,
        EmployeeField.SALARY: 0.9,
    }
    assert result.aggregate == pytest.approx(0.94)
    assert result.is_duplicate
    assert result.reasons == [
        "Names are very similar",
        "Job titles match closely",
        "Same country/location",
        "Similar salary ranges",
    ]


def test_near_exact_name_alone_is_a_duplicate() -> None:
    left = EmployeeRecord(id="1", name="Maya Taylor", title="Data Analyst", country="GB")
    right = EmployeeRecord(id="2", name="maya taylor", title="Sales Director", country="US")

    result = WeightedRecordScorer().score(left, right)

    assert result.aggregate < 0.8
    assert result.is_duplicate


def test_missing_fields_are_not_renormalized() -> None:
    left = EmployeeRecord(id="1", name="Maya Taylor", title="Data Analyst", country="GB")
    right = EmployeeRecord(id="2", name="Maya Taylor", title="Data Analyst", country="GB")

    result = WeightedRecordScorer().score(left, right)

    # salary is missing on both sides and still costs its 10% weight
    assert result.per_field[EmployeeField.SALARY] == 0.0
    assert result.aggregate == pytest.approx(0.9)


def test_different_people_with_shared_attributes_are_not_duplicates() -> None:
    left = EmployeeRecord(id="1", name="Alice Walker", title="Engineer", country="US", salary=Salary(90_000))
    right = EmployeeRecord(id="2", name="Bob Stone", title="Engineer", country="US", salary=Salary(90_000))

    result = WeightedRecordScorer().score(left, right)

    assert not result.is_duplicate
    assert result.aggregate < 0.8
    assert "Names are very similar" not in result.reasons


def test_empty_records_report_low_similarity() -> None:
    result = WeightedRecordScorer().score(EmployeeRecord(id="1"), EmployeeRecord(id="2"))

    assert result.aggregate == 0.0
    assert not result.is_duplicate
    assert result.reasons == ["Low overall similarity"]


def test_custom_weights_change_the_aggregate() -> None:
    scorer = WeightedRecordScorer(MatchingConfig(weights={"name": 0.6, "country": 0.4}))
    left = EmployeeRecord(id="1", name="Emma Brown", country="IE")
    right = EmployeeRecord(id="2", name="Emma Brown", country="IE")

    result = scorer.score(left, right)

    assert set(result.per_field) == {EmployeeField.NAME, EmployeeField.COUNTRY}
    assert result.aggregate == pytest.approx(1.0)


def test_aggregate_stays_within_unit_interval() -> None:
    records = EmployeeDatasetGenerator(seed=3).generate(size=40, duplicate_rate=0.3)
    scorer = WeightedRecordScorer()

    for left, right in combinations(records, 2):
        aggregate = scorer.score(left, right).aggregate
        assert 0.0 <= aggregate <= 1.0
