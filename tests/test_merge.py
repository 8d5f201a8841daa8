from employee_dedupe.datasets import EmployeeDatasetGenerator
from employee_dedupe.models import EmployeeRecord, PerformanceRating, Salary
from employee_dedupe.schema import CANONICAL_FIELDS, EmployeeField, field_value, is_empty
from employee_dedupe.steps.clustering import ConnectedComponentsClusterer
from employee_dedupe.steps.merge import GapFillMergeResolver, apply_selections, completeness
from employee_dedupe.steps.scoring import WeightedRecordScorer


def _full_record(record_id: str = "full") -> EmployeeRecord:
    return EmployeeRecord(
        id=record_id,
        name="Sofia Martin",
        title="Product Manager",
        country="DE",
        salary=Salary(85_000, "EUR"),
        comparatio=1.02,
        performance_rating=PerformanceRating(4, "Exceeds Expectations"),
        future_talent=False,
        time_in_role=18,
        time_since_raise=6,
    )


def test_completeness_counts_canonical_fields() -> None:
    assert completeness(_full_record()) == 1.0
    assert completeness(EmployeeRecord(id="x", name="Sofia Martin")) == 1 / 9
    assert completeness(EmployeeRecord(id="x", name="  ", salary=Salary(None))) == 0.0


def test_choose_base_prefers_most_complete_then_earliest() -> None:
    sparse = EmployeeRecord(id="sparse", name="Sofia Martin")
    first = EmployeeRecord(id="first", name="Sofia Martin", title="PM")
    second = EmployeeRecord(id="second", name="Sofia Martin", country="DE")
    resolver = GapFillMergeResolver()

    assert resolver.choose_base([sparse, _full_record()]).id == "full"
    assert resolver.choose_base([sparse, first, second]).id == "first"


def test_merge_fills_gaps_first_write_wins() -> None:
    base = EmployeeRecord(
        id="base", name="Sofia Martin", title="Product Manager", country="DE", salary=Salary(85_000)
    )
    second = EmployeeRecord(id="2", name="Martin, Sofia", country="AT", comparatio=1.05)
    third = EmployeeRecord(id="3", name="Sofia Martin", comparatio=0.9, time_in_role=12)

    merged = GapFillMergeResolver().merge([second, base, third])

    assert merged.id == "base"
    assert merged.country == "DE"
    assert merged.comparatio == 1.05
    assert merged.time_in_role == 12


def test_merge_fills_extra_attributes() -> None:
    base = _full_record()
    other = EmployeeRecord(id="2", name="Sofia Martin", attributes={"DEPARTMENT": "Product", "SITE": ""})
    third = EmployeeRecord(id="3", name="Sofia Martin", attributes={"SITE": "Berlin"})

    merged = GapFillMergeResolver().merge([base, other, third])

    assert merged.attributes == {"DEPARTMENT": "Product", "SITE": "Berlin"}
    assert base.attributes == {}


def test_merge_never_drops_a_value_the_base_lacks() -> None:
    records = EmployeeDatasetGenerator(seed=5).generate(size=60, duplicate_rate=0.3)
    resolver = GapFillMergeResolver()

    for group in ConnectedComponentsClusterer(WeightedRecordScorer()).cluster(records):
        members = [records[idx] for idx in group]
        merged = resolver.merge(members)
        for field in CANONICAL_FIELDS:
            if any(not is_empty(field_value(member, field)) for member in members):
                assert not is_empty(field_value(merged, field))


def test_conflicts_use_literal_equality() -> None:
    left = EmployeeRecord(id="1", name="John Doe", title="Engineer", country="US", salary=Salary(100_000))
    right = EmployeeRecord(id="2", name="Doe, John", title="Engineer", country="US", salary=Salary(102_000))

    assert WeightedRecordScorer().score(left, right).is_duplicate

    conflicts = {conflict.field: conflict for conflict in GapFillMergeResolver().find_conflicts([left, right])}

    assert set(conflicts) == {EmployeeField.NAME, EmployeeField.SALARY}
    assert conflicts[EmployeeField.SALARY].values == [Salary(100_000), Salary(102_000)]
    assert conflicts[EmployeeField.NAME].values == ["John Doe", "Doe, John"]
    assert conflicts[EmployeeField.SALARY].suggestion == "manual_review"


def test_missing_values_are_not_conflicts() -> None:
    left = EmployeeRecord(id="1", name="Noah Davies", performance_rating=PerformanceRating(3, "Meets"))
    right = EmployeeRecord(id="2", name="Noah Davies", performance_rating=None, comparatio=0.9)
    third = EmployeeRecord(id="3", name="Noah Davies", comparatio=1.1)

    assert GapFillMergeResolver().find_conflicts([left, right, third]) == []


def test_suggest_reports_base_and_conflicts() -> None:
    base = _full_record()
    other = EmployeeRecord(id="2", name="Sofia Martin", title="Senior Product Manager")

    suggestion = GapFillMergeResolver().suggest([other, base])

    assert suggestion.base_record_id == "full"
    assert suggestion.merged_record.title == "Product Manager"
    assert [conflict.field for conflict in suggestion.conflicts] == [EmployeeField.TITLE]


def test_field_options_track_sources() -> None:
    records = [
        EmployeeRecord(id="1", country="US"),
        EmployeeRecord(id="2", country="GB"),
        EmployeeRecord(id="3", country="US"),
        EmployeeRecord(id="4"),
    ]

    options = GapFillMergeResolver().field_options(records, EmployeeField.COUNTRY)

    assert [(option.value, option.sources) for option in options] == [
        ("US", [1, 3]),
        ("GB", [2]),
        (None, [4]),
    ]


def test_apply_selections_overrides_fields() -> None:
    record = apply_selections(_full_record(), {"title": "Group Product Manager", EmployeeField.COUNTRY: "AT"})

    assert record.title == "Group Product Manager"
    assert record.country == "AT"
    assert record.name == "Sofia Martin"


def test_blank_values_are_not_conflicts() -> None:
    left = EmployeeRecord(id="1", name="Noah Davies", title="")
    right = EmployeeRecord(id="2", name="Noah Davies", title="Engineer")

    assert GapFillMergeResolver().find_conflicts([left, right]) == []
