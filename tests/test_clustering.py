from employee_dedupe.config import ClusteringStrategy
from employee_dedupe.datasets import EmployeeDatasetGenerator
from employee_dedupe.models import EmployeeRecord
from employee_dedupe.steps.clustering import (
    ConnectedComponentsClusterer,
    RepresentativeClusterer,
    build_clusterer,
)
from employee_dedupe.steps.scoring import WeightedRecordScorer


def _chain() -> list[EmployeeRecord]:
    # A~B and B~C match on name tokens; A and C do not match directly
    return [
        EmployeeRecord(id="a", name="John Smith"),
        EmployeeRecord(id="b", name="John Michael Smith"),
        EmployeeRecord(id="c", name="Michael Smith"),
        EmployeeRecord(id="d", name="Olivia Wilson"),
    ]


def test_chain_is_not_a_direct_match_at_the_ends() -> None:
    scorer = WeightedRecordScorer()
    records = _chain()

    assert scorer.score(records[0], records[1]).is_duplicate
    assert scorer.score(records[1], records[2]).is_duplicate
    assert not scorer.score(records[0], records[2]).is_duplicate


def test_connected_components_groups_transitive_matches() -> None:
    groups = ConnectedComponentsClusterer(WeightedRecordScorer()).cluster(_chain())

    assert groups == [[0, 1, 2]]


def test_representative_pass_splits_the_chain() -> None:
    groups = RepresentativeClusterer(WeightedRecordScorer()).cluster(_chain())

    assert groups == [[0, 1]]


def test_build_clusterer_follows_strategy() -> None:
    scorer = WeightedRecordScorer()

    assert isinstance(build_clusterer(scorer, ClusteringStrategy.REPRESENTATIVE), RepresentativeClusterer)
    assert isinstance(
        build_clusterer(scorer, ClusteringStrategy.CONNECTED_COMPONENTS),
        ConnectedComponentsClusterer,
    )


def test_groups_are_disjoint_and_never_singletons() -> None:
    records = EmployeeDatasetGenerator(seed=11).generate(size=80, duplicate_rate=0.25)
    scorer = WeightedRecordScorer()

    for clusterer in (ConnectedComponentsClusterer(scorer), RepresentativeClusterer(scorer)):
        groups = clusterer.cluster(records)
        seen = [idx for group in groups for idx in group]

        assert groups
        assert all(len(group) >= 2 for group in groups)
        assert len(seen) == len(set(seen))
        assert all(group == sorted(group) for group in groups)


def test_empty_input_has_no_groups() -> None:
    assert ConnectedComponentsClusterer(WeightedRecordScorer()).cluster([]) == []
    assert RepresentativeClusterer(WeightedRecordScorer()).cluster([]) == []
