from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Sequence

from employee_dedupe.config import ClusteringStrategy
from employee_dedupe.interfaces import DuplicateClusterer, RecordScorer
from employee_dedupe.models import EmployeeRecord

logger = logging.getLogger(__name__)


class ConnectedComponentsClusterer:
    """Groups records into connected components of the pairwise-duplicate graph.

    Every pair is scored, so A~B and B~C land in one group even when A and C do
    not match directly.
    """

    def __init__(self, scorer: RecordScorer) -> None:
        self._scorer = scorer

    def cluster(self, records: Sequence[EmployeeRecord]) -> list[list[int]]:
        uf = _UnionFind(len(records))
        edges = 0
        for i, left in enumerate(records):
            for j in range(i + 1, len(records)):
                if self._scorer.score(left, records[j]).is_duplicate:
                    uf.union(i, j)
                    edges += 1

        groups = [members for members in uf.groups().values() if len(members) >= 2]
        groups.sort(key=lambda members: members[0])
        logger.debug("Connected components: %d duplicate edges, %d groups", edges, len(groups))
        return groups


class RepresentativeClusterer:
    """Single representative-anchored pass.

    Each unprocessed record absorbs every later unprocessed record it matches
    directly. Not transitive: a record matching only a non-representative
    member is left out of that group.
    """

    def __init__(self, scorer: RecordScorer) -> None:
        self._scorer = scorer

    def cluster(self, records: Sequence[EmployeeRecord]) -> list[list[int]]:
        processed = [False] * len(records)
        groups: list[list[int]] = []

        for i, representative in enumerate(records):
            if processed[i]:
                continue
            group = [i]
            for j in range(i + 1, len(records)):
                if processed[j]:
                    continue
                if self._scorer.score(representative, records[j]).is_duplicate:
                    group.append(j)
                    processed[j] = True
            processed[i] = True
            if len(group) > 1:
                groups.append(group)

        logger.debug("Representative pass: %d groups", len(groups))
        return groups


def build_clusterer(scorer: RecordScorer, strategy: ClusteringStrategy) -> DuplicateClusterer:
    if strategy is ClusteringStrategy.REPRESENTATIVE:
        return RepresentativeClusterer(scorer)
    return ConnectedComponentsClusterer(scorer)


class _UnionFind:
    def __init__(self, size: int) -> None:
        self._parent = list(range(size))

    def find(self, item: int) -> int:
        root = item
        while self._parent[root] != root:
            root = self._parent[root]
        while self._parent[item] != root:
            self._parent[item], item = root, self._parent[item]
        return root

    def union(self, left: int, right: int) -> None:
        root_left = self.find(left)
        root_right = self.find(right)
        if root_left == root_right:
            return
        # lowest index stays the root so groups read in input order
        if root_right < root_left:
            root_left, root_right = root_right, root_left
        self._parent[root_right] = root_left

    def groups(self) -> dict[int, list[int]]:
        grouped: dict[int, list[int]] = defaultdict(list)
        for item in range(len(self._parent)):
            grouped[self.find(item)].append(item)
        return grouped
