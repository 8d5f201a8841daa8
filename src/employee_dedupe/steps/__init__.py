from employee_dedupe.steps.clustering import ConnectedComponentsClusterer, RepresentativeClusterer, build_clusterer
from employee_dedupe.steps.merge import GapFillMergeResolver, apply_selections, completeness
from employee_dedupe.steps.quality import QualityAuditor, quality_grade
from employee_dedupe.steps.scoring import WeightedRecordScorer
from employee_dedupe.steps.similarity import (
    categorical_equality,
    levenshtein,
    name_similarity,
    numeric_proximity,
    text_similarity,
)

__all__ = [
    "ConnectedComponentsClusterer",
    "RepresentativeClusterer",
    "build_clusterer",
    "GapFillMergeResolver",
    "apply_selections",
    "completeness",
    "QualityAuditor",
    "quality_grade",
    "WeightedRecordScorer",
    "categorical_equality",
    "levenshtein",
    "name_similarity",
    "numeric_proximity",
    "text_similarity",
]
