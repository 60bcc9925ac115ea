"""Heuristic translation quality scoring."""

from legaltrans_llms.eval.quality import (
    QualityScorer,
    aggregate,
    calculate_quality_score,
    complexity_score,
    split_into_sections,
)

__all__ = [
    "QualityScorer",
    "aggregate",
    "calculate_quality_score",
    "complexity_score",
    "split_into_sections",
]
