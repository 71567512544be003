"""
Filters Package - Screening Criteria.

Each criterion is an independent, pure predicate over a Quote. The
screening engine evaluates them in order and stops at the first failure.

Criteria:
    - ExclusionCriterion: Persisted exclusion list
    - RangeCriterion: Inclusive numeric bounds on a quote metric
    - SpecialTreatmentCriterion: ST-flagged issuers
    - BoardCriterion: Hidden listing board by code prefix

Design Principles:
    - Each criterion is independently testable
    - Configuration injected via constructor
    - Clear rejection reasons for audit trail
"""

from quote_screener.filters.criteria import (
    BoardCriterion,
    Criterion,
    ExclusionCriterion,
    RangeCriterion,
    SpecialTreatmentCriterion,
    build_criteria,
    metric_value,
    scale_bound,
)

__all__ = [
    "BoardCriterion",
    "Criterion",
    "ExclusionCriterion",
    "RangeCriterion",
    "SpecialTreatmentCriterion",
    "build_criteria",
    "metric_value",
    "scale_bound",
]
