"""
Grouping module - PAF limb scoring and multi-person assembly

Provides:
- Line-integral limb scoring
- Per-limb greedy matching
- Sequential merge of limb matches into poses
"""

from .limb_scorer import LimbScorer, LimbScore, score_limb
from .assembler import (
    PoseAssembler,
    match_limb,
    merge_associations,
    finalize_subsets,
)

__all__ = [
    "LimbScorer",
    "LimbScore",
    "score_limb",
    "PoseAssembler",
    "match_limb",
    "merge_associations",
    "finalize_subsets",
]
