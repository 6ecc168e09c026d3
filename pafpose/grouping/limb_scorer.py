"""
PAF line-integral limb scoring

Samples the two-channel part affinity field along the segment joining two
candidates and measures how well the field agrees with the segment
direction. Long segments relative to the map height are penalized.

Provides:
- score_limb: compatibility of one candidate pair
- LimbScorer: config-bound wrapper used by the assembler
"""

import numpy as np
from dataclasses import dataclass
from typing import Optional

from ..core.config import LimbConfig
from ..core.constants import (
    DEFAULT_MID_POINTS_SCORE_THRESHOLD,
    DEFAULT_FOUND_MID_POINTS_RATIO_THRESHOLD,
    DEFAULT_NUM_SAMPLE_POINTS,
)
from ..core.types import Candidate


@dataclass(frozen=True)
class LimbScore:
    """Result of scoring one limb hypothesis"""
    score: float
    valid: bool

    def __iter__(self):
        # Allows `score, valid = score_limb(...)`
        return iter((self.score, self.valid))


INVALID_LIMB = LimbScore(score=0.0, valid=False)


def sample_segment(
    candidate_a: Candidate,
    candidate_b: Candidate,
    num_sample_points: int,
    width: int,
    height: int
):
    """
    Integer pixel coordinates of evenly spaced points from A to B

    Returns:
        (xs, ys) integer arrays of length num_sample_points, clipped to the map
    """
    xs = np.rint(np.linspace(candidate_a.x, candidate_b.x, num=num_sample_points)).astype(np.intp)
    ys = np.rint(np.linspace(candidate_a.y, candidate_b.y, num=num_sample_points)).astype(np.intp)
    return np.clip(xs, 0, width - 1), np.clip(ys, 0, height - 1)


def score_limb(
    candidate_a: Candidate,
    candidate_b: Candidate,
    paf_x: np.ndarray,
    paf_y: np.ndarray,
    num_sample_points: int = DEFAULT_NUM_SAMPLE_POINTS,
    mid_points_score_threshold: float = DEFAULT_MID_POINTS_SCORE_THRESHOLD,
    found_mid_points_ratio_threshold: float = DEFAULT_FOUND_MID_POINTS_RATIO_THRESHOLD
) -> LimbScore:
    """
    Score a limb hypothesis between two candidates

    score = mean of the sample dot products above mid_points_score_threshold
            + min(0.5 * map_height / segment_length - 1, 0)

    The hypothesis is valid when at least found_mid_points_ratio_threshold
    of the samples pass mid_points_score_threshold and the score is positive.

    Args:
        candidate_a: Candidate of the limb's first keypoint type
        candidate_b: Candidate of the limb's second keypoint type
        paf_x: PAF x-component map (H, W)
        paf_y: PAF y-component map (H, W)
        num_sample_points: Number of samples along the segment, endpoints included
        mid_points_score_threshold: Per-sample dot product threshold
        found_mid_points_ratio_threshold: Required fraction of passing samples

    Returns:
        LimbScore(score, valid); coincident candidates are invalid

    Example:
        >>> result = score_limb(neck, shoulder, pafs[12], pafs[13])
        >>> if result.valid:
        ...     print(result.score)
    """
    vec_x = candidate_b.x - candidate_a.x
    vec_y = candidate_b.y - candidate_a.y
    length = float(np.hypot(vec_x, vec_y))
    if length == 0:
        return INVALID_LIMB
    unit_x, unit_y = vec_x / length, vec_y / length

    height, width = paf_x.shape[:2]
    xs, ys = sample_segment(candidate_a, candidate_b, num_sample_points, width, height)
    dots = unit_x * paf_x[ys, xs] + unit_y * paf_y[ys, xs]

    passing = dots > mid_points_score_threshold
    num_passing = int(np.count_nonzero(passing))
    mean_score = float(dots[passing].mean()) if num_passing > 0 else 0.0
    length_penalty = min(0.5 * height / length - 1.0, 0.0)
    score = mean_score + length_penalty

    found_ratio = num_passing / num_sample_points
    valid = found_ratio >= found_mid_points_ratio_threshold and score > 0
    return LimbScore(score=score, valid=valid)


class LimbScorer:
    """
    Limb scoring bound to a LimbConfig

    Example:
        >>> from pafpose.grouping import LimbScorer
        >>> scorer = LimbScorer(LimbConfig(num_sample_points=20))
        >>> score, valid = scorer(cand_a, cand_b, paf_x, paf_y)
    """

    def __init__(self, config: Optional[LimbConfig] = None):
        self.config = config if config is not None else LimbConfig()

    def __call__(
        self,
        candidate_a: Candidate,
        candidate_b: Candidate,
        paf_x: np.ndarray,
        paf_y: np.ndarray
    ) -> LimbScore:
        return score_limb(
            candidate_a,
            candidate_b,
            paf_x,
            paf_y,
            num_sample_points=self.config.num_sample_points,
            mid_points_score_threshold=self.config.mid_points_score_threshold,
            found_mid_points_ratio_threshold=self.config.found_mid_points_ratio_threshold,
        )
