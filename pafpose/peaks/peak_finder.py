"""
Heatmap peak extraction

Provides:
- find_peaks: local maxima of one keypoint heatmap with distance suppression
- refine_peak: sub-pixel quadratic refinement of an integer maximum
- PeakFinder: config-bound wrapper used by the pipeline
"""

import logging
import numpy as np
from scipy.ndimage import maximum_filter
from typing import List, Optional, Tuple

from ..core.config import PeakConfig
from ..core.constants import (
    DEFAULT_CONFIDENCE_THRESHOLD,
    DEFAULT_MIN_PEAKS_DISTANCE,
    MAX_SUBPIXEL_OFFSET,
)
from ..core.types import Candidate

logger = logging.getLogger(__name__)

# 4-neighbourhood without the centre pixel
_NEIGHBOUR_FOOTPRINT = np.array([
    [0, 1, 0],
    [1, 0, 1],
    [0, 1, 0],
], dtype=bool)


def local_maxima_mask(heatmap: np.ndarray, confidence_threshold: float) -> np.ndarray:
    """
    Mark interior pixels that beat all four neighbours and the threshold

    Args:
        heatmap: 2D float map (H, W)
        confidence_threshold: Values must be strictly greater than this

    Returns:
        Boolean mask (H, W); border rows/columns are always False
    """
    neighbour_max = maximum_filter(
        heatmap, footprint=_NEIGHBOUR_FOOTPRINT, mode='constant', cval=-np.inf
    )
    mask = (heatmap > neighbour_max) & (heatmap > confidence_threshold)
    mask[0, :] = False
    mask[-1, :] = False
    mask[:, 0] = False
    mask[:, -1] = False
    return mask


def refine_peak(heatmap: np.ndarray, x: int, y: int) -> Tuple[float, float]:
    """
    Fit a quadratic on the 3x3 neighbourhood of an interior maximum

    Args:
        heatmap: 2D float map (H, W)
        x: Column of the integer maximum (1 <= x <= W - 2)
        y: Row of the integer maximum (1 <= y <= H - 2)

    Returns:
        (x, y) refined location, shifted by at most 0.5 pixel per axis

    Example:
        >>> hm = np.zeros((5, 5)); hm[2, 2] = 1.0; hm[2, 3] = 0.5
        >>> refine_peak(hm, 2, 2)  # pulled toward the right neighbour
    """
    patch = heatmap[y - 1:y + 2, x - 1:x + 2].astype(np.float64)
    center = patch[1, 1]

    dx = 0.5 * (patch[1, 2] - patch[1, 0])
    dy = 0.5 * (patch[2, 1] - patch[0, 1])
    dxx = patch[1, 2] - 2.0 * center + patch[1, 0]
    dyy = patch[2, 1] - 2.0 * center + patch[0, 1]
    dxy = 0.25 * (patch[2, 2] - patch[2, 0] - patch[0, 2] + patch[0, 0])

    det = dxx * dyy - dxy * dxy
    if det > 0 and dxx < 0:
        offset_x = -(dyy * dx - dxy * dy) / det
        offset_y = -(dxx * dy - dxy * dx) / det
    else:
        # Hessian not negative definite: fit each axis on its own
        offset_x = -dx / dxx if dxx < 0 else 0.0
        offset_y = -dy / dyy if dyy < 0 else 0.0

    offset_x = float(np.clip(offset_x, -MAX_SUBPIXEL_OFFSET, MAX_SUBPIXEL_OFFSET))
    offset_y = float(np.clip(offset_y, -MAX_SUBPIXEL_OFFSET, MAX_SUBPIXEL_OFFSET))
    return x + offset_x, y + offset_y


def find_peaks(
    heatmap: np.ndarray,
    min_distance: float = DEFAULT_MIN_PEAKS_DISTANCE,
    confidence_threshold: float = DEFAULT_CONFIDENCE_THRESHOLD,
    keypoint_type: int = 0,
    refine: bool = True
) -> List[Candidate]:
    """
    Extract keypoint candidates from one heatmap

    Local maxima are visited in row-major order. A new maximum closer than
    min_distance to an already accepted candidate survives only if it
    scores strictly higher, in which case the weaker neighbours are dropped.
    Equal scores keep the first found.

    Args:
        heatmap: 2D float map (H, W) for a single keypoint type
        min_distance: Euclidean suppression radius in pixels
        confidence_threshold: Minimum heatmap value (exclusive)
        keypoint_type: Keypoint type index stored on each candidate
        refine: Apply sub-pixel refinement to reported coordinates

    Returns:
        Candidates in discovery order, IDs numbered locally from 0

    Example:
        >>> peaks = find_peaks(heatmap, min_distance=3.0, confidence_threshold=0.1)
        >>> print(peaks[0].x, peaks[0].y, peaks[0].confidence)
    """
    heatmap = np.asarray(heatmap)
    if not np.issubdtype(heatmap.dtype, np.floating):
        heatmap = heatmap.astype(np.float32)
    if heatmap.ndim != 2 or heatmap.shape[0] < 3 or heatmap.shape[1] < 3:
        return []

    ys, xs = np.nonzero(local_maxima_mask(heatmap, confidence_threshold))

    # (x, y, value) of accepted maxima, in discovery order
    accepted: List[Tuple[int, int, float]] = []
    for y, x in zip(ys.tolist(), xs.tolist()):
        value = float(heatmap[y, x])
        close = [
            index for index, (ax, ay, _) in enumerate(accepted)
            if np.hypot(ax - x, ay - y) < min_distance
        ]
        if any(accepted[index][2] >= value for index in close):
            continue
        if close:
            accepted = [peak for index, peak in enumerate(accepted) if index not in close]
        accepted.append((x, y, value))

    candidates = []
    for local_id, (x, y, value) in enumerate(accepted):
        if refine:
            px, py = refine_peak(heatmap, x, y)
        else:
            px, py = float(x), float(y)
        candidates.append(Candidate(
            keypoint_type=keypoint_type,
            x=px,
            y=py,
            confidence=value,
            id=local_id,
        ))

    logger.debug("Keypoint type %d: %d maxima, %d candidates", keypoint_type, len(ys), len(candidates))
    return candidates


class PeakFinder:
    """
    Peak extraction bound to a PeakConfig

    Example:
        >>> from pafpose.peaks import PeakFinder
        >>> finder = PeakFinder(PeakConfig(confidence_threshold=0.2))
        >>> candidates = finder(heatmap, keypoint_type=3)
    """

    def __init__(self, config: Optional[PeakConfig] = None):
        self.config = config if config is not None else PeakConfig()

    def __call__(self, heatmap: np.ndarray, keypoint_type: int = 0) -> List[Candidate]:
        return find_peaks(
            heatmap,
            min_distance=self.config.min_peaks_distance,
            confidence_threshold=self.config.confidence_threshold,
            keypoint_type=keypoint_type,
            refine=self.config.refine,
        )
