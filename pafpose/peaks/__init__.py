"""
Peaks module - keypoint candidate extraction from heatmaps

Provides:
- Local maximum detection with distance suppression
- Sub-pixel refinement
"""

from .peak_finder import PeakFinder, find_peaks, refine_peak, local_maxima_mask

__all__ = [
    "PeakFinder",
    "find_peaks",
    "refine_peak",
    "local_maxima_mask",
]
