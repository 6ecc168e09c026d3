"""
Synthetic heatmap / PAF builders shared by the tests
"""

import numpy as np
from typing import Sequence, Tuple


def gaussian_bump(
    heatmap: np.ndarray,
    x: int,
    y: int,
    amplitude: float = 0.9,
    sigma: float = 1.5
) -> np.ndarray:
    """Add a Gaussian peak centred on pixel (x, y), keeping the per-pixel maximum"""
    height, width = heatmap.shape
    yy, xx = np.mgrid[0:height, 0:width]
    bump = amplitude * np.exp(-((xx - x) ** 2 + (yy - y) ** 2) / (2.0 * sigma ** 2))
    np.maximum(heatmap, bump.astype(heatmap.dtype), out=heatmap)
    return heatmap


def paint_vertical_band(
    paf_x: np.ndarray,
    paf_y: np.ndarray,
    x: int,
    y_start: int,
    y_end: int,
    half_width: int = 1
) -> None:
    """Fill a vertical band with the unit vector pointing from y_start to y_end"""
    direction = 1.0 if y_end >= y_start else -1.0
    top, bottom = min(y_start, y_end), max(y_start, y_end)
    paf_x[top:bottom + 1, x - half_width:x + half_width + 1] = 0.0
    paf_y[top:bottom + 1, x - half_width:x + half_width + 1] = direction


def paint_limb_samples(
    paf_x: np.ndarray,
    paf_y: np.ndarray,
    point_a: Tuple[int, int],
    point_b: Tuple[int, int],
    num_sample_points: int = 10
) -> None:
    """
    Write the A->B unit vector on the pixels the limb scorer samples
    """
    (ax, ay), (bx, by) = point_a, point_b
    length = np.hypot(bx - ax, by - ay)
    unit_x, unit_y = (bx - ax) / length, (by - ay) / length
    xs = np.rint(np.linspace(ax, bx, num=num_sample_points)).astype(np.intp)
    ys = np.rint(np.linspace(ay, by, num=num_sample_points)).astype(np.intp)
    paf_x[ys, xs] = unit_x
    paf_y[ys, xs] = unit_y


def render_people(
    people: Sequence[Sequence[Tuple[int, int]]],
    limbs: Sequence[Tuple[int, int, int, int]],
    shape: Tuple[int, int],
    num_heatmaps: int,
    num_pafs: int,
    amplitude: float = 0.9
):
    """
    Render heatmaps and PAFs for people given as per-keypoint (x, y) lists

    Returns:
        (heatmaps, pafs) float32 arrays of shape (C, H, W)
    """
    heatmaps = np.zeros((num_heatmaps,) + tuple(shape), dtype=np.float32)
    pafs = np.zeros((num_pafs,) + tuple(shape), dtype=np.float32)
    for person in people:
        for keypoint_type, (x, y) in enumerate(person):
            gaussian_bump(heatmaps[keypoint_type], x, y, amplitude=amplitude)
        for type_a, type_b, paf_x, paf_y in limbs:
            paint_limb_samples(pafs[paf_x], pafs[paf_y], person[type_a], person[type_b])
    return heatmaps, pafs


# One upright person in a 280x200 map, COCO-18 OpenPose keypoint order
OPENPOSE_PERSON = [
    (100, 80),   # nose
    (100, 120),  # neck
    (60, 120),   # right_shoulder
    (40, 160),   # right_elbow
    (30, 200),   # right_wrist
    (140, 120),  # left_shoulder
    (160, 160),  # left_elbow
    (170, 200),  # left_wrist
    (75, 180),   # right_hip
    (70, 220),   # right_knee
    (70, 260),   # right_ankle
    (125, 180),  # left_hip
    (130, 220),  # left_knee
    (130, 260),  # left_ankle
    (64, 68),    # right_eye
    (136, 68),   # left_eye
    (30, 50),    # right_ear
    (170, 50),   # left_ear
]

OPENPOSE_MAP_SHAPE = (280, 200)
