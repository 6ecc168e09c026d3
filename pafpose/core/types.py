"""
Data model for the pafpose decoder

Dataclass containers flowing through the pipeline:
- Candidate: one localized keypoint instance
- LimbDefinition: one row of the limb topology table
- Association: an accepted candidate pairing for a limb
- PoseSubset: a person being assembled (mutable)
- Pose: a finalized person (immutable)
"""

import numpy as np
from dataclasses import dataclass, field, asdict, replace
from typing import Dict, List, Optional, Sequence, Tuple

from .constants import ABSENT_ID, ABSENT_COORDINATE


@dataclass(frozen=True)
class Candidate:
    """Keypoint candidate extracted from one heatmap"""
    keypoint_type: int
    x: float
    y: float
    confidence: float
    id: int

    @property
    def position(self) -> Tuple[float, float]:
        """(x, y) location"""
        return (self.x, self.y)

    def with_id(self, new_id: int) -> "Candidate":
        """Return a copy carrying a different ID"""
        return replace(self, id=new_id)

    def to_dict(self) -> Dict:
        """Convert to dictionary"""
        return asdict(self)


@dataclass(frozen=True)
class LimbDefinition:
    """Keypoint pair joined by a limb and the PAF channels that encode it"""
    type_a: int
    type_b: int
    paf_x: int
    paf_y: int

    @classmethod
    def from_tuple(cls, row: Sequence[int]) -> "LimbDefinition":
        """Create instance from (type_a, type_b, paf_x, paf_y)"""
        type_a, type_b, paf_x, paf_y = row
        return cls(int(type_a), int(type_b), int(paf_x), int(paf_y))


@dataclass(frozen=True)
class Association:
    """Accepted pairing of two candidates through one limb"""
    id_a: int
    id_b: int
    score: float
    rank: int


@dataclass
class PoseSubset:
    """
    Person under construction

    Holds one candidate ID per keypoint type (ABSENT_ID when missing), the
    running aggregate score and the number of assigned keypoints.
    """
    peak_ids: List[int]
    score: float = 0.0
    num_joints: int = 0

    @classmethod
    def empty(cls, num_keypoints: int) -> "PoseSubset":
        """Create a subset with every keypoint absent"""
        return cls(peak_ids=[ABSENT_ID] * num_keypoints)

    def has(self, keypoint_type: int) -> bool:
        """True if a candidate is assigned at keypoint_type"""
        return self.peak_ids[keypoint_type] != ABSENT_ID

    def assign(self, keypoint_type: int, candidate_id: int, score_gain: float) -> None:
        """Put a candidate into an empty slot and account for its score"""
        self.peak_ids[keypoint_type] = candidate_id
        self.num_joints += 1
        self.score += score_gain

    def conflicts_with(self, other: "PoseSubset") -> bool:
        """True if both subsets assign some keypoint type"""
        return any(
            mine != ABSENT_ID and theirs != ABSENT_ID
            for mine, theirs in zip(self.peak_ids, other.peak_ids)
        )

    def absorb(self, other: "PoseSubset", edge_score: float) -> None:
        """Merge a non-conflicting subset into this one"""
        for keypoint_type, candidate_id in enumerate(other.peak_ids):
            if candidate_id != ABSENT_ID:
                self.peak_ids[keypoint_type] = candidate_id
        self.num_joints += other.num_joints
        self.score += other.score + edge_score

    def assigned_ids(self) -> List[int]:
        """Candidate IDs currently held"""
        return [candidate_id for candidate_id in self.peak_ids if candidate_id != ABSENT_ID]


@dataclass(frozen=True)
class Pose:
    """Finalized person skeleton"""
    keypoints: Tuple[Tuple[float, float], ...]
    score: float
    peak_ids: Tuple[int, ...] = field(default=(), compare=False)

    @property
    def num_keypoints(self) -> int:
        """Number of present (non-sentinel) keypoints"""
        return sum(1 for point in self.keypoints if point != ABSENT_COORDINATE)

    def is_present(self, keypoint_type: int) -> bool:
        """True if keypoint_type was detected for this person"""
        return self.keypoints[keypoint_type] != ABSENT_COORDINATE

    def to_array(self) -> np.ndarray:
        """
        Convert keypoints to array format

        Returns:
            Array of shape (K, 2) with [x, y] rows, absent rows at (-1, -1)
        """
        return np.array(self.keypoints, dtype=np.float32).reshape(-1, 2)

    def to_named(self, keypoint_names: Sequence[str]) -> Dict[str, Optional[Tuple[float, float]]]:
        """
        Map keypoint names to coordinates

        Args:
            keypoint_names: Names in keypoint-type order

        Returns:
            Dict mapping name to (x, y), or None where the keypoint is absent
        """
        return {
            name: (point if point != ABSENT_COORDINATE else None)
            for name, point in zip(keypoint_names, self.keypoints)
        }


def scale_poses(poses: Sequence[Pose], scale_x: float, scale_y: float) -> List[Pose]:
    """
    Rescale pose coordinates, keeping absent keypoints as sentinels

    Args:
        poses: Poses in working-resolution coordinates
        scale_x: Horizontal scale factor
        scale_y: Vertical scale factor

    Returns:
        New list of poses in the target coordinate space

    Example:
        >>> scaled = scale_poses(poses, 8.0 / 4.0 * 1.5, 8.0 / 4.0 * 1.5)
    """
    scaled = []
    for pose in poses:
        keypoints = tuple(
            point if point == ABSENT_COORDINATE else (point[0] * scale_x, point[1] * scale_y)
            for point in pose.keypoints
        )
        scaled.append(replace(pose, keypoints=keypoints))
    return scaled
