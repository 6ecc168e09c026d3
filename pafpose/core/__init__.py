"""
Core module - Configuration, constants, data model and exceptions for pafpose
"""

from .config import (
    PAFPoseConfig,
    PeakConfig,
    LimbConfig,
    AssemblyConfig,
)
from .constants import (
    OPENPOSE_KEYPOINT_NAMES,
    OPENPOSE_LIMBS,
    OPENPOSE_NUM_KEYPOINTS,
    OPENPOSE_NUM_HEATMAPS,
    OPENPOSE_NUM_PAFS,
    ABSENT_ID,
    ABSENT_COORDINATE,
)
from .exceptions import (
    PAFPoseException,
    ConfigError,
    ValidationError,
    ShapeMismatchError,
    TopologyError,
)
from .types import (
    Candidate,
    LimbDefinition,
    Association,
    PoseSubset,
    Pose,
    scale_poses,
)
from .topology import Topology

__all__ = [
    "PAFPoseConfig",
    "PeakConfig",
    "LimbConfig",
    "AssemblyConfig",
    "OPENPOSE_KEYPOINT_NAMES",
    "OPENPOSE_LIMBS",
    "OPENPOSE_NUM_KEYPOINTS",
    "OPENPOSE_NUM_HEATMAPS",
    "OPENPOSE_NUM_PAFS",
    "ABSENT_ID",
    "ABSENT_COORDINATE",
    "PAFPoseException",
    "ConfigError",
    "ValidationError",
    "ShapeMismatchError",
    "TopologyError",
    "Candidate",
    "LimbDefinition",
    "Association",
    "PoseSubset",
    "Pose",
    "scale_poses",
    "Topology",
]
