"""
pafpose - Multi-person 2D pose assembly from keypoint heatmaps and part affinity fields

A Python package for:
- Keypoint candidate extraction from heatmaps
- PAF line-integral limb scoring
- Greedy multi-person skeleton assembly
"""

__version__ = "0.1.0"
__author__ = "pafpose developers"

# Core imports (numpy and PyYAML only)
from .core.config import PAFPoseConfig, PeakConfig, LimbConfig, AssemblyConfig
from .core.constants import (
    OPENPOSE_KEYPOINT_NAMES,
    OPENPOSE_LIMBS,
    OPENPOSE_NUM_KEYPOINTS,
    OPENPOSE_NUM_HEATMAPS,
    OPENPOSE_NUM_PAFS,
    ABSENT_COORDINATE,
)
from .core.exceptions import (
    PAFPoseException,
    ConfigError,
    ValidationError,
    ShapeMismatchError,
    TopologyError,
)
from .core.types import Candidate, LimbDefinition, Association, PoseSubset, Pose, scale_poses
from .core.topology import Topology


# Lazy imports for modules depending on scipy
def __getattr__(name):
    """Lazy loading for decoder stages"""
    if name in ("PoseExtractor", "extract_poses", "assign_global_ids"):
        from .pipeline import extractor
        return getattr(extractor, name)
    elif name in ("PeakFinder", "find_peaks"):
        from .peaks import peak_finder
        return getattr(peak_finder, name)
    elif name in ("LimbScorer", "score_limb", "PoseAssembler", "match_limb",
                  "merge_associations", "finalize_subsets"):
        from . import grouping
        return getattr(grouping, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    # Version
    "__version__",
    # Config
    "PAFPoseConfig",
    "PeakConfig",
    "LimbConfig",
    "AssemblyConfig",
    # Constants
    "OPENPOSE_KEYPOINT_NAMES",
    "OPENPOSE_LIMBS",
    "OPENPOSE_NUM_KEYPOINTS",
    "OPENPOSE_NUM_HEATMAPS",
    "OPENPOSE_NUM_PAFS",
    "ABSENT_COORDINATE",
    # Exceptions
    "PAFPoseException",
    "ConfigError",
    "ValidationError",
    "ShapeMismatchError",
    "TopologyError",
    # Data model
    "Candidate",
    "LimbDefinition",
    "Association",
    "PoseSubset",
    "Pose",
    "scale_poses",
    "Topology",
    # Pipeline
    "PoseExtractor",
    "extract_poses",
    "assign_global_ids",
    # Peaks
    "PeakFinder",
    "find_peaks",
    # Grouping
    "LimbScorer",
    "score_limb",
    "PoseAssembler",
    "match_limb",
    "merge_associations",
    "finalize_subsets",
]
