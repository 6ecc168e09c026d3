"""
Pipeline module - end-to-end pose extraction

Provides:
- PoseExtractor: heatmap/PAF decoder
- Input validation and global candidate numbering
"""

from .extractor import (
    PoseExtractor,
    extract_poses,
    assign_global_ids,
    validate_maps,
    as_map_stack,
)

__all__ = [
    "PoseExtractor",
    "extract_poses",
    "assign_global_ids",
    "validate_maps",
    "as_map_stack",
]
