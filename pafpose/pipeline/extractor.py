"""
Multi-person pose extraction pipeline

Orchestrates the decoder:
1. Validate that every heatmap and PAF channel shares one height/width
2. Extract candidates for each keypoint type in parallel (fork/join)
3. Assign global, type-contiguous candidate IDs
4. Match candidates per limb in parallel
5. Merge limb matches into poses sequentially
"""

import logging
import numpy as np
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Iterable, List, Optional, Sequence, Union

from ..core.config import PAFPoseConfig
from ..core.exceptions import ShapeMismatchError, ValidationError
from ..core.topology import Topology
from ..core.types import Association, Candidate, Pose
from ..grouping.assembler import PoseAssembler
from ..peaks.peak_finder import PeakFinder

logger = logging.getLogger(__name__)

MapStack = Union[np.ndarray, Sequence[np.ndarray]]


def as_map_stack(maps: MapStack, name: str) -> np.ndarray:
    """
    Convert a (C, H, W) array or a sequence of 2D maps to one 3D array

    Args:
        maps: Map stack
        name: Label used in error messages

    Returns:
        Array of shape (C, H, W)

    Raises:
        ShapeMismatchError: If the 2D maps differ in shape or are not 2D
    """
    if isinstance(maps, np.ndarray):
        if maps.ndim != 3:
            raise ShapeMismatchError(f"{name} must have shape (C, H, W), got {maps.shape}")
        return maps

    arrays = [np.asarray(channel) for channel in maps]
    if not arrays:
        raise ShapeMismatchError(f"{name} is empty")
    for index, channel in enumerate(arrays):
        if channel.ndim != 2:
            raise ShapeMismatchError(f"{name}[{index}] must be 2D, got shape {channel.shape}")
        if channel.shape != arrays[0].shape:
            raise ShapeMismatchError(
                f"{name}[{index}] has shape {channel.shape}, expected {arrays[0].shape}"
            )
    return np.stack(arrays)


def validate_maps(heatmaps: np.ndarray, pafs: np.ndarray, topology: Topology) -> None:
    """
    Check map stacks against each other and against the topology

    Raises:
        ShapeMismatchError: If heatmaps and PAFs differ in height/width
        ValidationError: If either stack has too few channels
    """
    if heatmaps.shape[1:] != pafs.shape[1:]:
        raise ShapeMismatchError(
            f"Heatmaps are {heatmaps.shape[1:]} but PAFs are {pafs.shape[1:]}"
        )
    if heatmaps.shape[0] < topology.num_keypoints:
        raise ValidationError(
            f"Expected at least {topology.num_keypoints} heatmap channels, got {heatmaps.shape[0]}"
        )
    if pafs.shape[0] < topology.num_pafs:
        raise ValidationError(
            f"Expected at least {topology.num_pafs} PAF channels, got {pafs.shape[0]}"
        )


def assign_global_ids(peaks_per_type: Sequence[Sequence[Candidate]]) -> List[List[Candidate]]:
    """
    Renumber candidates so each keypoint type owns a contiguous ID range

    Type 0 gets [0, n0), type 1 gets [n0, n0 + n1), and so on, preserving
    the order within each type.

    Args:
        peaks_per_type: Candidates per keypoint type, locally numbered

    Returns:
        New per-type lists carrying global IDs
    """
    renumbered = []
    offset = 0
    for peaks in peaks_per_type:
        renumbered.append([peak.with_id(offset + local) for local, peak in enumerate(peaks)])
        offset += len(peaks)
    return renumbered


class PoseExtractor:
    """
    Heatmap/PAF to multi-person pose decoder

    Example:
        >>> from pafpose import PoseExtractor, PAFPoseConfig
        >>> extractor = PoseExtractor(PAFPoseConfig())
        >>> poses = extractor.extract(heatmaps, pafs)  # (19, H, W), (38, H, W)
        >>> for pose in poses:
        ...     print(pose.score, pose.num_keypoints)
    """

    def __init__(
        self,
        config: Optional[PAFPoseConfig] = None,
        topology: Optional[Topology] = None
    ):
        """
        Initialize the extractor

        Args:
            config: Decoder configuration (default values when None)
            topology: Limb table (COCO-18 OpenPose when None)
        """
        self.config = config if config is not None else PAFPoseConfig()
        self.topology = topology if topology is not None else Topology.openpose()
        self.peak_finder = PeakFinder(self.config.peaks)
        self.assembler = PoseAssembler(self.config.limbs, self.config.assembly)

    def _run(self, fn: Callable, items: Iterable) -> list:
        """Map fn over items, on a thread pool unless num_workers is 0 or 1"""
        num_workers = self.config.num_workers
        if num_workers is not None and num_workers <= 1:
            return [fn(item) for item in items]
        with ThreadPoolExecutor(max_workers=num_workers) as executor:
            # map() yields in submission order; list() waits for all tasks
            return list(executor.map(fn, items))

    def find_candidates(self, heatmaps: MapStack) -> List[List[Candidate]]:
        """
        Extract candidates for every keypoint type with global IDs

        Args:
            heatmaps: (C, H, W) stack; channels past num_keypoints are ignored

        Returns:
            Candidates per keypoint type
        """
        heatmaps = as_map_stack(heatmaps, "heatmaps")
        num_keypoints = self.topology.num_keypoints
        if heatmaps.shape[0] < num_keypoints:
            raise ValidationError(
                f"Expected at least {num_keypoints} heatmap channels, got {heatmaps.shape[0]}"
            )
        local_peaks = self._run(
            lambda keypoint_type: self.peak_finder(heatmaps[keypoint_type], keypoint_type),
            range(num_keypoints),
        )
        return assign_global_ids(local_peaks)

    def match_limbs(
        self,
        peaks_per_type: Sequence[Sequence[Candidate]],
        pafs: MapStack
    ) -> List[List[Association]]:
        """
        Run per-limb matching for the whole topology

        Returns:
            Associations per limb, in limb-table order
        """
        pafs = as_map_stack(pafs, "pafs")
        return self._run(
            lambda limb: self.assembler.match(
                limb, peaks_per_type[limb.type_a], peaks_per_type[limb.type_b], pafs
            ),
            self.topology.limbs,
        )

    def extract(self, heatmaps: MapStack, pafs: MapStack) -> List[Pose]:
        """
        Decode poses from heatmaps and PAFs

        Args:
            heatmaps: (C, H, W) keypoint heatmaps, optionally with a trailing
                background channel
            pafs: (P, H, W) part affinity fields, x/y channel per limb as in
                the topology

        Returns:
            Poses in merge order

        Raises:
            ShapeMismatchError: If map heights/widths disagree
            ValidationError: If channel counts do not fit the topology
        """
        heatmaps = as_map_stack(heatmaps, "heatmaps")
        pafs = as_map_stack(pafs, "pafs")
        validate_maps(heatmaps, pafs, self.topology)

        peaks_per_type = self.find_candidates(heatmaps)
        logger.debug("Candidates per keypoint type: %s", [len(peaks) for peaks in peaks_per_type])

        associations_per_limb = self.match_limbs(peaks_per_type, pafs)
        logger.debug("Associations per limb: %s", [len(a) for a in associations_per_limb])

        candidates = [candidate for peaks in peaks_per_type for candidate in peaks]
        poses = self.assembler.assemble(
            associations_per_limb,
            self.topology.limbs,
            candidates,
            self.topology.num_keypoints,
        )
        logger.debug("Extracted %d poses", len(poses))
        return poses


def extract_poses(
    heatmaps: MapStack,
    pafs: MapStack,
    config: Optional[PAFPoseConfig] = None,
    topology: Optional[Topology] = None
) -> List[Pose]:
    """
    Decode poses with a one-off PoseExtractor

    Args:
        heatmaps: (C, H, W) keypoint heatmaps
        pafs: (P, H, W) part affinity fields
        config: Decoder configuration
        topology: Limb table (COCO-18 OpenPose when None)

    Returns:
        Poses in merge order
    """
    return PoseExtractor(config, topology).extract(heatmaps, pafs)
