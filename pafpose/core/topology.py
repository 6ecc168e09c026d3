"""
Limb topology for PAF grouping

A Topology is the ordered limb table together with the number of keypoint
types it spans. Limb order is the merge order used by the assembler, so it
is kept exactly as given.
"""

from typing import Iterable, List, Optional, Sequence, Union

from .constants import OPENPOSE_LIMBS, OPENPOSE_KEYPOINT_NAMES
from .exceptions import TopologyError
from .types import LimbDefinition

LimbLike = Union[LimbDefinition, Sequence[int]]


class Topology:
    """
    Validated limb table

    Example:
        >>> from pafpose.core.topology import Topology
        >>> chain = Topology([(0, 1, 0, 1), (1, 2, 2, 3)], num_keypoints=3)
        >>> chain.num_pafs
        4
    """

    def __init__(
        self,
        limbs: Iterable[LimbLike],
        num_keypoints: Optional[int] = None,
        keypoint_names: Optional[Sequence[str]] = None
    ):
        """
        Build and validate a topology

        Args:
            limbs: Limb definitions or (type_a, type_b, paf_x, paf_y) rows
            num_keypoints: Number of keypoint types (default: derived from
                keypoint_names, else from the highest type in the table)
            keypoint_names: Optional names in keypoint-type order

        Raises:
            TopologyError: If the table is empty, references invalid types
                or channels, or leaves a keypoint type without a limb
        """
        self.limbs: List[LimbDefinition] = [
            limb if isinstance(limb, LimbDefinition) else LimbDefinition.from_tuple(limb)
            for limb in limbs
        ]
        if not self.limbs:
            raise TopologyError("Topology needs at least one limb")

        if num_keypoints is None:
            if keypoint_names is not None:
                num_keypoints = len(keypoint_names)
            else:
                num_keypoints = 1 + max(max(limb.type_a, limb.type_b) for limb in self.limbs)
        self.num_keypoints = int(num_keypoints)

        if keypoint_names is not None and len(keypoint_names) != self.num_keypoints:
            raise TopologyError(
                f"Got {len(keypoint_names)} keypoint names for {self.num_keypoints} keypoint types"
            )
        self.keypoint_names = list(keypoint_names) if keypoint_names is not None else None

        self._validate()

    def _validate(self) -> None:
        covered = set()
        for index, limb in enumerate(self.limbs):
            for keypoint_type in (limb.type_a, limb.type_b):
                if keypoint_type < 0 or keypoint_type >= self.num_keypoints:
                    raise TopologyError(
                        f"Limb {index} references keypoint type {keypoint_type}, "
                        f"expected [0, {self.num_keypoints})"
                    )
            if limb.type_a == limb.type_b:
                raise TopologyError(f"Limb {index} connects keypoint type {limb.type_a} to itself")
            if limb.paf_x < 0 or limb.paf_y < 0:
                raise TopologyError(f"Limb {index} has a negative PAF channel")
            covered.update((limb.type_a, limb.type_b))

        missing = sorted(set(range(self.num_keypoints)) - covered)
        if missing:
            raise TopologyError(f"Keypoint types not covered by any limb: {missing}")

    @property
    def num_pafs(self) -> int:
        """Minimum number of PAF channels the table needs"""
        return 1 + max(max(limb.paf_x, limb.paf_y) for limb in self.limbs)

    def __len__(self) -> int:
        return len(self.limbs)

    def __iter__(self):
        return iter(self.limbs)

    def __getitem__(self, index: int) -> LimbDefinition:
        return self.limbs[index]

    def __repr__(self) -> str:
        return f"Topology(num_keypoints={self.num_keypoints}, num_limbs={len(self.limbs)})"

    @classmethod
    def openpose(cls) -> "Topology":
        """COCO-18 OpenPose body model"""
        return cls(OPENPOSE_LIMBS, keypoint_names=OPENPOSE_KEYPOINT_NAMES)
