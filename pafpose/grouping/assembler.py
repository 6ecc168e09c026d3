"""
Pose assembly from limb associations

Two explicit stages:
1. match_limb: greedy one-to-one matching of candidates for a single limb
2. merge_associations: sequential merge of all limb matches into person
   subsets, in limb-table order

finalize_subsets then applies the joint-count and score thresholds and
resolves candidate IDs back to coordinates.

The merge is greedy and order-sensitive: the same associations processed in
a different order can yield different people.
"""

import logging
import numpy as np
from typing import Dict, List, Optional, Sequence

from ..core.config import AssemblyConfig, LimbConfig
from ..core.constants import (
    ABSENT_ID,
    ABSENT_COORDINATE,
    DEFAULT_MIN_JOINTS_NUMBER,
    DEFAULT_MIN_SUBSET_SCORE,
)
from ..core.types import Association, Candidate, LimbDefinition, Pose, PoseSubset
from .limb_scorer import LimbScorer

logger = logging.getLogger(__name__)


def match_limb(
    candidates_a: Sequence[Candidate],
    candidates_b: Sequence[Candidate],
    paf_x: np.ndarray,
    paf_y: np.ndarray,
    scorer: Optional[LimbScorer] = None
) -> List[Association]:
    """
    Greedily match candidates of a limb's two keypoint types

    Every (A, B) pair is scored; valid pairs are ranked by score descending,
    ties going to the lower id_a + id_b and then to discovery order. Pairs
    are accepted top-down unless either candidate is already used.

    Args:
        candidates_a: Candidates of the limb's first keypoint type
        candidates_b: Candidates of the limb's second keypoint type
        paf_x: PAF x-component for this limb (H, W)
        paf_y: PAF y-component for this limb (H, W)
        scorer: LimbScorer (default thresholds when None)

    Returns:
        Associations in acceptance order, rank = position in that order
    """
    if scorer is None:
        scorer = LimbScorer()
    if not candidates_a or not candidates_b:
        return []

    scored = []
    for cand_a in candidates_a:
        for cand_b in candidates_b:
            result = scorer(cand_a, cand_b, paf_x, paf_y)
            if result.valid:
                scored.append((result.score, cand_a.id, cand_b.id))

    # sorted() is stable: equal keys stay in discovery order
    scored = sorted(scored, key=lambda item: (-item[0], item[1] + item[2]))

    max_connections = min(len(candidates_a), len(candidates_b))
    used_a, used_b = set(), set()
    associations: List[Association] = []
    for score, id_a, id_b in scored:
        if id_a in used_a or id_b in used_b:
            continue
        associations.append(Association(id_a=id_a, id_b=id_b, score=score, rank=len(associations)))
        used_a.add(id_a)
        used_b.add(id_b)
        if len(associations) == max_connections:
            break

    return associations


class _SubsetArena:
    """
    Subsets stored by index with a candidate ID -> subset index registry

    Merged-away subsets stay in the list as None so indices never shift.
    """

    def __init__(self, num_keypoints: int, confidences: Dict[int, float]):
        self.num_keypoints = num_keypoints
        self.confidences = confidences
        self.subsets: List[Optional[PoseSubset]] = []
        self.owner: Dict[int, int] = {}
        self.discarded = 0

    def create(self, limb: LimbDefinition, association: Association) -> None:
        subset = PoseSubset.empty(self.num_keypoints)
        subset.assign(limb.type_a, association.id_a, self.confidences[association.id_a])
        subset.assign(limb.type_b, association.id_b, self.confidences[association.id_b])
        subset.score += association.score
        index = len(self.subsets)
        self.subsets.append(subset)
        self.owner[association.id_a] = index
        self.owner[association.id_b] = index

    def attach(self, index: int, keypoint_type: int, candidate_id: int, edge_score: float) -> None:
        subset = self.subsets[index]
        if subset.has(keypoint_type):
            # Slot already taken by another candidate of this type
            self.discarded += 1
            return
        subset.assign(keypoint_type, candidate_id, self.confidences[candidate_id] + edge_score)
        self.owner[candidate_id] = index

    def join(self, index_a: int, index_b: int, edge_score: float) -> None:
        if index_a == index_b:
            return
        keep, drop = min(index_a, index_b), max(index_a, index_b)
        kept, dropped = self.subsets[keep], self.subsets[drop]
        if kept.conflicts_with(dropped):
            self.discarded += 1
            return
        kept.absorb(dropped, edge_score)
        for candidate_id in dropped.assigned_ids():
            self.owner[candidate_id] = keep
        self.subsets[drop] = None

    def add(self, limb: LimbDefinition, association: Association) -> None:
        owner_a = self.owner.get(association.id_a)
        owner_b = self.owner.get(association.id_b)
        if owner_a is None and owner_b is None:
            self.create(limb, association)
        elif owner_b is None:
            self.attach(owner_a, limb.type_b, association.id_b, association.score)
        elif owner_a is None:
            self.attach(owner_b, limb.type_a, association.id_a, association.score)
        else:
            self.join(owner_a, owner_b, association.score)

    def alive(self) -> List[PoseSubset]:
        return [subset for subset in self.subsets if subset is not None]


def merge_associations(
    associations_per_limb: Sequence[Sequence[Association]],
    limbs: Sequence[LimbDefinition],
    candidates: Sequence[Candidate],
    num_keypoints: int
) -> List[PoseSubset]:
    """
    Merge per-limb associations into person subsets

    Limbs are processed in table order and associations in rank order. For
    an association (id_a, id_b):
    - neither candidate owned: start a new subset
    - one candidate owned: attach the other to that subset if its slot is free
    - both owned by different subsets: merge them unless they share a
      keypoint type
    Subset aggregate score is the sum of member confidences plus the scores
    of the edges that built it.

    Args:
        associations_per_limb: Associations for each limb, aligned with limbs
        limbs: Limb definitions in merge order
        candidates: All candidates, any order, with global IDs
        num_keypoints: Number of keypoint types

    Returns:
        Surviving subsets in creation order
    """
    confidences = {candidate.id: candidate.confidence for candidate in candidates}
    arena = _SubsetArena(num_keypoints, confidences)

    for limb, associations in zip(limbs, associations_per_limb):
        for association in associations:
            arena.add(limb, association)

    subsets = arena.alive()
    logger.debug(
        "Merged associations into %d subsets (%d associations discarded)",
        len(subsets), arena.discarded
    )
    return subsets


def finalize_subsets(
    subsets: Sequence[PoseSubset],
    candidates: Sequence[Candidate],
    min_joints_number: int = DEFAULT_MIN_JOINTS_NUMBER,
    min_subset_score: float = DEFAULT_MIN_SUBSET_SCORE
) -> List[Pose]:
    """
    Threshold subsets and resolve candidate IDs to coordinates

    Args:
        subsets: Subsets from merge_associations
        candidates: All candidates with global IDs
        min_joints_number: Minimum number of present keypoints
        min_subset_score: Minimum aggregate score

    Returns:
        Poses in subset order; absent keypoints at (-1, -1)
    """
    by_id = {candidate.id: candidate for candidate in candidates}
    poses = []
    for subset in subsets:
        if subset.num_joints < min_joints_number or subset.score < min_subset_score:
            continue
        keypoints = tuple(
            by_id[candidate_id].position if candidate_id != ABSENT_ID else ABSENT_COORDINATE
            for candidate_id in subset.peak_ids
        )
        poses.append(Pose(keypoints=keypoints, score=float(subset.score), peak_ids=tuple(subset.peak_ids)))
    return poses


class PoseAssembler:
    """
    Two-stage limb matching and pose merging

    Example:
        >>> from pafpose.grouping import PoseAssembler
        >>> assembler = PoseAssembler()
        >>> matches = [assembler.match(limb, peaks[limb.type_a], peaks[limb.type_b], pafs)
        ...            for limb in topology]
        >>> poses = assembler.assemble(matches, topology.limbs, candidates, topology.num_keypoints)
    """

    def __init__(
        self,
        limb_config: Optional[LimbConfig] = None,
        assembly_config: Optional[AssemblyConfig] = None
    ):
        self.scorer = LimbScorer(limb_config)
        self.config = assembly_config if assembly_config is not None else AssemblyConfig()

    def match(
        self,
        limb: LimbDefinition,
        candidates_a: Sequence[Candidate],
        candidates_b: Sequence[Candidate],
        pafs: Sequence[np.ndarray]
    ) -> List[Association]:
        """Stage 1 for one limb, reading its channels out of the PAF stack"""
        return match_limb(candidates_a, candidates_b, pafs[limb.paf_x], pafs[limb.paf_y], self.scorer)

    def assemble(
        self,
        associations_per_limb: Sequence[Sequence[Association]],
        limbs: Sequence[LimbDefinition],
        candidates: Sequence[Candidate],
        num_keypoints: int
    ) -> List[Pose]:
        """Stage 2 plus thresholding"""
        subsets = merge_associations(associations_per_limb, limbs, candidates, num_keypoints)
        return finalize_subsets(
            subsets,
            candidates,
            min_joints_number=self.config.min_joints_number,
            min_subset_score=self.config.min_subset_score,
        )
