"""
Snap solver for canvas alignment.

Given the rectangle being moved (a single layer or a selection bounding
box) and the stationary rectangles around it (the canvas itself and every
non-selected layer), find at most one alignment per axis and report the
offset that realizes it plus the guide line to draw.

Candidates are scanned in priority order (canvas first, then siblings in
layer order) and the first pairing within the threshold wins. Within a
candidate the pairings are tried in this order:

    left<->left, left<->right, right<->right, right<->left, center<->center

(top/bottom for the vertical axis). The canvas only offers the inner
pairings (left<->left, right<->right, center<->center) so a layer never
snaps to the outside of the canvas.

The solver never mutates anything; guides are recomputed per call.
"""

import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence, Tuple

import numpy as np

from constants import SNAP_THRESHOLD
from models.transform import Rect

logger = logging.getLogger(__name__)


# (moving stop, candidate stop) index pairs into [low edge, high edge, center]
_PAIRS = np.array([(0, 0), (0, 1), (1, 1), (1, 0), (2, 2)])
_INNER_PAIRS = np.array([True, False, True, False, True])

AXES = ('x', 'y')
EDGE_INDEX = {'left': 0, 'right': 1, 'top': 0, 'bottom': 1}
EDGE_AXIS = {'left': 'x', 'right': 'x', 'top': 'y', 'bottom': 'y'}
GUIDE_ORIENTATION = {'x': 'vertical', 'y': 'horizontal'}


@dataclass
class SnapCandidate:
    """A stationary rectangle the moving geometry may align with"""
    rect: Rect
    inner_only: bool = False
    source_id: Optional[str] = None


@dataclass
class SnapGuide:
    """Advisory alignment line; vertical guides have an x position"""
    orientation: str
    position: float


@dataclass
class SnapResult:
    offset_x: float = 0.0
    offset_y: float = 0.0
    target_x: Optional[float] = None
    target_y: Optional[float] = None
    guides: List[SnapGuide] = field(default_factory=list)

    @property
    def snapped_x(self) -> bool:
        return self.target_x is not None

    @property
    def snapped_y(self) -> bool:
        return self.target_y is not None


def build_candidates(canvas_width: float, canvas_height: float,
                     siblings: Iterable[Tuple[str, Rect]]) -> List[SnapCandidate]:
    """Candidates in priority order: the canvas, then siblings as given"""
    candidates = [SnapCandidate(Rect(0.0, 0.0, canvas_width, canvas_height), inner_only=True)]
    for layer_id, rect in siblings:
        candidates.append(SnapCandidate(rect, source_id=layer_id))
    return candidates


def _axis_stops(rect: Rect, axis: str) -> Tuple[float, float, float]:
    if axis == 'x':
        return rect.left, rect.right, rect.center_x
    return rect.top, rect.bottom, rect.center_y


class SnapSolver:
    """Alignment search over a fixed candidate list

    Args:
        threshold: Snap distance in canvas units; a pairing matches when
            |target - moving| < threshold (strict)
    """

    def __init__(self, threshold: float = SNAP_THRESHOLD):
        self.threshold = float(threshold)

    def _stop_matrix(self, candidates: Sequence[SnapCandidate], axis: str) -> np.ndarray:
        return np.array([_axis_stops(c.rect, axis) for c in candidates], dtype=float).reshape(-1, 3)

    def _first_match(self, sources: np.ndarray, targets: np.ndarray,
                     allowed: np.ndarray) -> Optional[Tuple[float, float, int]]:
        """First allowed pairing within threshold in row-major order

        Args:
            sources: (P,) moving positions, one per pairing column
            targets: (N, P) candidate positions
            allowed: (N, P) pairing mask

        Returns:
            (offset, target, candidate row) or None
        """
        if targets.size == 0:
            return None
        diff = targets - sources[np.newaxis, :]
        mask = (np.abs(diff) < self.threshold) & allowed
        if not mask.any():
            return None
        row, col = divmod(int(np.argmax(mask)), mask.shape[1])
        return float(diff[row, col]), float(targets[row, col]), row

    def solve(self, moving: Rect, candidates: Sequence[SnapCandidate]) -> SnapResult:
        """Snap a whole rectangle (drag): one offset per axis

        Args:
            moving: Rectangle at its unsnapped position
            candidates: Stationary candidates in priority order

        Returns:
            SnapResult with per-axis offsets (0 when unmatched) and guides
        """
        result = SnapResult()
        inner_only = np.array([c.inner_only for c in candidates], dtype=bool)
        allowed = ~inner_only[:, np.newaxis] | _INNER_PAIRS[np.newaxis, :]

        for axis in AXES:
            stops = self._stop_matrix(candidates, axis)
            sources = np.array(_axis_stops(moving, axis), dtype=float)[_PAIRS[:, 0]]
            match = self._first_match(sources, stops[:, _PAIRS[:, 1]], allowed)
            if match is None:
                continue
            offset, target, row = match
            if axis == 'x':
                result.offset_x, result.target_x = offset, target
            else:
                result.offset_y, result.target_y = offset, target
            result.guides.append(SnapGuide(GUIDE_ORIENTATION[axis], target))
            logger.debug(f"Snap {axis}: offset {offset:.3f} to {target:.3f} "
                         f"(candidate {candidates[row].source_id or 'canvas'})")
        return result

    def snap_edge(self, edge: str, position: float,
                  candidates: Sequence[SnapCandidate]) -> Optional[float]:
        """Snap one moving edge (resize)

        Each candidate offers its same-side edge, then (siblings only)
        its opposite edge; e.g. a right edge tries candidate.right, then
        candidate.left.

        Args:
            edge: 'left', 'right', 'top' or 'bottom'
            position: Current position of that edge

        Returns:
            Target position, or None when nothing is within threshold
        """
        axis = EDGE_AXIS[edge]
        same = EDGE_INDEX[edge]
        stops = self._stop_matrix(candidates, axis)[:, [same, 1 - same]]
        inner_only = np.array([c.inner_only for c in candidates], dtype=bool)
        allowed = np.column_stack([np.ones(len(candidates), dtype=bool), ~inner_only])
        match = self._first_match(np.array([position, position], dtype=float), stops, allowed)
        if match is None:
            return None
        return match[1]

    def center_guides(self, rect: Rect, candidates: Sequence[SnapCandidate]) -> List[SnapGuide]:
        """Guides for candidate centers near the rectangle's center

        Advisory only: nothing moves.
        """
        guides = []
        for axis in AXES:
            centers = self._stop_matrix(candidates, axis)[:, 2]
            center = rect.center_x if axis == 'x' else rect.center_y
            near = centers[np.abs(centers - center) < self.threshold]
            for position in dict.fromkeys(near.tolist()):
                guides.append(SnapGuide(GUIDE_ORIENTATION[axis], position))
        return guides
