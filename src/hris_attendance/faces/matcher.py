"""Face matching by Euclidean distance between descriptors."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any, Iterable, Optional, Sequence

import numpy as np

from ..core.constants import DEFAULT_FACE_MATCH_MIN_SCORE, FACE_DISTANCE_SCALE
from .descriptor import DescriptorDecodeError, normalize_descriptor

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FaceCandidate:
    """A registered face: any identifying object plus its stored descriptor."""

    employee: Any
    descriptor: Any


@dataclass(frozen=True)
class FaceMatch:
    employee: Any
    score: int
    distance: float


def euclidean_distance(a: Sequence[float], b: Sequence[float]) -> float:
    va = np.asarray(a, dtype=np.float64)
    vb = np.asarray(b, dtype=np.float64)
    if va.shape != vb.shape:
        raise ValueError(f"Descriptor length mismatch: {va.shape[0]} != {vb.shape[0]}")
    return float(np.linalg.norm(va - vb))


def similarity_score(distance: float) -> int:
    """0..100; a distance of 0.6 or more scores 0."""
    # Halves round up: 62.5 scores 63.
    return int(math.floor(max(0.0, 1.0 - distance / FACE_DISTANCE_SCALE) * 100 + 0.5))


def match_best_employee(
    live: Any,
    candidates: Iterable[FaceCandidate],
    *,
    min_score: int = DEFAULT_FACE_MATCH_MIN_SCORE,
) -> Optional[FaceMatch]:
    """Best-scoring candidate at or above `min_score`; the first one wins ties."""
    live_vec = normalize_descriptor(live)
    best: Optional[FaceMatch] = None

    for candidate in candidates:
        try:
            stored = normalize_descriptor(candidate.descriptor)
        except DescriptorDecodeError as e:
            logger.warning("Skipping face candidate %r: %s", candidate.employee, e)
            continue
        if len(stored) != len(live_vec):
            logger.debug("Skipping face candidate %r: length %d != %d", candidate.employee, len(stored), len(live_vec))
            continue

        distance = euclidean_distance(live_vec, stored)
        score = similarity_score(distance)
        if score < min_score:
            continue
        if best is None or score > best.score:
            best = FaceMatch(employee=candidate.employee, score=score, distance=distance)

    return best
