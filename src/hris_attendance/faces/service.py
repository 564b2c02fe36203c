from __future__ import annotations

import logging
from typing import Any

from ..core.constants import DEFAULT_FACE_MATCH_MIN_SCORE
from ..core.exceptions import NotFoundError, ValidationError
from ..employees.repository import EmployeeRepository
from .descriptor import DescriptorDecodeError
from .matcher import FaceCandidate, FaceMatch, match_best_employee

logger = logging.getLogger(__name__)


class FaceService:
    """Server-side identification against every registered face."""

    def __init__(self, employees: EmployeeRepository, *, min_score: int = DEFAULT_FACE_MATCH_MIN_SCORE):
        self._employees = employees
        self._min_score = int(min_score)

    def candidates(self) -> list[FaceCandidate]:
        return [FaceCandidate(employee=e, descriptor=e.face_descriptor) for e in self._employees.list_with_faces()]

    def identify(self, descriptor: Any) -> FaceMatch:
        if descriptor is None:
            raise ValidationError("descriptor is required")
        try:
            found = match_best_employee(descriptor, self.candidates(), min_score=self._min_score)
        except DescriptorDecodeError as e:
            raise ValidationError(f"Invalid face descriptor: {e}")

        if found is None:
            logger.info("No face match at min score %d", self._min_score)
            raise NotFoundError("Face not recognized", code="NoMatch")
        return found
