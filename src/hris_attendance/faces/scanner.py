"""Cancelable polling loop that turns camera frames into a face match."""

from __future__ import annotations

import logging
import threading
from enum import Enum
from typing import Any, Callable, Iterable, Optional

from ..core.constants import DEFAULT_FACE_MATCH_MIN_SCORE, DEFAULT_SCAN_INTERVAL_SECONDS
from .descriptor import DescriptorDecodeError
from .matcher import FaceCandidate, FaceMatch, match_best_employee

logger = logging.getLogger(__name__)


class ScanState(str, Enum):
    IDLE = "IDLE"
    SCANNING = "SCANNING"
    MATCHED = "MATCHED"
    CANCELLED = "CANCELLED"


class FaceScanSession:
    """State machine IDLE -> SCANNING -> MATCHED | CANCELLED.

    `detect` returns the live descriptor of the current frame or None when no
    face is visible. `release` frees the camera. `on_match` is called once,
    from the polling thread, when a match is committed.
    """

    def __init__(
        self,
        *,
        detect: Callable[[], Any],
        candidates: Callable[[], Iterable[FaceCandidate]],
        release: Optional[Callable[[], None]] = None,
        on_match: Optional[Callable[[FaceMatch], None]] = None,
        interval: float = DEFAULT_SCAN_INTERVAL_SECONDS,
        min_score: int = DEFAULT_FACE_MATCH_MIN_SCORE,
    ):
        self._detect = detect
        self._candidates = candidates
        self._release = release
        self._on_match = on_match
        self._interval = float(interval)
        self._min_score = int(min_score)

        self._lock = threading.Lock()
        self._cancelled = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._state = ScanState.IDLE
        self._match: Optional[FaceMatch] = None

    @property
    def state(self) -> ScanState:
        with self._lock:
            return self._state

    @property
    def match(self) -> Optional[FaceMatch]:
        with self._lock:
            return self._match

    def start(self) -> None:
        with self._lock:
            if self._state != ScanState.IDLE:
                raise RuntimeError(f"Cannot start a scan in state {self._state.value}")
            # Each run owns its token so a thread left over from a cancelled run stays cancelled.
            token = threading.Event()
            self._cancelled = token
            self._state = ScanState.SCANNING
            self._thread = threading.Thread(target=self._run, args=(token,), name="face-scan", daemon=True)
            self._thread.start()

    def poll_once(self, token: Optional[threading.Event] = None) -> Optional[FaceMatch]:
        """Run one detect + match step; commits and returns the match if any.

        `token` is the cancellation token of the run doing the polling. It
        defaults to the current run's token.
        """
        with self._lock:
            if token is None:
                token = self._cancelled
            if not self._is_live(token):
                return None

        live = self._detect()
        if live is None:
            return None
        try:
            found = match_best_employee(live, self._candidates(), min_score=self._min_score)
        except DescriptorDecodeError as e:
            logger.warning("Unusable live descriptor: %s", e)
            return None
        if found is None:
            return None

        with self._lock:
            # A cancel, a restart or an earlier match may have landed while detecting.
            if not self._is_live(token):
                return None
            self._state = ScanState.MATCHED
            self._match = found

        logger.info("Face matched %r (score %d)", found.employee, found.score)
        if self._on_match:
            self._on_match(found)
        return found

    def _is_live(self, token: threading.Event) -> bool:
        # Caller holds the lock.
        return token is self._cancelled and not token.is_set() and self._state == ScanState.SCANNING

    def _run(self, token: threading.Event) -> None:
        while not token.is_set():
            try:
                if self.poll_once(token) is not None:
                    return
            except Exception:
                logger.exception("Face scan step failed")
            if token.wait(self._interval):
                return

    def cancel(self) -> None:
        with self._lock:
            if self._state == ScanState.SCANNING:
                self._state = ScanState.CANCELLED
            self._cancelled.set()
            thread = self._thread

        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout=self._interval * 2)
        if self._release:
            self._release()

    def reset(self) -> None:
        """Back to IDLE after a match or cancel; the next start() scans again."""
        with self._lock:
            if self._state == ScanState.SCANNING:
                raise RuntimeError("Cancel the running scan before resetting")
            self._state = ScanState.IDLE
            self._match = None
            self._thread = None
