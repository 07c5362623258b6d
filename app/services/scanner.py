"""Door scanning sessions.

A session is what a door device holds while its camera is open. It accepts
one decoded code at a time: after a code is submitted the session shows the
outcome and refuses further codes until the operator acknowledges it. This
keeps a code that stays in front of the camera from being counted twice.

    WAITING --submit--> DECIDING --> SHOWING(outcome) --acknowledge--> WAITING
"""
import enum
import threading
import uuid
from dataclasses import replace
from datetime import datetime
from typing import Callable, Dict, Optional

import structlog
from sqlalchemy.orm import Session

from app.core.utils import utcnow
from app.services.checkin import CheckinOutcome, resolve

logger = structlog.get_logger(__name__)


class ScanState(str, enum.Enum):
    WAITING = "waiting"
    DECIDING = "deciding"
    SHOWING = "showing"


class ScannerBusy(Exception):
    """Raised when a code is submitted while the session is not waiting."""

    def __init__(self, state: ScanState):
        self.state = state
        super().__init__(f"Scanner is not accepting codes (state: {state.value})")


class ScanSession:
    """State machine for one door device."""

    def __init__(
        self,
        event_id: Optional[uuid.UUID] = None,
        resolver: Callable[..., CheckinOutcome] = resolve,
    ):
        self.id = uuid.uuid4()
        self.event_id = event_id
        self.created = utcnow()
        self.state = ScanState.WAITING
        self.outcome: Optional[CheckinOutcome] = None
        self.scans = 0
        self._resolver = resolver
        self._lock = threading.Lock()

    def submit(self, db: Session, scanned_text: str) -> CheckinOutcome:
        """
        Hand one decoded code to the session.

        Raises:
            ScannerBusy: If an outcome is still on display or a code is being decided
        """
        with self._lock:
            if self.state is not ScanState.WAITING:
                raise ScannerBusy(self.state)
            self.state = ScanState.DECIDING

        try:
            outcome = self._resolver(db, scanned_text, event_id=self.event_id)
        except Exception:
            # resolve() reports its own failures as outcomes; anything else is a bug,
            # but the door must not stay stuck in DECIDING because of it
            with self._lock:
                self.state = ScanState.WAITING
            raise

        with self._lock:
            # Keep no ORM objects past the request that loaded them
            self.outcome = replace(outcome, invite=None)
            self.state = ScanState.SHOWING
            self.scans += 1

        logger.info(
            "scan_session_outcome",
            session_id=str(self.id),
            status=outcome.status.value,
        )
        return outcome

    def acknowledge(self) -> None:
        """Dismiss the displayed outcome and resume scanning. No-op while waiting."""
        with self._lock:
            if self.state is ScanState.DECIDING:
                raise ScannerBusy(self.state)
            self.state = ScanState.WAITING
            self.outcome = None


class ScanSessionRegistry:
    """In-process store of open scan sessions."""

    def __init__(self):
        self._sessions: Dict[uuid.UUID, ScanSession] = {}
        self._lock = threading.Lock()

    def open(self, event_id: Optional[uuid.UUID] = None) -> ScanSession:
        session = ScanSession(event_id=event_id)
        with self._lock:
            self._sessions[session.id] = session
        logger.info("scan_session_opened", session_id=str(session.id), event_id=str(event_id) if event_id else None)
        return session

    def get(self, session_id: uuid.UUID) -> Optional[ScanSession]:
        with self._lock:
            return self._sessions.get(session_id)

    def close(self, session_id: uuid.UUID) -> bool:
        with self._lock:
            session = self._sessions.pop(session_id, None)
        if session is not None:
            logger.info("scan_session_closed", session_id=str(session_id), scans=session.scans)
        return session is not None

    def close_idle(self, older_than: datetime) -> int:
        """Drop sessions created before ``older_than`` that are not mid-decision."""
        with self._lock:
            stale = [
                sid for sid, s in self._sessions.items()
                if s.created < older_than and s.state is not ScanState.DECIDING
            ]
            for sid in stale:
                del self._sessions[sid]
        return len(stale)

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)


# Global registry used by the API
scan_sessions = ScanSessionRegistry()
