"""Check-in business logic.

A scan is classified into exactly one outcome. Only a successful
classification (first visit or repeat visit) writes anything, and it writes
exactly one CheckIn row. Every other path leaves the store untouched.
"""
import enum
import uuid
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Callable, Optional

import structlog
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.db.models import CheckIn, Invite
from app.core.locks import KeyedLock, checkin_locks
from app.core.sanitization import parse_token
from app.core.utils import utcnow

logger = structlog.get_logger(__name__)


class CheckinStatus(str, enum.Enum):
    FIRST_CHECK_IN = "first_check_in"
    REPEAT = "repeat"
    LIMIT_REACHED = "limit_reached"
    NOT_FOUND = "not_found"
    MALFORMED = "malformed"
    PERSISTENCE_FAILURE = "persistence_failure"


@dataclass(frozen=True)
class InviteSummary:
    """Plain copy of the invite fields a door display needs, safe to keep after the session closes."""
    id: uuid.UUID
    event_id: uuid.UUID
    display_name: str
    event_title: str
    checkin_count: int
    max_checkins: Optional[int]

    @classmethod
    def from_invite(cls, invite: Invite) -> "InviteSummary":
        return cls(
            id=invite.id,
            event_id=invite.event_id,
            display_name=invite.display_name,
            event_title=invite.event.title,
            checkin_count=invite.checkin_count,
            max_checkins=invite.max_checkins,
        )


@dataclass(frozen=True)
class CheckinOutcome:
    """Result of resolving one scan.

    ``prior_count`` and ``previous_checkin_at`` always describe the invite as
    it was before this scan, so a door display can say "visit N" or
    "last seen 5 minutes ago" accurately.
    """
    status: CheckinStatus
    invite: Optional[Invite] = None
    summary: Optional[InviteSummary] = None
    prior_count: int = 0
    previous_checkin_at: Optional[datetime] = None
    reason: Optional[str] = None

    @property
    def admitted(self) -> bool:
        return self.status in (CheckinStatus.FIRST_CHECK_IN, CheckinStatus.REPEAT)


InviteLookup = Callable[[Session, str], Optional[Invite]]


def get_invite_by_token(db: Session, token: str) -> Optional[Invite]:
    """Find the invite whose QR token is ``token``. Pure read."""
    return db.query(Invite).filter(Invite.id == uuid.UUID(token)).first()


def resolve(
    db: Session,
    scanned_text: str,
    lookup: InviteLookup = get_invite_by_token,
    event_id: Optional[uuid.UUID] = None,
    locks: KeyedLock = checkin_locks,
) -> CheckinOutcome:
    """
    Resolve a scanned code into a check-in outcome.

    Args:
        db: Database session
        scanned_text: Raw decoder output (untrusted)
        lookup: Finds an invite by canonical token
        event_id: When set, invites of other events are treated as unknown
        locks: Per-invite lock registry serializing scans of the same code

    Returns:
        CheckinOutcome. Never raises for bad input, unknown codes, exhausted
        invites or database errors; each is its own status.
    """
    try:
        token = parse_token(scanned_text)
    except ValueError as e:
        logger.info("checkin_malformed", reason=str(e))
        return CheckinOutcome(status=CheckinStatus.MALFORMED, reason=str(e))

    with locks.hold(token):
        # Drop anything cached in this session so the count below is read fresh
        db.expire_all()

        try:
            invite = lookup(db, token)
            if invite is not None:
                before = InviteSummary.from_invite(invite)
                previous_checkin_at = invite.last_checkin_at
        except SQLAlchemyError as e:
            db.rollback()
            logger.error("checkin_lookup_failed", token=token, error=str(e))
            return CheckinOutcome(
                status=CheckinStatus.PERSISTENCE_FAILURE,
                reason="Invitation could not be looked up",
            )

        if invite is None or (event_id is not None and invite.event_id != event_id):
            logger.info("checkin_not_found", token=token, event_id=str(event_id) if event_id else None)
            return CheckinOutcome(status=CheckinStatus.NOT_FOUND, reason="No invitation matches this code")

        prior_count = before.checkin_count

        if invite.max_checkins is not None and prior_count >= invite.max_checkins:
            logger.info(
                "checkin_limit_reached",
                invite_id=token,
                checkins=prior_count,
                max_checkins=invite.max_checkins,
            )
            return CheckinOutcome(
                status=CheckinStatus.LIMIT_REACHED,
                invite=invite,
                summary=before,
                prior_count=prior_count,
                previous_checkin_at=previous_checkin_at,
            )

        try:
            invite.checkins.append(CheckIn(created=utcnow()))
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            logger.error("checkin_persist_failed", invite_id=token, error=str(e))
            return CheckinOutcome(
                status=CheckinStatus.PERSISTENCE_FAILURE,
                invite=invite,
                summary=before,
                prior_count=prior_count,
                previous_checkin_at=previous_checkin_at,
                reason="Check-in could not be saved",
            )

        status = CheckinStatus.REPEAT if prior_count > 0 else CheckinStatus.FIRST_CHECK_IN
        logger.info(
            "checkin_recorded",
            invite_id=token,
            event_id=str(before.event_id),
            status=status.value,
            prior_count=prior_count,
        )
        return CheckinOutcome(
            status=status,
            invite=invite,
            summary=replace(before, checkin_count=prior_count + 1),
            prior_count=prior_count,
            previous_checkin_at=previous_checkin_at,
        )
