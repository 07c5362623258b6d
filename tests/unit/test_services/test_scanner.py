"""Unit tests for door scan sessions."""
import uuid
from datetime import timedelta

import pytest

from app.core.utils import utcnow
from app.services.checkin import CheckinOutcome, CheckinStatus
from app.services.scanner import ScannerBusy, ScanSession, ScanSessionRegistry, ScanState


def fixed_resolver(status=CheckinStatus.FIRST_CHECK_IN, calls=None):
    """Resolver stand-in that needs no database."""
    def _resolve(db, scanned_text, event_id=None):
        if calls is not None:
            calls.append((scanned_text, event_id))
        return CheckinOutcome(status=status, invite=object(), prior_count=0)
    return _resolve


@pytest.mark.unit
class TestScanSession:
    """State machine transitions."""

    def test_starts_waiting(self):
        session = ScanSession(resolver=fixed_resolver())

        assert session.state is ScanState.WAITING
        assert session.outcome is None
        assert session.scans == 0

    def test_submit_shows_outcome(self):
        session = ScanSession(resolver=fixed_resolver())

        outcome = session.submit(None, "code")

        assert outcome.status is CheckinStatus.FIRST_CHECK_IN
        assert session.state is ScanState.SHOWING
        assert session.outcome.status is CheckinStatus.FIRST_CHECK_IN
        assert session.scans == 1

    def test_displayed_outcome_holds_no_orm_object(self):
        session = ScanSession(resolver=fixed_resolver())

        returned = session.submit(None, "code")

        assert returned.invite is not None
        assert session.outcome.invite is None

    def test_submit_while_showing_is_refused(self):
        """A code lingering in front of the camera is not decided twice."""
        calls = []
        session = ScanSession(resolver=fixed_resolver(calls=calls))
        session.submit(None, "code")

        with pytest.raises(ScannerBusy) as exc_info:
            session.submit(None, "code")

        assert exc_info.value.state is ScanState.SHOWING
        assert len(calls) == 1
        assert session.scans == 1

    def test_acknowledge_resumes_scanning(self):
        session = ScanSession(resolver=fixed_resolver())
        session.submit(None, "code")

        session.acknowledge()

        assert session.state is ScanState.WAITING
        assert session.outcome is None
        session.submit(None, "code")
        assert session.scans == 2

    def test_acknowledge_while_waiting_is_noop(self):
        session = ScanSession(resolver=fixed_resolver())

        session.acknowledge()

        assert session.state is ScanState.WAITING

    def test_busy_while_deciding(self):
        """Neither a second code nor an acknowledgement is accepted mid-decision."""
        observed = []

        def resolver(db, scanned_text, event_id=None):
            observed.append(session.state)
            for attempt in (lambda: session.submit(None, "other"), session.acknowledge):
                try:
                    attempt()
                except ScannerBusy as e:
                    observed.append(e.state)
            return CheckinOutcome(status=CheckinStatus.REPEAT)

        session = ScanSession(resolver=resolver)
        session.submit(None, "code")

        assert observed == [ScanState.DECIDING, ScanState.DECIDING, ScanState.DECIDING]
        assert session.state is ScanState.SHOWING

    def test_resolver_error_returns_to_waiting(self):
        def broken(db, scanned_text, event_id=None):
            raise RuntimeError("boom")

        session = ScanSession(resolver=broken)

        with pytest.raises(RuntimeError):
            session.submit(None, "code")

        assert session.state is ScanState.WAITING
        assert session.scans == 0

    def test_event_binding_passed_to_resolver(self):
        calls = []
        event_id = uuid.uuid4()
        session = ScanSession(event_id=event_id, resolver=fixed_resolver(calls=calls))

        session.submit(None, "code")

        assert calls == [("code", event_id)]

    def test_rejections_also_wait_for_acknowledgement(self):
        session = ScanSession(resolver=fixed_resolver(CheckinStatus.MALFORMED))
        session.submit(None, "garbage")

        assert session.state is ScanState.SHOWING
        with pytest.raises(ScannerBusy):
            session.submit(None, "garbage")


@pytest.mark.unit
class TestScanSessionRegistry:
    """In-process session store."""

    def test_open_get_close(self):
        registry = ScanSessionRegistry()

        session = registry.open()

        assert registry.get(session.id) is session
        assert len(registry) == 1
        assert registry.close(session.id) is True
        assert registry.get(session.id) is None
        assert registry.close(session.id) is False
        assert len(registry) == 0

    def test_open_bound_to_event(self):
        registry = ScanSessionRegistry()
        event_id = uuid.uuid4()

        session = registry.open(event_id)

        assert session.event_id == event_id

    def test_close_idle_drops_old_sessions(self):
        registry = ScanSessionRegistry()
        old = registry.open()
        fresh = registry.open()
        old.created = utcnow() - timedelta(days=2)

        dropped = registry.close_idle(utcnow() - timedelta(hours=24))

        assert dropped == 1
        assert registry.get(old.id) is None
        assert registry.get(fresh.id) is fresh

    def test_close_idle_keeps_deciding_sessions(self):
        registry = ScanSessionRegistry()
        session = registry.open()
        session.created = utcnow() - timedelta(days=2)
        session.state = ScanState.DECIDING

        assert registry.close_idle(utcnow()) == 0
        assert registry.get(session.id) is session
