"""Bulk export of invitation cards."""
import io
import threading
import zipfile
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence

import structlog

from app.db.models import Invite
from app.core.utils import safe_filename
from app.services.card import render_invitation_card_bytes

logger = structlog.get_logger(__name__)


class ExportCancelled(Exception):
    """Raised when an export is abandoned before it finishes."""


@dataclass
class ExportResult:
    archive: bytes
    exported: int
    failed: List[str] = field(default_factory=list)  # display names of cards that could not be made


def card_filename(invite: Invite, position: int) -> str:
    """File name for the ``position``-th (1-based) card of an export."""
    return f"{safe_filename(invite.display_name)}_{position}.jpg"


def export_invitations(
    invites: Sequence[Invite],
    cancel_event: Optional[threading.Event] = None,
    render: Callable[[Invite], Optional[bytes]] = render_invitation_card_bytes,
) -> ExportResult:
    """
    Render every invite's card and pack them into one ZIP archive.

    A card that cannot be rendered is recorded in ``failed`` and skipped;
    it never aborts the batch. Nothing is written anywhere but the in-memory
    archive, so an abandoned export leaves no partial output behind.

    Args:
        invites: Invites to export, in output order
        cancel_event: Checked before each card; when set the export stops
        render: Produces encoded card bytes for an invite (None on failure)

    Raises:
        ExportCancelled: If ``cancel_event`` is set before the export completes
    """
    buffer = io.BytesIO()
    result = ExportResult(archive=b"", exported=0)

    with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_STORED) as archive:
        for position, invite in enumerate(invites, start=1):
            if cancel_event is not None and cancel_event.is_set():
                logger.info("export_cancelled", done=position - 1, total=len(invites))
                raise ExportCancelled(f"Export cancelled after {position - 1} of {len(invites)} cards")

            data = render(invite)
            if data is None:
                result.failed.append(invite.display_name)
                continue

            archive.writestr(card_filename(invite, position), data)
            result.exported += 1

    result.archive = buffer.getvalue()
    logger.info("export_completed", exported=result.exported, failed=len(result.failed))
    return result
