from .checkin import CheckinOutcome, CheckinStatus, InviteSummary, get_invite_by_token, resolve
from .scanner import ScanSession, ScanSessionRegistry, ScanState, ScannerBusy, scan_sessions
from .card import (
    compose,
    compose_with_metadata,
    generate_qr,
    render_invitation_card,
    render_invitation_card_bytes,
)
from .contacts import (
    create_contact,
    delete_contact,
    get_contact,
    get_contacts,
    import_contacts_csv,
    update_contact,
)
from .events import (
    create_event,
    delete_event,
    get_event,
    get_event_stats,
    get_events,
    set_event_image,
    update_event,
)
from .invites import (
    create_blank_invites,
    create_contact_invites,
    delete_invite,
    get_event_invites,
    get_invite,
    update_invite,
)
from .templates import create_template, delete_template, get_template, get_templates, update_template
from .export import ExportCancelled, ExportResult, export_invitations

__all__ = [
    # check-in
    "CheckinOutcome",
    "CheckinStatus",
    "InviteSummary",
    "get_invite_by_token",
    "resolve",
    # scanning
    "ScanSession",
    "ScanSessionRegistry",
    "ScanState",
    "ScannerBusy",
    "scan_sessions",
    # cards
    "compose",
    "compose_with_metadata",
    "generate_qr",
    "render_invitation_card",
    "render_invitation_card_bytes",
    # contacts
    "create_contact",
    "delete_contact",
    "get_contact",
    "get_contacts",
    "import_contacts_csv",
    "update_contact",
    # events
    "create_event",
    "delete_event",
    "get_event",
    "get_event_stats",
    "get_events",
    "set_event_image",
    "update_event",
    # invites
    "create_blank_invites",
    "create_contact_invites",
    "delete_invite",
    "get_event_invites",
    "get_invite",
    "update_invite",
    # templates
    "create_template",
    "delete_template",
    "get_template",
    "get_templates",
    "update_template",
    # export
    "ExportCancelled",
    "ExportResult",
    "export_invitations",
]
