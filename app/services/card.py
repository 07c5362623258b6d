"""Invitation card rendering.

Cards are a background image with the invite's QR code pasted on top.
Placement is normalized to the background:

    edge = size_fraction * min(width, height)
    left = position_x * width  - edge / 2
    top  = position_y * height - edge / 2

so (position_x, position_y) is the centre of the code. Positions near the
edges put part of the code off-canvas; that is allowed.

Every function here returns None instead of a placeholder when it cannot
produce an image, so callers can tell "unavailable" apart from "blank".
"""
import io
import warnings
from dataclasses import dataclass
from typing import Optional, Union

import qrcode
import qrcode.exceptions
import structlog
from PIL import Image, ImageOps, UnidentifiedImageError
from PIL.PngImagePlugin import PngInfo

from app.core.config import settings
from app.core.constants import QR_BORDER_MODULES
from app.db.models import Invite

logger = structlog.get_logger(__name__)

# EXIF tags (IFD0, ASCII)
EXIF_DOCUMENT_NAME = 0x010D
EXIF_IMAGE_DESCRIPTION = 0x010E

Background = Union[bytes, Image.Image, None]


@dataclass(frozen=True)
class CardLayout:
    """Where the background comes from and where the code goes on it."""
    background: Optional[bytes]
    position_x: float
    position_y: float
    size_fraction: float


def generate_qr(payload: str, size: Optional[int] = None) -> Optional[Image.Image]:
    """
    Render ``payload`` as a square QR bitmap.

    Uses high error correction (~30% damage tolerance) so a code printed over
    a busy background or partly covered by a thumb still scans.

    Args:
        payload: Text to encode
        size: Edge length in pixels (defaults to QR_RENDER_SIZE)

    Returns:
        An RGB image, or None if the payload is empty or does not fit a QR code
    """
    if not payload:
        return None

    size = size or settings.QR_RENDER_SIZE

    qr = qrcode.QRCode(
        error_correction=qrcode.constants.ERROR_CORRECT_H,
        box_size=10,
        border=QR_BORDER_MODULES,
    )
    try:
        qr.add_data(payload)
        qr.make(fit=True)
    except (qrcode.exceptions.DataOverflowError, ValueError) as e:
        logger.warning("qr_generation_failed", error=str(e), payload_length=len(payload))
        return None

    image = qr.make_image(fill_color="black", back_color="white").get_image().convert("RGB")
    # Nearest neighbour keeps module edges hard at any scale
    return image.resize((size, size), Image.Resampling.NEAREST)


def decode_image(data: bytes) -> Optional[Image.Image]:
    """
    Decode image bytes into an RGB image, honouring EXIF orientation.

    Images over Pillow's MAX_IMAGE_PIXELS are refused before their pixels are
    decoded, so a small file with huge dimensions cannot exhaust memory.
    """
    try:
        with warnings.catch_warnings():
            warnings.simplefilter("error", Image.DecompressionBombWarning)
            image = Image.open(io.BytesIO(data))
            image.load()
    except (
        Image.DecompressionBombError,
        Image.DecompressionBombWarning,
        UnidentifiedImageError,
        OSError,
        ValueError,
    ) as e:
        logger.warning("image_decode_failed", error=str(e), size=len(data))
        return None
    return ImageOps.exif_transpose(image).convert("RGB")


def qr_rectangle(
    width: int, height: int, position_x: float, position_y: float, size_fraction: float
) -> tuple:
    """Return (left, top, edge) in whole pixels for a code on a width x height background."""
    edge = size_fraction * min(width, height)
    left = position_x * width - edge / 2
    top = position_y * height - edge / 2
    return round(left), round(top), max(1, round(edge))


def compose(
    background: Background,
    payload: str,
    position_x: float,
    position_y: float,
    size_fraction: float,
) -> Optional[Image.Image]:
    """
    Paste a QR code for ``payload`` onto ``background``.

    Args:
        background: Encoded image bytes, a decoded image, or None
        payload: QR payload (the invite token)
        position_x: Horizontal centre of the code, fraction of width
        position_y: Vertical centre of the code, fraction of height
        size_fraction: Code edge as a fraction of the shorter background side

    Returns:
        The composed image; the bare QR code if there is no background;
        None if the background cannot be decoded or the code cannot be made.
    """
    qr_image = generate_qr(payload)
    if qr_image is None:
        return None

    if background is None:
        return qr_image

    if isinstance(background, Image.Image):
        canvas = background.convert("RGB")
    else:
        canvas = decode_image(background)
        if canvas is None:
            return None

    left, top, edge = qr_rectangle(canvas.width, canvas.height, position_x, position_y, size_fraction)
    scaled = qr_image.resize((edge, edge), Image.Resampling.LANCZOS)

    # Background first at the origin, code on top; paste clips off-canvas parts
    card = canvas.copy()
    card.paste(scaled, (left, top))
    return card


def encode_image(
    image: Image.Image,
    image_format: str = "JPEG",
    guest_name: Optional[str] = None,
    event_title: Optional[str] = None,
) -> bytes:
    """Encode ``image``, embedding guest and event names as text metadata when given."""
    image_format = image_format.upper()
    buffer = io.BytesIO()

    if image_format == "PNG":
        info = PngInfo()
        if guest_name:
            info.add_itxt("Description", f"Invitation for {guest_name}")
            info.add_itxt("Author", guest_name)
        if event_title:
            info.add_itxt("Title", event_title)
        image.save(buffer, format="PNG", pnginfo=info)
    elif image_format in ("JPEG", "JPG"):
        exif = Image.Exif()
        if guest_name:
            exif[EXIF_IMAGE_DESCRIPTION] = f"Invitation for {guest_name}"
        if event_title:
            exif[EXIF_DOCUMENT_NAME] = event_title
        image.save(buffer, format="JPEG", quality=settings.CARD_JPEG_QUALITY, exif=exif)
    else:
        raise ValueError(f"Unsupported card format: {image_format}")

    return buffer.getvalue()


def compose_with_metadata(
    background: Background,
    payload: str,
    position_x: float,
    position_y: float,
    size_fraction: float,
    guest_name: str,
    event_title: str,
    image_format: str = "JPEG",
) -> Optional[bytes]:
    """Compose a card and encode it with guest/event metadata. None if composition fails."""
    image = compose(background, payload, position_x, position_y, size_fraction)
    if image is None:
        return None
    return encode_image(image, image_format, guest_name=guest_name, event_title=event_title)


def card_layout(invite: Invite) -> CardLayout:
    """
    Pick the background and placement for an invite's card.

    The event's own image wins. Events created before images moved onto the
    event fall back to their template. Without either, the card is the bare code.
    """
    event = invite.event
    if event.image_data is not None:
        return CardLayout(event.image_data, event.qr_position_x, event.qr_position_y, event.qr_size)
    if event.template is not None:
        template = event.template
        return CardLayout(template.image_data, template.qr_position_x, template.qr_position_y, template.qr_size)
    return CardLayout(None, event.qr_position_x, event.qr_position_y, event.qr_size)


def render_invitation_card(invite: Invite) -> Optional[Image.Image]:
    """Compose the invitation card for ``invite``."""
    layout = card_layout(invite)
    card = compose(layout.background, invite.qr_token, layout.position_x, layout.position_y, layout.size_fraction)
    if card is None:
        logger.warning("card_composition_failed", invite_id=invite.qr_token, event_id=str(invite.event_id))
    return card


def render_invitation_card_bytes(invite: Invite, image_format: str = "JPEG") -> Optional[bytes]:
    """Compose and encode the invitation card for ``invite`` with metadata."""
    card = render_invitation_card(invite)
    if card is None:
        return None
    return encode_image(card, image_format, guest_name=invite.display_name, event_title=invite.event.title)
