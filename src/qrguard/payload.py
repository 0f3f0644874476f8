"""Producer side: member payloads and QR images.

Only id_number goes into the payload. QR cards are printed and shown
around, so names and phone numbers stay in storage.
"""

from __future__ import annotations

import io
import json
import re

import qrcode
from qrcode.constants import ERROR_CORRECT_M

from qrguard.codec import Codec
from qrguard.models import Member
from qrguard.resolver import ID_FIELD

QR_BORDER = 2
QR_BOX_SIZE = 6


def build_payload(id_number: str) -> str:
    return json.dumps({ID_FIELD: id_number}, separators=(",", ":"))


def member_token(member: Member, codec: Codec) -> str:
    """Payload for member, encrypted when the codec has a passphrase."""
    return codec.encode(build_payload(member.id_number))


def render_qr_png(data: str) -> bytes:
    """Render data into a PNG QR code."""
    qr = qrcode.QRCode(
        version=None,
        error_correction=ERROR_CORRECT_M,
        box_size=QR_BOX_SIZE,
        border=QR_BORDER,
    )
    qr.add_data(data)
    qr.make(fit=True)
    img = qr.make_image(fill_color="black", back_color="white")
    buf = io.BytesIO()
    img.save(buf)
    return buf.getvalue()


def qr_filename(member: Member) -> str:
    name = re.sub(r"\s+", "_", member.full_name)
    return f"{name}_{member.id_number}.png"
