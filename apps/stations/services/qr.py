"""QR code rendering for pairing tokens."""

import base64
from io import BytesIO

import qrcode


def render_qr_png(data: str) -> bytes:
    """
    Render ``data`` as a PNG QR code.

    Uses error correction level M (15% recovery), large enough for a
    station screen and a phone camera at arm's length.
    """
    qr = qrcode.QRCode(
        version=None,
        error_correction=qrcode.constants.ERROR_CORRECT_M,
        box_size=10,
        border=4,
    )
    qr.add_data(data)
    qr.make(fit=True)

    img = qr.make_image(fill_color="black", back_color="white")

    buffer = BytesIO()
    img.save(buffer)
    return buffer.getvalue()


def render_qr_data_uri(data: str) -> str:
    """Render ``data`` as a ``data:image/png;base64,...`` URI for inline display."""
    encoded = base64.b64encode(render_qr_png(data)).decode('ascii')
    return f"data:image/png;base64,{encoded}"
