from io import BytesIO

import qrcode

QR_PREFIX = "ASSET:"


def build_qr_payload(code):
    return f"{QR_PREFIX}{code}"


def parse_qr_payload(raw):
    """
    Extract the asset code from a scanned value.
    Accepts 'ASSET:<code>' as well as a bare code.
    """
    value = (raw or '').strip()
    if value.upper().startswith(QR_PREFIX):
        value = value[len(QR_PREFIX):]
    return value.strip()


def generate_qr_png(payload, box_size=8, border=2):
    """Render payload as a PNG and return the bytes"""
    qr = qrcode.QRCode(version=1, box_size=box_size, border=border)
    qr.add_data(payload)
    qr.make(fit=True)
    qr_img = qr.make_image(fill_color="black", back_color="white")

    buffer = BytesIO()
    qr_img.save(buffer, format="PNG")
    return buffer.getvalue()
