import io

import qrcode


def reservation_qr_text(reservation_id: str, price: float) -> str:
    return f"ID: {reservation_id} | Total: ${price:.2f}"


def generate_qr_png(qr_data: str) -> bytes:
    """Genera una imagen QR en PNG"""
    qr = qrcode.QRCode(
        version=1,
        error_correction=qrcode.constants.ERROR_CORRECT_L,
        box_size=10,
        border=4,
    )
    qr.add_data(qr_data)
    qr.make(fit=True)

    img = qr.make_image(fill_color="black", back_color="white")

    buffered = io.BytesIO()
    img.save(buffered, format="PNG")
    return buffered.getvalue()
