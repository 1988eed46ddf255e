import base64
import io
import qrcode
import qrcode.image.svg


def qr_data_url(data: str) -> str:
    """Render data as a QR code SVG embedded in a data URL"""
    image = qrcode.make(data, image_factory=qrcode.image.svg.SvgPathImage)
    buffer = io.BytesIO()
    image.save(buffer)
    encoded = base64.b64encode(buffer.getvalue()).decode('ascii')
    return f"data:image/svg+xml;base64,{encoded}"
