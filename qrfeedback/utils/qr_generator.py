import os
import io
import base64
import qrcode
from PIL import Image, ImageColor
from qrcode.image.styledpil import StyledPilImage
from qrcode.image.styles.moduledrawers import (
    SquareModuleDrawer, GappedSquareModuleDrawer,
    CircleModuleDrawer, RoundedModuleDrawer
)
from qrcode.image.styles.colormasks import SolidFillColorMask
from flask import current_app, has_app_context

DEFAULT_BASE_URL = "http://localhost:3000"
DEFAULT_DARK = "#1f2937"


def _configured_base_url() -> str:
    if has_app_context():
        return current_app.config.get("BASE_URL") or DEFAULT_BASE_URL
    return os.getenv("BASE_URL") or DEFAULT_BASE_URL


def format_qr_payload(form_id: str, base_url: str | None = None) -> str:
    """URL encoded into a form's QR code. The form id is used verbatim."""
    if base_url is None:
        base_url = _configured_base_url()
    return f"{base_url}/feedback/{form_id}"


def generate_styled_qr(form_id, color_dark=DEFAULT_DARK, style="square", logo_data=None, size=256, margin=2):
    """
    Renders the QR code for a form's feedback page.
    Returns (payload, data_url) where data_url is a base64 PNG.
    """
    qr_data = format_qr_payload(form_id)

    # 1. Color
    try:
        fill_rgb = ImageColor.getrgb(color_dark)
    except ValueError:
        fill_rgb = ImageColor.getrgb(DEFAULT_DARK)
    back_rgb = (255, 255, 255)

    # 2. Style (Drawer)
    style = (style or "square").lower()
    drawer_map = {
        "square": SquareModuleDrawer(),
        "dots": GappedSquareModuleDrawer(),
        "circle": CircleModuleDrawer(),
        "rounded": RoundedModuleDrawer(),
    }
    drawer = drawer_map.get(style, SquareModuleDrawer())

    # 3. Generate QR Object
    qr = qrcode.QRCode(
        version=None,
        error_correction=qrcode.constants.ERROR_CORRECT_H,
        box_size=10,
        border=margin,
    )
    qr.add_data(qr_data)
    qr.make(fit=True)

    # 4. Create Image
    qr_img = qr.make_image(
        image_factory=StyledPilImage,
        module_drawer=drawer,
        color_mask=SolidFillColorMask(back_color=back_rgb, front_color=fill_rgb)
    ).convert("RGB")

    # 5. Logo Overlay
    if logo_data:
        try:
            if "," in logo_data:
                logo_data = logo_data.split(",", 1)[1]
            logo_img = Image.open(io.BytesIO(base64.b64decode(logo_data)))

            qr_w, qr_h = qr_img.size
            logo_size = int(qr_w * 0.25)
            logo_img = logo_img.resize((logo_size, logo_size))
            pos = ((qr_w - logo_size) // 2, (qr_h - logo_size) // 2)
            if logo_img.mode == "RGBA":
                qr_img.paste(logo_img, pos, logo_img)
            else:
                qr_img.paste(logo_img, pos)
        except (ValueError, OSError) as e:
            current_app.logger.warning(f"Logo embedding failed: {e}")

    # 6. Encode
    qr_img = qr_img.resize((size, size))
    buffer = io.BytesIO()
    qr_img.save(buffer, format="PNG")
    encoded = base64.b64encode(buffer.getvalue()).decode("ascii")

    return qr_data, f"data:image/png;base64,{encoded}"
