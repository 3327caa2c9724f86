"""
Pickup QR code rendering for EMall
Encodes a pickup code as a scannable PNG the customer shows at the store.
"""

from __future__ import annotations

import io
import logging

import qrcode
from django.conf import settings
from PIL import Image

from apps.common.constants import (
    PICKUP_QR_BORDER_MODULES,
    PICKUP_QR_MAX_SIZE_PX,
    PICKUP_QR_MIN_SIZE_PX,
    PICKUP_QR_SIZE_PX,
)

logger = logging.getLogger(__name__)


class PickupQRCodeEncoder:
    """
    QR encoder for pickup codes.
    Medium error correction, two-module quiet zone, black on white,
    rendered to an exact size_px square.
    """

    def __init__(
        self,
        error_correction: int = qrcode.constants.ERROR_CORRECT_M,
        border: int = PICKUP_QR_BORDER_MODULES,
        fill_color: str = "black",
        back_color: str = "white",
    ) -> None:
        self.error_correction = error_correction
        self.border = border
        self.fill_color = fill_color
        self.back_color = back_color

    @staticmethod
    def default_size() -> int:
        return int(getattr(settings, 'PICKUP_QR_SIZE_PX', PICKUP_QR_SIZE_PX))

    @staticmethod
    def validate_size(size_px: int) -> int:
        """Reject sizes a scanner cannot read or that waste memory"""
        if not PICKUP_QR_MIN_SIZE_PX <= size_px <= PICKUP_QR_MAX_SIZE_PX:
            raise ValueError(
                f"QR size must be between {PICKUP_QR_MIN_SIZE_PX} and {PICKUP_QR_MAX_SIZE_PX} pixels"
            )
        return size_px

    def encode(self, code: str, size_px: int | None = None) -> Image.Image:
        """Render `code` as a size_px by size_px QR image"""
        if not code:
            raise ValueError("Cannot encode an empty pickup code")
        size_px = self.validate_size(size_px or self.default_size())

        qr = qrcode.QRCode(
            version=None,
            error_correction=self.error_correction,
            box_size=1,
            border=self.border,
        )
        qr.add_data(code)
        qr.make(fit=True)

        # Largest whole box size that fits, then scale to the exact target
        total_modules = qr.modules_count + 2 * self.border
        qr.box_size = max(1, size_px // total_modules)

        qr_img = qr.make_image(fill_color=self.fill_color, back_color=self.back_color)
        image = qr_img.convert("RGB")
        if image.size != (size_px, size_px):
            image = image.resize((size_px, size_px), Image.Resampling.NEAREST)
        return image

    def to_png_bytes(self, code: str, size_px: int | None = None) -> bytes:
        """PNG encoded QR image"""
        try:
            image = self.encode(code, size_px)
            buffer = io.BytesIO()
            image.save(buffer, "PNG")
            return buffer.getvalue()
        except Exception as e:
            logger.error(f"🔥 [Pickup] QR code generation failed: {e}")
            raise

