"""
Image slot preview component.
Shows the uploaded image of a slot, or a placeholder, with a clear button.
"""

import streamlit as st
from PIL import Image, ImageDraw

from explorer.image_encoding import data_uri_to_image
from explorer.models import ImageSlot


def _create_placeholder_image(label: str, width: int = 400, height: int = 400) -> Image.Image:
    """Create a placeholder image for an empty slot."""
    img = Image.new('RGB', (width, height), color=(17, 24, 39))
    draw = ImageDraw.Draw(img)

    border_color = (75, 85, 99)
    draw.rectangle([10, 10, width-10, height-10], outline=border_color, width=3)

    # Plus sign
    cx, cy, arm = width // 2, height // 2 - 20, 30
    draw.line([(cx - arm, cy), (cx + arm, cy)], fill=border_color, width=6)
    draw.line([(cx, cy - arm), (cx, cy + arm)], fill=border_color, width=6)

    draw.text((cx, cy + arm + 30), label, fill=(156, 163, 175), anchor='mt')
    return img


class ImagePreview:
    """
    Preview of a single upload slot.

    Usage:
        if ImagePreview(slot).render():
            slot.clear()
            st.rerun()
    """

    def __init__(self, slot: ImageSlot, show_clear: bool = True, aspect: str = "square"):
        """
        Args:
            slot: Slot to display
            show_clear: Whether to show the clear button
            aspect: "square" for person photos, "wide" for the background
        """
        self.slot = slot
        self.show_clear = show_clear
        self.aspect = aspect

    def render(self) -> bool:
        """
        Render the preview.

        Returns:
            bool: True if the clear button was clicked
        """
        col_title, col_clear = st.columns([5, 1])

        with col_title:
            required = " :red[*]" if self.slot.required else ""
            st.markdown(f"**{self.slot.label}**{required}")

        cleared = False
        with col_clear:
            if self.show_clear and self.slot.preview_uri:
                cleared = st.button("🗑️", key=f"clear_slot_{self.slot.key}", help="Remove image",
                                    use_container_width=True)

        if self.slot.preview_uri:
            try:
                st.image(data_uri_to_image(self.slot.preview_uri), use_container_width=True)
            except (ValueError, OSError):
                st.warning("This file could not be previewed.")
        else:
            width, height = (400, 400) if self.aspect == "square" else (640, 360)
            st.image(_create_placeholder_image(self.slot.label, width, height), use_container_width=True)

        return cleared
