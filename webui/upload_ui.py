"""
Upload view for the Runway explorer.
Pure view that handles the image intake form and the generate action.
"""

import streamlit as st

from explorer.models import ImageSlot
from explorer.status import TaskStatus
from webui.state_manager import StateManager
from webui.controllers import AppController
from webui.image_preview import ImagePreview
from webui.ui_components import show_status


class UploadUI:
    """Handles the image intake and main generation UI."""

    @staticmethod
    def render(controller: AppController) -> None:
        """Render the upload form and the generate button."""
        slots = StateManager.image_slots.value

        st.subheader("Person Photos")
        cols = st.columns(4)
        for col, slot in zip(cols, slots[:4]):
            with col:
                UploadUI._render_slot(slot, aspect="square")

        st.subheader("Background / Setting Image")
        left, _ = st.columns([1, 1])
        with left:
            UploadUI._render_slot(slots[4], aspect="wide")

        UploadUI._render_generate_button(controller, slots)
        st.caption("* Required fields. Front photo and background image are required at minimum.")

    @staticmethod
    def _render_slot(slot: ImageSlot, aspect: str) -> None:
        """Render one slot: uploader plus preview."""
        uploaded_file = st.file_uploader(
            f"Upload {slot.label}",
            type=["png", "jpg", "jpeg", "webp"],
            key=f"upload_{slot.key}_{StateManager.slot_version(slot.key)}",
            label_visibility="collapsed"
        )

        if uploaded_file is not None:
            data = uploaded_file.getvalue()
            if data != slot.raw_image:
                slot.fill(data, uploaded_file.name)
        elif slot.is_filled:
            slot.clear()

        if ImagePreview(slot, aspect=aspect).render():
            StateManager.clear_slot(slot)
            st.rerun()

    @staticmethod
    def _render_generate_button(controller: AppController, slots) -> None:
        task = controller.generation_controller.state.task
        busy = task.status in (TaskStatus.GENERATING, TaskStatus.POLLING)

        if st.button(
            "Generating..." if busy else "🎬 Generate Videos",
            type="primary",
            key="generate_videos",
            disabled=not controller.can_generate(slots),
            use_container_width=True
        ):
            controller.generate(slots)
            st.rerun()

        show_status(task)
