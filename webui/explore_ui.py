"""
Results and exploration view for the Runway explorer.
Shows the generated videos, the frame capture panel and the exploration trail.
"""

import streamlit as st
import requests
from typing import Dict, Optional

from explorer.errors import CaptureUnavailable
from explorer.image_encoding import data_uri_to_image
from explorer.models import GenerationResult
from webui.state_manager import StateManager
from webui.controllers import AppController
from webui.ui_components import (
    ROOT_INDEX, show_video_preview, show_status, show_breadcrumbs, show_thumbnail_trail
)

SOURCE_LABELS = {"setting": "Setting Pan", "person": "Person Animated"}


class ExploreUI:
    """Handles the generated videos and the exploration chain."""

    @staticmethod
    def render(controller: AppController) -> None:
        """Render results; nothing is shown before the first successful generation."""
        result = controller.generation_controller.result
        if result is None:
            return

        st.markdown("---")
        st.header("Generated Videos")

        state = controller.exploration_controller.state
        clicked = show_breadcrumbs(state.nodes)
        if clicked == ROOT_INDEX:
            controller.reset()
            st.rerun()
        elif clicked is not None:
            controller.navigate_to(clicked)
            st.rerun()

        source_url = ExploreUI._render_current_videos(controller, result)

        if source_url:
            ExploreUI._render_capture_panel(controller, source_url)
        ExploreUI._render_prompt_panel(controller)

        if state.nodes:
            st.subheader("Exploration Trail")
            show_thumbnail_trail(state.nodes)

    @staticmethod
    def _render_current_videos(controller: AppController, result: GenerationResult) -> Optional[str]:
        """Show the video(s) of the current node and return the capture source URL."""
        node = controller.current_node()
        if node is not None:
            depth = controller.exploration_controller.state.depth
            show_video_preview(node.video_url, f"Exploration {depth}: {node.prompt}", f"exploration-{depth}.mp4")
            return node.video_url

        col1, col2 = st.columns(2)
        with col1:
            show_video_preview(result.setting_video_url, SOURCE_LABELS["setting"], "setting-video.mp4")
        with col2:
            show_video_preview(result.person_video_url, SOURCE_LABELS["person"], "person-video.mp4")

        sources: Dict[str, str] = {
            key: url for key, url in (("setting", result.setting_video_url), ("person", result.person_video_url))
            if url
        }
        if not sources:
            return None

        options = list(sources)
        current = StateManager.selected_source.value
        selected = st.radio(
            "Explore from",
            options=options,
            index=options.index(current) if current in options else 0,
            format_func=lambda key: SOURCE_LABELS[key],
            horizontal=True,
            key="explore_source"
        )
        StateManager.selected_source = selected
        return sources[selected]

    @staticmethod
    def _render_capture_panel(controller: AppController, video_url: str) -> None:
        """Scrub a paused copy of the video and capture the visible frame."""
        with st.expander("🎞️ Capture a frame", expanded=True):
            try:
                surface = controller.surface_for(video_url)
                frame_count = surface.frame_count
            except requests.RequestException as e:
                st.warning(f"The video could not be downloaded for capture: {e}")
                return
            except CaptureUnavailable:
                st.warning("This video cannot be decoded for frame capture.")
                return

            playing = st.toggle("Playing", value=not surface.paused, key=f"playing_{surface.source}")
            if playing:
                surface.play()
            else:
                surface.pause()

            if frame_count > 1:
                position = st.slider(
                    "Frame", 0, frame_count - 1, surface.position,
                    key=f"frame_{surface.source}", disabled=playing
                )
                surface.seek_frame(position)

            if surface.paused:
                try:
                    st.image(surface.current_frame(), caption=f"{surface.current_time:.2f}s",
                             use_container_width=True)
                except CaptureUnavailable:
                    st.warning("This frame cannot be decoded.")
            else:
                st.caption("Pause the video to pick a frame.")

            # Capturing while playing is a no-op
            busy = controller.exploration_controller.state.task.is_busy
            if st.button("📸 Use this frame", key=f"capture_{surface.source}", disabled=busy):
                if controller.capture(surface) is not None:
                    st.rerun()

    @staticmethod
    def _render_prompt_panel(controller: AppController) -> None:
        """Prompt for the next exploration step from the captured frame."""
        state = controller.exploration_controller.state
        if state.pending_frame is None and not state.task.is_busy:
            show_status(state.task)
            return

        st.subheader("Explore")
        if state.pending_frame:
            col_frame, col_clear = st.columns([5, 1])
            with col_frame:
                st.image(data_uri_to_image(state.pending_frame), caption="Captured frame",
                         use_container_width=True)
            with col_clear:
                if st.button("🗑️", key="discard_frame", help="Discard frame", disabled=state.task.is_busy):
                    controller.exploration_controller.discard_frame()
                    st.rerun()

        prompt = st.text_input(
            "What should happen next?",
            placeholder="zoom in",
            key=f"explore_prompt_{state.depth}"
        )

        if st.button(
            "Generating..." if state.task.is_busy else "🚀 Explore",
            type="primary",
            key="explore_submit",
            disabled=not controller.exploration_controller.can_explore(prompt)
        ):
            controller.explore(prompt)
            st.rerun()

        show_status(state.task)
