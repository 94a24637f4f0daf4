"""
Main application UI for the Runway explorer.
Orchestrates the UI components and manages application flow.
"""

import streamlit as st

from webui.controllers import AppController
from webui.upload_ui import UploadUI
from webui.explore_ui import ExploreUI

POLL_INTERVAL_SECONDS = 2


@st.fragment(run_every=POLL_INTERVAL_SECONDS)
def _poll_gateway_responses(controller: AppController) -> None:
    """Pick up finished gateway calls without blocking the page."""
    if controller.poll():
        st.rerun()


class ExplorerApp:
    """Main application UI orchestrator."""

    def __init__(self, controller: AppController):
        """Initialize the explorer application UI."""
        self.controller = controller
        self._configure_page()

    @staticmethod
    def _configure_page() -> None:
        """Configure Streamlit page settings and styles."""
        st.set_page_config(
            page_title="Runway Video Generator",
            page_icon="🎬",
            layout="wide",
            initial_sidebar_state="collapsed"
        )

        st.markdown("""
            <style>
            .block-container {
                padding-top: 1rem !important;
                max-width: 1100px;
            }
            </style>
        """, unsafe_allow_html=True)

    def run(self) -> None:
        """Run the main application."""
        self.controller.periodic_cleanup()

        # Apply anything that finished since the last run before drawing
        self.controller.poll()

        st.title("Runway Video Generator")
        st.markdown(
            "Upload profile photos and a background image to generate cinematic videos. "
            "Pause a result, capture a frame and describe what happens next to keep exploring."
        )

        UploadUI.render(self.controller)
        ExploreUI.render(self.controller)

        if self.controller.has_pending:
            _poll_gateway_responses(self.controller)
