"""
Runway Explorer - Main Application Entry Point
Streamlit front end; gateway calls go to the server in server.py.

Run with: streamlit run app.py
"""

import logging

from webui.controllers import AppController
from webui.state_manager import StateManager
from webui.app_ui import ExplorerApp

logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')


def main():
    """Main application entry point."""
    StateManager.initialize()

    # One controller per browser session, kept across reruns
    controller = StateManager.controller.value
    if controller is None:
        controller = AppController()
        StateManager.controller = controller

    # Create and run the UI
    app = ExplorerApp(controller)
    app.run()


if __name__ == "__main__":
    main()
