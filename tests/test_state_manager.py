"""
Tests for the session-scoped UI store.
"""

import unittest
from unittest import mock

from webui import state_manager
from webui.state_manager import StateManager


class FakeStreamlit:
    """Stands in for the streamlit module with a swappable session."""

    def __init__(self):
        self.session_state = {}
        self.reruns = 0

    def rerun(self):
        self.reruns += 1


class TestStateManager(unittest.TestCase):

    def setUp(self):
        self.st = FakeStreamlit()
        patcher = mock.patch.object(state_manager, "st", self.st)
        patcher.start()
        self.addCleanup(patcher.stop)

    def test_sessions_keep_their_own_controller(self):
        session_a, session_b = {}, {}

        self.st.session_state = session_a
        StateManager.initialize()
        self.assertIsNone(StateManager.controller.value)
        StateManager.controller = "controller-A"

        self.st.session_state = session_b
        StateManager.initialize()
        self.assertIsNone(StateManager.controller.value)
        StateManager.controller = "controller-B"

        self.st.session_state = session_a
        StateManager.initialize()
        self.assertEqual(StateManager.controller.value, "controller-A")

        self.st.session_state = session_b
        self.assertEqual(StateManager.controller.value, "controller-B")

    def test_mutable_defaults_are_per_session(self):
        self.st.session_state = {}
        StateManager.initialize()
        slots_a = StateManager.image_slots.value
        StateManager.slot_versions.value["setting"] = 3

        self.st.session_state = {}
        StateManager.initialize()
        self.assertIsNot(StateManager.image_slots.value, slots_a)
        self.assertEqual(StateManager.slot_version("setting"), 0)

    def test_assignment_writes_session_state(self):
        StateManager.selected_source = "person"
        self.assertEqual(self.st.session_state["selected_source"], "person")
        self.assertEqual(self.st.reruns, 0)

    def test_observed_change_triggers_rerun(self):
        StateManager.initialize()
        with StateManager.observe(StateManager.selected_source):
            StateManager.selected_source = "person"
            StateManager.selected_source = "person"
        self.assertEqual(self.st.reruns, 1)


if __name__ == "__main__":
    unittest.main()
