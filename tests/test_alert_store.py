"""Unit tests for the single-slot alert store."""

from __future__ import annotations

import unittest

from rich.text import Text

from alerts.models import EMPTY_ALERT_STATE, AlertOptions, AlertSeverity, AlertState
from alerts.store import AlertStore
from alerts.timers import ManualClock, TimerController


class AlertStoreTests(unittest.TestCase):
    """Validate show/hide semantics, timers and notifications."""

    def setUp(self) -> None:
        self.clock = ManualClock()
        self.timers = TimerController(self.clock)
        self.store = AlertStore(self.timers)
        self.events: list[AlertState] = []
        self.store.subscribe(self.events.append)

    def tearDown(self) -> None:
        self.store.close()

    def test_initial_state_is_empty(self) -> None:
        self.assertEqual(self.store.state, EMPTY_ALERT_STATE)
        self.assertFalse(self.store.state.is_visible)
        self.assertEqual(self.store.state.message, "")
        self.assertEqual(self.store.state.severity, AlertSeverity.INFO)

    def test_show_alert_sets_state_and_notifies(self) -> None:
        self.store.show_alert("Test message", "info")

        state = self.store.state
        self.assertTrue(state.is_visible)
        self.assertEqual(state.message, "Test message")
        self.assertEqual(state.severity, AlertSeverity.INFO)
        self.assertFalse(state.is_collapsed)
        self.assertGreater(state.alert_id, 0)
        self.assertEqual(self.events, [state])

    def test_auto_close_hides_alert_after_delay(self) -> None:
        self.store.show_alert("Saved", "info", AlertOptions(auto_close_delay=5000))

        self.timers.advance(4999)
        self.assertTrue(self.store.state.is_visible)

        self.timers.advance(2)
        self.assertEqual(self.store.state, EMPTY_ALERT_STATE)
        self.assertEqual(self.timers.pending(), [])

    def test_replacement_cancels_previous_timers(self) -> None:
        self.store.show_alert("First message", "info", AlertOptions(auto_close_delay=3000))
        self.timers.advance(1000)
        self.store.show_alert("Second message", "warning", AlertOptions(auto_close_delay=5000))

        self.assertEqual(self.store.state.message, "Second message")
        self.assertEqual(self.store.state.severity, AlertSeverity.WARNING)

        self.timers.advance(3000)
        self.assertTrue(self.store.state.is_visible)
        self.assertEqual(self.store.state.message, "Second message")

        self.timers.advance(2000)
        self.assertFalse(self.store.state.is_visible)

    def test_replacement_without_auto_close_stays_visible(self) -> None:
        self.store.show_alert("First message", "info", AlertOptions(auto_close_delay=3000))
        first_id = self.store.state.alert_id
        self.timers.advance(1000)
        self.store.show_alert("Second message", "warning")

        self.assertNotEqual(self.store.state.alert_id, first_id)
        self.timers.advance(10_000)
        self.assertTrue(self.store.state.is_visible)
        self.assertEqual(self.store.state.message, "Second message")

    def test_stale_collapse_never_touches_successor(self) -> None:
        self.store.show_alert("Editing", "edit", AlertOptions(collapsible=True, collapse_delay=1000))
        self.store.show_alert("Still editing", "edit", AlertOptions(collapsible=True, collapse_delay=5000))

        self.timers.advance(1000)
        self.assertFalse(self.store.state.is_collapsed)
        self.assertEqual(len(self.timers.pending()), 1)

        self.timers.advance(4000)
        self.assertTrue(self.store.state.is_collapsed)

    def test_only_one_generation_of_timers_is_live(self) -> None:
        options = AlertOptions(collapsible=True, collapse_delay=2000, auto_close_delay=6000)
        for index in range(5):
            self.store.show_alert(f"Alert {index}", "info", options)
            self.assertEqual(len(self.timers.pending()), 2)
            generations = {handle.generation for handle in self.timers.pending()}
            self.assertEqual(generations, {self.timers.generation})

    def test_hide_alert_resets_state_and_cancels_timers(self) -> None:
        self.store.show_alert("Error occurred", "error", AlertOptions(auto_close_delay=5000))
        self.store.hide_alert()

        self.assertEqual(self.store.state, EMPTY_ALERT_STATE)
        self.assertEqual(self.timers.pending(), [])
        self.assertEqual(len(self.events), 2)

    def test_hide_alert_when_nothing_visible_is_side_effect_free(self) -> None:
        self.store.hide_alert()
        self.store.hide_alert()

        self.assertEqual(self.store.state, EMPTY_ALERT_STATE)
        self.assertEqual(self.events, [])

    def test_collapse_timer_and_hover_transitions(self) -> None:
        self.store.show_alert("Edit mode", "edit", AlertOptions(collapsible=True, collapse_delay=3000))
        self.assertFalse(self.store.state.is_collapsed)

        self.timers.advance(3000)
        self.assertTrue(self.store.state.is_collapsed)

        self.store.expand()
        self.assertFalse(self.store.state.is_collapsed)
        self.assertEqual(self.timers.pending(), [])

        self.store.collapse_now()
        self.assertTrue(self.store.state.is_collapsed)

    def test_auto_close_before_collapse_cancels_collapse(self) -> None:
        self.store.show_alert(
            "Short lived",
            "info",
            AlertOptions(collapsible=True, collapse_delay=4000, auto_close_delay=1000),
        )

        self.timers.advance(1000)
        self.assertFalse(self.store.state.is_visible)
        self.assertEqual(self.timers.pending(), [])

        self.timers.advance(5000)
        self.assertEqual(self.store.state, EMPTY_ALERT_STATE)

    def test_collapse_then_auto_close(self) -> None:
        self.store.show_alert(
            "Collapses first",
            "info",
            AlertOptions(collapsible=True, collapse_delay=1000, auto_close_delay=4000),
        )

        self.timers.advance(1000)
        self.assertTrue(self.store.state.is_collapsed)
        self.timers.advance(3000)
        self.assertFalse(self.store.state.is_visible)

    def test_non_collapsible_alert_never_collapses(self) -> None:
        self.store.show_alert("Warning", "warning", AlertOptions(collapse_delay=100))
        self.assertIsNone(self.store.state.options.collapse_delay)

        self.timers.advance(1000)
        self.store.collapse_now()
        self.assertFalse(self.store.state.is_collapsed)
        self.assertEqual(len(self.events), 1)

    def test_default_collapse_delay_applies_when_omitted(self) -> None:
        self.store.show_alert("Edit", "edit", AlertOptions(collapsible=True))
        self.assertEqual(self.store.state.options.collapse_delay, 3000)

        self.timers.advance(3000)
        self.assertTrue(self.store.state.is_collapsed)

    def test_expand_and_collapse_without_alert_are_noops(self) -> None:
        self.store.expand()
        self.store.collapse_now()

        self.assertEqual(self.store.state, EMPTY_ALERT_STATE)
        self.assertEqual(self.events, [])

    def test_unknown_severity_falls_back_to_info(self) -> None:
        with self.assertLogs("alerts.store", level="WARNING"):
            self.store.show_alert("Odd", "critical")
        self.assertEqual(self.store.state.severity, AlertSeverity.INFO)

        self.store.show_alert("None", None)
        self.assertEqual(self.store.state.severity, AlertSeverity.INFO)

        self.store.show_alert("Upper", "WARNING")
        self.assertEqual(self.store.state.severity, AlertSeverity.WARNING)

    def test_empty_message_is_rejected(self) -> None:
        for message in ("", "   ", None):
            with self.assertRaises(ValueError):
                self.store.show_alert(message, "info")
        self.assertEqual(self.events, [])

    def test_rich_message_is_kept_as_is(self) -> None:
        message = Text("Rich ") + Text("content", style="bold")
        self.store.show_alert(message, "info", key="rich")

        self.assertIs(self.store.state.message, message)
        self.assertEqual(self.store.state.message_text(), "Rich content")
        self.assertEqual(self.store.state.key, "rich")

    def test_unsubscribe_stops_notifications(self) -> None:
        received: list[AlertState] = []
        unsubscribe = self.store.subscribe(received.append)

        self.store.show_alert("One", "info")
        unsubscribe()
        self.store.show_alert("Two", "info")

        self.assertEqual([state.message for state in received], ["One"])

    def test_listeners_notified_synchronously_in_order(self) -> None:
        order: list[str] = []
        self.store.subscribe(lambda state: order.append("second"))
        self.store.subscribe(lambda state: order.append(f"third:{self.store.state.message}"))

        self.store.show_alert("Now", "info")

        self.assertEqual(order, ["second", "third:Now"])
        self.assertEqual(len(self.events), 1)

    def test_close_cancels_timers_and_listeners(self) -> None:
        self.store.show_alert("Pending", "info", AlertOptions(auto_close_delay=1000))
        self.store.close()

        self.assertEqual(self.timers.pending(), [])
        self.assertEqual(self.store.listener_count(), 0)
        self.timers.advance(5000)
        self.assertTrue(self.store.state.is_visible)

    def test_calls_after_close_schedule_nothing(self) -> None:
        self.store.show_alert("Collapsible", "edit", AlertOptions(collapsible=True, collapse_delay=0))
        self.store.close()
        before = self.store.state

        self.store.show_alert("Late", "info", AlertOptions(auto_close_delay=1000))
        self.store.collapse_now()
        self.store.close()

        self.assertEqual(self.timers.pending(), [])
        self.assertIs(self.store.state, before)

    def test_options_accepted_as_mapping(self) -> None:
        self.store.show_alert(
            "Saved",
            "info",
            {"auto_close_delay": 5000, "action": {"label": "Open", "href": "/plan/1"}},
        )

        options = self.store.state.options
        self.assertEqual(options.auto_close_delay, 5000)
        self.assertEqual(options.action.href, "/plan/1")
        self.timers.advance(5001)
        self.assertFalse(self.store.state.is_visible)

    def test_unusable_options_are_rejected(self) -> None:
        with self.assertRaises(TypeError):
            self.store.show_alert("Saved", "info", {"auto_close": 5000})
        with self.assertRaises(TypeError):
            self.store.show_alert("Saved", "info", 5000)
        self.assertFalse(self.store.state.is_visible)

    def test_blank_rich_text_is_rejected(self) -> None:
        for message in (Text(""), Text("   ")):
            with self.assertRaises(ValueError):
                self.store.show_alert(message, "info")
        self.assertEqual(self.events, [])


if __name__ == "__main__":  # pragma: no cover - test module entry point
    unittest.main()
