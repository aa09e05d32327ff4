import unittest

from fret_tuner import mode_controller
from fret_tuner.note_types import ModeState, TunerMode

AUTO = ModeState(TunerMode.AUTO)


def manual(index):
    return ModeState(TunerMode.MANUAL, index)


class TestStart(unittest.TestCase):
    def test_idle_starts_auto(self):
        transition = mode_controller.start(mode_controller.IDLE)
        self.assertEqual(transition.state, AUTO)
        self.assertTrue(transition.acquire)
        self.assertIsNone(transition.tone_index)

    def test_preserved_lock_resumes_manual(self):
        transition = mode_controller.start(ModeState(TunerMode.IDLE, 2))
        self.assertEqual(transition.state, manual(2))
        self.assertTrue(transition.acquire)
        self.assertIsNone(transition.tone_index)

    def test_start_while_running_is_noop(self):
        for state in (AUTO, ModeState(TunerMode.AUTO, 3), manual(1)):
            transition = mode_controller.start(state)
            self.assertEqual(transition.state, state)
            self.assertFalse(transition.acquire)
            self.assertFalse(transition.reset_tracking)


class TestStop(unittest.TestCase):
    def test_stop_from_auto_forgets_target(self):
        transition = mode_controller.stop(ModeState(TunerMode.AUTO, 4))
        self.assertEqual(transition.state, mode_controller.IDLE)
        self.assertTrue(transition.release)
        self.assertTrue(transition.reset_tracking)
        self.assertTrue(transition.clear_detected)

    def test_stop_from_manual_keeps_lock(self):
        transition = mode_controller.stop(manual(3))
        self.assertEqual(transition.state, ModeState(TunerMode.IDLE, 3))
        self.assertTrue(transition.release)

    def test_stop_when_idle_releases_nothing(self):
        transition = mode_controller.stop(ModeState(TunerMode.IDLE, 3))
        self.assertEqual(transition.state, ModeState(TunerMode.IDLE, 3))
        self.assertFalse(transition.release)


class TestSelectTarget(unittest.TestCase):
    def test_select_from_idle_locks_and_starts(self):
        transition = mode_controller.select_target(mode_controller.IDLE, 0)
        self.assertEqual(transition.state, manual(0))
        self.assertTrue(transition.acquire)
        self.assertTrue(transition.reset_tracking)
        self.assertEqual(transition.tone_index, 0)

    def test_select_from_idle_with_same_preserved_lock(self):
        transition = mode_controller.select_target(ModeState(TunerMode.IDLE, 0), 0)
        self.assertEqual(transition.state, manual(0))
        self.assertTrue(transition.acquire)
        self.assertEqual(transition.tone_index, 0)

    def test_select_from_auto_locks_without_acquiring(self):
        transition = mode_controller.select_target(ModeState(TunerMode.AUTO, 1), 4)
        self.assertEqual(transition.state, manual(4))
        self.assertFalse(transition.acquire)
        self.assertTrue(transition.reset_tracking)
        self.assertEqual(transition.tone_index, 4)

    def test_select_other_string_moves_lock(self):
        transition = mode_controller.select_target(manual(1), 2)
        self.assertEqual(transition.state, manual(2))
        self.assertEqual(transition.tone_index, 2)

    def test_select_locked_string_unlocks(self):
        transition = mode_controller.select_target(manual(2), 2)
        self.assertEqual(transition.state, AUTO)
        self.assertTrue(transition.clear_detected)
        self.assertFalse(transition.acquire)
        self.assertFalse(transition.release)
        self.assertIsNone(transition.tone_index)


class TestRecordMatch(unittest.TestCase):
    def test_auto_remembers_match(self):
        self.assertEqual(
            mode_controller.record_match(AUTO, 3), ModeState(TunerMode.AUTO, 3)
        )

    def test_manual_lock_is_untouched(self):
        self.assertEqual(mode_controller.record_match(manual(0), 2), manual(0))

    def test_idle_is_untouched(self):
        self.assertEqual(
            mode_controller.record_match(mode_controller.IDLE, 2), mode_controller.IDLE
        )


if __name__ == "__main__":
    unittest.main()
