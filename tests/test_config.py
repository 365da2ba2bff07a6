"""Tests for countdown.core.config, TimerConfig defaults plus JSON load/save."""

import json
import shutil
import tempfile
import unittest
from pathlib import Path


class TestTimerConfig(unittest.TestCase):

    def test_empty_params_give_defaults(self):
        from countdown.core.config import TimerConfig, noop
        from countdown.core.formatting import format_time
        config = TimerConfig.from_dict({})
        self.assertEqual(config.start_at, 0)
        self.assertFalse(config.count_down)
        self.assertEqual(config.update_interval_ms, 10)
        self.assertIs(config.format_time, format_time)
        self.assertIs(config.display_function, noop)
        self.assertIs(config.stop_callback, noop)

    def test_camel_case_aliases(self):
        from countdown.core.config import TimerConfig
        display = lambda parts: None
        config = TimerConfig.from_dict({"startAt": 5000, "countDown": True, "updateInterval": 50,
                                        "displayFunction": display})
        self.assertEqual(config.start_at, 5000)
        self.assertTrue(config.count_down)
        self.assertEqual(config.update_interval_ms, 50)
        self.assertIs(config.display_function, display)

    def test_invalid_values_fall_back(self):
        from countdown.core.config import TimerConfig, noop
        with self.assertLogs("countdown", level="WARNING") as logs:
            config = TimerConfig.from_dict({"start_at": "soon", "count_down": "yes",
                                            "start_callback": 12, "update_interval_ms": True})
        self.assertEqual(config.start_at, 0)
        self.assertFalse(config.count_down)
        self.assertEqual(config.update_interval_ms, 10)
        self.assertIs(config.start_callback, noop)
        self.assertIn("start_callback", logs.output[0])

    def test_none_callback_means_default(self):
        from countdown.core.config import TimerConfig, noop
        config = TimerConfig.from_dict({"reset_callback": None})
        self.assertIs(config.reset_callback, noop)

    def test_unknown_keys_are_dropped(self):
        from countdown.core.config import TimerConfig
        with self.assertLogs("countdown", level="DEBUG") as logs:
            config = TimerConfig.from_dict({"theme": "dark", "start_at": 1})
        self.assertEqual(config.start_at, 1)
        self.assertNotIn("theme", config.as_params())
        self.assertFalse(hasattr(config, "extras"))
        self.assertIn("theme", logs.output[-1])

    def test_non_positive_interval_defaults(self):
        from countdown.core.config import TimerConfig
        for interval in (0, -1, -250.5):
            with self.assertLogs("countdown", level="WARNING") as logs:
                config = TimerConfig.from_dict({"updateInterval": interval})
            self.assertEqual(config.update_interval_ms, 10, interval)
            self.assertIn("update_interval_ms", logs.output[0])

    def test_as_params_round_trips_through_from_dict(self):
        from countdown.core.config import TimerConfig
        display = lambda parts: None
        config = TimerConfig(start_at=-5000, count_down=True, update_interval_ms=25, display_function=display)
        self.assertEqual(TimerConfig.from_dict(config.as_params()), config)


class TestLoadSave(unittest.TestCase):

    def setUp(self):
        self.tmpdir = Path(tempfile.mkdtemp())
        self.path = self.tmpdir / "timer.json"

    def tearDown(self):
        shutil.rmtree(self.tmpdir, ignore_errors=True)

    def test_missing_file_gives_defaults(self):
        from countdown.core.config import load_config
        config = load_config(self.path)
        self.assertEqual(config.settings(), {"start_at": 0, "count_down": False, "update_interval_ms": 10})

    def test_save_and_load_roundtrip(self):
        from countdown.core.config import TimerConfig, load_config, save_config
        save_config(TimerConfig(start_at=-10000, count_down=True, update_interval_ms=50), self.path)
        with open(self.path, encoding="utf-8") as f:
            self.assertEqual(json.load(f), {"start_at": -10000, "count_down": True, "update_interval_ms": 50})
        loaded = load_config(self.path)
        self.assertEqual(loaded.start_at, -10000)
        self.assertTrue(loaded.count_down)
        self.assertEqual(loaded.update_interval_ms, 50)

    def test_partial_file_fills_defaults(self):
        from countdown.core.config import load_config
        self.path.write_text(json.dumps({"startAt": 90000}), encoding="utf-8")
        config = load_config(self.path)
        self.assertEqual(config.start_at, 90000)
        self.assertEqual(config.update_interval_ms, 10)

    def test_file_cannot_supply_callables(self):
        from countdown.core.config import load_config, noop
        self.path.write_text(json.dumps({"display_function": "print"}), encoding="utf-8")
        config = load_config(self.path)
        self.assertIs(config.display_function, noop)

    def test_corrupted_file_falls_back(self):
        from countdown.core.config import load_config
        self.path.write_text("{invalid json!!", encoding="utf-8")
        with self.assertLogs("countdown", level="WARNING"):
            config = load_config(self.path)
        self.assertEqual(config.start_at, 0)

    def test_non_object_file_falls_back(self):
        from countdown.core.config import load_config
        self.path.write_text("[1, 2, 3]", encoding="utf-8")
        with self.assertLogs("countdown", level="WARNING"):
            config = load_config(self.path)
        self.assertEqual(config.update_interval_ms, 10)

    def test_callbacks_passed_alongside_file(self):
        from countdown.core.config import load_config
        seen = []
        config = load_config(self.path, stop_callback=seen.append)
        config.stop_callback("x")
        self.assertEqual(seen, ["x"])


if __name__ == "__main__":
    unittest.main()
