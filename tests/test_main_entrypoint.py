"""Tests for CLI entrypoint wiring."""

from __future__ import annotations

import logging
import tempfile
from pathlib import Path
import unittest
from unittest.mock import patch

from delayed_playback.__main__ import EXIT_FAILED, EXIT_OK, EXIT_USAGE, main, parse_element


class MainEntrypointTests(unittest.TestCase):
    """Validate top-level main() behavior."""

    def setUp(self) -> None:
        root = logging.getLogger()
        self._original_level = root.level
        self._original_handlers = list(root.handlers)
        self._tmp = tempfile.TemporaryDirectory()
        self.config_path = Path(self._tmp.name) / "config.toml"

    def tearDown(self) -> None:
        root = logging.getLogger()
        root.setLevel(self._original_level)
        root.handlers.clear()
        root.handlers.extend(self._original_handlers)
        self._tmp.cleanup()

    def test_parse_element(self) -> None:
        self.assertEqual(parse_element("30"), 30)
        self.assertEqual(parse_element("2.5"), 2.5)
        self.assertEqual(parse_element("word"), "word")

    def test_run_completes_and_prints_statistics(self) -> None:
        with patch("delayed_playback.__main__.Console.print") as print_mock:
            code = main(["--config", str(self.config_path), "3", "1", "2"])
        self.assertEqual(code, EXIT_OK)
        printed = [str(call.args[0]) for call in print_mock.call_args_list if call.args]
        self.assertTrue(any("#1: 1" in line for line in printed))
        self.assertTrue(any("Playback completed: 3/3" in line for line in printed))

    def test_quiet_mutes_event_log(self) -> None:
        with patch("delayed_playback.__main__.Console.print") as print_mock:
            code = main(["--config", str(self.config_path), "--quiet", "1"])
        self.assertEqual(code, EXIT_OK)
        printed = [call.args[0] for call in print_mock.call_args_list if call.args]
        self.assertFalse(any(isinstance(line, str) and "Playback" in line for line in printed))

    def test_empty_input_is_usage_error(self) -> None:
        with patch("delayed_playback.__main__.Console.print"):
            code = main(["--config", str(self.config_path)])
        self.assertEqual(code, EXIT_USAGE)

    def test_unknown_strategy_is_usage_error(self) -> None:
        with patch("delayed_playback.__main__.Console.print") as print_mock:
            code = main(["--config", str(self.config_path), "--strategy", "nope", "1"])
        self.assertEqual(code, EXIT_USAGE)
        self.assertIn("nope", str(print_mock.call_args_list[-1].args[0]))

    def test_invalid_element_is_usage_error(self) -> None:
        with patch("delayed_playback.__main__.Console.print"):
            code = main(["--config", str(self.config_path), "1", "abc"])
        self.assertEqual(code, EXIT_USAGE)

    def test_failed_run_exit_code(self) -> None:
        with patch("delayed_playback.__main__.Console.print"), patch(
            "delayed_playback.__main__._run",
        ) as run_mock:
            from delayed_playback.state import SchedulerState

            async def _failed(builder):
                return SchedulerState.FAILED

            run_mock.side_effect = _failed
            code = main(["--config", str(self.config_path), "1"])
        self.assertEqual(code, EXIT_FAILED)

    def test_list_strategies(self) -> None:
        with patch("delayed_playback.__main__.Console.print") as print_mock:
            code = main(["--list-strategies"])
        self.assertEqual(code, EXIT_OK)
        printed = [call.args[0] for call in print_mock.call_args_list]
        self.assertTrue(any(line.startswith("identity:") for line in printed))

    def test_version(self) -> None:
        with patch("delayed_playback.__main__.Console.print") as print_mock:
            code = main(["--version"])
        self.assertEqual(code, EXIT_OK)
        self.assertTrue(print_mock.call_args.args[0].startswith("delayed-playback "))


if __name__ == "__main__":
    unittest.main()
