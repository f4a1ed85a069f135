import logging
import sys
import tempfile
import unittest
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from cultivation.utils import logger_utils


class ReconfigureLoggerTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.log_dir = Path(self._tmp.name) / "logs"

    def tearDown(self) -> None:
        for handler in list(logging.getLogger("Cultivation").handlers):
            handler.close()
        logging.getLogger("Cultivation").handlers.clear()
        logger_utils._logger_instance = None
        logger_utils._custom_log_dir = None
        self._tmp.cleanup()

    def test_redirect_is_the_only_public_entry_point(self) -> None:
        self.assertEqual(sorted(logger_utils.__all__), ["logger", "reconfigure_logger"])

    def test_proxy_writes_into_reconfigured_directory(self) -> None:
        logger_utils.reconfigure_logger(self.log_dir)
        logger_utils.logger.info("written to the app data logs")

        log_files = list(self.log_dir.glob("LOG_CULTIVATION_*.log"))
        self.assertEqual(len(log_files), 1)
        self.assertIn("written to the app data logs", log_files[0].read_text(encoding="utf-8"))

    def test_reconfiguring_twice_keeps_one_handler_pair(self) -> None:
        logger_utils.reconfigure_logger(self.log_dir)
        instance = logger_utils.reconfigure_logger(self.log_dir)
        self.assertEqual(len(instance.handlers), 2)


if __name__ == "__main__":
    unittest.main()
