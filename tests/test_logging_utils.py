import logging
import unittest

from utils import logging_utils
from utils.logging_utils import EnsureTagFilter, MaxLevelFilter, build_logging_config, get_tagged_logger


class _ListHandler(logging.Handler):
    def __init__(self):
        super().__init__()
        self.records = []

    def emit(self, record: logging.LogRecord) -> None:  # type: ignore[override]
        self.records.append(record)


class TestLoggingUtils(unittest.TestCase):
    def test_build_logging_config_has_expected_handlers_and_filters(self):
        cfg = build_logging_config(job_name="weather_eval")
        self.assertIn("stdout", cfg["handlers"])
        self.assertIn("stderr", cfg["handlers"])
        self.assertEqual(cfg["filters"]["job_name"]["job_name"], "weather_eval")
        self.assertEqual(cfg["handlers"]["stderr"]["level"], "WARNING")

    def test_get_tagged_logger_injects_tag(self):
        handler = _ListHandler()
        logger = get_tagged_logger("weather_agent.tools", tag="tools")
        base_logger = logger.logger
        base_logger.setLevel(logging.DEBUG)
        base_logger.addHandler(handler)
        base_logger.propagate = False
        try:
            logger.info("hello")
            self.assertEqual(handler.records[-1].tag, "tools")
        finally:
            base_logger.removeHandler(handler)
            base_logger.propagate = True

    def test_default_tag_is_last_name_segment(self):
        logger = get_tagged_logger("weather_agent.scorers.weather")
        self.assertEqual(logger.extra["tag"], "weather")

    def test_ensure_tag_filter_uses_logger_name(self):
        record = logging.LogRecord("uvicorn.access", logging.INFO, __file__, 1, "msg", None, None)
        self.assertTrue(EnsureTagFilter().filter(record))
        self.assertEqual(record.tag, "access")

    def test_max_level_filter(self):
        f = MaxLevelFilter(logging.INFO)
        info = logging.LogRecord("x", logging.INFO, __file__, 1, "msg", None, None)
        warn = logging.LogRecord("x", logging.WARNING, __file__, 1, "msg", None, None)
        self.assertTrue(f.filter(info))
        self.assertFalse(f.filter(warn))

    def test_setup_logging_override_applies_filters(self):
        root = logging.getLogger()
        orig_handlers = root.handlers[:]
        orig_level = root.level
        try:
            logging_utils.setup_logging(level="INFO", job_name="jobtest", override_existing=True)
            self.assertTrue(
                any(
                    any(f.__class__.__name__ == "JobNameFilter" for f in h.filters)
                    for h in root.handlers
                )
            )
        finally:
            root.handlers = orig_handlers
            root.setLevel(orig_level)


if __name__ == "__main__":
    unittest.main()
