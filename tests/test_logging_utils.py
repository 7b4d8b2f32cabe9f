"""Tests for logging helpers."""

import logging

from common.logging_utils import Timer, configure_logging, extra_context, is_debug_enabled, safe_url


class TestLoggingUtils:
    """Structured logging helpers."""

    def test_extra_context_drops_none(self):
        """None fields are omitted."""
        assert extra_context(event="lookup", target=None, count=0) == {"event": "lookup", "count": 0}

    def test_safe_url_redacts(self):
        """Credentials are removed from URLs."""
        url = "https://user:pw@registry.test:8443/api?token=abc&page=2"
        assert safe_url(url) == "https://registry.test:8443/api?token=***&page=2"

    def test_configure_logging_level(self):
        """configure_logging sets the root level."""
        configure_logging("DEBUG")
        assert is_debug_enabled(logging.getLogger("gexreg.test"))
        configure_logging("WARNING")
        assert not is_debug_enabled(logging.getLogger("gexreg.test"))

    def test_configure_logging_file(self, tmp_path):
        """Records go to the log file when one is given."""
        logfile = tmp_path / "gexreg.log"
        configure_logging("INFO", str(logfile))
        logging.getLogger("gexreg.test").info("hello file")
        for handler in logging.getLogger().handlers:
            handler.flush()
        assert "[INFO] hello file" in logfile.read_text(encoding="utf-8")
        configure_logging("WARNING")

    def test_timer(self):
        """Timer reports a non-negative duration."""
        with Timer() as t:
            pass
        assert t.duration_ms() >= 0
