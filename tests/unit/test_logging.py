import logging
from io import StringIO

import pytest

from searchdeck.core.logging import (
    NOISY_HTTP_LOGGERS,
    HttpRequestLogDowngradeFilter,
    configure_root_logging,
    fingerprint,
    normalize_log_level,
    set_noisy_http_logger_levels,
)


@pytest.mark.unit
class TestHttpRequestLogDowngradeFilter:
    def setup_method(self) -> None:
        self.stream = StringIO()
        self.handler = logging.StreamHandler(self.stream)
        self.handler.setFormatter(logging.Formatter("%(levelname)s:%(message)s"))
        self.handler.addFilter(HttpRequestLogDowngradeFilter(*NOISY_HTTP_LOGGERS))

    def _emit(self, logger_name: str, level: int, message: str) -> str:
        logger = logging.getLogger(logger_name)
        logger.handlers = [self.handler]
        logger.setLevel(logging.DEBUG)
        logger.propagate = False
        logger.log(level, message)
        self.handler.flush()
        output = self.stream.getvalue()
        self.stream.truncate(0)
        self.stream.seek(0)
        return output

    def test_downgrades_noisy_http_info_logs(self):
        output = self._emit("httpx", logging.INFO, "HTTP Request: GET")
        assert output.startswith("DEBUG:HTTP Request: GET")

    def test_preserves_non_noisy_info_logs(self):
        output = self._emit("searchdeck.clients", logging.INFO, "Important info message")
        assert output.startswith("INFO:Important info message")


@pytest.mark.unit
class TestNoisyHttpLoggerLevelSetter:
    def test_sets_warning_by_default(self):
        set_noisy_http_logger_levels("INFO")
        for name in NOISY_HTTP_LOGGERS:
            assert logging.getLogger(name).level == logging.WARNING

    def test_stays_debug_when_global_debug(self):
        set_noisy_http_logger_levels("DEBUG")
        for name in NOISY_HTTP_LOGGERS:
            assert logging.getLogger(name).level == logging.DEBUG


@pytest.mark.unit
class TestRootLogging:
    def test_configure_installs_single_handler(self):
        root = logging.getLogger()
        saved_handlers, saved_level = root.handlers[:], root.level
        try:
            handler = configure_root_logging("warning  # comment")
            assert root.handlers == [handler]
            assert root.level == logging.WARNING
        finally:
            root.handlers = saved_handlers
            root.setLevel(saved_level)

    @pytest.mark.parametrize(("raw", "expected"), [("debug", "DEBUG"), ("", "INFO"), ("LOUD", "INFO")])
    def test_normalize_log_level(self, raw, expected):
        assert normalize_log_level(raw) == expected


@pytest.mark.unit
def test_fingerprint_is_short_and_stable():
    assert fingerprint("abc") == "ba7816bf"
    assert fingerprint("abc") != fingerprint("abd")
