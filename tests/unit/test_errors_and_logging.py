"""
Error taxonomy and structured logging tests.
"""

import json
import logging

import pytest

from core.errors import ErrorCode, get_http_status_code, create_error_response
from exceptions import (
    BusinessLogicError,
    ConfigurationError,
    GrantIssuanceFailedError,
    InvalidRequestError,
    PayloadTooLargeError,
    StoreWriteFailedError,
    UploadGatewayError,
)
from util_logger import ComponentType, JSONFormatter, LogContext, LoggerFactory, log_exceptions


class TestErrorCodes:

    @pytest.mark.parametrize("exc,status", [
        (InvalidRequestError("x"), 400),
        (PayloadTooLargeError(2, 1), 413),
        (StoreWriteFailedError("x"), 500),
        (GrantIssuanceFailedError("x"), 500),
    ])
    def test_status_per_exception(self, exc, status):
        assert exc.http_status == status
        assert isinstance(exc, UploadGatewayError)
        assert isinstance(exc, BusinessLogicError)

    def test_method_not_allowed_is_405(self):
        assert get_http_status_code(ErrorCode.METHOD_NOT_ALLOWED) == 405

    def test_every_code_has_a_status(self):
        for code in ErrorCode:
            assert get_http_status_code(code) in (400, 405, 413, 500)

    def test_configuration_error_is_not_a_request_error(self):
        assert not issubclass(ConfigurationError, UploadGatewayError)
        assert ConfigurationError.error_code == ErrorCode.CONFIG_ERROR

    def test_error_body_omits_empty_details(self):
        assert create_error_response("boom") == {"error": "boom"}
        assert create_error_response("boom", "why") == {"error": "boom", "details": "why"}


class TestJSONFormatter:

    def _record(self, msg="hello", exc_info=None):
        return logging.LogRecord(
            name="service.UploadGateway", level=logging.INFO, pathname=__file__,
            lineno=10, msg=msg, args=(), exc_info=exc_info,
        )

    def test_one_json_object(self):
        out = json.loads(JSONFormatter().format(self._record()))
        assert out["level"] == "INFO"
        assert out["message"] == "hello"
        assert out["logger"] == "service.UploadGateway"

    def test_custom_dimensions_passed_through(self):
        record = self._record()
        record.custom_dimensions = {"blob_name": "1-a.txt"}
        out = json.loads(JSONFormatter().format(record))
        assert out["customDimensions"] == {"blob_name": "1-a.txt"}

    def test_exception_included(self):
        try:
            raise ValueError("bad")
        except ValueError:
            import sys
            record = self._record(exc_info=sys.exc_info())
        out = json.loads(JSONFormatter().format(record))
        assert out["exception"]["type"] == "ValueError"
        assert out["exception"]["message"] == "bad"


class TestLoggerFactory:

    def test_logger_name_includes_component(self):
        logger = LoggerFactory.create_logger(ComponentType.SERVICE, "NameCheck")
        assert logger.name == "service.NameCheck"

    def test_single_json_handler_on_repeat_calls(self):
        LoggerFactory.create_logger(ComponentType.REPOSITORY, "RepeatCheck")
        logger = LoggerFactory.create_logger(ComponentType.REPOSITORY, "RepeatCheck")
        json_handlers = [h for h in logger.logger.handlers if isinstance(h.formatter, JSONFormatter)]
        assert len(json_handlers) == 1

    def test_context_becomes_custom_dimensions(self, caplog):
        logger = LoggerFactory.create_logger(
            ComponentType.TRIGGER, "ContextCheck",
            context=LogContext(request_id="abc123", blob_name="1-a.txt"),
        )
        with caplog.at_level(logging.INFO, logger="trigger.ContextCheck"):
            logger.info("upload finished")

        record = caplog.records[-1]
        assert record.custom_dimensions["request_id"] == "abc123"
        assert record.custom_dimensions["blob_name"] == "1-a.txt"
        assert record.custom_dimensions["component_type"] == "trigger"

    def test_each_call_carries_its_own_context(self, caplog):
        first = LoggerFactory.create_logger(
            ComponentType.TRIGGER, "TwoContexts", context=LogContext(request_id="first"),
        )
        second = LoggerFactory.create_logger(
            ComponentType.TRIGGER, "TwoContexts", context=LogContext(request_id="second"),
        )
        with caplog.at_level(logging.INFO, logger="trigger.TwoContexts"):
            second.info("from second")
            first.info("from first")

        assert [r.custom_dimensions["request_id"] for r in caplog.records[-2:]] == ["second", "first"]

    def test_with_context_shares_the_underlying_logger(self, caplog):
        base = LoggerFactory.create_logger(ComponentType.SERVICE, "WithContext")
        scoped = base.with_context(LogContext(request_id="r1", blob_name="1-a.txt"))

        assert scoped.logger is base.logger
        with caplog.at_level(logging.INFO, logger="service.WithContext"):
            base.info("no context")
            scoped.info("scoped")

        plain, tagged = caplog.records[-2:]
        assert "request_id" not in plain.custom_dimensions
        assert tagged.custom_dimensions["blob_name"] == "1-a.txt"

    def test_extra_custom_dimensions_merged(self, caplog):
        logger = LoggerFactory.create_logger(
            ComponentType.SERVICE, "ExtraMerge", context=LogContext(request_id="r2"),
        )
        with caplog.at_level(logging.INFO, logger="service.ExtraMerge"):
            logger.info("x", extra={"custom_dimensions": {"size_bytes": 10}})

        dims = caplog.records[-1].custom_dimensions
        assert dims["request_id"] == "r2"
        assert dims["size_bytes"] == 10

    def test_set_level_applies_to_existing_and_new_loggers(self):
        existing = LoggerFactory.create_logger(ComponentType.FACTORY, "LevelCheck")
        original = LoggerFactory._default_level
        try:
            LoggerFactory.set_level("WARNING")
            created_after = LoggerFactory.create_logger(ComponentType.REPOSITORY, "LevelCheckAfter")

            assert existing.logger.level == logging.WARNING
            assert created_after.logger.level == logging.WARNING
        finally:
            LoggerFactory.set_level(original.value)

    def test_log_exceptions_reraises(self):
        @log_exceptions(ComponentType.SERVICE, "DecoratorCheck")
        def fails():
            raise RuntimeError("nope")

        with pytest.raises(RuntimeError, match="nope"):
            fails()
