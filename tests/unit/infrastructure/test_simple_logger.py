"""Tests for the SimpleLogger adapter."""

import logging

import pytest

from subscription_service.infrastructure.simple_logger import SimpleLogger


@pytest.fixture
def logger():
    return SimpleLogger(name="subscription_service.test", level=logging.DEBUG)


class TestSimpleLogger:
    """Test cases for SimpleLogger."""

    def test_uses_named_logger(self, logger):
        assert logger.name == "subscription_service.test"

    def test_accepts_level_names(self):
        SimpleLogger(name="subscription_service.named", level="WARNING")
        assert logging.getLogger("subscription_service.named").level == logging.WARNING

    def test_does_not_stack_handlers(self):
        SimpleLogger(name="subscription_service.once")
        SimpleLogger(name="subscription_service.once")
        assert len(logging.getLogger("subscription_service.once").handlers) == 1

    @pytest.mark.parametrize(
        "method,level",
        [
            ("debug", logging.DEBUG),
            ("info", logging.INFO),
            ("warning", logging.WARNING),
            ("error", logging.ERROR),
        ],
    )
    def test_levels_and_context(self, logger, caplog, method, level):
        with caplog.at_level(logging.DEBUG, logger="subscription_service.test"):
            getattr(logger, method)("Subscription opened", provider_id="p1", subscriber="bob")

        record = caplog.records[-1]
        assert record.levelno == level
        assert record.getMessage() == "Subscription opened [provider_id=p1 subscriber=bob]"
        assert record.context == {"provider_id": "p1", "subscriber": "bob"}

    def test_message_without_context_is_unchanged(self, logger, caplog):
        with caplog.at_level(logging.INFO, logger="subscription_service.test"):
            logger.info("Started renewal worker")
        assert caplog.records[-1].getMessage() == "Started renewal worker"

    def test_exception_includes_traceback(self, logger, caplog):
        with caplog.at_level(logging.ERROR, logger="subscription_service.test"):
            try:
                raise RuntimeError("store offline")
            except RuntimeError as e:
                logger.exception("Renewal sweep crashed", exc_info=e)

        record = caplog.records[-1]
        assert record.levelno == logging.ERROR
        assert record.exc_info is not None
        assert record.exc_info[0] is RuntimeError
