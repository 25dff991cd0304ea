"""
Tests for the structlog setup.
"""

import logging

import pytest
import structlog

from eventhub.core.logging import HANDLER_NAME, add_service_context, setup_logging


@pytest.fixture
def restore_logging():
    root_logger = logging.getLogger()
    handlers, level = list(root_logger.handlers), root_logger.level
    yield
    root_logger.handlers[:] = handlers
    root_logger.setLevel(level)
    structlog.reset_defaults()


def test_setup_logging_installs_one_handler(restore_logging):
    setup_logging()
    setup_logging()

    ours = [h for h in logging.getLogger().handlers if h.get_name() == HANDLER_NAME]
    assert len(ours) == 1
    assert logging.getLogger("sqlalchemy.engine").level == logging.WARNING


def test_service_context_does_not_override_bound_values():
    event_dict = add_service_context(None, "info", {"event": "x", "env": "staging"})
    assert event_dict["app"] == "EventHub"
    assert event_dict["env"] == "staging"
