# tests/test_logging_config.py
import logging

from helpdesk.core import logging_config
from helpdesk.core.logging_config import configure_logging


def test_configure_logging_adds_one_handler():
    root = logging.getLogger()
    level = root.level
    try:
        configure_logging("debug")
        configure_logging("info")
        assert root.handlers.count(logging_config._handler) == 1
        assert root.level == logging.INFO
    finally:
        root.removeHandler(logging_config._handler)
        root.setLevel(level)
