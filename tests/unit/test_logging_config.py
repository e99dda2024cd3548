"""Unit tests for configure_logging."""

import io
import logging

import pytest

from securedb import SecureDatabase, configure_logging
from securedb.logging_config import HANDLER_NAME, LOGGER_NAME


@pytest.fixture
def clean_logger():
    logger = logging.getLogger(LOGGER_NAME)
    saved = (list(logger.handlers), logger.level)
    yield logger
    logger.handlers[:] = saved[0]
    logger.setLevel(saved[1])


def test_configure_logging_is_idempotent(clean_logger):
    configure_logging(logging.INFO, stream=io.StringIO())
    configure_logging(logging.DEBUG, stream=io.StringIO())
    ours = [h for h in clean_logger.handlers if h.get_name() == HANDLER_NAME]
    assert len(ours) == 1
    assert isinstance(ours[0], logging.StreamHandler)
    assert clean_logger.level == logging.DEBUG


def test_delete_missing_record_is_logged(clean_logger, tmp_path):
    out = io.StringIO()
    configure_logging(logging.WARNING, stream=out)

    db = SecureDatabase(tmp_path, "store.db", "k")
    db.delete_record("ghost")

    line = out.getvalue()
    assert "WARNING securedb.core.database: Record with key 'ghost' does not exist." in line
