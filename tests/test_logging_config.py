"""Tests for logging configuration."""

import logging

from common.logging_config import BinaryPayloadFilter, get_logger, setup_logging


def make_record(msg, args):
    return logging.LogRecord("gridstore", logging.INFO, __file__, 1, msg, args, None)


class TestBinaryPayloadFilter:
    """Test that chunk payloads are kept out of log output."""

    def test_masks_bytes_arguments(self):
        record = make_record("chunk %s of %s", (b"\x00" * 16, "file-1"))

        assert BinaryPayloadFilter().filter(record) is True
        assert record.getMessage() == "chunk <16 bytes> of file-1"

    def test_masks_bytes_message(self):
        record = make_record(bytearray(b"abc"), None)
        BinaryPayloadFilter().filter(record)

        assert record.getMessage() == "<3 bytes>"

    def test_masks_dict_arguments(self):
        record = make_record("%(data)s", ({"data": memoryview(b"abcd")},))
        BinaryPayloadFilter().filter(record)

        assert record.getMessage() == "<4 bytes>"

    def test_leaves_text_alone(self):
        record = make_record("plain %s", ("text",))
        BinaryPayloadFilter().filter(record)

        assert record.getMessage() == "plain text"


class TestSetupLogging:
    """Test logger setup."""

    def test_setup_logging_adds_single_handler(self):
        logger = setup_logging("gridstore-test-setup", "DEBUG")
        again = setup_logging("gridstore-test-setup", "DEBUG")

        assert logger is again
        assert len(logger.handlers) == 1
        assert logger.level == logging.DEBUG
        assert any(isinstance(f, BinaryPayloadFilter) for f in logger.handlers[0].filters)

    def test_log_level_from_environment(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "warning")
        logger = setup_logging("gridstore-test-env")

        assert logger.level == logging.WARNING

    def test_get_logger(self):
        assert get_logger("gridstore.upload_stream") is logging.getLogger("gridstore.upload_stream")
