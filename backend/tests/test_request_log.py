import logging

from converter.request_log import request_logger


def test_request_logger_prefixes_request_id(caplog):
    log = request_logger("converter.api", "abc123")
    with caplog.at_level(logging.INFO, logger="converter.api"):
        log.info("Target format: %s", "png")
    assert caplog.records[-1].getMessage() == "[abc123] Target format: png"
