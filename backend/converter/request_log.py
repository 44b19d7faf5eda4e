"""Per-request logger passed from the API into the conversion code."""
import logging


class RequestLogger(logging.LoggerAdapter):
    """Prefixes every record with the request id."""

    def process(self, msg, kwargs):
        return f"[{self.extra['request_id']}] {msg}", kwargs


def request_logger(name: str, request_id: str) -> RequestLogger:
    return RequestLogger(logging.getLogger(name), {"request_id": request_id})
