"""Structured JSON logging with request context and card-number masking."""

import logging
import re
import sys
from contextvars import ContextVar

from pythonjsonlogger.json import JsonFormatter

from cardpay.common.config import settings


trace_id_ctx: ContextVar[str] = ContextVar("trace_id", default="")

# 13-19 digits, optionally split by spaces or dashes; hex tokens are left alone.
_PAN = re.compile(r"(?<![0-9A-Za-z])[0-9](?:[ -]?[0-9]){12,18}(?![0-9A-Za-z])")


def mask_card_numbers(text: str) -> str:
    """Replace anything shaped like a card number, keeping the last four digits."""

    def _mask(match: re.Match) -> str:
        digits = re.sub(r"[^0-9]", "", match.group(0))
        return f"****{digits[-4:]}"

    return _PAN.sub(_mask, text)


class ContextFilter(logging.Filter):
    """Inject service name and correlation id, and mask card numbers in the message."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.service_name = settings.service_name
        record.trace_id = trace_id_ctx.get()
        message = record.getMessage()
        masked = mask_card_numbers(message)
        if masked != message:
            record.msg = masked
            record.args = None
        return True


def configure_logging() -> None:
    """Configure root logger once per service process."""

    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(ContextFilter())
    handler.setFormatter(JsonFormatter("%(asctime)s %(levelname)s %(service_name)s %(trace_id)s %(message)s"))

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(settings.log_level)


logger = logging.getLogger("cardpay")
logger.addFilter(ContextFilter())
