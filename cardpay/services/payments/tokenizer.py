"""One-way card tokenization keyed by a process-wide secret."""

import hashlib

from cardpay.common.errors import ConfigurationError


class CardTokenizer:
    """Derive a stable 64-char hex token from a card number.

    The same card and secret always yield the same token, which keeps repeat
    charges traceable. Built once at startup so a missing secret fails the
    process before it serves traffic.
    """

    def __init__(self, secret: str | None) -> None:
        if not secret:
            raise ConfigurationError("SECRET_KEY is not set; refusing to start without a tokenization secret")
        self.__secret = secret

    def __repr__(self) -> str:
        return "CardTokenizer(secret=<redacted>)"

    def tokenize(self, card_number: str) -> str:
        digest = hashlib.sha256((card_number + self.__secret).encode("utf-8"))
        return digest.hexdigest()
