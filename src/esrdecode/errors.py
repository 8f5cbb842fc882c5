from __future__ import annotations


class EsrDecodeError(Exception):
    """Base class for every failure that ends an invocation."""


class UsageError(EsrDecodeError):
    def __init__(self, usage: str):
        super().__init__("invalid arguments")
        self.usage = usage


class ParseError(EsrDecodeError, ValueError):
    def __init__(self, text: str, reason: str = "not a valid number"):
        super().__init__(f"{text!r}: {reason}")
        self.text = text


class DecodeError(EsrDecodeError):
    pass
