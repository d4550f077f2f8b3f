from typing import Optional

class QuoteRelayError(Exception):
    """Base class for every failure the relay reports."""

class DeadlineExceeded(QuoteRelayError):
    def __init__(self, timeout: float, stage: str):
        self.timeout = timeout
        self.stage = stage
        super().__init__(f"{stage} timeout: deadline of {int(timeout * 1000)}ms exceeded")

class ScopeCancelled(QuoteRelayError):
    def __init__(self, stage: str):
        self.stage = stage
        super().__init__(f"{stage} cancelled by caller")

class FetchError(QuoteRelayError):
    """Raised when the quote source could not provide a usable quote."""

class TransportError(FetchError):
    def __init__(self, url: str, cause: Exception):
        self.url = url
        self.cause = cause
        super().__init__(f"error when making http request to {url}: {cause!r}")

class UnexpectedStatus(FetchError):
    def __init__(self, code: int):
        self.code = code
        super().__init__(f"error in http response: status {code}")

class DecodeError(FetchError):
    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"error when decoding JSON: {reason}")

class PersistError(QuoteRelayError):
    """Wraps either an expired persist deadline or a storage failure."""

    def __init__(self, cause: Exception):
        self.cause = cause
        super().__init__(f"error saving to database: {cause}")

    @property
    def timed_out(self) -> bool:
        return isinstance(self.cause, DeadlineExceeded)

class SinkWriteError(QuoteRelayError):
    def __init__(self, path: str, cause: Optional[Exception] = None):
        self.path = path
        self.cause = cause
        super().__init__(f"error writing to file {path}: {cause}")
