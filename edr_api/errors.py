"""
EDR API Error Taxonomy.

Recoverable errors are carried as ``EDRError`` values and mapped onto HTTP
responses by the trigger layer. ``EncoderDispatchError`` is the only exception
allowed to escape the service, and it signals a broken build rather than a bad
request.
"""

from dataclasses import dataclass
from enum import Enum


class EDRErrorKind(str, Enum):
    """Recoverable error kinds reported to clients."""
    UNKNOWN_COLLECTION = "UnknownCollection"
    UNSUPPORTED_QUERY = "UnsupportedQuery"
    UNSUPPORTED_FORMAT = "UnsupportedFormat"
    MALFORMED_RECORD = "MalformedRecord"


_STATUS_CODES = {
    EDRErrorKind.UNKNOWN_COLLECTION: 404,
    EDRErrorKind.UNSUPPORTED_QUERY: 400,
    EDRErrorKind.UNSUPPORTED_FORMAT: 400,
    EDRErrorKind.MALFORMED_RECORD: 500,
}


@dataclass(frozen=True)
class EDRError:
    """A recoverable failure with a client-facing message."""
    kind: EDRErrorKind
    message: str

    @property
    def status_code(self) -> int:
        """HTTP status code for this error kind."""
        return _STATUS_CODES[self.kind]

    def to_dict(self) -> dict:
        """OGC-style error body."""
        return {
            "code": self.kind.value,
            "description": self.message
        }


class MalformedRecordError(ValueError):
    """Raised when a raw observation row cannot be turned into a record."""


class EncoderDispatchError(RuntimeError):
    """A resolved output format has no encoder (programming error)."""
