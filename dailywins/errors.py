"""Error taxonomy for DailyWins.

Only boundary operations (store fetch/save, request parsing) raise these.
The pure engines never do on well-formed input.
"""

from __future__ import annotations


class DailyWinsError(Exception):
    """Base class for all DailyWins failures."""


class TransportFailure(DailyWinsError):
    """A collaborator call failed: storage I/O, network, or non-success response."""


class ParseFailure(DailyWinsError):
    """A response or stored document does not match the expected record shape."""


class ValidationFailure(DailyWinsError):
    """Caller-supplied input is out of range (rating outside 1-5, malformed day key)."""


class RecordNotFound(DailyWinsError):
    """An update referenced an identity the store does not hold."""
