# phivolcs_api/errors.py
from __future__ import annotations


class PhivolcsError(Exception):
    """Base class for every error raised by the scrape/cache/query pipeline."""


class NetworkError(PhivolcsError):
    """Upstream fetch failed: timeout, connection, TLS or a non-2xx status."""


class ParseError(PhivolcsError):
    """The page came back but the earthquake table could not be read."""


class DataUnavailableError(PhivolcsError):
    """No snapshot exists, fresh or stale, and the refresh attempt failed."""


class EmptyDatasetError(PhivolcsError):
    """An aggregate was requested over zero records."""


class ValidationError(PhivolcsError):
    """A request parameter is malformed or out of range."""
