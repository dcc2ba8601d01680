"""
Transit Intel Errors

Every error raised by the package derives from TransitIntelError so
callers can catch engine failures in one place. Per-record problems are
raised as MalformedInputError and normally skipped by ingestion; bad
settings surface as ConfigurationError at load time.
"""

from typing import Optional


class TransitIntelError(Exception):
    """Base exception for the analytics engine"""


class MalformedInputError(TransitIntelError):
    """
    A single input record failed validation

    Attributes:
        record_type: Model the record was parsed into (e.g. "VehicleSnapshot")
    """

    def __init__(self, message: str, record_type: Optional[str] = None):
        super().__init__(message)
        self.record_type = record_type


class ConfigurationError(TransitIntelError):
    """
    Engine settings could not be loaded or validated

    Attributes:
        section: Config file stem the settings came from
    """

    def __init__(self, message: str, section: Optional[str] = None):
        super().__init__(message)
        self.section = section
