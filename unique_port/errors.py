"""Errors reported back to CloudFormation as the failure reason."""


class UniquePortError(Exception):
    """Base class for unique port failures."""


class InvalidPropertiesError(UniquePortError):
    """Resource properties are missing or malformed."""


class LockTimeoutError(UniquePortError):
    """The DynamoDB lock could not be acquired in time."""


class PortsExhaustedError(UniquePortError):
    """Every port in the range has been handed out."""
