from typing import Optional

from aibs_informatics_core.exceptions import ApplicationException


class ParameterReplicationError(ApplicationException):
    """Base class of the parameter replication errors."""


class ParameterNotFoundError(ParameterReplicationError):
    """Raised when a parameter store reports that a parameter does not exist."""

    def __init__(self, name: str, region: Optional[str] = None):
        self.name = name
        self.region = region
        super().__init__(f"Parameter {name} was not found in {region or 'the default region'}")


class RetryableReplicationError(ParameterReplicationError):
    """Raised to fail the invocation so that the Lambda runtime redelivers the event."""


class ReplicatorConfigError(ParameterReplicationError):
    """Raised when the replicator is configured with missing or conflicting regions."""
