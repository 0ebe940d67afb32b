"""Parameter Store access for a single region.

Wraps an SSM client and translates the `ParameterNotFound` error code into
`ParameterNotFoundError`, the only store failure the replicator treats
differently from the rest.
"""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Optional

from aibs_informatics_aws_utils.core import client_error_code_check, get_client_error_code
from aibs_informatics_aws_utils.ssm import get_ssm_client
from aibs_informatics_core.utils.logging import get_logger
from botocore.exceptions import ClientError
from botocore.exceptions import ConnectionError as BotocoreConnectionError
from botocore.exceptions import HTTPClientError

from ssm_parameter_replicator.handlers.ssm.exceptions import ParameterNotFoundError
from ssm_parameter_replicator.handlers.ssm.model import Parameter

if TYPE_CHECKING:  # pragma: no cover
    from mypy_boto3_ssm import SSMClient
else:
    SSMClient = object

logger = get_logger(__name__)

PARAMETER_NOT_FOUND_ERROR_CODE = "ParameterNotFound"

# Error codes botocore's standard retry mode retries, plus Parameter Store's
# own rate limit on parameter updates.
THROTTLING_ERROR_CODES = frozenset(
    [
        "Throttling",
        "ThrottlingException",
        "ThrottledException",
        "RequestThrottledException",
        "TooManyRequestsException",
        "ProvisionedThroughputExceededException",
        "TransactionInProgressException",
        "RequestLimitExceeded",
        "BandwidthLimitExceeded",
        "LimitExceededException",
        "RequestThrottled",
        "SlowDown",
        "PriorRequestNotComplete",
        "EC2ThrottledException",
        "TooManyUpdates",
    ]
)
TRANSIENT_ERROR_CODES = frozenset(
    [
        "RequestTimeout",
        "RequestTimeoutException",
        "PriorRequestNotComplete",
        "InternalError",
        "InternalServerError",
        "InternalFailure",
        "ServiceUnavailable",
    ]
)
TRANSIENT_STATUS_CODES = frozenset([500, 502, 503, 504])


def is_parameter_not_found(error: BaseException) -> bool:
    """Check whether an error is Parameter Store's report of a missing parameter.

    Args:
        error (BaseException): The error raised by an SSM client call.

    Returns:
        True if the error is a `ClientError` with the `ParameterNotFound` code.
    """
    return isinstance(error, ClientError) and client_error_code_check(
        error, PARAMETER_NOT_FOUND_ERROR_CODE
    )


def is_retryable_error(error: BaseException) -> bool:
    """Check whether a store failure is worth redelivering the event for.

    Connection level failures, throttling and transient service errors are
    retryable. Everything else (missing permissions, validation errors,
    missing parameters) fails the same way on every attempt.

    Args:
        error (BaseException): The error that ended a store call.

    Returns:
        True if a later attempt may succeed.
    """
    if isinstance(error, (BotocoreConnectionError, HTTPClientError)):
        return True
    if isinstance(error, ClientError):
        code = get_client_error_code(error)
        if code in THROTTLING_ERROR_CODES or code in TRANSIENT_ERROR_CODES:
            return True
        status_code = error.response.get("ResponseMetadata", {}).get("HTTPStatusCode")
        return status_code in TRANSIENT_STATUS_CODES
    return False


@dataclass
class ParameterStore:
    """Parameter Store of one region.

    Meant to be built once per process and shared by every invocation.

    Attributes:
        region: Region of the store.
        client: SSM client bound to the region, created when not given.
    """

    region: str
    client: SSMClient = field(default=None, repr=False)  # type: ignore[assignment]

    def __post_init__(self):
        if self.client is None:
            self.client = get_ssm_client(region=self.region)

    def get_parameter(self, name: str) -> Parameter:
        """Fetch a parameter, decrypting SecureString values.

        Args:
            name (str): Name of the parameter.

        Raises:
            ParameterNotFoundError: If the parameter does not exist in this store.

        Returns:
            The parameter with its value, type and version.
        """
        try:
            response = self.client.get_parameter(Name=name, WithDecryption=True)
        except ClientError as e:
            if is_parameter_not_found(e):
                raise ParameterNotFoundError(name, self.region) from e
            raise
        return Parameter.from_boto(response["Parameter"])

    def find_parameter(self, name: str) -> Optional[Parameter]:
        """Fetch a parameter, returning None if it does not exist in this store."""
        try:
            return self.get_parameter(name)
        except ParameterNotFoundError:
            return None

    def put_parameter(self, parameter: Parameter, overwrite: bool = True) -> int:
        """Write a parameter to this store.

        Args:
            parameter (Parameter): The parameter to write. Its version is not sent.
            overwrite (bool): Whether an existing parameter may be replaced.

        Returns:
            The version this store assigned to the written parameter.
        """
        response = self.client.put_parameter(**parameter.to_put_request(overwrite=overwrite))
        logger.debug(f"Put {parameter.name} in {self.region} as version {response['Version']}")
        return response["Version"]

    def delete_parameter(self, name: str) -> None:
        """Delete a parameter.

        Args:
            name (str): Name of the parameter.

        Raises:
            ParameterNotFoundError: If the parameter does not exist in this store.
        """
        try:
            self.client.delete_parameter(Name=name)
        except ClientError as e:
            if is_parameter_not_found(e):
                raise ParameterNotFoundError(name, self.region) from e
            raise
