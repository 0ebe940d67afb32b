"""Parameter Store replication handler.

Entry point for EventBridge "Parameter Store Change" events. Create and
Update events copy the parameter from the source region into the target
region, Delete events remove it from the target region.
"""

from dataclasses import dataclass, field
from typing import Optional

import marshmallow as mm
from aibs_informatics_core.utils.json import JSON
from aibs_informatics_core.utils.logging import get_logger

from ssm_parameter_replicator.common.handler import LambdaHandler
from ssm_parameter_replicator.handlers.ssm.config import get_parameter_stores
from ssm_parameter_replicator.handlers.ssm.exceptions import RetryableReplicationError
from ssm_parameter_replicator.handlers.ssm.model import (
    MalformedParameterChangeEvent,
    ParameterChangeEvent,
    ParameterOperation,
    ReplicationOutcome,
    ReplicationResponse,
)
from ssm_parameter_replicator.handlers.ssm.replicator import ParameterReplicator
from ssm_parameter_replicator.handlers.ssm.store import ParameterStore, is_retryable_error

logger = get_logger(__name__)


@dataclass  # type: ignore[misc] # mypy #5374
class ReplicateParameterHandler(LambdaHandler[ParameterChangeEvent, ReplicationResponse]):
    """Handler replicating a changed parameter into the target region.

    Every invocation reports status "OK" unless the failure that ended it is
    retryable (throttling, transient service or connection errors), in which
    case `RetryableReplicationError` is raised so that the event is delivered
    again. Other failures, including events that fail validation, are logged
    and reported with outcome FAILED or INVALID.

    Attributes:
        source: Source store. Defaults to the process wide store built from the environment.
        target: Target store. Defaults to the process wide store built from the environment.

    Example:
        ```python
        handler = ReplicateParameterHandler.get_handler()
        # Or with explicit stores
        handler = ReplicateParameterHandler.get_handler(
            source=ParameterStore("us-west-2"), target=ParameterStore("us-east-1")
        )
        ```
    """

    source: Optional[ParameterStore] = field(default=None)
    target: Optional[ParameterStore] = field(default=None)

    def __post_init__(self):
        super().__post_init__()
        if self.source is None or self.target is None:
            source, target = get_parameter_stores()
            self.source = self.source or source
            self.target = self.target or target

    @property
    def replicator(self) -> ParameterReplicator:
        assert self.source is not None and self.target is not None
        return ParameterReplicator(source=self.source, target=self.target)

    @classmethod
    def deserialize_request(cls, request: JSON) -> ParameterChangeEvent:
        """Load the change event, substituting a malformed event on validation errors.

        A redelivered event fails validation the same way, so the failure is
        reported from `handle` instead of failing the invocation.

        Args:
            request (JSON): The raw EventBridge event.

        Returns:
            The loaded event, or a `MalformedParameterChangeEvent` holding the errors.
        """
        try:
            return super().deserialize_request(request)
        except mm.ValidationError as e:
            logger.error(f"Event failed validation: {e.normalized_messages()}. Event: {request}")
            return MalformedParameterChangeEvent(errors=e.normalized_messages())

    def handle(self, request: ParameterChangeEvent) -> ReplicationResponse:
        try:
            response = self._replicate(request)
        except RetryableReplicationError:
            self.metrics.add_failure_metric("Replication")
            raise
        else:
            self.metrics.add_count_metric(response.outcome.metric_name)
            if response.outcome == ReplicationOutcome.FAILED:
                self.metrics.add_failure_metric("Replication")
            else:
                self.metrics.add_success_metric("Replication")
        finally:
            self.metrics.flush_metrics()
        return response

    def _replicate(self, request: ParameterChangeEvent) -> ReplicationResponse:
        if isinstance(request, MalformedParameterChangeEvent):
            return ReplicationResponse(outcome=ReplicationOutcome.INVALID)

        operation = ParameterOperation.parse(request.operation)
        if operation is None:
            self.log.info(f'Unknown operation "{request.operation}": {request.to_dict()}')
            return ReplicationResponse(
                outcome=ReplicationOutcome.IGNORED, operation=request.operation, name=request.name
            )
        if not request.name:
            self.log.error(f"Event does not name a parameter: {request.to_dict()}")
            return ReplicationResponse(
                outcome=ReplicationOutcome.INVALID, operation=request.operation
            )

        try:
            response = self.replicator.replicate(operation, request.name)
        except Exception as e:
            self.log.exception(f"Operation failed for {request.to_dict()}: {e}")
            if is_retryable_error(e):
                raise RetryableReplicationError(
                    f"{operation.value} of {request.name} failed and can be retried: {e}"
                ) from e
            return ReplicationResponse(
                outcome=ReplicationOutcome.FAILED, operation=operation.value, name=request.name
            )

        self.log.info(f"{operation.value} result: {response.to_dict()}")
        return response


lambda_handler = ReplicateParameterHandler.get_handler()
