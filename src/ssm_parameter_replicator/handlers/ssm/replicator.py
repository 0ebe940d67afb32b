from dataclasses import dataclass

from aibs_informatics_core.utils.logging import get_logger

from ssm_parameter_replicator.handlers.ssm.exceptions import ParameterNotFoundError
from ssm_parameter_replicator.handlers.ssm.model import (
    ParameterOperation,
    ReplicationOutcome,
    ReplicationResponse,
)
from ssm_parameter_replicator.handlers.ssm.store import ParameterStore

logger = get_logger(__name__)


@dataclass
class ParameterReplicator:
    """Mirrors parameters from a source store into a target store.

    Each call touches a single parameter and issues its store calls
    sequentially. Store failures other than an expected missing target
    parameter propagate to the caller.

    Attributes:
        source: Store parameters are read from.
        target: Store parameters are mirrored into.
    """

    source: ParameterStore
    target: ParameterStore

    def replicate(self, operation: ParameterOperation, name: str) -> ReplicationResponse:
        """Apply a change operation on the source store to the target store.

        Create and Update sync the parameter, Delete purges it.

        Args:
            operation (ParameterOperation): The operation reported for the parameter.
            name (str): Name of the changed parameter.

        Raises:
            ValueError: If the operation has no replication counterpart.

        Returns:
            The outcome of the replication, tagged with the operation.
        """
        if operation in (ParameterOperation.CREATE, ParameterOperation.UPDATE):
            response = self.sync(name)
        elif operation == ParameterOperation.DELETE:
            response = self.purge(name)
        else:
            raise ValueError(f"Unsupported operation {operation}")
        response.operation = operation.value
        return response

    def sync(self, name: str) -> ReplicationResponse:
        """Copy a parameter to the target unless the target already holds it.

        The target is written only when it lacks the parameter or holds a
        different value or type. Writing identical values would add a new
        version to the target's history on every change event.

        Args:
            name (str): Name of the parameter to copy.

        Raises:
            ParameterNotFoundError: If the parameter does not exist in the source store.

        Returns:
            A WRITTEN response with the target version, or a SKIPPED response.
        """
        source_parameter = self.source.get_parameter(name)
        target_parameter = self.target.find_parameter(name)

        if source_parameter.matches(target_parameter):
            logger.info(
                f"Parameter {name} is already in {self.target.region} "
                "with the same value and type, ignoring"
            )
            return ReplicationResponse(outcome=ReplicationOutcome.SKIPPED, name=name)

        version = self.target.put_parameter(source_parameter, overwrite=True)
        logger.info(f"Parameter {name} written to {self.target.region} as version {version}")
        return ReplicationResponse(outcome=ReplicationOutcome.WRITTEN, name=name, version=version)

    def purge(self, name: str) -> ReplicationResponse:
        """Remove a parameter from the target, tolerating its absence.

        Args:
            name (str): Name of the parameter to remove.

        Returns:
            A DELETED response, or NOT_FOUND if the target did not hold the parameter.
        """
        try:
            self.target.delete_parameter(name)
        except ParameterNotFoundError:
            logger.info(f"Parameter {name} was not found in {self.target.region}, ignoring")
            return ReplicationResponse(outcome=ReplicationOutcome.NOT_FOUND, name=name)
        logger.info(f"Parameter {name} deleted from {self.target.region}")
        return ReplicationResponse(outcome=ReplicationOutcome.DELETED, name=name)
