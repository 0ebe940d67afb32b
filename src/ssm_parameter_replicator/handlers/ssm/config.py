"""Process level configuration of the parameter replicator.

The source and target regions are read from the environment once per
process; the parameter stores built from them are cached and shared by
every invocation handled by the process.
"""

from dataclasses import dataclass
from functools import lru_cache
from typing import Tuple

from aibs_informatics_aws_utils.core import get_region
from aibs_informatics_core.utils.os_operations import get_env_var

from ssm_parameter_replicator.handlers.ssm.exceptions import ReplicatorConfigError
from ssm_parameter_replicator.handlers.ssm.store import ParameterStore

AWS_SOURCE_REGION_KEY = "AWS_SOURCE_REGION"
AWS_TARGET_REGION_KEY = "AWS_TARGET_REGION"


@dataclass(frozen=True)
class ReplicatorConfig:
    """Regions the source and target parameter stores are bound to.

    Attributes:
        source_region: Region parameters are read from.
        target_region: Region parameters are mirrored into.
    """

    source_region: str
    target_region: str

    def __post_init__(self):
        if not self.source_region:
            raise ReplicatorConfigError("A source region is required")
        if not self.target_region:
            raise ReplicatorConfigError(
                f"A target region is required, set {AWS_TARGET_REGION_KEY}"
            )
        if self.source_region == self.target_region:
            raise ReplicatorConfigError(
                f"Source and target regions must differ (both are {self.source_region})"
            )

    @classmethod
    def from_env(cls) -> "ReplicatorConfig":
        """Build the configuration from environment variables.

        The source region defaults to the region of the Lambda function itself.

        Raises:
            ReplicatorConfigError: If the target region is missing or equals the source region.
        """
        return cls(
            source_region=get_env_var(AWS_SOURCE_REGION_KEY) or get_region(),
            target_region=get_env_var(AWS_TARGET_REGION_KEY) or "",
        )


@lru_cache(maxsize=None)
def get_parameter_stores() -> Tuple[ParameterStore, ParameterStore]:
    """Get the (source, target) parameter stores of this process."""
    config = ReplicatorConfig.from_env()
    return ParameterStore(region=config.source_region), ParameterStore(region=config.target_region)
