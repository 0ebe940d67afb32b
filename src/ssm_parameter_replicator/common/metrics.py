"""Metrics utilities for the replication handlers.

CloudWatch metrics are emitted as EMF log lines through AWS Lambda Powertools.
"""

from typing import Optional

from aibs_informatics_core.utils.os_operations import get_env_var
from aws_lambda_powertools.metrics import Metrics, MetricUnit

from ssm_parameter_replicator.common.base import HandlerMixins

METRICS_NAMESPACE_KEY = "POWERTOOLS_METRICS_NAMESPACE"
DEFAULT_METRICS_NAMESPACE = "ParameterReplication"


class EnhancedMetrics(Metrics):
    """Metrics with shorthands for the count and success/failure patterns."""

    def add_count_metric(self, name: str, value: float = 1):
        """Record a count metric.

        Args:
            name (str): The metric name.
            value (float): The count to record.
        """
        self.add_metric(name=name, unit=MetricUnit.Count, value=value)

    def add_success_metric(self, name: str = ""):
        """Record a successful operation.

        Adds metrics indicating success (1) and failure (0) counts.

        Args:
            name (str): Prefix for the metric names.
        """
        self.add_count_metric(f"{name}Success", 1)
        self.add_count_metric(f"{name}Failure", 0)

    def add_failure_metric(self, name: str = ""):
        """Record a failed operation.

        Adds metrics indicating success (0) and failure (1) counts.

        Args:
            name (str): Prefix for the metric names.
        """
        self.add_count_metric(f"{name}Success", 0)
        self.add_count_metric(f"{name}Failure", 1)


class MetricsMixins(HandlerMixins):
    """Mixin class providing a Powertools metrics collector."""

    @property
    def metrics(self) -> EnhancedMetrics:
        """Get the metrics collector, creating one if needed.

        The collector is dimensioned by the handler name.
        """
        try:
            return self._metrics
        except AttributeError:
            self.metrics = self.get_metrics(
                service=self.service_name(), handler=self.handler_name()
            )
        return self.metrics

    @metrics.setter
    def metrics(self, value: EnhancedMetrics):
        self._metrics = value

    @classmethod
    def get_metrics(
        cls,
        service: Optional[str] = None,
        namespace: Optional[str] = None,
        **additional_dimensions: str,
    ) -> EnhancedMetrics:
        """Create a new EnhancedMetrics instance.

        Args:
            service (Optional[str]): The service name for metrics.
            namespace (Optional[str]): The CloudWatch namespace. Falls back to
                POWERTOOLS_METRICS_NAMESPACE and then to DEFAULT_METRICS_NAMESPACE.
            **additional_dimensions (str): Additional metric dimensions as key-value pairs.

        Returns:
            A configured EnhancedMetrics instance.
        """
        metrics = EnhancedMetrics(
            service=service,
            namespace=namespace
            or get_env_var(METRICS_NAMESPACE_KEY, default_value=DEFAULT_METRICS_NAMESPACE),
        )
        for dimension_name, dimension_value in additional_dimensions.items():
            metrics.add_dimension(name=dimension_name, value=dimension_value)
        return metrics
