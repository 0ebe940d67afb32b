from test.base import BaseTest

from ssm_parameter_replicator.common.metrics import (
    DEFAULT_METRICS_NAMESPACE,
    METRICS_NAMESPACE_KEY,
    EnhancedMetrics,
    MetricsMixins,
)


class Metered(MetricsMixins):
    pass


class MetricsMixinsTests(BaseTest):
    def get_namespace(self, metrics: EnhancedMetrics) -> str:
        self.addCleanup(metrics.clear_metrics)
        metrics.add_count_metric("Invocation")
        return metrics.serialize_metric_set()["_aws"]["CloudWatchMetrics"][0]["Namespace"]

    def test__get_metrics__defaults_namespace(self):
        metrics = MetricsMixins.get_metrics(service="svc")
        self.assertEqual(self.get_namespace(metrics), DEFAULT_METRICS_NAMESPACE)

    def test__get_metrics__namespace_from_env(self):
        self.set_env_vars((METRICS_NAMESPACE_KEY, "Custom"))
        metrics = MetricsMixins.get_metrics(service="svc")
        self.assertEqual(self.get_namespace(metrics), "Custom")

    def test__metrics__property_is_created_once(self):
        metered = Metered()
        self.assertIs(metered.metrics, metered.metrics)

    def test__add_failure_metric__records_both_counts(self):
        metrics = MetricsMixins.get_metrics(service="svc")
        self.addCleanup(metrics.clear_metrics)

        metrics.add_failure_metric("Replication")

        metric_set = metrics.serialize_metric_set()
        self.assertEqual(metric_set["ReplicationSuccess"], 0.0)
        self.assertEqual(metric_set["ReplicationFailure"], 1.0)
