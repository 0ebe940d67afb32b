from test.base import AwsBaseTest
from unittest import mock

from ssm_parameter_replicator.handlers.ssm.exceptions import ParameterNotFoundError
from ssm_parameter_replicator.handlers.ssm.model import ParameterOperation, ReplicationOutcome
from ssm_parameter_replicator.handlers.ssm.replicator import ParameterReplicator
from ssm_parameter_replicator.handlers.ssm.store import ParameterStore


class ParameterReplicatorTests(AwsBaseTest):
    def setUp(self) -> None:
        super().setUp()
        self.set_aws_credentials()
        self.start_mock_aws()
        self.source = ParameterStore(region=self.US_WEST_2)
        self.target = ParameterStore(region=self.US_EAST_1)
        self.replicator = ParameterReplicator(source=self.source, target=self.target)

    def put_source(self, name: str, value: str, type: str = "String"):
        self.source.client.put_parameter(Name=name, Value=value, Type=type, Overwrite=True)

    def put_target(self, name: str, value: str, type: str = "String"):
        self.target.client.put_parameter(Name=name, Value=value, Type=type, Overwrite=True)

    def spy(self, store: ParameterStore, method: str) -> mock.MagicMock:
        patcher = mock.patch.object(store, method, wraps=getattr(store, method))
        self.addCleanup(patcher.stop)
        return patcher.start()

    def test__sync__writes_when_target_is_missing(self):
        self.put_source("/a", "x")

        response = self.replicator.sync("/a")

        self.assertEqual(response.outcome, ReplicationOutcome.WRITTEN)
        self.assertEqual(response.version, 1)
        target_parameter = self.target.get_parameter("/a")
        self.assertEqual(target_parameter.value, "x")
        self.assertEqual(target_parameter.type, "String")

    def test__sync__skips_when_target_matches(self):
        self.put_source("/a", "x")
        self.put_target("/a", "x")
        put_parameter = self.spy(self.target, "put_parameter")

        response = self.replicator.sync("/a")

        self.assertEqual(response.outcome, ReplicationOutcome.SKIPPED)
        self.assertIsNone(response.version)
        put_parameter.assert_not_called()
        self.assertEqual(self.target.get_parameter("/a").version, 1)

    def test__sync__overwrites_when_value_differs(self):
        self.put_source("/a", "y")
        self.put_target("/a", "x")

        response = self.replicator.sync("/a")

        self.assertEqual(response.outcome, ReplicationOutcome.WRITTEN)
        self.assertEqual(response.version, 2)
        self.assertEqual(self.target.get_parameter("/a").value, "y")

    def test__sync__overwrites_when_type_differs(self):
        self.put_source("/a", "x,y", type="StringList")
        self.put_target("/a", "x,y", type="String")

        response = self.replicator.sync("/a")

        self.assertEqual(response.outcome, ReplicationOutcome.WRITTEN)
        self.assertEqual(self.target.get_parameter("/a").type, "StringList")

    def test__sync__replicates_secure_string_decrypted(self):
        self.put_source("/secret", "hunter2", type="SecureString")

        self.replicator.sync("/secret")
        response = self.replicator.sync("/secret")

        self.assertEqual(response.outcome, ReplicationOutcome.SKIPPED)
        target_parameter = self.target.get_parameter("/secret")
        self.assertEqual(target_parameter.value, "hunter2")
        self.assertEqual(target_parameter.type, "SecureString")

    def test__sync__does_not_forward_source_version(self):
        for value in ["1", "2", "3"]:
            self.put_source("/a", value)

        response = self.replicator.sync("/a")

        self.assertEqual(self.source.get_parameter("/a").version, 3)
        self.assertEqual(response.version, 1)

    def test__sync__missing_source_parameter_raises(self):
        self.put_target("/a", "x")
        put_parameter = self.spy(self.target, "put_parameter")

        with self.assertRaises(ParameterNotFoundError):
            self.replicator.sync("/a")
        put_parameter.assert_not_called()

    def test__purge__deletes_target_parameter(self):
        self.put_source("/a", "x")
        self.put_target("/a", "x")

        response = self.replicator.purge("/a")

        self.assertEqual(response.outcome, ReplicationOutcome.DELETED)
        self.assertIsNone(self.target.find_parameter("/a"))
        self.assertIsNotNone(self.source.find_parameter("/a"))

    def test__purge__missing_target_parameter_is_tolerated(self):
        delete_parameter = self.spy(self.target, "delete_parameter")
        put_parameter = self.spy(self.target, "put_parameter")

        response = self.replicator.purge("/a")

        self.assertEqual(response.outcome, ReplicationOutcome.NOT_FOUND)
        delete_parameter.assert_called_once_with("/a")
        put_parameter.assert_not_called()

    def test__replicate__dispatches_operations(self):
        self.put_source("/a", "x")

        created = self.replicator.replicate(ParameterOperation.CREATE, "/a")
        updated = self.replicator.replicate(ParameterOperation.UPDATE, "/a")
        deleted = self.replicator.replicate(ParameterOperation.DELETE, "/a")

        self.assertEqual(
            (created.outcome, created.operation), (ReplicationOutcome.WRITTEN, "Create")
        )
        self.assertEqual(
            (updated.outcome, updated.operation), (ReplicationOutcome.SKIPPED, "Update")
        )
        self.assertEqual(
            (deleted.outcome, deleted.operation), (ReplicationOutcome.DELETED, "Delete")
        )
