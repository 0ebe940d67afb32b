"""Parameter replication data models.

Defines the EventBridge change event accepted by the replication handler,
the parameter representation shared by the stores, and the handler response.
"""

__all__ = [
    "ParameterOperation",
    "ParameterChangeDetail",
    "ParameterChangeEvent",
    "MalformedParameterChangeEvent",
    "Parameter",
    "ReplicationOutcome",
    "ReplicationResponse",
    "REPLICATION_STATUS_OK",
]

from dataclasses import dataclass, fields
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, List, Optional

import marshmallow as mm
from aibs_informatics_core.models.base import (
    EnumField,
    IntegerField,
    ListField,
    RawField,
    SchemaModel,
    StringField,
    custom_field,
)

if TYPE_CHECKING:  # pragma: no cover
    from mypy_boto3_ssm.type_defs import ParameterTypeDef, PutParameterRequestRequestTypeDef
else:
    ParameterTypeDef = dict
    PutParameterRequestRequestTypeDef = dict

REPLICATION_STATUS_OK = "OK"
"""Status token reported for every invocation that should not be retried."""


def _known_fields(cls, data: Dict[str, Any]) -> Dict[str, Any]:
    names = {f.name for f in fields(cls)}
    return {k: v for k, v in data.items() if k in names}


class ParameterOperation(str, Enum):
    """Parameter Store change operations that are replicated."""

    CREATE = "Create"
    UPDATE = "Update"
    DELETE = "Delete"

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional["ParameterOperation"]:
        """Resolve an operation name, returning None for anything unrecognized."""
        try:
            return cls(value)
        except ValueError:
            return None


@dataclass
class ParameterChangeDetail(SchemaModel):
    """The `detail` section of a "Parameter Store Change" event.

    Attributes:
        operation: Change operation as reported by Parameter Store.
        name: Name of the changed parameter.
        type: Parameter type, when reported.
        description: Parameter description, when reported.
    """

    operation: Optional[str] = custom_field(default=None, mm_field=StringField(allow_none=True))
    name: Optional[str] = custom_field(default=None, mm_field=StringField(allow_none=True))
    type: Optional[str] = custom_field(default=None, mm_field=StringField(allow_none=True))
    description: Optional[str] = custom_field(
        default=None, mm_field=StringField(allow_none=True)
    )

    @classmethod
    @mm.pre_load
    def _parse_fields(cls, data: Dict[str, Any], **kwargs) -> Dict[str, Any]:
        if not isinstance(data, dict):
            return data
        return _known_fields(cls, data)


@dataclass
class ParameterChangeEvent(SchemaModel):
    """EventBridge envelope of a Parameter Store change notification.

    Only `detail` matters for replication, the remaining envelope fields are
    kept for logging. Keys outside the model are dropped on load, while a
    missing or non-object `detail` fails validation.
    """

    detail: ParameterChangeDetail = custom_field(
        default_factory=ParameterChangeDetail, mm_field=ParameterChangeDetail.as_mm_field()
    )
    detail_type: Optional[str] = custom_field(default=None, mm_field=StringField(allow_none=True))
    id: Optional[str] = custom_field(default=None, mm_field=StringField(allow_none=True))
    source: Optional[str] = custom_field(default=None, mm_field=StringField(allow_none=True))
    account: Optional[str] = custom_field(default=None, mm_field=StringField(allow_none=True))
    region: Optional[str] = custom_field(default=None, mm_field=StringField(allow_none=True))
    time: Optional[str] = custom_field(default=None, mm_field=StringField(allow_none=True))
    resources: List[str] = custom_field(default_factory=list, mm_field=ListField(StringField()))

    @classmethod
    @mm.pre_load
    def _parse_fields(cls, data: Dict[str, Any], **kwargs) -> Dict[str, Any]:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        if "detail-type" in data and "detail_type" not in data:
            data["detail_type"] = data["detail-type"]
        if not isinstance(data.get("detail"), dict):
            raise mm.ValidationError("Event has no detail object.", field_name="detail")
        return _known_fields(cls, data)

    @property
    def operation(self) -> Optional[str]:
        return self.detail.operation

    @property
    def name(self) -> Optional[str]:
        return self.detail.name


@dataclass
class MalformedParameterChangeEvent(ParameterChangeEvent):
    """Stand-in for an event that failed validation.

    Attributes:
        errors: Validation messages, keyed by field.
    """

    errors: Dict[str, Any] = custom_field(default_factory=dict, mm_field=RawField())


@dataclass
class Parameter(SchemaModel):
    """A Parameter Store entry as held in memory for comparison and forwarding.

    Attributes:
        name: Parameter name.
        value: Parameter value, decrypted for SecureString parameters.
        type: One of String, StringList or SecureString.
        version: Version assigned by the store the parameter was read from.
        data_type: Parameter data type (text, aws:ec2:image, ...).
    """

    name: str = custom_field(mm_field=StringField())
    value: str = custom_field(mm_field=StringField())
    type: str = custom_field(mm_field=StringField())
    version: Optional[int] = custom_field(default=None, mm_field=IntegerField(allow_none=True))
    data_type: Optional[str] = custom_field(default=None, mm_field=StringField(allow_none=True))

    @classmethod
    def from_boto(cls, parameter: ParameterTypeDef) -> "Parameter":
        return cls(
            name=parameter["Name"],
            value=parameter["Value"],
            type=parameter["Type"],
            version=parameter.get("Version"),
            data_type=parameter.get("DataType"),
        )

    def to_put_request(self, overwrite: bool = True) -> PutParameterRequestRequestTypeDef:
        """Build PutParameter arguments for this parameter.

        The version is never forwarded, the receiving store assigns its own.
        """
        request = PutParameterRequestRequestTypeDef(
            Name=self.name,
            Value=self.value,
            Type=self.type,  # type: ignore[typeddict-item]
            Overwrite=overwrite,
        )
        if self.data_type:
            request["DataType"] = self.data_type
        return request

    def matches(self, other: Optional["Parameter"]) -> bool:
        """Whether `other` holds the same value and type as this parameter."""
        return other is not None and other.value == self.value and other.type == self.type


class ReplicationOutcome(str, Enum):
    """What an invocation did to the target store.

    Attributes:
        WRITTEN: Source parameter was written to the target.
        SKIPPED: Target already held the same value and type.
        DELETED: Parameter was removed from the target.
        NOT_FOUND: Parameter to delete was already absent from the target.
        IGNORED: Operation is not replicated.
        INVALID: Event failed validation or does not name a parameter.
        FAILED: A non-retryable error ended the replication.
    """

    WRITTEN = "WRITTEN"
    SKIPPED = "SKIPPED"
    DELETED = "DELETED"
    NOT_FOUND = "NOT_FOUND"
    IGNORED = "IGNORED"
    INVALID = "INVALID"
    FAILED = "FAILED"

    @property
    def metric_name(self) -> str:
        return "Parameter" + "".join(part.capitalize() for part in self.value.split("_"))


@dataclass
class ReplicationResponse(SchemaModel):
    """Response of the replication handler.

    Attributes:
        outcome: What happened to the target store.
        operation: Operation named by the event.
        name: Parameter named by the event.
        version: Version assigned by the target store on write.
        status: Always REPLICATION_STATUS_OK; failures that need a retry raise instead.
    """

    outcome: ReplicationOutcome = custom_field(mm_field=EnumField(ReplicationOutcome))
    operation: Optional[str] = custom_field(default=None, mm_field=StringField(allow_none=True))
    name: Optional[str] = custom_field(default=None, mm_field=StringField(allow_none=True))
    version: Optional[int] = custom_field(default=None, mm_field=IntegerField(allow_none=True))
    status: str = custom_field(default=REPLICATION_STATUS_OK, mm_field=StringField())
