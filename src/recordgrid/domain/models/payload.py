"""Mutation requests handed to the persistence collaborator, and its replies.

Payloads describe intent only.  Their wire shape is::

    {"kind": "update", "targets": [id, ...], "fields": {name: value}}
    {"kind": "create", "fields": {name: value}}
    {"kind": "delete", "target": id}

``PAYLOAD_SCHEMA`` pins that shape so collaborators can validate what they
receive with the same JSON Schema the engine checks against.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Hashable, Optional, Tuple, Union

from jsonschema import Draft202012Validator

from .core import RecordSet

PAYLOAD_SCHEMA: Dict[str, Any] = {
    "$id": "recordgrid/mutation-payload.schema.json",
    "oneOf": [
        {
            "type": "object",
            "required": ["kind", "targets", "fields"],
            "properties": {
                "kind": {"const": "update"},
                "targets": {"type": "array", "minItems": 1},
                "fields": {"type": "object"},
            },
            "additionalProperties": False,
        },
        {
            "type": "object",
            "required": ["kind", "fields"],
            "properties": {
                "kind": {"const": "create"},
                "fields": {"type": "object"},
            },
            "additionalProperties": False,
        },
        {
            "type": "object",
            "required": ["kind", "target"],
            "properties": {
                "kind": {"const": "delete"},
                "target": {"type": ["string", "integer", "number"]},
            },
            "additionalProperties": False,
        },
    ],
}

_validator = Draft202012Validator(PAYLOAD_SCHEMA)


class PayloadKind(str, Enum):
    UPDATE = "update"
    CREATE = "create"
    DELETE = "delete"


@dataclass(frozen=True)
class UpdatePayload:
    targets: Tuple[Hashable, ...]
    fields: Dict[str, Any] = field(default_factory=dict)
    kind: PayloadKind = PayloadKind.UPDATE

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind.value, "targets": list(self.targets), "fields": dict(self.fields)}


@dataclass(frozen=True)
class CreatePayload:
    fields: Dict[str, Any] = field(default_factory=dict)
    kind: PayloadKind = PayloadKind.CREATE

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind.value, "fields": dict(self.fields)}


@dataclass(frozen=True)
class DeletePayload:
    target: Hashable
    kind: PayloadKind = PayloadKind.DELETE

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind.value, "target": self.target}


MutationPayload = Union[UpdatePayload, CreatePayload, DeletePayload]


def validate_payload(data: Dict[str, Any]) -> None:
    """Validate a serialised payload against :data:`PAYLOAD_SCHEMA`."""

    _validator.validate(data)


class MutationStatus(str, Enum):
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    # Handed to the consumer through ``mutation_requested`` only; nobody acknowledges it
    DEFERRED = "deferred"
    # Refused by the grid before anything was submitted
    DENIED = "denied"


@dataclass(frozen=True)
class MutationResult:
    """Outcome of a submitted payload as reported by the collaborator.

    ``message`` carries the collaborator's failure text verbatim.  A success may
    carry the refreshed ``record_set`` so the grid can reload without a fetch.
    """

    status: MutationStatus
    message: Optional[str] = None
    record_set: Optional[RecordSet] = None

    @property
    def ok(self) -> bool:
        return self.status is MutationStatus.SUCCEEDED

    @classmethod
    def success(cls, record_set: Optional[RecordSet] = None) -> "MutationResult":
        return cls(status=MutationStatus.SUCCEEDED, record_set=record_set)

    @classmethod
    def failure(cls, message: str) -> "MutationResult":
        return cls(status=MutationStatus.FAILED, message=message)

    @classmethod
    def deferred(cls) -> "MutationResult":
        return cls(status=MutationStatus.DEFERRED)

    @classmethod
    def denied(cls, reason: str) -> "MutationResult":
        return cls(status=MutationStatus.DENIED, message=reason)
