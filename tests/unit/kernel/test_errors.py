"""Unit tests for the kernel error hierarchy."""

from __future__ import annotations

import json

import pytest

from petadoption.kernel.errors import (
    ApplicationError,
    BaseError,
    ConcurrencyConflictError,
    ConflictError,
    DomainError,
    HandlerNotFoundError,
    InfrastructureError,
    NotFoundError,
    PublishError,
    SerializationError,
    StorageError,
    TopologyError,
    UnknownEventTypeError,
    ValidationError,
)


class TestBaseError:
    def test_default_code(self) -> None:
        assert BaseError("m").code == "base_error"

    def test_custom_code_and_detail(self) -> None:
        err = BaseError("m", code="my_code", detail={"key": "val"})
        assert err.to_dict() == {"code": "my_code", "message": "m", "detail": {"key": "val"}}

    def test_cause_is_chained(self) -> None:
        cause = RuntimeError("root")
        err = BaseError("wrap", cause=cause)
        assert err.__cause__ is cause
        assert "root" in err.to_dict()["cause"]

    def test_str_is_valid_json(self) -> None:
        parsed = json.loads(str(BaseError("oops", code="oops")))
        assert parsed["message"] == "oops"


class TestDomainErrors:
    def test_concurrency_conflict_is_a_conflict(self) -> None:
        err = ConcurrencyConflictError("Pet", "p-1", 3)
        assert isinstance(err, ConflictError)
        assert isinstance(err, DomainError)
        assert err.code == "concurrency_conflict"
        assert err.detail == {"aggregate_type": "Pet", "aggregate_id": "p-1", "expected_version": 3}
        assert "p-1" in err.message

    def test_not_found_message(self) -> None:
        err = NotFoundError("Pet", "p-9")
        assert err.message == "Pet 'p-9' not found"
        assert err.code == "not_found"

    def test_validation_error_carries_field_errors(self) -> None:
        err = ValidationError("bad", errors=[{"field": "name"}])
        assert err.to_dict()["errors"] == [{"field": "name"}]


class TestInfrastructureErrors:
    @pytest.mark.parametrize(
        "err",
        [
            StorageError("outbox.add"),
            PublishError("PetReservedEvent"),
            TopologyError("nope", attempts=10),
            SerializationError("bad json"),
        ],
    )
    def test_all_are_infrastructure_errors(self, err: BaseError) -> None:
        assert isinstance(err, InfrastructureError)

    def test_storage_error_default_message(self) -> None:
        assert StorageError("Pet.save").message == "Storage operation 'Pet.save' failed"

    def test_publish_error_keeps_event_type(self) -> None:
        assert PublishError("PetAdoptedEvent").event_type == "PetAdoptedEvent"

    def test_topology_error_attempts(self) -> None:
        assert TopologyError("x", attempts=10).attempts == 10

    def test_unknown_event_type_is_serialization_error(self) -> None:
        err = UnknownEventTypeError("Nope")
        assert isinstance(err, SerializationError)
        assert err.payload_type == "Nope"
        assert err.code == "unknown_event_type"


class TestApplicationErrors:
    def test_handler_not_found(self) -> None:
        class Ping:
            pass

        err = HandlerNotFoundError(Ping)
        assert isinstance(err, ApplicationError)
        assert "Ping" in err.message
