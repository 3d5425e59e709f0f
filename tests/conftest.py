from __future__ import annotations

import io

import pytest
from pydantic import BaseModel

from recordgate import (
    AuditCounter,
    Context,
    DataFlavour,
    DataReaderRequest,
    LeafResource,
    PredicateRule,
    Rules,
    TransformRule,
    User,
)
from recordgate.serialisation import JsonLinesSerialiser

EMPLOYEE_FLAVOUR = DataFlavour("employee", "jsonl")


class Employee(BaseModel):
    index: int
    name: str
    salary: int | None = None


class TrackingStream(io.BytesIO):
    """BytesIO that records how often it was closed."""

    def __init__(self, data: bytes = b"", fail_on_close: bool = False):
        super().__init__(data)
        self.close_calls = 0
        self.fail_on_close = fail_on_close

    def close(self) -> None:
        self.close_calls += 1
        super().close()
        if self.fail_on_close:
            raise OSError("close failed")


class BrokenStream(TrackingStream):
    """Stream whose reads fail after the first chunk."""

    def __init__(self, data: bytes = b""):
        super().__init__(data)
        self.reads = 0

    def read(self, size: int | None = -1) -> bytes:
        self.reads += 1
        if self.reads > 1:
            raise OSError("connection reset")
        return super().read(min(size, 8) if size and size > 0 else 8)


def employees(count: int = 10) -> list[Employee]:
    return [Employee(index=i, name=f"employee-{i}", salary=1000 * i) for i in range(count)]


def jsonl(records: list[Employee]) -> bytes:
    return b"".join(r.model_dump_json().encode("utf-8") + b"\n" for r in records)


def parse_jsonl(data: bytes) -> list[Employee]:
    return [Employee.model_validate_json(line) for line in data.splitlines() if line.strip()]


def make_request(rules: Rules, resource_id: str = "/data/employees.jsonl", purpose: str = "payroll") -> DataReaderRequest:
    return DataReaderRequest(
        resource=LeafResource(id=resource_id, type="employee", serialised_format="jsonl"),
        rules=rules,
        user=User(user_id="alice", roles={"hr"}),
        context=Context(purpose=purpose),
    )


def identity_rules() -> Rules:
    return Rules("identity").add_rule("R1", TransformRule(lambda record, user, context: record))


def drop_odd_rules() -> Rules:
    return Rules("even only").add_rule("R1", PredicateRule(lambda record, user, context: record.index % 2 == 0))


def inapplicable_rules() -> Rules:
    never = lambda user, context: False  # noqa: E731
    return (
        Rules("switched off")
        .add_rule("R1", PredicateRule(lambda record, user, context: False, applies_to=never))
        .add_rule("R2", TransformRule(lambda record, user, context: None, applies_to=never))
    )


@pytest.fixture
def serialiser() -> JsonLinesSerialiser[Employee]:
    return JsonLinesSerialiser(Employee)


@pytest.fixture
def counters() -> tuple[AuditCounter, AuditCounter]:
    return AuditCounter(), AuditCounter()


@pytest.fixture
def ten_employees() -> list[Employee]:
    return employees(10)
