#!/usr/bin/env python3
"""
Record Read Example

Demonstrates record-level enforcement over a local JSON Lines resource.

Usage:
    python scripts/example_record_read.py

This script:
1. Writes a small employee resource to a temporary directory
2. Creates a data reader over local storage
3. Reads it under a redaction rule (payroll purpose)
4. Reads it again for a purpose no rule applies to (bypass)
"""

import io
import logging
import sys
import tempfile
from pathlib import Path

# Add project root to path
sys.path.insert(0, ".")

from pydantic import BaseModel

from recordgate import (
    AuditCounter,
    Context,
    DataFlavour,
    DataReaderRequest,
    LeafResource,
    PredicateRule,
    ReaderConfig,
    Rules,
    TransformRule,
    User,
    create_data_reader,
)
from recordgate.serialisation import JsonLinesSerialiser

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

EMPLOYEE = DataFlavour("employee", "jsonl")


class Employee(BaseModel):
    uid: str
    name: str
    department: str
    salary: int | None = None


def build_rules() -> Rules:
    """Payroll staff see salaries of their own department only; nobody else sees salaries."""
    def same_department(record: Employee, user: User, context: Context) -> bool:
        return record.department == context.contents.get("department")

    def redact_salary(record: Employee, user: User, context: Context) -> Employee:
        return record.model_copy(update={"salary": None})

    return (
        Rules("payroll visibility")
        .add_rule(
            "department-only",
            PredicateRule(same_department, applies_to=lambda user, context: context.purpose == "payroll"),
        )
        .add_rule(
            "redact-salary",
            TransformRule(redact_salary, applies_to=lambda user, context: "payroll" not in user.roles),
        )
    )


def read(reader, resource: LeafResource, user: User, context: Context) -> bytes:
    processed, returned = AuditCounter(), AuditCounter()
    request = DataReaderRequest(resource=resource, rules=build_rules(), user=user, context=context)
    output = io.BytesIO()

    reader.read(request, processed, returned).write(output)

    logger.info(
        f"user={user.user_id} purpose={context.purpose} "
        f"processed={processed.value} returned={returned.value}"
    )
    return output.getvalue()


def main() -> None:
    with tempfile.TemporaryDirectory() as root:
        staff = [
            Employee(uid="e1", name="Ada", department="eng", salary=120),
            Employee(uid="e2", name="Grace", department="ops", salary=110),
            Employee(uid="e3", name="Linus", department="eng", salary=100),
        ]
        Path(root, "employees.jsonl").write_text(
            "".join(e.model_dump_json() + "\n" for e in staff), encoding="utf-8"
        )

        reader = create_data_reader(
            ReaderConfig(name="example-reader", max_concurrent_reads=4),
            storage={"storage.backend": "local", "storage.root": root},
            serialisers={EMPLOYEE: JsonLinesSerialiser(Employee)},
        )
        resource = LeafResource(id="employees.jsonl", type="employee", serialised_format="jsonl")

        payroll = read(
            reader,
            resource,
            User(user_id="pam", roles={"payroll"}),
            Context(purpose="payroll", contents={"department": "eng"}),
        )
        logger.info(f"Payroll view:\n{payroll.decode()}")

        # Still redacted: the user lacks the payroll role
        directory = read(reader, resource, User(user_id="dan"), Context(purpose="directory"))
        logger.info(f"Directory view:\n{directory.decode()}")

        # No rule applies: bytes pass through and counters read -1
        raw = read(reader, resource, User(user_id="pat", roles={"payroll"}), Context(purpose="audit"))
        logger.info(f"Audit view:\n{raw.decode()}")

    logger.info("✓ Example complete")


if __name__ == "__main__":
    main()
