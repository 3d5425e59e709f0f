"""
JSON Lines Serialiser

Each non-blank line of the resource is one JSON object, validated into a
pydantic model. Rules then operate on typed records rather than raw dicts.

Example:
    class Employee(BaseModel):
        uid: str
        name: str
        salary: int

    serialiser = JsonLinesSerialiser(Employee)
"""

from collections.abc import Iterable, Iterator
from typing import BinaryIO, TypeVar

from pydantic import BaseModel

from recordgate.serialisation.ports import Serialiser

M = TypeVar("M", bound=BaseModel)


class JsonLinesSerialiser(Serialiser[M]):
    """
    JSON Lines <-> pydantic model serialiser.

    Invalid lines raise pydantic.ValidationError from the record iterator,
    which aborts the read.
    """

    def __init__(self, model: type[M], exclude_none: bool = False):
        self.model = model
        self.exclude_none = exclude_none

    def deserialise(self, stream: BinaryIO) -> Iterator[M]:
        for line in stream:
            if not line.strip():
                continue
            yield self.model.model_validate_json(line)

    def serialise(self, records: Iterable[M], output: BinaryIO) -> None:
        for record in records:
            output.write(record.model_dump_json(exclude_none=self.exclude_none).encode("utf-8"))
            output.write(b"\n")

    def __repr__(self) -> str:
        return f"JsonLinesSerialiser(model={self.model.__name__})"
