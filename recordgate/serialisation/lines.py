"""
Line Serialiser

Newline-delimited text: each line of the resource is one str record.
Line terminators are stripped on read and written back as "\\n".
"""

from collections.abc import Iterable, Iterator
from typing import BinaryIO

from recordgate.serialisation.ports import Serialiser


class LineSerialiser(Serialiser[str]):

    def __init__(self, encoding: str = "utf-8"):
        self.encoding = encoding

    def deserialise(self, stream: BinaryIO) -> Iterator[str]:
        for line in stream:
            yield line.decode(self.encoding).rstrip("\r\n")

    def serialise(self, records: Iterable[str], output: BinaryIO) -> None:
        for record in records:
            output.write(record.encode(self.encoding))
            output.write(b"\n")
