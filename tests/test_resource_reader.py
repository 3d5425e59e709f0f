from __future__ import annotations

import io
from pathlib import Path
from urllib.parse import SplitResult

import pytest

from recordgate.reader import BackendResourceReader, InvalidUriError, ResourceReadError, parse_uri
from recordgate.storage import (
    InMemoryBackend,
    LocalFileBackend,
    ResourceNotFoundError,
    StorageBackend,
    StorageError,
    UnsupportedSchemeError,
)


class SpyBackend(StorageBackend):
    """Records which form each open used and delegates to a wrapped backend."""

    def __init__(self, inner: StorageBackend):
        self.inner = inner
        self.calls: list[tuple[str, str]] = []

    def open_uri(self, uri: SplitResult):
        self.calls.append(("uri", uri.geturl()))
        return self.inner.open_uri(uri)

    def open_path(self, path: str):
        self.calls.append(("path", path))
        return self.inner.open_path(path)


@pytest.mark.parametrize(
    "identifier",
    [
        "hdfs://host/path",
        "file:///data/employees.jsonl",
        "/local/plain/path",
        "relative/path.jsonl",
        "s3://bucket/key%20with%20space",
    ],
)
def test_parse_uri_accepts_uris(identifier: str) -> None:
    assert parse_uri(identifier).geturl() == identifier


@pytest.mark.parametrize(
    "identifier",
    [
        "/data/staff list.jsonl",
        "C:\\data\\employees.jsonl",
        "/data/100%.jsonl",
        "/data/{template}.jsonl",
        "http://[::1/path",
    ],
)
def test_parse_uri_rejects_non_uris(identifier: str) -> None:
    with pytest.raises(InvalidUriError):
        parse_uri(identifier)


def test_valid_uri_opens_via_uri_path(tmp_path: Path) -> None:
    target = tmp_path / "employees.jsonl"
    target.write_bytes(b"payload")
    spy = SpyBackend(LocalFileBackend())

    with BackendResourceReader(spy).open_raw(target.as_uri()) as stream:
        assert stream.read() == b"payload"

    assert [form for form, _ in spy.calls] == ["uri"]


def test_invalid_uri_falls_back_to_plain_path(tmp_path: Path) -> None:
    target = tmp_path / "staff list.jsonl"
    target.write_bytes(b"payload")
    spy = SpyBackend(LocalFileBackend())

    with BackendResourceReader(spy).open_raw(str(target)) as stream:
        assert stream.read() == b"payload"

    assert spy.calls == [("path", str(target))]


def test_plain_path_under_configured_root_opens_via_fallback(tmp_path: Path) -> None:
    (tmp_path / "plain path").mkdir()
    (tmp_path / "plain path" / "data.jsonl").write_bytes(b"rooted")
    reader = BackendResourceReader(LocalFileBackend(root=tmp_path))

    with reader.open_raw("plain path/data.jsonl") as stream:
        assert stream.read() == b"rooted"


def test_unreachable_hdfs_uri_is_read_error() -> None:
    spy = SpyBackend(LocalFileBackend())

    with pytest.raises(ResourceReadError) as excinfo:
        BackendResourceReader(spy).open_raw("hdfs://host/path")

    assert excinfo.value.resource_id == "hdfs://host/path"
    assert "hdfs://host/path" in str(excinfo.value)
    assert isinstance(excinfo.value.cause, UnsupportedSchemeError)
    # A URI that parsed is not retried as a plain path
    assert [form for form, _ in spy.calls] == ["uri"]


def test_missing_plain_path_is_read_error(tmp_path: Path) -> None:
    identifier = str(tmp_path / "no such file.jsonl")

    with pytest.raises(ResourceReadError) as excinfo:
        BackendResourceReader(LocalFileBackend()).open_raw(identifier)

    assert excinfo.value.resource_id == identifier
    assert isinstance(excinfo.value.cause, FileNotFoundError)


@pytest.mark.parametrize("identifier", ["/data/bad\x00name.jsonl", "file:///data/a%00b.jsonl"])
def test_identifier_with_nul_byte_is_read_error(identifier: str) -> None:
    with pytest.raises(ResourceReadError) as excinfo:
        BackendResourceReader(LocalFileBackend()).open_raw(identifier)

    assert excinfo.value.resource_id == identifier
    assert isinstance(excinfo.value.cause, StorageError)


def test_storage_errors_are_wrapped() -> None:
    with pytest.raises(ResourceReadError) as excinfo:
        BackendResourceReader(InMemoryBackend()).open_raw("mem://nowhere")

    assert isinstance(excinfo.value.cause, ResourceNotFoundError)
    assert isinstance(excinfo.value.__cause__, ResourceNotFoundError)


def test_stream_is_not_read_eagerly() -> None:
    class LazyBackend(StorageBackend):
        def __init__(self):
            self.stream = io.BytesIO(b"untouched")

        def open_uri(self, uri):
            return self.stream

        def open_path(self, path):
            return self.stream

    backend = LazyBackend()
    stream = BackendResourceReader(backend).open_raw("/data/file")

    assert stream.tell() == 0


def test_empty_identifier_rejected() -> None:
    with pytest.raises(ValueError):
        BackendResourceReader(InMemoryBackend()).open_raw("")
