from __future__ import annotations

from pathlib import Path
from urllib.parse import urlsplit

import pytest
from redis import ConnectionError as RedisConnectionError

from recordgate.storage import (
    BackendType,
    InMemoryBackend,
    LocalFileBackend,
    ResourceNotFoundError,
    StorageError,
    StorageSettings,
    UnsupportedSchemeError,
    conf_map,
    create_backend,
    create_sqlite_backend,
    settings_from_conf,
    settings_from_env,
)
from recordgate.storage.redis import RedisBackend
from recordgate.storage.sqlalchemy import SqlAlchemyBackend


class FakeRedis:
    """Minimal stand-in for redis.Redis covering get/set/close."""

    def __init__(self, fail: bool = False):
        self.data: dict[str, bytes] = {}
        self.ttls: dict[str, int | None] = {}
        self.fail = fail
        self.closed = False

    def get(self, key: str) -> bytes | None:
        if self.fail:
            raise RedisConnectionError("connection refused")
        return self.data.get(key)

    def set(self, key: str, value: bytes, ex: int | None = None) -> bool:
        if self.fail:
            raise RedisConnectionError("connection refused")
        self.data[key] = value
        self.ttls[key] = ex
        return True

    def close(self) -> None:
        self.closed = True


# =============================================================================
# Local filesystem
# =============================================================================

def test_local_backend_opens_file_uri_with_encoded_path(tmp_path: Path) -> None:
    target = tmp_path / "with space.bin"
    target.write_bytes(b"\x00\x01")

    with LocalFileBackend().open_uri(urlsplit(target.as_uri())) as stream:
        assert stream.read() == b"\x00\x01"


def test_local_backend_accepts_localhost_file_uri(tmp_path: Path) -> None:
    target = tmp_path / "data.bin"
    target.write_bytes(b"local")

    with LocalFileBackend().open_uri(urlsplit(f"file://localhost{target}")) as stream:
        assert stream.read() == b"local"


@pytest.mark.parametrize("uri", ["hdfs://namenode/data", "s3://bucket/key", "file://remote-host/data"])
def test_local_backend_refuses_remote_uris(uri: str) -> None:
    with pytest.raises(UnsupportedSchemeError):
        LocalFileBackend().open_uri(urlsplit(uri))


def test_local_backend_resolves_relative_paths_against_root(tmp_path: Path) -> None:
    (tmp_path / "nested").mkdir()
    (tmp_path / "nested" / "data.bin").write_bytes(b"nested")
    backend = LocalFileBackend(root=tmp_path)

    with backend.open_path("nested/data.bin") as stream:
        assert stream.read() == b"nested"


def test_local_backend_missing_file_raises_os_error(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        LocalFileBackend(root=tmp_path).open_path("missing.bin")


def test_local_backend_rejects_nul_in_path(tmp_path: Path) -> None:
    with pytest.raises(StorageError):
        LocalFileBackend(root=tmp_path).open_path("bad\x00name.bin")


# =============================================================================
# In-memory
# =============================================================================

def test_memory_backend_put_open_remove() -> None:
    backend = InMemoryBackend()
    backend.put("mem://a", b"alpha")

    assert "mem://a" in backend
    assert backend.open_uri(urlsplit("mem://a")).read() == b"alpha"
    assert backend.remove("mem://a") is True
    assert backend.remove("mem://a") is False
    with pytest.raises(ResourceNotFoundError):
        backend.open_path("mem://a")


def test_memory_backend_streams_are_independent() -> None:
    backend = InMemoryBackend({"k": b"abc"})

    first = backend.open_path("k")
    first.read(2)

    assert backend.open_path("k").read() == b"abc"


# =============================================================================
# SQLAlchemy
# =============================================================================

def test_sqlite_backend_round_trip() -> None:
    backend = create_sqlite_backend()

    assert isinstance(backend, SqlAlchemyBackend)
    backend.put("/data/employees.jsonl", b'{"index": 0}\n')
    backend.put("/data/employees.jsonl", b'{"index": 1}\n')

    assert backend.open_path("/data/employees.jsonl").read() == b'{"index": 1}\n'
    assert backend.open_uri(urlsplit("/data/employees.jsonl")).read() == b'{"index": 1}\n'
    backend.close()


def test_sqlite_backend_missing_row() -> None:
    backend = create_sqlite_backend()

    with pytest.raises(ResourceNotFoundError):
        backend.open_path("/nope")


def test_sqlite_backend_from_conf(tmp_path: Path) -> None:
    url = f"sqlite:///{tmp_path / 'resources.db'}"
    backend = create_backend(settings_from_conf({"storage.database.url": url}))

    assert isinstance(backend, SqlAlchemyBackend)
    backend.put("r", b"row")
    assert backend.open_path("r").read() == b"row"
    backend.close()


# =============================================================================
# Redis
# =============================================================================

def test_redis_backend_uses_prefixed_keys() -> None:
    client = FakeRedis()
    backend = RedisBackend(client, key_prefix="tenant-a", default_ttl_seconds=60)
    backend.put("/data/x", b"xyz")

    assert client.data == {"tenant-a:resource:/data/x": b"xyz"}
    assert client.ttls["tenant-a:resource:/data/x"] == 60
    assert backend.open_uri(urlsplit("/data/x")).read() == b"xyz"


def test_redis_backend_missing_key() -> None:
    with pytest.raises(ResourceNotFoundError):
        RedisBackend(FakeRedis()).open_path("/data/none")


def test_redis_backend_wraps_client_errors() -> None:
    with pytest.raises(StorageError):
        RedisBackend(FakeRedis(fail=True)).open_path("/data/x")


def test_redis_backend_close_closes_client() -> None:
    client = FakeRedis()
    RedisBackend(client).close()

    assert client.closed


# =============================================================================
# Factory
# =============================================================================

def test_settings_from_conf_defaults() -> None:
    settings = settings_from_conf(None)

    assert settings.backend == BackendType.LOCAL
    assert settings.root is None
    assert conf_map(settings) == {}


def test_settings_from_conf_reads_known_and_keeps_unknown_keys() -> None:
    conf = {
        "storage.backend": "redis",
        "storage.redis.url": "redis://cache:6379/0",
        "storage.redis.key-prefix": "hr",
        "dfs.client.use.datanode.hostname": "true",
    }
    settings = settings_from_conf(conf)

    assert settings.backend == BackendType.REDIS
    assert settings.redis_url == "redis://cache:6379/0"
    assert settings.key_prefix == "hr"
    assert settings.extra == {"dfs.client.use.datanode.hostname": "true"}
    assert conf_map(settings) == conf


def test_settings_detect_backend_from_database_url() -> None:
    settings = settings_from_conf({"storage.database.url": "postgresql://db/resources"})

    assert settings.backend == BackendType.POSTGRESQL


def test_conf_map_reports_only_changed_entries() -> None:
    settings = StorageSettings(root="/data", create_tables=False)

    assert conf_map(settings) == {
        "storage.root": "/data",
        "storage.database.create-tables": "false",
    }


def test_unknown_backend_rejected() -> None:
    with pytest.raises(ValueError):
        settings_from_conf({"storage.backend": "tape"})


@pytest.mark.parametrize("backend", [BackendType.SQLITE, BackendType.REDIS])
def test_backends_require_connection_urls(backend: BackendType) -> None:
    with pytest.raises(ValueError):
        create_backend(StorageSettings(backend=backend))


def test_settings_from_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("RECORDGATE_STORAGE_BACKEND", "memory")
    monkeypatch.setenv("RECORDGATE_KEY_PREFIX", "env-prefix")
    monkeypatch.delenv("RECORDGATE_STORAGE_ROOT", raising=False)
    monkeypatch.delenv("RECORDGATE_DATABASE_URL", raising=False)

    settings = settings_from_env()

    assert settings.backend == BackendType.MEMORY
    assert settings.key_prefix == "env-prefix"
    assert isinstance(create_backend(settings), InMemoryBackend)
