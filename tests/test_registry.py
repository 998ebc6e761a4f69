import threading

import pytest

from sqlitebridge import (
    BridgeConfig, Commands, DatabaseNotOpened, RegistryUnavailable, SessionRegistry,
)


def test_get_unknown_path(registry):
    with pytest.raises(DatabaseNotOpened) as exc:
        registry.get("missing.db")
    assert exc.value.path == "missing.db"


def test_open_registers_path(registry, db_path):
    assert registry.open(db_path) is True
    assert db_path in registry
    assert registry.paths() == [db_path]
    assert len(registry) == 1


def test_reopen_replaces_and_closes_previous(registry, db_path):
    registry.open(db_path)
    first = registry.get(db_path)
    registry.open(db_path)
    second = registry.get(db_path)

    assert first is not second
    assert first.closed
    assert not second.closed
    assert len(registry) == 1


def test_reopen_keeps_data(commands, db_path):
    commands.open(db_path)
    commands.execute(db_path, "CREATE TABLE t(a)")
    commands.execute2(db_path, "INSERT INTO t VALUES (?)", [1])
    commands.open(db_path)
    assert commands.select(db_path, "SELECT a FROM t", []) == [{"a": 1}]


def test_session_holds_lock(registry, db_path):
    registry.open(db_path)
    with registry.session(db_path) as session:
        assert session.path == db_path
        assert registry._lock.locked()
    assert not registry._lock.locked()


def test_session_releases_lock_on_missing_path(registry):
    with pytest.raises(DatabaseNotOpened):
        with registry.session("nope.db"):
            pass
    assert not registry._lock.locked()


def test_close_closes_every_session(registry, tmp_path):
    paths = [str(tmp_path / f"{i}.db") for i in range(3)]
    for p in paths:
        registry.open(p)
    sessions = [registry.get(p) for p in paths]

    registry.close()

    assert registry.closed
    assert all(s.closed for s in sessions)
    with pytest.raises(RegistryUnavailable):
        registry.get(paths[0])
    with pytest.raises(RegistryUnavailable):
        registry.open(paths[0])


def test_commands_build_private_registry(db_path):
    a = Commands(config=BridgeConfig())
    b = Commands(config=BridgeConfig())
    try:
        a.open(db_path)
        assert db_path in a.registry
        assert db_path not in b.registry
    finally:
        a.close()
        b.close()


def test_concurrent_writers_share_registry(registry, tmp_path):
    commands = Commands(registry)
    paths = [str(tmp_path / "a.db"), str(tmp_path / "b.db")]
    for p in paths:
        commands.open(p)
        commands.execute(p, "CREATE TABLE t(worker INTEGER, n INTEGER)")

    errors = []

    def worker(worker_id):
        path = paths[worker_id % 2]
        try:
            for n in range(50):
                commands.execute2(path, "INSERT INTO t VALUES (?, ?)", [[worker_id, n], [worker_id, n + 1000]])
                commands.select(path, "SELECT count(*) AS c FROM t WHERE worker = ?", [worker_id])
        except Exception as e:
            errors.append(e)

    threads = [threading.Thread(target=worker, args=(i,)) for i in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert errors == []
    total = sum(commands.select(p, "SELECT count(*) AS c FROM t", [])[0]["c"] for p in paths)
    assert total == 8 * 50 * 2


def test_concurrent_open_same_path(registry, db_path):
    commands = Commands(registry)
    commands.open(db_path)
    commands.execute(db_path, "CREATE TABLE t(a INTEGER)")

    errors = []

    def reopen_and_insert(i):
        try:
            commands.open(db_path)
            commands.execute2(db_path, "INSERT INTO t VALUES (?)", [i])
        except Exception as e:
            errors.append(e)

    threads = [threading.Thread(target=reopen_and_insert, args=(i,)) for i in range(10)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert errors == []
    assert len(registry) == 1
    assert commands.select(db_path, "SELECT count(*) AS n FROM t", [])[0]["n"] == 10
