from __future__ import annotations

import threading

import pytest
from seaweedpath.domain import InvariantViolation
from seaweedpath.infrastructure.db import build_engine, init_db
from seaweedpath.infrastructure.repositories import InMemoryMappingStore, SqlAlchemyMappingStore
from seaweedpath.shared.config import DatabaseConfig
from sqlalchemy.orm import sessionmaker


@pytest.fixture
def sql_store(tmp_path) -> SqlAlchemyMappingStore:
    engine = build_engine(DatabaseConfig(url=f"sqlite:///{tmp_path / 'mappings.db'}"))
    init_db(engine)
    yield SqlAlchemyMappingStore(sessionmaker(bind=engine, expire_on_commit=False))
    engine.dispose()


@pytest.fixture(params=["memory", "sqlalchemy"])
def store(request, sql_store):
    if request.param == "memory":
        return InMemoryMappingStore()
    return sql_store


def test_get_of_unknown_path_is_none(store) -> None:
    assert store.get("nope") is None


def test_store_is_an_upsert(store) -> None:
    store.store("a/b.png", "3,01", "image/png", 10)
    first = store.get("a/b.png")

    store.store("a/b.png", "3,01", "image/png", 25)
    second = store.get("a/b.png")

    assert first.size == 10
    assert second.fid == "3,01"
    assert second.size == 25
    assert second.timestamp is not None
    assert second.timestamp >= first.timestamp


def test_paths_match_exactly(store) -> None:
    store.store("a/b.png", "3,01", "image/png", 1)

    assert store.get("a/b.png/") is None
    assert store.get("A/B.PNG") is None


def test_remove_deletes_only_that_path(store) -> None:
    store.store("keep", "1,01", "application/octet-stream", 1)
    store.store("drop", "1,02", "application/octet-stream", 2)

    store.remove("drop")
    store.remove("never-there")

    assert store.get("drop") is None
    assert store.get("keep").fid == "1,01"


def test_invalid_rows_are_rejected_before_persisting(store) -> None:
    with pytest.raises(InvariantViolation):
        store.store("bad", "1,01", "text/plain", -5)
    assert store.get("bad") is None


def test_sqlalchemy_store_survives_new_sessions(tmp_path) -> None:
    url = f"sqlite:///{tmp_path / 'persist.db'}"
    engine = build_engine(DatabaseConfig(url=url))
    init_db(engine)
    SqlAlchemyMappingStore(sessionmaker(bind=engine)).store("p.txt", "5,aa", "text/plain", 3)
    engine.dispose()

    reopened = build_engine(DatabaseConfig(url=url))
    mapping = SqlAlchemyMappingStore(sessionmaker(bind=reopened)).get("p.txt")
    reopened.dispose()

    assert mapping is not None
    assert (mapping.fid, mapping.content_type, mapping.size) == ("5,aa", "text/plain", 3)


def test_concurrent_first_writes_never_fail(tmp_path) -> None:
    engine = build_engine(DatabaseConfig(url=f"sqlite:///{tmp_path / 'race.db'}"))
    init_db(engine)
    store = SqlAlchemyMappingStore(sessionmaker(bind=engine, expire_on_commit=False))
    fids = [f"3,{n:02x}" for n in range(1, 9)]
    start = threading.Barrier(len(fids))
    errors: list[BaseException] = []

    def writer(fid: str) -> None:
        start.wait()
        try:
            store.store("same.txt", fid, "text/plain", len(fid))
        except Exception as exc:  # noqa: BLE001
            errors.append(exc)

    threads = [threading.Thread(target=writer, args=(fid,)) for fid in fids]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    mapping = store.get("same.txt")
    engine.dispose()

    assert errors == []
    assert mapping.fid in fids
