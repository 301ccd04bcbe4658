import threading
import time

import pytest

from app.core import cache as cache_module
from app.core.cache import CatalogQuestion, QuestionCatalogCache
from app.core.locks import SessionLockRegistry
from app.repositories.question_repository import QuestionRepository
from app.db.seed import DEFAULT_QUESTIONS, seed_questions

QUESTION = CatalogQuestion(id="q1", position=0, text="Why us?", question_type="Behavioural")


def test_catalog_cache_round_trip():
    cache = QuestionCatalogCache(ttl_seconds=60)
    assert cache.get_catalog() is None

    cache.set_catalog([QUESTION])
    assert cache.get_catalog() == [QUESTION]

    cache.clear()
    assert cache.get_catalog() is None


def test_catalog_cache_expires(monkeypatch):
    cache = QuestionCatalogCache(ttl_seconds=10)
    monkeypatch.setattr(cache_module, "time", lambda: 1000.0)
    cache.set_catalog([QUESTION])

    monkeypatch.setattr(cache_module, "time", lambda: 1011.0)
    assert cache.get_catalog() is None


def test_seed_questions_only_when_empty(db):
    assert seed_questions(db) == len(DEFAULT_QUESTIONS)
    assert seed_questions(db) == 0

    catalog = QuestionRepository(db).list_all()
    assert [question.position for question in catalog] == list(range(len(DEFAULT_QUESTIONS)))
    assert catalog[0].question_type == "Behavioural"
    assert catalog[-1].question_type == "Technical"


def test_session_lock_serialises_holders():
    locks = SessionLockRegistry()
    active = []
    overlaps = []

    def worker():
        with locks.hold("session-1"):
            if active:
                overlaps.append(True)
            active.append(True)
            time.sleep(0.05)
            active.pop()

    threads = [threading.Thread(target=worker) for _ in range(3)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=5)

    assert overlaps == []
    assert len(locks) == 0


def test_session_locks_are_independent_and_released():
    locks = SessionLockRegistry()

    with locks.hold("a"):
        with locks.hold("b"):
            assert len(locks) == 2
        assert len(locks) == 1

    assert len(locks) == 0


def test_session_lock_released_on_error():
    locks = SessionLockRegistry()

    with pytest.raises(RuntimeError):
        with locks.hold("a"):
            raise RuntimeError("boom")

    assert len(locks) == 0
    with locks.hold("a"):
        assert len(locks) == 1
