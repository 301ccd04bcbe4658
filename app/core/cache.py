from dataclasses import dataclass
from threading import Lock
from time import time

from app.core.config import settings


@dataclass(frozen=True)
class CatalogQuestion:
    id: str
    position: int
    text: str
    question_type: str


class QuestionCatalogCache:
    def __init__(self, ttl_seconds: int = 600):
        self.ttl_seconds = ttl_seconds
        self._lock = Lock()
        self._catalog: tuple[float, list[CatalogQuestion]] | None = None

    def get_catalog(self) -> list[CatalogQuestion] | None:
        with self._lock:
            if not self._catalog:
                return None
            expires_at, value = self._catalog
            if expires_at < time():
                self._catalog = None
                return None
            return list(value)

    def set_catalog(self, questions: list[CatalogQuestion]):
        with self._lock:
            self._catalog = (time() + self.ttl_seconds, list(questions))

    def clear(self):
        with self._lock:
            self._catalog = None


catalog_cache = QuestionCatalogCache(ttl_seconds=settings.catalog_cache_ttl_seconds)
