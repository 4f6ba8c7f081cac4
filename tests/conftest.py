from contextlib import contextmanager
from typing import Any, Dict, List, Optional

import pytest

from pizzapi.db import DBResult
from pizzapi.schema import load_resource_schemas
from pizzapi.serializers import build_serializers


class RecordingExecutor:
    """
    Executor replacement: records the executed statements and returns the queued results
    """

    def __init__(self, results: Optional[List[DBResult]] = None, errors: Optional[Dict[str, Exception]] = None) -> None:
        self.results = list(results or [])
        self.errors = errors or {}
        self.calls: List[tuple] = []
        self.connections = 0
        self.closed = 0
        self.committed = 0
        self.rolled_back = 0

    def execute(self, sql: str, bind_params: Any = None) -> DBResult:
        self.calls.append((sql, bind_params))
        for marker, exc in self.errors.items():
            if marker in sql:
                raise exc
        if self.results:
            return self.results.pop(0)
        return DBResult()

    @contextmanager
    def transaction(self):
        try:
            yield self
        except Exception:
            self.rolled_back += 1
            raise
        self.committed += 1

    @contextmanager
    def connect(self):
        self.connections += 1
        try:
            yield self
        finally:
            self.closed += 1

    @property
    def statements(self) -> List[str]:
        return [sql for sql, _ in self.calls]


@pytest.fixture
def schemas():
    return load_resource_schemas()


@pytest.fixture
def serializers(schemas):
    return build_serializers(schemas)


@pytest.fixture
def make_executor():
    return RecordingExecutor
