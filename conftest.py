"""
Shared pytest fixtures for OmniFocus Kiwi tests

No test talks to osascript or OmniFocus. Tools take a ``runner`` coroutine,
and tests hand them a FakeRunner that records every script and replies with
canned stdout, the way OmniFocus would.
"""

import json
from typing import Any, List, Optional
from unittest.mock import Mock

import pytest


# ============================================================================
# Mock Helper Classes
# ============================================================================

class FakeRunner:
    """
    Stand-in for run_jxa.

    Usage:
        runner = FakeRunner([{'id': 'a1', 'name': 'Buy milk', ...}])
        tool = GetTasksTool(runner=runner)
        await tool.execute({})
        assert runner.calls == 1
        assert '__DATA__' in runner.last_script
    """

    def __init__(self, output: Any = None, error: Optional[Exception] = None):
        """
        Args:
            output: Value to return. Non-strings are JSON-encoded.
            error: Exception to raise instead of returning.
        """
        self.output = output
        self.error = error
        self.scripts: List[str] = []

    async def __call__(self, script: str) -> str:
        self.scripts.append(script)
        if self.error is not None:
            raise self.error
        if isinstance(self.output, str):
            return self.output
        return json.dumps(self.output)

    @property
    def calls(self) -> int:
        return len(self.scripts)

    @property
    def last_script(self) -> str:
        return self.scripts[-1]

    def last_data(self) -> dict:
        """Decode the __DATA__ record bound into the last script."""
        first_line = self.last_script.split("\n", 1)[0]
        prefix = "const __DATA__ = "
        assert first_line.startswith(prefix), "script has no __DATA__ binding"
        return json.loads(first_line[len(prefix):].rstrip(";"))


def make_task(**overrides) -> dict:
    """Task record as the get_tasks script emits it."""
    task = {
        "id": "task-1",
        "name": "Buy milk",
        "project": "Groceries",
        "flagged": False,
        "dueDate": None,
        "deferDate": None,
        "note": "",
        "tags": [],
    }
    task.update(overrides)
    return task


class MockSupabaseClient:
    """
    Minimal Supabase client mock: table(name).insert(data).execute().

    Inserted rows are collected per table in ``inserted``.
    """

    def __init__(self):
        self.inserted = {}
        self.table = Mock(side_effect=self._table)

    def _table(self, table_name: str):
        table = Mock()

        def insert(data):
            self.inserted.setdefault(table_name, []).append(data)
            query = Mock()
            query.execute = Mock(return_value=Mock(data=[{"id": "exec-123", **data}]))
            return query

        table.insert = Mock(side_effect=insert)
        return table


# ============================================================================
# Fixtures
# ============================================================================

@pytest.fixture(autouse=True)
def isolated_home(tmp_path, monkeypatch):
    """
    Point OMNIFOCUS_KIWI_HOME at a temp dir and drop Supabase credentials,
    so no test writes to the real run history or a remote table.
    """
    home = tmp_path / "omnifocus-kiwi-home"
    monkeypatch.setenv("OMNIFOCUS_KIWI_HOME", str(home))
    monkeypatch.delenv("SUPABASE_URL", raising=False)
    monkeypatch.delenv("SUPABASE_SECRET_KEY", raising=False)
    monkeypatch.delenv("OMNIFOCUS_KIWI_HISTORY", raising=False)
    return home


@pytest.fixture
def fake_runner():
    """FakeRunner returning an empty JSON list; set .output per test."""
    return FakeRunner([])


@pytest.fixture
def mock_supabase():
    return MockSupabaseClient()
