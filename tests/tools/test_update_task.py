"""
Tests for update task tool.
"""

import json

import pytest

from conftest import FakeRunner
from omnifocus_kiwi.tools.update_task import NO_CHANGES_MESSAGE, UpdateTaskTool


class StatefulRunner(FakeRunner):
    """Applies __DATA__ updates to a single stored task, like OmniFocus would."""

    def __init__(self, task):
        super().__init__()
        self.task = dict(task)

    async def __call__(self, script):
        self.scripts.append(script)
        data = self.last_data()
        if data['taskId'] != self.task['id']:
            return json.dumps({'error': 'not_found'})
        for key in ('name', 'dueDate', 'deferDate', 'flagged', 'note', 'tags'):
            if key in data:
                value = data[key]
                self.task[key] = '' if key == 'note' and value is None else value
        return json.dumps({**self.task, 'updated': True})


STORED = {
    'id': 'abc', 'name': 'Write report', 'project': 'Work', 'flagged': False,
    'dueDate': '2026-03-01T09:00:00.000Z', 'deferDate': None, 'note': 'x',
    'tags': ['office'],
}


class TestUpdateTaskTool:
    """Tests for UpdateTaskTool"""

    @pytest.mark.asyncio
    async def test_task_id_required(self):
        runner = StatefulRunner(STORED)
        result = await UpdateTaskTool(runner=runner).execute({'name': 'New'})

        assert result.is_error is True
        assert result.text == "'task_id' is required."
        assert runner.calls == 0

    @pytest.mark.asyncio
    async def test_no_changes_rejected(self):
        runner = StatefulRunner(STORED)
        result = await UpdateTaskTool(runner=runner).execute({'task_id': 'abc'})

        assert result.is_error is True
        assert result.text == NO_CHANGES_MESSAGE
        assert runner.calls == 0

    @pytest.mark.asyncio
    async def test_null_name_is_not_a_change(self):
        runner = StatefulRunner(STORED)
        result = await UpdateTaskTool(runner=runner).execute({'task_id': 'abc', 'name': None, 'flagged': None})

        assert result.text == NO_CHANGES_MESSAGE
        assert runner.calls == 0

    @pytest.mark.asyncio
    async def test_absent_fields_left_untouched(self):
        """Test only the sent field is emitted and the note survives"""
        runner = StatefulRunner(STORED)
        result = await UpdateTaskTool(runner=runner).execute({'task_id': 'abc', 'flagged': True})

        assert result.is_error is False
        assert runner.last_data() == {'taskId': 'abc', 'flagged': True}
        assert runner.task['note'] == 'x'
        assert "Note: x" in result.text
        assert "Flagged: yes" in result.text

    @pytest.mark.asyncio
    async def test_null_clears_due_date(self):
        runner = StatefulRunner(STORED)
        result = await UpdateTaskTool(runner=runner).execute({'task_id': 'abc', 'due_date': None})

        assert result.is_error is False
        assert runner.last_data() == {'taskId': 'abc', 'dueDate': None}
        assert runner.task['dueDate'] is None
        assert "Due:" not in result.text

    @pytest.mark.asyncio
    async def test_null_clears_note(self):
        runner = StatefulRunner(STORED)
        await UpdateTaskTool(runner=runner).execute({'task_id': 'abc', 'note': None})

        assert runner.last_data() == {'taskId': 'abc', 'note': None}
        assert runner.task['note'] == ''

    @pytest.mark.asyncio
    async def test_empty_tags_replaces_all(self):
        runner = StatefulRunner(STORED)
        result = await UpdateTaskTool(runner=runner).execute({'task_id': 'abc', 'tags': []})

        assert result.is_error is False
        assert runner.last_data()['tags'] == []
        assert runner.task['tags'] == []
        assert "Tags:" not in result.text

    @pytest.mark.asyncio
    async def test_dates_normalized(self):
        runner = StatefulRunner(STORED)
        await UpdateTaskTool(runner=runner).execute({
            'task_id': 'abc', 'defer_date': '2026-03-10T08:30:00+00:00',
        })

        assert runner.last_data()['deferDate'] == '2026-03-10T08:30:00.000Z'

    @pytest.mark.asyncio
    async def test_invalid_defer_date(self):
        runner = StatefulRunner(STORED)
        result = await UpdateTaskTool(runner=runner).execute({'task_id': 'abc', 'defer_date': 'soon'})

        assert result.is_error is True
        assert result.text.startswith('Invalid defer date: "soon"')
        assert runner.calls == 0

    @pytest.mark.asyncio
    async def test_not_found(self):
        runner = StatefulRunner(STORED)
        result = await UpdateTaskTool(runner=runner).execute({'task_id': 'missing', 'name': 'New'})

        assert result.is_error is True
        assert result.text == 'No incomplete task found with ID "missing".'

    @pytest.mark.asyncio
    async def test_rename(self):
        runner = StatefulRunner(STORED)
        result = await UpdateTaskTool(runner=runner).execute({'task_id': 'abc', 'name': 'Write final report'})

        assert result.text.startswith('Updated: "Write final report"\nID: abc')

    @pytest.mark.asyncio
    @pytest.mark.parametrize("name", ["", "   "])
    async def test_blank_name_rejected(self, name):
        runner = StatefulRunner(STORED)
        result = await UpdateTaskTool(runner=runner).execute({'task_id': 'abc', 'name': name})

        assert result.is_error is True
        assert result.text == "'name' must not be empty."
        assert runner.calls == 0

    @pytest.mark.asyncio
    async def test_tags_replace_existing_set(self):
        """Test new tag names replace the old set rather than adding to it"""
        runner = StatefulRunner(STORED)
        result = await UpdateTaskTool(runner=runner).execute({
            'task_id': 'abc', 'tags': ['deep-work', 'q2-review', 'deep-work'],
        })

        assert result.is_error is False
        assert runner.last_data() == {'taskId': 'abc', 'tags': ['deep-work', 'q2-review']}
        assert runner.task['tags'] == ['deep-work', 'q2-review']
        assert "office" not in result.text
        assert "Tags: deep-work, q2-review" in result.text
