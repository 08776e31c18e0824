"""
Tests for decoding script output.
"""

import json
import pytest

from conftest import make_task
from omnifocus_kiwi.utils.errors import ResultParseError
from omnifocus_kiwi.utils.results import (
    CompletedTask,
    CreatedProject,
    CreatedTask,
    FolderNotFound,
    MultipleMatches,
    NoMatch,
    NotFound,
    ProjectNotFound,
    TaskRecord,
    UpdatedTask,
    parse_add_result,
    parse_complete_result,
    parse_completed_tasks,
    parse_create_project_result,
    parse_projects,
    parse_tags,
    parse_tasks,
    parse_update_result,
)


class TestQueryParsers:
    """Tests for list-shaped results"""

    def test_parse_tasks(self):
        raw = json.dumps([make_task(tags=["errand"], dueDate="2026-03-15T17:00:00.000Z")])
        tasks = parse_tasks(raw)
        assert tasks == [TaskRecord(
            id="task-1",
            name="Buy milk",
            project="Groceries",
            flagged=False,
            due_date="2026-03-15T17:00:00.000Z",
            defer_date=None,
            note="",
            tags=["errand"],
        )]

    def test_parse_tasks_empty(self):
        assert parse_tasks("[]") == []

    def test_parse_tasks_inbox_task(self):
        tasks = parse_tasks(json.dumps([make_task(project=None)]))
        assert tasks[0].project is None

    def test_parse_tasks_missing_id(self):
        task = make_task()
        del task["id"]
        with pytest.raises(ResultParseError, match="'id'"):
            parse_tasks(json.dumps([task]))

    def test_parse_completed_tasks(self):
        raw = json.dumps([make_task(completionDate="2026-02-14T10:00:00.000Z")])
        tasks = parse_completed_tasks(raw)
        assert tasks[0].completion_date == "2026-02-14T10:00:00.000Z"
        assert tasks[0].name == "Buy milk"

    def test_parse_projects(self):
        raw = json.dumps([
            {"name": "Work", "taskCount": 4, "type": "sequential", "folder": "Office"},
            {"name": "Home", "taskCount": 0},
        ])
        projects = parse_projects(raw)
        assert projects[0].task_count == 4
        assert projects[0].type == "sequential"
        assert projects[0].folder == "Office"
        assert projects[1].type == "parallel"
        assert projects[1].folder is None

    def test_parse_tags(self):
        assert parse_tags('["errand", "home"]') == ["errand", "home"]

    def test_parse_tags_rejects_objects(self):
        with pytest.raises(ResultParseError):
            parse_tags('[{"name": "errand"}]')

    def test_object_where_list_expected(self):
        with pytest.raises(ResultParseError, match="JSON array"):
            parse_tasks('{"error": "boom"}')


class TestMalformedOutput:
    """Tests for output that is not JSON at all"""

    @pytest.mark.parametrize("raw", ["", "   ", "undefined", "execution error", "{'a': 1}"])
    def test_not_json(self, raw):
        with pytest.raises(ResultParseError):
            parse_tasks(raw)

    def test_raw_output_kept(self):
        with pytest.raises(ResultParseError) as exc_info:
            parse_complete_result("garbage")
        assert exc_info.value.raw == "garbage"


class TestCompleteResult:
    """Tests for parse_complete_result"""

    def test_success(self):
        raw = json.dumps({
            "completed": True, "id": "t1", "name": "Call Bob", "project": "Sales", "tags": ["phone"]
        })
        assert parse_complete_result(raw) == CompletedTask(
            id="t1", name="Call Bob", project="Sales", tags=["phone"]
        )

    def test_no_match(self):
        assert parse_complete_result('{"error": "no_match"}') == NoMatch()

    def test_multiple_matches_carries_count(self):
        result = parse_complete_result('{"error": "multiple_matches", "count": 2}')
        assert isinstance(result, MultipleMatches)
        assert result.count == 2

    def test_multiple_matches_without_count(self):
        with pytest.raises(ResultParseError, match="'count'"):
            parse_complete_result('{"error": "multiple_matches"}')

    def test_foreign_error_code(self):
        """Test an error code this template never emits is a parse error"""
        with pytest.raises(ResultParseError, match="project_not_found"):
            parse_complete_result('{"error": "project_not_found", "projectName": "x"}')

    def test_neither_error_nor_flag(self):
        with pytest.raises(ResultParseError, match="'completed'"):
            parse_complete_result('{"id": "t1", "name": "x"}')


class TestMutationResults:
    """Tests for add/update/create-project parsers"""

    def test_add_success(self):
        raw = json.dumps({
            "created": True, "id": "t9", "name": "Buy milk", "project": None,
            "flagged": True, "dueDate": None, "tags": [],
        })
        result = parse_add_result(raw)
        assert isinstance(result, CreatedTask)
        assert result.project is None
        assert result.flagged is True

    def test_add_project_not_found(self):
        result = parse_add_result('{"error": "project_not_found", "projectName": "Groceries"}')
        assert result == ProjectNotFound(project_name="Groceries")

    def test_update_success(self):
        raw = json.dumps({
            "updated": True, "id": "t1", "name": "Call Bob", "project": "Sales",
            "flagged": False, "dueDate": None, "deferDate": "2026-03-01T08:00:00.000Z",
            "note": "x", "tags": ["phone"],
        })
        result = parse_update_result(raw)
        assert isinstance(result, UpdatedTask)
        assert result.note == "x"
        assert result.defer_date == "2026-03-01T08:00:00.000Z"

    def test_update_not_found(self):
        assert parse_update_result('{"error": "not_found"}') == NotFound()

    def test_create_project_success(self):
        raw = json.dumps({
            "created": True, "id": "p1", "name": "Launch", "type": "sequential", "folder": "Work"
        })
        assert parse_create_project_result(raw) == CreatedProject(
            id="p1", name="Launch", type="sequential", folder="Work"
        )

    def test_create_project_folder_not_found(self):
        result = parse_create_project_result('{"error": "folder_not_found", "folderName": "Nope"}')
        assert result == FolderNotFound(folder_name="Nope")
