"""Add task tool for OmniFocus Kiwi."""

from typing import Any, Dict

from ..api.templates import build_add_task_script
from ..utils.dates import normalize_date
from ..utils.formatting import format_created_task, format_resolution_error
from ..utils.models import AddTaskRequest
from ..utils.results import CreatedTask, parse_add_result
from .base import OmniFocusTool, ToolResponse, optional_bool, optional_str, required_str, tag_list


class AddTaskTool(OmniFocusTool):
    """Create a task in a project or in the Inbox"""

    name = "omnifocus_add_task"

    def build_request(self, params: Dict[str, Any]) -> AddTaskRequest:
        due_date = optional_str(params, "due_date")
        return AddTaskRequest(
            name=required_str(params, "task_name"),
            project=optional_str(params, "project"),
            note=optional_str(params, "note"),
            due_date=normalize_date(due_date, "due date") if due_date else None,
            tags=tag_list(params),
            flagged=optional_bool(params, "flagged"),
        )

    async def run(self, params: Dict[str, Any]) -> ToolResponse:
        """
        Args:
            task_name: Name of the new task
            project: Exact project name; Inbox when omitted
            note: Note text
            due_date: ISO 8601 due date
            tags: Tag names, created when missing
            flagged: Flag the task

        A project name that does not resolve is reported as project_not_found
        and nothing is created.
        """
        request = self.build_request(params)

        raw = await self.runner(build_add_task_script(request))
        result = parse_add_result(raw)

        if isinstance(result, CreatedTask):
            return ToolResponse.ok(format_created_task(result))
        return ToolResponse.error(format_resolution_error(result))
