"""Complete task tool for OmniFocus Kiwi."""

from typing import Any, Dict

from ..api.templates import build_complete_task_script
from ..utils.errors import ValidationError
from ..utils.formatting import format_completed, format_resolution_error
from ..utils.models import CompleteTaskRequest
from ..utils.results import CompletedTask, parse_complete_result
from .base import OmniFocusTool, ToolResponse, optional_str


class CompleteTaskTool(OmniFocusTool):
    """Mark one incomplete task complete, by ID or by exact name + project"""

    name = "omnifocus_complete_task"

    def build_request(self, params: Dict[str, Any]) -> CompleteTaskRequest:
        task_id = optional_str(params, "task_id")
        task_name = optional_str(params, "task_name")
        project = optional_str(params, "project")

        if not task_id and (not task_name or not project):
            raise ValidationError("Provide either task_id, or both task_name and project.")

        if task_id:
            return CompleteTaskRequest(task_id=task_id)
        return CompleteTaskRequest(task_name=task_name, project=project)

    async def run(self, params: Dict[str, Any]) -> ToolResponse:
        """
        Resolve and complete a task.

        Name+project must match exactly one incomplete task. Zero matches is
        no_match; several is multiple_matches and nothing is completed.
        """
        request = self.build_request(params)

        raw = await self.runner(build_complete_task_script(request))
        result = parse_complete_result(raw)

        if isinstance(result, CompletedTask):
            return ToolResponse.ok(format_completed(result))
        return ToolResponse.error(format_resolution_error(
            result,
            task_id=request.task_id,
            task_name=request.task_name,
            project=request.project,
        ))
