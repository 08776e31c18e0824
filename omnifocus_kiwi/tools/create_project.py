"""Create project tool for OmniFocus Kiwi."""

from typing import Any, Dict

from ..api.templates import build_create_project_script
from ..utils.errors import ValidationError
from ..utils.formatting import format_created_project, format_resolution_error
from ..utils.models import PROJECT_TYPES, CreateProjectRequest
from ..utils.results import CreatedProject, parse_create_project_result
from .base import OmniFocusTool, ToolResponse, optional_str, required_str


class CreateProjectTool(OmniFocusTool):
    """Create a project, optionally inside an existing folder"""

    name = "omnifocus_create_project"

    def build_request(self, params: Dict[str, Any]) -> CreateProjectRequest:
        project_type = optional_str(params, "type") or "parallel"
        if project_type not in PROJECT_TYPES:
            raise ValidationError(
                f"Invalid project type: \"{project_type}\". Use 'parallel' or 'sequential'."
            )
        return CreateProjectRequest(
            name=required_str(params, "project_name"),
            type=project_type,
            folder=optional_str(params, "folder"),
        )

    async def run(self, params: Dict[str, Any]) -> ToolResponse:
        request = self.build_request(params)

        raw = await self.runner(build_create_project_script(request))
        result = parse_create_project_result(raw)

        if isinstance(result, CreatedProject):
            return ToolResponse.ok(format_created_project(result))
        return ToolResponse.error(format_resolution_error(result))
