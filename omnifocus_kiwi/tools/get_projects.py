"""Get projects tool for OmniFocus Kiwi."""

from typing import Any, Dict

from ..api.templates import build_get_projects_script
from ..utils.formatting import format_project_summary
from ..utils.results import parse_projects
from .base import OmniFocusTool, ToolResponse


class GetProjectsTool(OmniFocusTool):
    """List active projects with their incomplete-task counts"""

    name = "omnifocus_get_projects"

    async def run(self, params: Dict[str, Any]) -> ToolResponse:
        raw = await self.runner(build_get_projects_script())
        return ToolResponse.ok(format_project_summary(parse_projects(raw)))
