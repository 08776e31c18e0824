"""Get tasks tool for OmniFocus Kiwi."""

from typing import Any, Dict, List, Optional

from ..api.templates import build_get_tasks_script
from ..utils.formatting import format_task_summary
from ..utils.models import TaskQuery
from ..utils.results import TaskRecord, parse_tasks
from .base import OmniFocusTool, ToolResponse, optional_bool, optional_str


def filter_tasks(tasks: List[TaskRecord], query: TaskQuery) -> List[TaskRecord]:
    """
    Apply flagged-only, project and tag filters to incomplete tasks.

    Project and tag are case-insensitive substring matches; a task passes the
    tag filter when any of its tags matches. Inbox tasks never pass a project
    filter.
    """
    if query.flagged_only:
        tasks = [t for t in tasks if t.flagged]

    if query.project:
        needle = query.project.lower()
        tasks = [t for t in tasks if t.project is not None and needle in t.project.lower()]

    if query.tag:
        needle = query.tag.lower()
        tasks = [t for t in tasks if any(needle in name.lower() for name in t.tags)]

    return tasks


class GetTasksTool(OmniFocusTool):
    """List incomplete tasks with optional filters"""

    name = "omnifocus_get_tasks"

    async def run(self, params: Dict[str, Any]) -> ToolResponse:
        """
        Args:
            project: Project name, case-insensitive partial match
            tag: Tag name, case-insensitive partial match
            flagged_only: Only return flagged tasks
        """
        query = TaskQuery(
            project=optional_str(params, "project"),
            tag=optional_str(params, "tag"),
            flagged_only=bool(optional_bool(params, "flagged_only")),
        )

        raw = await self.runner(build_get_tasks_script(query))
        tasks = filter_tasks(parse_tasks(raw), query)

        return ToolResponse.ok(format_task_summary(tasks))
