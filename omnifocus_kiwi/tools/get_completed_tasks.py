"""Get completed tasks tool for OmniFocus Kiwi."""

from datetime import datetime
from typing import Any, Dict, List

from ..api.templates import build_get_completed_tasks_script
from ..utils.dates import normalize_date
from ..utils.formatting import format_completed_task_summary
from ..utils.models import CompletedTaskQuery
from ..utils.results import CompletedTaskRecord, parse_completed_tasks
from .base import OmniFocusTool, ToolResponse, optional_str, required_str


def filter_completed_tasks(
    tasks: List[CompletedTaskRecord], query: CompletedTaskQuery
) -> List[CompletedTaskRecord]:
    """
    Re-check the script's filters on decoded records.

    Unlike get_tasks, the project filter here is an exact (case-insensitive)
    match. The asymmetry is long-standing behaviour callers depend on.
    """
    since = datetime.fromisoformat(query.since)
    result = []
    for t in tasks:
        if datetime.fromisoformat(t.completion_date) < since:
            continue
        if query.project and (t.project is None or t.project.lower() != query.project.lower()):
            continue
        if query.tag and not any(query.tag.lower() in name.lower() for name in t.tags):
            continue
        result.append(t)
    return result


class GetCompletedTasksTool(OmniFocusTool):
    """List tasks completed on or after a date"""

    name = "omnifocus_get_completed_tasks"

    async def run(self, params: Dict[str, Any]) -> ToolResponse:
        since = required_str(params, "since")
        query = CompletedTaskQuery(
            since=normalize_date(since, "date"),
            project=optional_str(params, "project"),
            tag=optional_str(params, "tag"),
        )

        raw = await self.runner(build_get_completed_tasks_script(query))
        tasks = filter_completed_tasks(parse_completed_tasks(raw), query)

        return ToolResponse.ok(format_completed_task_summary(tasks))
