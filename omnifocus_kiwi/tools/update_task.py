"""Update task tool for OmniFocus Kiwi."""

from typing import Any, Dict

from ..api.templates import build_update_task_script
from ..utils.dates import normalize_optional_date
from ..utils.errors import ValidationError
from ..utils.formatting import format_resolution_error, format_updated_task
from ..utils.models import UNSET, UpdateTaskRequest
from ..utils.results import UpdatedTask, parse_update_result
from .base import OmniFocusTool, ToolResponse, optional_bool, optional_str, required_str, tag_list

NO_CHANGES_MESSAGE = (
    "No properties to update. Provide at least one of: "
    "name, due_date, defer_date, flagged, note, tags."
)


class UpdateTaskTool(OmniFocusTool):
    """Partially update an incomplete task by ID"""

    name = "omnifocus_update_task"

    def build_request(self, params: Dict[str, Any]) -> UpdateTaskRequest:
        """
        Map arguments onto an UpdateTaskRequest.

        A key that is absent stays UNSET. due_date, defer_date and note may be
        sent as null to clear them; name, flagged and tags sent as null count
        as absent.
        """
        task_id = required_str(params, "task_id")
        fields: Dict[str, Any] = {}

        if params.get("name") is not None:
            name = optional_str(params, "name")
            if name is None or not name.strip():
                raise ValidationError("'name' must not be empty.")
            fields["name"] = name

        for key, label in (("due_date", "due date"), ("defer_date", "defer date")):
            if key in params:
                value = params[key]
                if value is not None and not isinstance(value, str):
                    raise ValidationError(f"'{key}' must be a string or null.")
                fields[key] = normalize_optional_date(value, label)

        if params.get("flagged") is not None:
            fields["flagged"] = optional_bool(params, "flagged")

        if "note" in params:
            note = params["note"]
            if note is not None and not isinstance(note, str):
                raise ValidationError("'note' must be a string or null.")
            fields["note"] = note

        if params.get("tags") is not None:
            fields["tags"] = tag_list(params)

        request = UpdateTaskRequest(task_id=task_id, **fields)
        if not request.has_changes():
            raise ValidationError(NO_CHANGES_MESSAGE)
        return request

    async def run(self, params: Dict[str, Any]) -> ToolResponse:
        request = self.build_request(params)

        raw = await self.runner(build_update_task_script(request))
        result = parse_update_result(raw)

        if isinstance(result, UpdatedTask):
            return ToolResponse.ok(format_updated_task(result))
        return ToolResponse.error(format_resolution_error(result, task_id=request.task_id))
