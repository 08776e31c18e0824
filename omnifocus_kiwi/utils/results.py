"""
Typed results decoded from JXA script output.

Every template prints exactly one JSON value. The parsers here turn that text
into either success records or one of the named error variants below, and
raise ResultParseError for anything else. Callers match on the returned type.
"""

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple, Type, Union

from .errors import ResultParseError


# ============================================================================
# Error variants (reported by the scripts themselves)
# ============================================================================

@dataclass(frozen=True)
class NoMatch:
    """No incomplete task matched the identifier or the name+project pair."""
    code = "no_match"


@dataclass(frozen=True)
class MultipleMatches:
    """More than one incomplete task matched name+project; nothing was touched."""
    count: int
    code = "multiple_matches"


@dataclass(frozen=True)
class NotFound:
    """Identifier does not resolve to a currently incomplete task."""
    code = "not_found"


@dataclass(frozen=True)
class ProjectNotFound:
    project_name: str
    code = "project_not_found"


@dataclass(frozen=True)
class FolderNotFound:
    folder_name: str
    code = "folder_not_found"


ResolutionError = Union[NoMatch, MultipleMatches, NotFound, ProjectNotFound, FolderNotFound]


# ============================================================================
# Success records
# ============================================================================

@dataclass(frozen=True)
class TaskRecord:
    id: str
    name: str
    project: Optional[str]
    flagged: bool
    due_date: Optional[str]
    defer_date: Optional[str] = None
    note: str = ""
    tags: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class CompletedTaskRecord(TaskRecord):
    completion_date: str = ""


@dataclass(frozen=True)
class ProjectRecord:
    name: str
    task_count: int
    type: str = "parallel"
    folder: Optional[str] = None


@dataclass(frozen=True)
class CompletedTask:
    id: str
    name: str
    project: Optional[str]
    tags: List[str]


@dataclass(frozen=True)
class CreatedTask:
    id: str
    name: str
    project: Optional[str]
    flagged: bool
    due_date: Optional[str]
    tags: List[str]


@dataclass(frozen=True)
class UpdatedTask:
    id: str
    name: str
    project: Optional[str]
    flagged: bool
    due_date: Optional[str]
    defer_date: Optional[str]
    note: str
    tags: List[str]


@dataclass(frozen=True)
class CreatedProject:
    id: str
    name: str
    type: str
    folder: Optional[str]


# ============================================================================
# Decoding helpers
# ============================================================================

def load_json(raw: str) -> Any:
    """Parse the trimmed stdout of a script."""
    if raw is None or not raw.strip():
        raise ResultParseError("OmniFocus returned no output.", raw=raw or "")
    try:
        return json.loads(raw)
    except json.JSONDecodeError as e:
        raise ResultParseError(
            f"Could not parse OmniFocus output as JSON: {e}", raw=raw
        ) from e


def _require(payload: Dict[str, Any], key: str, kind: Union[type, Tuple[type, ...]], raw: str) -> Any:
    value = payload.get(key)
    if not isinstance(value, kind):
        raise ResultParseError(
            f"Unexpected OmniFocus output: field '{key}' is missing or has the wrong type",
            raw=raw,
        )
    return value


def _optional_str(payload: Dict[str, Any], key: str, raw: str) -> Optional[str]:
    value = payload.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ResultParseError(
            f"Unexpected OmniFocus output: field '{key}' must be a string or null",
            raw=raw,
        )
    return value


def _tags(payload: Dict[str, Any], raw: str) -> List[str]:
    tags = payload.get("tags") or []
    if not isinstance(tags, list) or not all(isinstance(t, str) for t in tags):
        raise ResultParseError("Unexpected OmniFocus output: 'tags' must be a list of names", raw=raw)
    return list(tags)


def _task_fields(item: Dict[str, Any], raw: str) -> Dict[str, Any]:
    return {
        "id": _require(item, "id", str, raw),
        "name": _require(item, "name", str, raw),
        "project": _optional_str(item, "project", raw),
        "flagged": bool(item.get("flagged", False)),
        "due_date": _optional_str(item, "dueDate", raw),
        "defer_date": _optional_str(item, "deferDate", raw),
        "note": item.get("note") or "",
        "tags": _tags(item, raw),
    }


def _as_object(data: Any, raw: str) -> Dict[str, Any]:
    if not isinstance(data, dict):
        raise ResultParseError("Unexpected OmniFocus output: expected a JSON object", raw=raw)
    return data


def _as_list(data: Any, raw: str) -> List[Any]:
    if not isinstance(data, list):
        raise ResultParseError("Unexpected OmniFocus output: expected a JSON array", raw=raw)
    return data


def _error_variant(
    payload: Dict[str, Any], allowed: Tuple[Type, ...], raw: str
) -> Optional[ResolutionError]:
    """Return the error variant named by payload['error'], or None if there is no error."""
    code = payload.get("error")
    if code is None:
        return None
    for variant in allowed:
        if variant.code != code:
            continue
        if variant is MultipleMatches:
            return MultipleMatches(count=_require(payload, "count", int, raw))
        if variant is ProjectNotFound:
            return ProjectNotFound(project_name=_require(payload, "projectName", str, raw))
        if variant is FolderNotFound:
            return FolderNotFound(folder_name=_require(payload, "folderName", str, raw))
        return variant()
    raise ResultParseError(f"Unexpected OmniFocus error: {code}", raw=raw)


def _check_success_flag(payload: Dict[str, Any], flag: str, raw: str) -> None:
    if payload.get(flag) is not True:
        raise ResultParseError(
            f"Unexpected OmniFocus output: neither an error nor '{flag}'", raw=raw
        )


# ============================================================================
# Per-template parsers
# ============================================================================

def parse_tasks(raw: str) -> List[TaskRecord]:
    items = _as_list(load_json(raw), raw)
    return [TaskRecord(**_task_fields(_as_object(item, raw), raw)) for item in items]


def parse_completed_tasks(raw: str) -> List[CompletedTaskRecord]:
    records = []
    for item in _as_list(load_json(raw), raw):
        item = _as_object(item, raw)
        records.append(CompletedTaskRecord(
            completion_date=_require(item, "completionDate", str, raw),
            **_task_fields(item, raw),
        ))
    return records


def parse_projects(raw: str) -> List[ProjectRecord]:
    records = []
    for item in _as_list(load_json(raw), raw):
        item = _as_object(item, raw)
        records.append(ProjectRecord(
            name=_require(item, "name", str, raw),
            task_count=_require(item, "taskCount", int, raw),
            type=item.get("type") or "parallel",
            folder=_optional_str(item, "folder", raw),
        ))
    return records


def parse_tags(raw: str) -> List[str]:
    names = _as_list(load_json(raw), raw)
    if not all(isinstance(n, str) for n in names):
        raise ResultParseError("Unexpected OmniFocus output: tag names must be strings", raw=raw)
    return names


def parse_complete_result(raw: str) -> Union[CompletedTask, NoMatch, MultipleMatches]:
    payload = _as_object(load_json(raw), raw)
    error = _error_variant(payload, (NoMatch, MultipleMatches), raw)
    if error is not None:
        return error
    _check_success_flag(payload, "completed", raw)
    return CompletedTask(
        id=_require(payload, "id", str, raw),
        name=_require(payload, "name", str, raw),
        project=_optional_str(payload, "project", raw),
        tags=_tags(payload, raw),
    )


def parse_add_result(raw: str) -> Union[CreatedTask, ProjectNotFound]:
    payload = _as_object(load_json(raw), raw)
    error = _error_variant(payload, (ProjectNotFound,), raw)
    if error is not None:
        return error
    _check_success_flag(payload, "created", raw)
    return CreatedTask(
        id=_require(payload, "id", str, raw),
        name=_require(payload, "name", str, raw),
        project=_optional_str(payload, "project", raw),
        flagged=bool(payload.get("flagged", False)),
        due_date=_optional_str(payload, "dueDate", raw),
        tags=_tags(payload, raw),
    )


def parse_update_result(raw: str) -> Union[UpdatedTask, NotFound]:
    payload = _as_object(load_json(raw), raw)
    error = _error_variant(payload, (NotFound,), raw)
    if error is not None:
        return error
    _check_success_flag(payload, "updated", raw)
    return UpdatedTask(
        id=_require(payload, "id", str, raw),
        name=_require(payload, "name", str, raw),
        project=_optional_str(payload, "project", raw),
        flagged=bool(payload.get("flagged", False)),
        due_date=_optional_str(payload, "dueDate", raw),
        defer_date=_optional_str(payload, "deferDate", raw),
        note=payload.get("note") or "",
        tags=_tags(payload, raw),
    )


def parse_create_project_result(raw: str) -> Union[CreatedProject, FolderNotFound]:
    payload = _as_object(load_json(raw), raw)
    error = _error_variant(payload, (FolderNotFound,), raw)
    if error is not None:
        return error
    _check_success_flag(payload, "created", raw)
    return CreatedProject(
        id=_require(payload, "id", str, raw),
        name=_require(payload, "name", str, raw),
        type=_require(payload, "type", str, raw),
        folder=_optional_str(payload, "folder", raw),
    )
