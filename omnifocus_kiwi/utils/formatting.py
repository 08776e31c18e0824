"""Render decoded results as the text returned to the calling agent."""

from typing import List, Optional

from .results import (
    CompletedTask,
    CompletedTaskRecord,
    CreatedProject,
    CreatedTask,
    FolderNotFound,
    MultipleMatches,
    NoMatch,
    NotFound,
    ProjectNotFound,
    ProjectRecord,
    ResolutionError,
    TaskRecord,
    UpdatedTask,
)

MAX_NOTE_PREVIEW = 200


def _note_preview(note: str) -> str:
    first_line = note.strip().splitlines()[0] if note.strip() else ""
    if len(first_line) > MAX_NOTE_PREVIEW:
        return first_line[:MAX_NOTE_PREVIEW] + "..."
    return first_line


def format_task_summary(tasks: List[TaskRecord]) -> str:
    blocks = []
    for t in tasks:
        parts = [f"- {t.name}", f"  ID: {t.id}"]
        if t.project:
            parts.append(f"  Project: {t.project}")
        if t.flagged:
            parts.append("  Flagged: yes")
        if t.due_date:
            parts.append(f"  Due: {t.due_date}")
        if t.defer_date:
            parts.append(f"  Defer: {t.defer_date}")
        if t.tags:
            parts.append(f"  Tags: {', '.join(t.tags)}")
        preview = _note_preview(t.note)
        if preview:
            parts.append(f"  Note: {preview}")
        blocks.append("\n".join(parts))
    return "\n".join(blocks) or "No matching tasks found."


def format_completed_task_summary(tasks: List[CompletedTaskRecord]) -> str:
    blocks = []
    for t in tasks:
        parts = [f"- {t.name}", f"  ID: {t.id}"]
        if t.project:
            parts.append(f"  Project: {t.project}")
        if t.flagged:
            parts.append("  Flagged: yes")
        if t.due_date:
            parts.append(f"  Due: {t.due_date}")
        parts.append(f"  Completed: {t.completion_date}")
        if t.tags:
            parts.append(f"  Tags: {', '.join(t.tags)}")
        preview = _note_preview(t.note)
        if preview:
            parts.append(f"  Note: {preview}")
        blocks.append("\n".join(parts))
    return "\n".join(blocks) or "No completed tasks found for this period."


def format_project_summary(projects: List[ProjectRecord]) -> str:
    lines = []
    for p in projects:
        line = f"- {p.name} ({p.task_count} tasks)"
        if p.type == "sequential":
            line += " [sequential]"
        if p.folder:
            line += f" in {p.folder}"
        lines.append(line)
    return "\n".join(lines) or "No active projects found."


def format_tag_summary(tags: List[str]) -> str:
    return "\n".join(f"- {t}" for t in tags) or "No tags found."


def format_completed(result: CompletedTask) -> str:
    tags = f" [{', '.join(result.tags)}]" if result.tags else ""
    return f'Completed: "{result.name}" in {result.project or "Inbox"}{tags}'


def format_created_task(result: CreatedTask) -> str:
    parts = [f'Created: "{result.name}"', f"ID: {result.id}"]
    parts.append(f"Project: {result.project}" if result.project else "Project: Inbox")
    if result.flagged:
        parts.append("Flagged: yes")
    if result.due_date:
        parts.append(f"Due: {result.due_date}")
    if result.tags:
        parts.append(f"Tags: {', '.join(result.tags)}")
    return "\n".join(parts)


def format_updated_task(result: UpdatedTask) -> str:
    parts = [f'Updated: "{result.name}"', f"ID: {result.id}"]
    if result.project:
        parts.append(f"Project: {result.project}")
    if result.flagged:
        parts.append("Flagged: yes")
    if result.due_date:
        parts.append(f"Due: {result.due_date}")
    if result.defer_date:
        parts.append(f"Defer: {result.defer_date}")
    if result.note:
        parts.append(f"Note: {result.note}")
    if result.tags:
        parts.append(f"Tags: {', '.join(result.tags)}")
    return "\n".join(parts)


def format_created_project(result: CreatedProject) -> str:
    parts = [f'Created project: "{result.name}"', f"ID: {result.id}", f"Type: {result.type}"]
    if result.folder:
        parts.append(f"Folder: {result.folder}")
    return "\n".join(parts)


def format_resolution_error(
    error: ResolutionError,
    task_id: Optional[str] = None,
    task_name: Optional[str] = None,
    project: Optional[str] = None,
) -> str:
    """
    Turn a script-reported error variant into an actionable message.

    The request context (identifier or name+project) is needed because the
    scripts report only the error code and its own payload.
    """
    if isinstance(error, NoMatch):
        target = f'task with ID "{task_id}"' if task_id else f'"{task_name}" in project "{project}"'
        return f"No incomplete task found matching {target}."
    if isinstance(error, MultipleMatches):
        return (
            f'Found {error.count} tasks matching "{task_name}" in project "{project}". '
            "Cannot complete, ambiguous match."
        )
    if isinstance(error, NotFound):
        return f'No incomplete task found with ID "{task_id}".'
    if isinstance(error, ProjectNotFound):
        return f'Project "{error.project_name}" not found in OmniFocus.'
    if isinstance(error, FolderNotFound):
        return f'Folder "{error.folder_name}" not found in OmniFocus.'
    raise TypeError(f"Unhandled result variant: {type(error).__name__}")
