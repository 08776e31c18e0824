"""
JXA script templates, one per operation.

Each builder takes a request record and returns a complete script for
run_jxa(). Scripts print one JSON value: a list for queries, or an object
carrying either an ``error`` code or a success flag (``completed``,
``created``, ``updated``) for mutations. The parsers in utils/results.py
decode exactly these shapes.

Caller data goes in through ``bind_data`` (the ``__DATA__`` object). The only
inline substitution left is the single identifier in complete-by-id, which
passes through ``escape_jxa``.
"""

from typing import Any, Dict

from ..utils.marshal import bind_data, escape_jxa
from ..utils.models import (
    UNSET,
    AddTaskRequest,
    CompletedTaskQuery,
    CompleteTaskRequest,
    CreateProjectRequest,
    TaskQuery,
    UpdateTaskRequest,
)

# Helpers shared by every template. Property reads on the OmniFocus object
# model throw for missing relations (an Inbox task has no containing project),
# hence safe().
JXA_HELPERS = """
function safe(fn, fallback) {
  try {
    const value = fn();
    return (value === undefined || value === null) ? fallback : value;
  } catch (e) {
    return fallback;
  }
}

function isoOrNull(d) {
  return d ? d.toISOString() : null;
}

function projectNameOf(t) {
  return safe(() => t.containingProject().name(), null);
}

function tagNamesOf(t) {
  return safe(() => t.tags().map(tag => tag.name()), []);
}

function taskRecord(t) {
  return {
    id: t.id(),
    name: t.name(),
    project: projectNameOf(t),
    flagged: t.flagged(),
    dueDate: safe(() => isoOrNull(t.dueDate()), null),
    deferDate: safe(() => isoOrNull(t.deferDate()), null),
    note: safe(() => t.note(), ''),
    tags: tagNamesOf(t)
  };
}

function exactByName(items, name) {
  return items.filter(item => item.name() === name);
}

function resolveTag(app, doc, name) {
  const existing = exactByName(doc.flattenedTags.whose({name: name})(), name);
  if (existing.length > 0) return existing[0];
  doc.tags.push(app.Tag({name: name}));
  return exactByName(doc.flattenedTags.whose({name: name})(), name)[0];
}
"""

GET_TASKS_SCRIPT = JXA_HELPERS + """
function run() {
  const app = Application('OmniFocus');
  const doc = app.defaultDocument();
  const tasks = doc.flattenedTasks.whose({completed: false})();

  const projectNeedle = __DATA__.narrowProject ? __DATA__.narrowProject.toLowerCase() : null;
  const tagNeedle = __DATA__.narrowTag ? __DATA__.narrowTag.toLowerCase() : null;

  const result = [];
  for (let i = 0; i < tasks.length; i++) {
    const t = tasks[i];
    if (projectNeedle !== null) {
      const proj = projectNameOf(t);
      if (!proj || proj.toLowerCase().indexOf(projectNeedle) === -1) continue;
    }
    if (tagNeedle !== null) {
      const names = tagNamesOf(t);
      if (!names.some(n => n.toLowerCase().indexOf(tagNeedle) !== -1)) continue;
    }
    result.push(taskRecord(t));
  }
  return JSON.stringify(result);
}
"""

# Bulk property reads: one Apple Event per property instead of per task.
GET_COMPLETED_TASKS_SCRIPT = JXA_HELPERS + """
function run() {
  const app = Application('OmniFocus');
  const doc = app.defaultDocument();
  const allTasks = doc.flattenedTasks;

  const ids = allTasks.id();
  const names = allTasks.name();
  const flaggedArr = allTasks.flagged();
  const dueDates = allTasks.dueDate();
  const deferDates = allTasks.deferDate();
  const notes = allTasks.note();
  const completionDates = allTasks.completionDate();
  const projectNames = allTasks.containingProject.name();
  const tagArrays = allTasks.tags.name();

  const sinceDate = new Date(__DATA__.since);
  const projFilter = __DATA__.project ? __DATA__.project.toLowerCase() : null;
  const tagFilter = __DATA__.tag ? __DATA__.tag.toLowerCase() : null;

  const results = [];
  for (let i = 0; i < ids.length; i++) {
    if (!completionDates[i] || completionDates[i] < sinceDate) continue;
    const proj = projectNames[i] || null;
    if (projFilter && (!proj || proj.toLowerCase() !== projFilter)) continue;
    const tags = tagArrays[i] || [];
    if (tagFilter && !tags.some(t => t.toLowerCase().indexOf(tagFilter) !== -1)) continue;
    results.push({
      id: ids[i],
      name: names[i],
      project: proj,
      flagged: flaggedArr[i],
      dueDate: isoOrNull(dueDates[i]),
      deferDate: isoOrNull(deferDates[i]),
      note: notes[i] || '',
      completionDate: completionDates[i].toISOString(),
      tags: tags
    });
  }
  return JSON.stringify(results);
}
"""

GET_PROJECTS_SCRIPT = JXA_HELPERS + """
function run() {
  const app = Application('OmniFocus');
  const doc = app.defaultDocument();
  const projects = doc.flattenedProjects();

  const result = projects
    .filter(p => safe(() => p.status(), null) === 'active status')
    .map(p => ({
      name: p.name(),
      taskCount: p.flattenedTasks.whose({completed: false})().length,
      type: safe(() => p.sequential(), false) ? 'sequential' : 'parallel',
      folder: safe(() => p.folder().name(), null)
    }));

  return JSON.stringify(result);
}
"""

GET_TAGS_SCRIPT = """
function run() {
  const app = Application('OmniFocus');
  const doc = app.defaultDocument();
  return JSON.stringify(doc.flattenedTags().map(t => t.name()));
}
"""

COMPLETE_BY_ID_SCRIPT = JXA_HELPERS + """
function run() {
  const app = Application('OmniFocus');
  const doc = app.defaultDocument();
  const task = doc.flattenedTasks.byId('%(task_id)s');

  let taskName;
  try { taskName = task.name(); } catch (e) {
    return JSON.stringify({error: 'no_match'});
  }
  if (task.completed()) {
    return JSON.stringify({error: 'no_match'});
  }

  app.markComplete(task);

  return JSON.stringify({
    completed: true,
    id: task.id(),
    name: taskName,
    project: projectNameOf(task),
    tags: tagNamesOf(task)
  });
}
"""

COMPLETE_BY_NAME_SCRIPT = JXA_HELPERS + """
function run() {
  const app = Application('OmniFocus');
  const doc = app.defaultDocument();
  const tasks = doc.flattenedTasks.whose({completed: false})();

  const matches = tasks.filter(t =>
    t.name() === __DATA__.taskName && projectNameOf(t) === __DATA__.project
  );

  if (matches.length === 0) {
    return JSON.stringify({error: 'no_match'});
  }
  if (matches.length > 1) {
    return JSON.stringify({error: 'multiple_matches', count: matches.length});
  }

  const task = matches[0];
  app.markComplete(task);

  return JSON.stringify({
    completed: true,
    id: task.id(),
    name: task.name(),
    project: __DATA__.project,
    tags: tagNamesOf(task)
  });
}
"""

ADD_TASK_SCRIPT = JXA_HELPERS + """
function run() {
  const app = Application('OmniFocus');
  const doc = app.defaultDocument();

  let targetProject = null;
  if (__DATA__.project !== null) {
    const projects = exactByName(doc.flattenedProjects.whose({name: __DATA__.project})(), __DATA__.project);
    if (projects.length === 0) {
      return JSON.stringify({error: 'project_not_found', projectName: __DATA__.project});
    }
    targetProject = projects[0];
  }

  const resolvedTags = __DATA__.tags.map(name => resolveTag(app, doc, name));

  const props = {name: __DATA__.name};
  if (__DATA__.note !== null) props.note = __DATA__.note;
  if (__DATA__.dueDate !== null) props.dueDate = new Date(__DATA__.dueDate);
  if (__DATA__.flagged !== null) props.flagged = __DATA__.flagged;
  const task = app.Task(props);

  if (targetProject !== null) {
    targetProject.tasks.push(task);
  } else {
    doc.inboxTasks.push(task);
  }

  resolvedTags.forEach(tag => app.add(tag, {to: task.tags}));

  return JSON.stringify({
    created: true,
    id: task.id(),
    name: task.name(),
    project: projectNameOf(task),
    flagged: task.flagged(),
    dueDate: safe(() => isoOrNull(task.dueDate()), null),
    tags: tagNamesOf(task)
  });
}
"""

UPDATE_TASK_SCRIPT = JXA_HELPERS + """
function has(key) {
  return Object.prototype.hasOwnProperty.call(__DATA__, key);
}

function run() {
  const app = Application('OmniFocus');
  const doc = app.defaultDocument();
  const task = doc.flattenedTasks.byId(__DATA__.taskId);

  try { task.name(); } catch (e) {
    return JSON.stringify({error: 'not_found'});
  }
  if (task.completed()) {
    return JSON.stringify({error: 'not_found'});
  }

  if (has('name')) {
    task.name.set(__DATA__.name);
  }
  if (has('dueDate')) {
    task.dueDate.set(__DATA__.dueDate !== null ? new Date(__DATA__.dueDate) : null);
  }
  if (has('deferDate')) {
    task.deferDate.set(__DATA__.deferDate !== null ? new Date(__DATA__.deferDate) : null);
  }
  if (has('flagged')) {
    task.flagged.set(__DATA__.flagged);
  }
  if (has('note')) {
    task.note.set(__DATA__.note !== null ? __DATA__.note : '');
  }
  if (has('tags')) {
    const currentTags = task.tags();
    for (let i = currentTags.length - 1; i >= 0; i--) {
      app.remove(currentTags[i], {from: task.tags});
    }
    __DATA__.tags.forEach(name => app.add(resolveTag(app, doc, name), {to: task.tags}));
  }

  const record = taskRecord(task);
  record.updated = true;
  return JSON.stringify(record);
}
"""

CREATE_PROJECT_SCRIPT = JXA_HELPERS + """
function run() {
  const app = Application('OmniFocus');
  const doc = app.defaultDocument();

  let targetFolder = null;
  if (__DATA__.folder !== null) {
    const folders = exactByName(doc.flattenedFolders.whose({name: __DATA__.folder})(), __DATA__.folder);
    if (folders.length === 0) {
      return JSON.stringify({error: 'folder_not_found', folderName: __DATA__.folder});
    }
    targetFolder = folders[0];
  }

  const proj = app.Project({
    name: __DATA__.projectName,
    sequential: __DATA__.sequential
  });

  if (targetFolder !== null) {
    targetFolder.projects.push(proj);
  } else {
    doc.projects.push(proj);
  }

  return JSON.stringify({
    created: true,
    id: proj.id(),
    name: proj.name(),
    type: proj.sequential() ? 'sequential' : 'parallel',
    folder: safe(() => proj.folder().name(), null)
  });
}
"""


def build_get_tasks_script(query: TaskQuery) -> str:
    """
    Incomplete tasks. When exactly one of project/tag is given the script
    narrows on it to cut the payload; the caller still applies every filter.
    """
    narrow_project = query.project if query.project and not query.tag else None
    narrow_tag = query.tag if query.tag and not query.project else None
    return bind_data(GET_TASKS_SCRIPT, {
        "narrowProject": narrow_project,
        "narrowTag": narrow_tag,
    })


def build_get_completed_tasks_script(query: CompletedTaskQuery) -> str:
    return bind_data(GET_COMPLETED_TASKS_SCRIPT, {
        "since": query.since,
        "project": query.project,
        "tag": query.tag,
    })


def build_get_projects_script() -> str:
    return GET_PROJECTS_SCRIPT


def build_get_tags_script() -> str:
    return GET_TAGS_SCRIPT


def build_complete_task_script(request: CompleteTaskRequest) -> str:
    if request.by_id:
        return COMPLETE_BY_ID_SCRIPT % {"task_id": escape_jxa(request.task_id)}
    return bind_data(COMPLETE_BY_NAME_SCRIPT, {
        "taskName": request.task_name,
        "project": request.project,
    })


def build_add_task_script(request: AddTaskRequest) -> str:
    return bind_data(ADD_TASK_SCRIPT, {
        "name": request.name,
        "project": request.project,
        "note": request.note,
        "dueDate": request.due_date,
        "tags": list(request.tags),
        "flagged": request.flagged,
    })


def build_update_task_script(request: UpdateTaskRequest) -> str:
    # Only fields that were sent are emitted; the script tests key presence,
    # so an emitted null clears and a missing key leaves the value alone.
    data: Dict[str, Any] = {"taskId": request.task_id}
    for attr, key in (
        ("name", "name"),
        ("due_date", "dueDate"),
        ("defer_date", "deferDate"),
        ("flagged", "flagged"),
        ("note", "note"),
        ("tags", "tags"),
    ):
        value = getattr(request, attr)
        if value is not UNSET:
            data[key] = list(value) if attr == "tags" else value
    return bind_data(UPDATE_TASK_SCRIPT, data)


def build_create_project_script(request: CreateProjectRequest) -> str:
    return bind_data(CREATE_PROJECT_SCRIPT, {
        "projectName": request.name,
        "sequential": request.sequential,
        "folder": request.folder,
    })
