#!/usr/bin/env python3
"""
OmniFocus Kiwi MCP Server

Exposes OmniFocus task management to agents through JXA automation.
Provides 8 tools: get_tasks, get_completed_tasks, get_projects, get_tags,
complete_task, add_task, update_task, create_project
"""

import asyncio
import logging
import sys
import time
import uuid
from importlib.metadata import PackageNotFoundError, version
from typing import Any, Dict, Optional

from dotenv import load_dotenv

# Load environment variables
load_dotenv()

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import CallToolResult, Tool

from .tools.add_task import AddTaskTool
from .tools.base import ScriptRunner, ToolResponse
from .tools.complete_task import CompleteTaskTool
from .tools.create_project import CreateProjectTool
from .tools.get_completed_tasks import GetCompletedTasksTool
from .tools.get_projects import GetProjectsTool
from .tools.get_tags import GetTagsTool
from .tools.get_tasks import GetTasksTool
from .tools.update_task import UpdateTaskTool
from .utils.analytics import log_execution
from .utils.settings import get_log_level

logger = logging.getLogger(__name__)

TOOL_CLASSES = {
    GetTasksTool.name: GetTasksTool,
    GetCompletedTasksTool.name: GetCompletedTasksTool,
    GetProjectsTool.name: GetProjectsTool,
    GetTagsTool.name: GetTagsTool,
    CompleteTaskTool.name: CompleteTaskTool,
    AddTaskTool.name: AddTaskTool,
    UpdateTaskTool.name: UpdateTaskTool,
    CreateProjectTool.name: CreateProjectTool,
}

ISO_DATE_HINT = "ISO 8601 format (e.g. '2026-03-15' or '2026-03-15T17:00:00')"


def _server_version() -> str:
    try:
        return version("omnifocus-kiwi")
    except PackageNotFoundError:
        return "0.0.0"


def tool_definitions() -> list[Tool]:
    """MCP tool list, names and argument fields as agents see them."""
    return [
        Tool(
            name="omnifocus_get_tasks",
            description="Get incomplete tasks from OmniFocus. Returns task ID, name, project, flagged status, due date, and tags.",
            inputSchema={
                "type": "object",
                "properties": {
                    "project": {
                        "type": "string",
                        "description": "Filter by project name (case-insensitive partial match)"
                    },
                    "tag": {
                        "type": "string",
                        "description": "Filter by tag name (case-insensitive partial match)"
                    },
                    "flagged_only": {
                        "type": "boolean",
                        "description": "Only return flagged tasks"
                    }
                }
            }
        ),
        Tool(
            name="omnifocus_get_completed_tasks",
            description="Get tasks completed in OmniFocus on or after a given date. Optionally filter by project or tag.",
            inputSchema={
                "type": "object",
                "properties": {
                    "since": {
                        "type": "string",
                        "description": "Return tasks completed on or after this date. ISO 8601 format (e.g. '2026-02-13')."
                    },
                    "project": {
                        "type": "string",
                        "description": "Filter by project name (case-insensitive exact match)"
                    },
                    "tag": {
                        "type": "string",
                        "description": "Filter by tag name (case-insensitive partial match)"
                    }
                },
                "required": ["since"]
            }
        ),
        Tool(
            name="omnifocus_get_projects",
            description="Get active projects from OmniFocus with their task counts.",
            inputSchema={"type": "object", "properties": {}}
        ),
        Tool(
            name="omnifocus_get_tags",
            description="Get all tags defined in OmniFocus.",
            inputSchema={"type": "object", "properties": {}}
        ),
        Tool(
            name="omnifocus_complete_task",
            description="Mark a task as complete in OmniFocus. Accepts a task_id (preferred) or exact task_name + project. Refuses to act if multiple tasks match.",
            inputSchema={
                "type": "object",
                "properties": {
                    "task_id": {
                        "type": "string",
                        "description": "OmniFocus task ID (returned by get_tasks). Preferred over name+project."
                    },
                    "task_name": {
                        "type": "string",
                        "description": "Exact name of the task to complete"
                    },
                    "project": {
                        "type": "string",
                        "description": "Exact name of the project the task belongs to"
                    }
                }
            }
        ),
        Tool(
            name="omnifocus_add_task",
            description="Add a new task to OmniFocus. Creates the task in a specified project or in the Inbox if no project is given. Optionally sets due date, tags, flagged status, and a note.",
            inputSchema={
                "type": "object",
                "properties": {
                    "task_name": {
                        "type": "string",
                        "minLength": 1,
                        "description": "Name of the task to create"
                    },
                    "project": {
                        "type": "string",
                        "description": "Exact name of the project to add the task to. If omitted, task goes to Inbox."
                    },
                    "note": {
                        "type": "string",
                        "description": "Note or description text for the task"
                    },
                    "due_date": {
                        "type": "string",
                        "description": f"Due date in {ISO_DATE_HINT}"
                    },
                    "tags": {
                        "type": "array",
                        "items": {"type": "string"},
                        "description": "List of tag names to apply. Tags that do not exist in OmniFocus will be created."
                    },
                    "flagged": {
                        "type": "boolean",
                        "description": "Whether to flag the task"
                    }
                },
                "required": ["task_name"]
            }
        ),
        Tool(
            name="omnifocus_update_task",
            description="Update an existing task in OmniFocus by ID. Can change name, due date, defer date, flagged status, note, and tags.",
            inputSchema={
                "type": "object",
                "properties": {
                    "task_id": {
                        "type": "string",
                        "description": "OmniFocus task ID (returned by get_tasks)"
                    },
                    "name": {
                        "type": "string",
                        "description": "New name for the task"
                    },
                    "due_date": {
                        "type": ["string", "null"],
                        "description": "New due date in ISO 8601 format, or null to clear the due date"
                    },
                    "defer_date": {
                        "type": ["string", "null"],
                        "description": "New defer (start) date in ISO 8601 format, or null to clear the defer date"
                    },
                    "flagged": {
                        "type": "boolean",
                        "description": "Set flagged status"
                    },
                    "note": {
                        "type": ["string", "null"],
                        "description": "New note text, or null to clear the note"
                    },
                    "tags": {
                        "type": "array",
                        "items": {"type": "string"},
                        "description": "Replace all tags with this list. Non-existent tags are created automatically."
                    }
                },
                "required": ["task_id"]
            }
        ),
        Tool(
            name="omnifocus_create_project",
            description="Create a new project in OmniFocus, optionally inside an existing folder.",
            inputSchema={
                "type": "object",
                "properties": {
                    "project_name": {
                        "type": "string",
                        "minLength": 1,
                        "description": "Name of the project to create"
                    },
                    "type": {
                        "type": "string",
                        "enum": ["parallel", "sequential"],
                        "description": "Whether tasks can be completed in any order (parallel) or must be done in sequence (sequential). Defaults to parallel."
                    },
                    "folder": {
                        "type": "string",
                        "description": "Exact name of an existing folder to add the project to. If omitted, project is added at the top level."
                    }
                },
                "required": ["project_name"]
            }
        ),
    ]


class OmniFocusKiwiMCP:
    """OmniFocus task management MCP server backed by JXA scripts"""

    def __init__(self, runner: Optional[ScriptRunner] = None):
        self.server = Server("omnifocus-kiwi", version=_server_version())
        # None means each tool uses the real osascript executor
        self.runner = runner
        self.setup_tools()

    async def dispatch(self, name: str, arguments: Optional[Dict[str, Any]]) -> ToolResponse:
        """
        Run one tool call and record it in the run history.

        Never raises: unknown tools and unexpected failures come back as
        error responses, so each call is isolated from the others.
        """
        execution_id = str(uuid.uuid4())
        started = time.monotonic()

        tool_class = TOOL_CLASSES.get(name)
        if tool_class is None:
            response = ToolResponse.error(f"Unknown tool: {name}")
        else:
            try:
                response = await tool_class(runner=self.runner).execute(dict(arguments or {}))
            except Exception as e:
                logger.exception(f"Unhandled error in {name}")
                response = ToolResponse.error(str(e) or type(e).__name__)

        duration = time.monotonic() - started
        status = "error" if response.is_error else "success"
        logger.info(f"{name}: {status} in {duration:.2f}s")

        log_execution(
            tool_name=name,
            status=status,
            duration_sec=duration,
            inputs=arguments,
            error=response.text if response.is_error else None,
            execution_id=execution_id,
        )
        return response

    def setup_tools(self):
        """Register the OmniFocus tools with the MCP server."""

        @self.server.list_tools()
        async def list_tools() -> list[Tool]:
            """List available tools."""
            return tool_definitions()

        @self.server.call_tool()
        async def call_tool(name: str, arguments: dict) -> CallToolResult:
            """Handle tool execution."""
            response = await self.dispatch(name, arguments)
            return response.to_call_result()

    async def run(self):
        """Start the MCP server"""
        async with stdio_server() as (read_stream, write_stream):
            await self.server.run(
                read_stream,
                write_stream,
                self.server.create_initialization_options()
            )


def main():
    """Entry point for the MCP server"""
    # stdout carries the MCP protocol, so logs go to stderr
    logging.basicConfig(
        stream=sys.stderr,
        level=get_log_level(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    server = OmniFocusKiwiMCP()
    asyncio.run(server.run())


if __name__ == "__main__":
    main()
