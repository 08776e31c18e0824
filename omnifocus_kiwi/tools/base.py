"""Shared plumbing for OmniFocus Kiwi tools."""

import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List, Optional

from mcp.types import CallToolResult, TextContent

from ..api.jxa import run_jxa
from ..utils.errors import ValidationError

logger = logging.getLogger(__name__)

ScriptRunner = Callable[[str], Awaitable[str]]


@dataclass(frozen=True)
class ToolResponse:
    """Human-readable text plus the error flag the MCP client sees."""

    text: str
    is_error: bool = False

    @classmethod
    def ok(cls, text: str) -> "ToolResponse":
        return cls(text=text)

    @classmethod
    def error(cls, text: str) -> "ToolResponse":
        return cls(text=text, is_error=True)

    def to_call_result(self) -> CallToolResult:
        return CallToolResult(
            content=[TextContent(type="text", text=self.text)],
            isError=self.is_error,
        )


class OmniFocusTool:
    """
    Base class for the eight OmniFocus tools.

    Subclasses implement ``run(params)``. ``execute`` is the fault boundary:
    whatever ``run`` raises comes back as an error response carrying the
    exception's message, so one failing call never takes the server down.
    """

    name = ""

    def __init__(self, runner: Optional[ScriptRunner] = None):
        self.runner = runner or run_jxa

    async def run(self, params: Dict[str, Any]) -> ToolResponse:
        raise NotImplementedError

    async def execute(self, params: Optional[Dict[str, Any]]) -> ToolResponse:
        try:
            return await self.run(params or {})
        except ValidationError as e:
            logger.info(f"{self.name}: rejected request: {e}")
            return ToolResponse.error(str(e))
        except Exception as e:
            logger.warning(f"{self.name} failed: {e}")
            return ToolResponse.error(str(e) or type(e).__name__)


# ============================================================================
# Argument helpers
# ============================================================================

def optional_str(params: Dict[str, Any], key: str) -> Optional[str]:
    """Return a string argument, treating empty strings as absent."""
    value = params.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError(f"'{key}' must be a string.")
    return value or None


def required_str(params: Dict[str, Any], key: str) -> str:
    value = optional_str(params, key)
    if value is None or not value.strip():
        raise ValidationError(f"'{key}' is required.")
    return value


def optional_bool(params: Dict[str, Any], key: str) -> Optional[bool]:
    value = params.get(key)
    if value is None:
        return None
    if not isinstance(value, bool):
        raise ValidationError(f"'{key}' must be true or false.")
    return value


def tag_list(params: Dict[str, Any], key: str = "tags") -> List[str]:
    """Validate a list of tag names, dropping duplicates but keeping order."""
    value = params.get(key)
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(t, str) for t in value):
        raise ValidationError(f"'{key}' must be a list of tag names.")
    seen = []
    for name in value:
        if name and name not in seen:
            seen.append(name)
    return seen
