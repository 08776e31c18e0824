"""Get tags tool for OmniFocus Kiwi."""

from typing import Any, Dict

from ..api.templates import build_get_tags_script
from ..utils.formatting import format_tag_summary
from ..utils.results import parse_tags
from .base import OmniFocusTool, ToolResponse


class GetTagsTool(OmniFocusTool):
    """List every tag name"""

    name = "omnifocus_get_tags"

    async def run(self, params: Dict[str, Any]) -> ToolResponse:
        raw = await self.runner(build_get_tags_script())
        return ToolResponse.ok(format_tag_summary(parse_tags(raw)))
