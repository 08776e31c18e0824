"""
Error taxonomy for OmniFocus Kiwi.

Validation, execution and parse failures are exceptions. Resolution failures
(no_match, multiple_matches, not_found, project_not_found, folder_not_found)
are not: scripts report them as JSON and the parsers in results.py return them
as error variants.
"""


class OmniFocusError(Exception):
    """Base class for every failure raised by the bridge."""


class ValidationError(OmniFocusError):
    """Request rejected before any script was built or executed."""


class ScriptExecutionError(OmniFocusError):
    """osascript exited non-zero or ran past the timeout."""

    def __init__(self, message: str, stderr: str = "", returncode: int = None):
        super().__init__(message)
        self.stderr = stderr
        self.returncode = returncode


class ResultParseError(OmniFocusError):
    """Script output was not the JSON shape its template promises."""

    def __init__(self, message: str, raw: str = ""):
        super().__init__(message)
        self.raw = raw
