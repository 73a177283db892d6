"""Editor hook integration.

Hooks pipe a JSON tool-invocation payload into ``ccg create``; this package
reads it without blocking and turns it into a checkpoint message.
"""

from ccg.hooks._inputs import StructuredPatch, ToolPayload, ToolResponse
from ccg.hooks._message import (
    MANUAL_CHECKPOINT_MESSAGE,
    format_commit_message,
    parse_payload,
    resolve_message,
)
from ccg.hooks._stdin import probe_stdin

__all__ = [
    "MANUAL_CHECKPOINT_MESSAGE",
    "StructuredPatch",
    "ToolPayload",
    "ToolResponse",
    "format_commit_message",
    "parse_payload",
    "probe_stdin",
    "resolve_message",
]
