"""Checkpoint message synthesis from hook payloads."""

from typing import Final

import orjson
from pydantic import ValidationError

from ccg.hooks._inputs import ToolPayload

MANUAL_CHECKPOINT_MESSAGE: Final = "Manual checkpoint"


def format_commit_message(payload: ToolPayload) -> str:
    """Build a checkpoint message describing a tool invocation.

    The message has a title (``<tool> on <file>``), the patch lines when the
    tool reported any, and the pretty-printed tool input.

    Args:
        payload: Parsed hook payload.

    Returns:
        Multi-line commit message.
    """
    file_name = payload.file_name
    title = f"{payload.tool_name} on {file_name}" if file_name else payload.tool_name

    parts = [f"{title}\n\n"]
    patches = payload.tool_response.structured_patch
    if patches is not None:
        parts.append("Changes:\n")
        parts.extend(f"  {line}\n" for patch in patches for line in patch.lines)
        parts.append("\n")

    parts.append("Tool Input:\n")
    parts.append(
        orjson.dumps(payload.tool_input, option=orjson.OPT_INDENT_2).decode("utf-8")
    )
    return "".join(parts)


def parse_payload(raw: str) -> ToolPayload | None:
    """Parse a hook payload, returning None when the text is not one."""
    try:
        return ToolPayload.model_validate_json(raw)
    except ValidationError:
        return None


def resolve_message(raw: str | None) -> tuple[str, ToolPayload | None]:
    """Choose the checkpoint message for text read from stdin.

    Args:
        raw: Text read from stdin, or None when nothing arrived.

    Returns:
        Tuple of (message, payload). A valid payload yields a synthesized
        message; other non-blank text is used verbatim; otherwise the manual
        checkpoint message is used.
    """
    if raw is None or not raw.strip():
        return MANUAL_CHECKPOINT_MESSAGE, None
    payload = parse_payload(raw)
    if payload is None:
        return raw, None
    return format_commit_message(payload), payload
