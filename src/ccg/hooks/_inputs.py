"""Pydantic models for tool-invocation payloads.

An editor hook pipes a JSON payload describing the tool that just ran into
``ccg create``. Only the fields used to build a checkpoint message are
modeled; anything else in the payload is ignored.
"""

from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class StructuredPatch(BaseModel):
    """A hunk of the patch the tool applied."""

    lines: list[str] = Field(default_factory=list, description="Patch lines")


class ToolResponse(BaseModel):
    """Result reported by the tool."""

    model_config: ClassVar[ConfigDict] = ConfigDict(
        alias_generator=to_camel, populate_by_name=True
    )

    structured_patch: list[StructuredPatch] | None = Field(
        None, description="Patch hunks for file-editing tools"
    )


class ToolPayload(BaseModel):
    """Payload sent by a tool-use hook."""

    tool_name: str = Field(..., description="Name of the tool that was invoked")
    tool_input: dict[str, object] = Field(
        default_factory=dict, description="Tool-specific input parameters"
    )
    tool_response: ToolResponse = Field(
        default_factory=ToolResponse, description="Tool execution result"
    )
    cwd: str | None = Field(None, description="Working directory of the session")

    @property
    def file_name(self) -> str | None:
        """Base name of the ``file_path`` tool input, if there is one."""
        file_path = self.tool_input.get("file_path")
        if not isinstance(file_path, str) or not file_path:
            return None
        return file_path.rsplit("/", 1)[-1] or None
