"""
Wire models: the response envelope and the tool input schemas.
"""

from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from winbasic.filesystem.search import SearchType
from winbasic.filesystem.writer import AppendPosition


class TextContent(BaseModel):
    """A block of text inside a response."""

    type: Literal["text"] = "text"
    text: str


class ToolResponse(BaseModel):
    """
    The envelope every tool returns.

    ``is_error`` is left unset on success and serialized as ``isError``.
    """

    model_config = ConfigDict(populate_by_name=True)

    content: list[TextContent]
    is_error: Optional[bool] = Field(default=None, alias="isError")

    @classmethod
    def success(cls, text: str) -> "ToolResponse":
        return cls(content=[TextContent(text=text)])

    @classmethod
    def error(cls, text: str) -> "ToolResponse":
        return cls(content=[TextContent(text=text)], is_error=True)

    @property
    def text(self) -> str:
        """All text blocks joined together."""
        return "".join(block.text for block in self.content)

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class ToolInput(BaseModel):
    """Base for tool arguments: wire names are aliases, extras are ignored."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class ExecuteCommandInput(ToolInput):
    command: str = Field(description="The command to execute")
    working_dir: Optional[str] = Field(
        default=None, alias="workingDir", description="Working directory for the command"
    )
    timeout: Optional[int] = Field(
        default=None, ge=0, description="Timeout in milliseconds (default: 30000)"
    )


class ExecutePowershellInput(ToolInput):
    script: str = Field(description="The PowerShell script to execute")
    working_dir: Optional[str] = Field(
        default=None, alias="workingDir", description="Working directory for the script"
    )
    timeout: Optional[int] = Field(
        default=None, ge=0, description="Timeout in milliseconds (default: 30000)"
    )


class ReadFileInput(ToolInput):
    path: str = Field(description="Path to the file to read")
    line_numbers_included: bool = Field(
        default=False, description="Whether to include line numbers in the output"
    )


class WriteFileInput(ToolInput):
    path: str = Field(description="Path to the file to write")
    content: str = Field(description="Content to write to the file")
    create_directories: bool = Field(
        default=False,
        alias="createDirectories",
        description="Whether to create parent directories if they don't exist",
    )
    line_numbers_included: bool = Field(
        default=False,
        description="Whether the content includes line numbers that should be stripped",
    )


class WriteLinesInput(ToolInput):
    path: str = Field(description="Path to the file to modify")
    lines: str = Field(description="Lines to write in format 'lineNumber:content'")
    create_directories: bool = Field(
        default=False,
        alias="createDirectories",
        description="Whether to create parent directories if they don't exist",
    )


class AppendTextInput(ToolInput):
    path: str = Field(description="Path to the file to modify")
    text: str = Field(description="Text to append")
    position: AppendPosition = Field(
        description="Whether to append the text before or after the file's content"
    )
    create_directories: bool = Field(
        default=False,
        alias="createDirectories",
        description="Whether to create parent directories if they don't exist",
    )


class SearchFilesInput(ToolInput):
    base_path: str = Field(
        alias="basePath", description="Base directory to start the search from"
    )
    pattern: str = Field(description="Regular expression pattern to search for")
    search_type: SearchType = Field(
        alias="searchType",
        description="Whether to search in file names, content, or both",
    )
    recursive: bool = Field(
        default=True, description="Whether to search recursively in subdirectories"
    )
    max_results: Optional[int] = Field(
        default=None,
        ge=0,
        alias="maxResults",
        description="Maximum number of results to return (default: 100)",
    )


class ListDirectoryInput(ToolInput):
    path: str = Field(description="Path to the directory to list")
    recursive: bool = Field(
        default=False, description="Whether to list files recursively"
    )
