"""
Configuration for the filesystem tools.
"""

import codecs

from pydantic import BaseModel, Field, field_validator


class FileSystemConfig(BaseModel):
    """
    Settings shared by the reader, writer and search engine.

    Path authorization is not configured here: it is driven by the
    live root set held in :class:`~winbasic.filesystem.roots.RootRegistry`.
    """

    encoding: str = Field(
        default="utf-8",
        description="Text encoding used for every file read and write",
    )

    max_search_results: int = Field(
        default=100,
        ge=1,
        le=100_000,
        description="Default cap on matching files when the caller gives none",
    )

    max_matches_per_file: int = Field(
        default=5,
        ge=1,
        le=1000,
        description="Content matches recorded per file before truncating",
    )

    @field_validator("encoding")
    @classmethod
    def validate_encoding(cls, v: str) -> str:
        """Reject encodings Python does not know about."""
        try:
            codecs.lookup(v)
        except LookupError:
            raise ValueError(f"Unknown encoding: {v}")
        return v

    def __repr__(self) -> str:
        return (
            f"FileSystemConfig(encoding={self.encoding!r}, "
            f"max_results={self.max_search_results}, "
            f"max_per_file={self.max_matches_per_file})"
        )
