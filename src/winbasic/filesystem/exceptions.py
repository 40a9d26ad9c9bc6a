"""
Exceptions for filesystem operations.
"""


class FileSystemError(Exception):
    """Base exception for filesystem operations."""

    pass


class FileAccessDeniedError(FileSystemError):
    """Raised when a path falls outside the permitted roots."""

    def __init__(self, path: str, subject: str = "path"):
        self.path = path
        self.subject = subject
        super().__init__(
            f"Access denied: The {subject} '{path}' is outside of allowed directories."
        )


class PathNotFoundError(FileSystemError):
    """Raised when a file or directory does not exist."""

    def __init__(self, path: str, kind: str = "File"):
        self.path = path
        self.kind = kind
        super().__init__(f"{kind} not found: '{path}'")


class NotDirectoryError(FileSystemError):
    """Raised when a directory was expected but something else was found."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Not a directory: '{path}'")


class InvalidPatternError(FileSystemError):
    """Raised when a search pattern fails to compile."""

    def __init__(self, pattern: str, reason: str):
        self.pattern = pattern
        self.reason = reason
        super().__init__(f"Invalid regular expression: {reason}")


class FileOperationError(FileSystemError):
    """Raised when an underlying read/write/stat call fails."""

    def __init__(self, operation: str, path: str, cause: Exception):
        self.operation = operation
        self.path = path
        self.cause = cause
        super().__init__(f"Error {operation}: {cause}")
