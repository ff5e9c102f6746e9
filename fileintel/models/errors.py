from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class FileErrorCode(str, Enum):
    NOT_FOUND = "not_found"
    NOT_A_FILE = "not_a_file"
    PERMISSION_DENIED = "permission_denied"
    FILE_TOO_LARGE = "file_too_large"
    HASH_CALCULATION_FAILED = "hash_calculation_failed"
    CANNOT_GET_FILE_SIZE = "cannot_get_file_size"
    INVALID_FILE_FORMAT = "invalid_file_format"


_RECOVERY: dict[FileErrorCode, str] = {
    FileErrorCode.NOT_FOUND: "Check if the file exists and the path is correct.",
    FileErrorCode.NOT_A_FILE: "Ensure the path points to a file, not a directory.",
    FileErrorCode.PERMISSION_DENIED: "Check file permissions and ensure you have read access.",
    FileErrorCode.FILE_TOO_LARGE: (
        "The file exceeds the maximum size limit. Consider increasing the limit or excluding large files."
    ),
    FileErrorCode.HASH_CALCULATION_FAILED: "Check file permissions and ensure the file is not corrupted.",
    FileErrorCode.CANNOT_GET_FILE_SIZE: "Check file permissions and ensure the file is accessible.",
    FileErrorCode.INVALID_FILE_FORMAT: "Ensure the file is in a supported format.",
}


@dataclass(slots=True, frozen=True)
class FileError:
    """Failure scoped to a single file.

    ``size`` and ``max_size`` are only set for ``FILE_TOO_LARGE``.
    """

    code: FileErrorCode
    path: str
    message: str
    size: int | None = None
    max_size: int | None = None

    @property
    def recovery_suggestion(self) -> str:
        return _RECOVERY[self.code]

    def __str__(self) -> str:
        return f"{self.message}: {self.path}"


def not_found(path: str) -> FileError:
    return FileError(code=FileErrorCode.NOT_FOUND, path=path, message="File not found")


def not_a_file(path: str) -> FileError:
    return FileError(code=FileErrorCode.NOT_A_FILE, path=path, message="Path is not a regular file")


def permission_denied(path: str) -> FileError:
    return FileError(
        code=FileErrorCode.PERMISSION_DENIED,
        path=path,
        message="Permission denied accessing file",
    )


def file_too_large(path: str, size: int, max_size: int) -> FileError:
    return FileError(
        code=FileErrorCode.FILE_TOO_LARGE,
        path=path,
        message=f"File too large ({size} > {max_size} bytes)",
        size=size,
        max_size=max_size,
    )


def error_from_os(path: str, exc: OSError, fallback: FileErrorCode) -> FileError:
    """Map an ``OSError`` raised for *path* onto the taxonomy."""
    if isinstance(exc, FileNotFoundError):
        return not_found(path)
    if isinstance(exc, IsADirectoryError):
        return not_a_file(path)
    if isinstance(exc, PermissionError):
        return permission_denied(path)
    return FileError(code=fallback, path=path, message=str(exc) or fallback.value)
