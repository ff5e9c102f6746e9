from __future__ import annotations

import hashlib
from dataclasses import dataclass

from result import Err, Ok, Result

from fileintel.models.errors import (
    FileError,
    FileErrorCode,
    error_from_os,
    file_too_large,
    not_a_file,
    not_found,
)
from fileintel.services.fs import DEFAULT_FS, FileSystem

DEFAULT_CHUNK_SIZE = 1024 * 1024
DEFAULT_MAX_FILE_SIZE = 1024 * 1024 * 1024


@dataclass(slots=True, frozen=True)
class HashedFile:
    path: str
    digest: str
    size: int


class Hasher:
    """SHA-256 content hasher that streams files in fixed-size chunks.

    Only regular files are hashed.  Files above ``max_file_size`` are rejected
    before any byte is read, and reading stops once more than that many bytes
    have come back.
    """

    def __init__(
        self,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        max_file_size: int = DEFAULT_MAX_FILE_SIZE,
        fs: FileSystem = DEFAULT_FS,
    ) -> None:
        if chunk_size <= 0:
            raise ValueError("chunk_size must be positive")
        self._chunk_size = chunk_size
        self._max_file_size = max_file_size
        self._fs = fs

    @property
    def chunk_size(self) -> int:
        return self._chunk_size

    @property
    def max_file_size(self) -> int:
        return self._max_file_size

    def hash(self, path: str) -> Result[str, FileError]:
        return self.hash_file(path).map(lambda hashed: hashed.digest)

    def hash_file(self, path: str) -> Result[HashedFile, FileError]:
        if not self._fs.exists(path):
            return Err(not_found(path))

        try:
            st = self._fs.stat(path)
        except OSError as exc:
            return Err(error_from_os(path, exc, FileErrorCode.CANNOT_GET_FILE_SIZE))
        if not st.is_file:
            return Err(not_a_file(path))
        if st.size > self._max_file_size:
            return Err(file_too_large(path, st.size, self._max_file_size))

        sha = hashlib.sha256()
        read = 0
        try:
            with self._fs.open_binary(path) as handle:
                while chunk := handle.read(self._chunk_size):
                    read += len(chunk)
                    # The file grew after stat, or stat under-reports its size.
                    if read > self._max_file_size:
                        return Err(file_too_large(path, read, self._max_file_size))
                    sha.update(chunk)
        except OSError as exc:
            return Err(error_from_os(path, exc, FileErrorCode.HASH_CALCULATION_FAILED))

        return Ok(HashedFile(path=path, digest=sha.hexdigest(), size=read))
