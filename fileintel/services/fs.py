from __future__ import annotations

import os
import stat as statmod
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Protocol


@dataclass(slots=True, frozen=True)
class StatResult:
    size: int
    mtime: float
    is_dir: bool
    is_file: bool


class FileSystem(Protocol):
    def expanduser(self, path: str) -> str: ...

    def exists(self, path: str) -> bool: ...

    def stat(self, path: str) -> StatResult: ...

    def open_binary(self, path: str) -> BinaryIO: ...

    def read_text(self, path: str, encoding: str = "utf-8") -> str: ...


class OsFileSystem:
    def expanduser(self, path: str) -> str:
        return str(Path(path).expanduser())

    def exists(self, path: str) -> bool:
        return Path(path).exists()

    def stat(self, path: str) -> StatResult:
        st = os.stat(path)
        return StatResult(
            size=st.st_size,
            mtime=st.st_mtime,
            is_dir=statmod.S_ISDIR(st.st_mode),
            is_file=statmod.S_ISREG(st.st_mode),
        )

    def open_binary(self, path: str) -> BinaryIO:
        return open(path, "rb")

    def read_text(self, path: str, encoding: str = "utf-8") -> str:
        return Path(path).read_text(encoding=encoding)


DEFAULT_FS: FileSystem = OsFileSystem()
