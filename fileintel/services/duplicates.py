from __future__ import annotations

import logging
import threading
import time
from collections.abc import Hashable, Iterable
from dataclasses import dataclass, field

from result import Err, Result

from fileintel.models.duplicates import DuplicateDetectionResults, DuplicateGroup
from fileintel.models.enums import DetectionType
from fileintel.models.errors import FileError, FileErrorCode, error_from_os, not_a_file
from fileintel.services.fs import DEFAULT_FS, FileSystem
from fileintel.services.hashing import HashedFile, Hasher
from fileintel.services.workers import map_bounded

logger = logging.getLogger(__name__)

DEFAULT_HASH_WORKERS = 4
DEFAULT_BATCH_SIZE = 1000


@dataclass(slots=True)
class _HashOutcome:
    hashed: list[HashedFile]
    errors: list[FileError] = field(default_factory=list)


def _basename(path: str) -> str:
    return path.replace("\\", "/").rstrip("/").rsplit("/", 1)[-1]


def _unique(paths: Iterable[str]) -> list[str]:
    """Drop repeated paths, keeping first-seen order.

    A path listed twice must never end up grouped with itself.
    """
    return list(dict.fromkeys(paths))


def _group_in_order(
    items: Iterable[tuple[Hashable, str, int]],
    detection_type: DetectionType,
) -> list[DuplicateGroup]:
    """Bucket ``(key, path, size)`` triples, keeping first-seen order.

    Singleton buckets never become groups.
    """
    buckets: dict[Hashable, tuple[list[str], list[int]]] = {}
    for key, path, size in items:
        paths, sizes = buckets.setdefault(key, ([], []))
        paths.append(path)
        sizes.append(size)
    return [
        DuplicateGroup(
            detection_type=detection_type,
            files=paths,
            group_key=str(key),
            total_size=sum(sizes),
        )
        for key, (paths, sizes) in buckets.items()
        if len(paths) > 1
    ]


class DuplicateService:
    """Content, name and size duplicate detection over a known path list.

    The three lenses are independent: a pair of files may show up in more
    than one of them and no attempt is made to reconcile the results.
    """

    def __init__(
        self,
        hasher: Hasher | None = None,
        fs: FileSystem = DEFAULT_FS,
        hash_workers: int = DEFAULT_HASH_WORKERS,
    ) -> None:
        self._fs = fs
        self._hasher = hasher if hasher is not None else Hasher(fs=fs)
        self._hash_workers = max(1, hash_workers)

    @property
    def hash_workers(self) -> int:
        return self._hash_workers

    # -- content ---------------------------------------------------------

    def _hash_one(self, path: str) -> Result[HashedFile, FileError]:
        try:
            return self._hasher.hash_file(path)
        except Exception as exc:  # noqa: BLE001
            return Err(
                FileError(
                    code=FileErrorCode.HASH_CALCULATION_FAILED,
                    path=path,
                    message=f"Unhandled hashing failure: {exc}",
                )
            )

    def _hash_all(self, paths: list[str]) -> _HashOutcome:
        """Hash *paths* on at most ``hash_workers`` threads.

        The thread count caps how many files are open at once.  Results keep
        input order so grouping sees discovery order.
        """
        outcome = _HashOutcome(hashed=[])
        for result in map_bounded(self._hash_one, paths, self._hash_workers):
            if isinstance(result, Err):
                error = result.unwrap_err()
                logger.warning("Skipping %s: %s (%s)", error.path, error.message, error.code.value)
                outcome.errors.append(error)
            else:
                outcome.hashed.append(result.unwrap())
        logger.debug("Hashed %d/%d files", len(outcome.hashed), len(paths))
        return outcome

    def _content_groups(self, paths: list[str]) -> tuple[list[DuplicateGroup], list[FileError]]:
        paths = _unique(paths)
        logger.info("Starting content-based duplicate detection for %d files", len(paths))
        outcome = self._hash_all(paths)
        groups = _group_in_order(
            ((hashed.digest, hashed.path, hashed.size) for hashed in outcome.hashed),
            DetectionType.CONTENT,
        )
        logger.info("Found %d content duplicate groups", len(groups))
        return groups, outcome.errors

    def find_by_content(self, paths: list[str]) -> list[DuplicateGroup]:
        groups, _ = self._content_groups(paths)
        return groups

    # -- name ------------------------------------------------------------

    def _size_or_zero(self, path: str) -> int:
        try:
            return self._fs.stat(path).size
        except OSError:
            return 0

    def find_by_name(self, paths: list[str]) -> list[DuplicateGroup]:
        paths = _unique(paths)
        logger.info("Starting name-based duplicate detection for %d files", len(paths))
        # Group on names first so only paths that end up in a group are stat'ed.
        by_name: dict[str, list[str]] = {}
        for path in paths:
            by_name.setdefault(_basename(path).lower(), []).append(path)
        groups = _group_in_order(
            (
                (name, path, self._size_or_zero(path))
                for name, members in by_name.items()
                if len(members) > 1
                for path in members
            ),
            DetectionType.NAME,
        )
        logger.info("Found %d name duplicate groups", len(groups))
        return groups

    # -- size ------------------------------------------------------------

    def _size_groups(self, paths: list[str]) -> tuple[list[DuplicateGroup], list[FileError]]:
        paths = _unique(paths)
        logger.info("Starting size-based duplicate detection for %d files", len(paths))
        sized: list[tuple[int, str, int]] = []
        errors: list[FileError] = []
        for path in paths:
            try:
                st = self._fs.stat(path)
            except OSError as exc:
                error = error_from_os(path, exc, FileErrorCode.CANNOT_GET_FILE_SIZE)
                logger.warning("Skipping %s: %s (%s)", path, error.message, error.code.value)
                errors.append(error)
                continue
            if not st.is_file:
                errors.append(not_a_file(path))
                continue
            sized.append((st.size, path, st.size))
        groups = _group_in_order(sized, DetectionType.SIZE)
        logger.info("Found %d size duplicate groups", len(groups))
        return groups, errors

    def find_by_size(self, paths: list[str]) -> list[DuplicateGroup]:
        groups, _ = self._size_groups(paths)
        return groups

    # -- combined --------------------------------------------------------

    def find_all(self, paths: list[str]) -> DuplicateDetectionResults:
        """Run the three lenses concurrently over *paths*.

        Repeated paths are counted once, including in ``total_files``.
        """
        paths = _unique(paths)
        logger.info("Starting comprehensive duplicate detection for %d files", len(paths))
        start = time.perf_counter()

        content: list[DuplicateGroup] = []
        names: list[DuplicateGroup] = []
        sizes: list[DuplicateGroup] = []
        content_errors: list[FileError] = []
        size_errors: list[FileError] = []

        def content_worker() -> None:
            nonlocal content, content_errors
            try:
                content, content_errors = self._content_groups(paths)
            except Exception:  # noqa: BLE001
                logger.exception("Content detection failed")

        def name_worker() -> None:
            nonlocal names
            try:
                names = self.find_by_name(paths)
            except Exception:  # noqa: BLE001
                logger.exception("Name detection failed")

        def size_worker() -> None:
            nonlocal sizes, size_errors
            try:
                sizes, size_errors = self._size_groups(paths)
            except Exception:  # noqa: BLE001
                logger.exception("Size detection failed")

        threads = [
            threading.Thread(target=worker, daemon=True) for worker in (content_worker, name_worker, size_worker)
        ]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        # A file that failed both lenses is reported once, preferring the hashing error.
        skipped: dict[str, FileError] = {}
        for error in (*content_errors, *size_errors):
            skipped.setdefault(error.path, error)

        duration = time.perf_counter() - start
        logger.info("Comprehensive duplicate detection completed in %.2fs", duration)
        return DuplicateDetectionResults(
            content_duplicates=content,
            name_duplicates=names,
            size_duplicates=sizes,
            total_files=len(paths),
            processing_time=duration,
            skipped=list(skipped.values()),
        )

    def find_all_batched(self, paths: list[str], batch_size: int = DEFAULT_BATCH_SIZE) -> DuplicateDetectionResults:
        """Run :meth:`find_all` on consecutive slices of *paths*.

        Batches are independent, so duplicates whose members land in
        different batches are not reported.
        """
        if batch_size < 1:
            raise ValueError("batch_size must be at least 1")
        paths = _unique(paths)

        logger.info("Starting batched duplicate detection for %d files in batches of %d", len(paths), batch_size)
        start = time.perf_counter()
        merged = DuplicateDetectionResults(
            content_duplicates=[],
            name_duplicates=[],
            size_duplicates=[],
            total_files=len(paths),
            processing_time=0.0,
        )
        batch_count = (len(paths) + batch_size - 1) // batch_size
        for number, offset in enumerate(range(0, len(paths), batch_size), start=1):
            logger.debug("Processing batch %d/%d", number, batch_count)
            batch = self.find_all(paths[offset : offset + batch_size])
            merged.content_duplicates.extend(batch.content_duplicates)
            merged.name_duplicates.extend(batch.name_duplicates)
            merged.size_duplicates.extend(batch.size_duplicates)
            merged.skipped.extend(batch.skipped)

        merged.processing_time = time.perf_counter() - start
        logger.info("Batched duplicate detection completed in %.2fs", merged.processing_time)
        return merged
