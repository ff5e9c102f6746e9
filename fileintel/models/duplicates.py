from __future__ import annotations

from dataclasses import dataclass, field

from fileintel.models.enums import DetectionType
from fileintel.models.errors import FileError


@dataclass(slots=True, frozen=True)
class CleanableItem:
    """Candidate file handed over by the upstream scan pipeline."""

    path: str
    size: int
    category: str = "other"


@dataclass(slots=True)
class DuplicateGroup:
    detection_type: DetectionType
    files: list[str]
    group_key: str
    total_size: int

    def __post_init__(self) -> None:
        if len(self.files) < 2:
            raise ValueError(f"duplicate group needs at least two files, got {len(self.files)}")

    @property
    def space_wasted(self) -> int:
        per_file = self.total_size // len(self.files)
        return per_file * (len(self.files) - 1)

    @property
    def file_to_keep(self) -> str:
        return self.files[0]

    @property
    def files_to_delete(self) -> list[str]:
        return self.files[1:]


@dataclass(slots=True, frozen=True)
class DuplicateStatistics:
    total_files: int
    duplicate_files: int
    unique_files: int
    space_wasted: int
    processing_time: float
    content_duplicate_groups: int
    name_duplicate_groups: int
    size_duplicate_groups: int

    @property
    def duplicate_percentage(self) -> float:
        if self.total_files <= 0:
            return 0.0
        return self.duplicate_files / self.total_files * 100


@dataclass(slots=True)
class DuplicateDetectionResults:
    content_duplicates: list[DuplicateGroup]
    name_duplicates: list[DuplicateGroup]
    size_duplicates: list[DuplicateGroup]
    total_files: int
    processing_time: float
    skipped: list[FileError] = field(default_factory=list)

    @property
    def all_groups(self) -> list[DuplicateGroup]:
        return [*self.content_duplicates, *self.name_duplicates, *self.size_duplicates]

    def statistics(self) -> DuplicateStatistics:
        groups = self.all_groups
        duplicate_files = len({path for group in groups for path in group.files})
        return DuplicateStatistics(
            total_files=self.total_files,
            duplicate_files=duplicate_files,
            unique_files=self.total_files - duplicate_files,
            space_wasted=sum(group.space_wasted for group in groups),
            processing_time=self.processing_time,
            content_duplicate_groups=len(self.content_duplicates),
            name_duplicate_groups=len(self.name_duplicates),
            size_duplicate_groups=len(self.size_duplicates),
        )


@dataclass(slots=True)
class ItemDuplicateGroup:
    checksum: str
    items: list[CleanableItem]

    @property
    def space_savings(self) -> int:
        # The first item is the one kept.
        return sum(item.size for item in self.items[1:])
