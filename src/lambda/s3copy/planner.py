"""Byte-range planning for multipart copies."""

import math
from dataclasses import dataclass
from typing import Tuple

from s3copy.exceptions import (
    InvalidArgumentError,
    ObjectTooLargeError,
    SizeTooSmallError,
)

# Smallest part S3 accepts for any part but the last (5 MB)
MIN_PART_SIZE = 5 * 1024 * 1024

# Default part size for multipart copy (50 MB)
DEFAULT_PART_SIZE = 50 * 1024 * 1024

# Max object size for S3 (5 TB)
MAX_OBJECT_SIZE = 5 * 1024 * 1024 * 1024 * 1024

# Max parts in a single multipart upload
MAX_PARTS = 10_000


@dataclass(frozen=True)
class PartRange:
    """One part of a multipart copy; ``range_end`` is inclusive."""

    part_number: int
    range_start: int
    range_end: int

    @property
    def copy_source_range(self) -> str:
        return f"bytes={self.range_start}-{self.range_end}"

    @property
    def size(self) -> int:
        return self.range_end - self.range_start + 1


@dataclass(frozen=True)
class CopyPlan:
    total_size: int
    part_size: int
    parts: Tuple[PartRange, ...]

    @property
    def part_count(self) -> int:
        return len(self.parts)


def plan(total_size: int, part_size: int = DEFAULT_PART_SIZE) -> CopyPlan:
    """Split ``total_size`` bytes into contiguous, ascending part ranges.

    Part n spans [(n-1) * part_size, min(n * part_size, total_size) - 1].
    """
    if part_size < MIN_PART_SIZE:
        raise InvalidArgumentError(
            f"part_size {part_size} is smaller than 5MB",
            details={"part_size": part_size, "min_part_size": MIN_PART_SIZE},
        )
    if total_size < MIN_PART_SIZE:
        raise SizeTooSmallError(
            f"unable to multipart copy objects smaller than 5MB, object is {total_size} bytes",
            details={"total_size": total_size, "min_part_size": MIN_PART_SIZE},
        )
    if total_size > MAX_OBJECT_SIZE:
        raise ObjectTooLargeError(
            f"Object size {total_size} exceeds max {MAX_OBJECT_SIZE}",
            details={"total_size": total_size},
        )

    num_parts = math.ceil(total_size / part_size)
    if num_parts > MAX_PARTS:
        raise ObjectTooLargeError(
            f"Object size {total_size} needs {num_parts} parts of {part_size} bytes, "
            f"max is {MAX_PARTS}; use a larger part_size",
            details={"total_size": total_size, "part_size": part_size},
        )

    parts = tuple(
        PartRange(
            part_number=part_num,
            range_start=(part_num - 1) * part_size,
            range_end=min(part_num * part_size, total_size) - 1,
        )
        for part_num in range(1, num_parts + 1)
    )
    return CopyPlan(total_size=total_size, part_size=part_size, parts=parts)
