"""Configuration loaded from environment variables, and per-call copy options."""

import os
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

from s3copy.exceptions import InvalidArgumentError
from s3copy.planner import DEFAULT_PART_SIZE, MIN_PART_SIZE
from s3copy.s3_client import operation_parameters

DEFAULT_MAX_CONCURRENCY = 10

# Option names consumed by the orchestrator; everything else is passthrough.
RECOGNIZED_OPTIONS = frozenset(
    {
        "multipart_copy",
        "part_size",
        "min_part_size",
        "content_length",
        "copy_source_client",
        "copy_source_region",
        "max_concurrency",
    }
)


@dataclass(frozen=True)
class CopyConfig:
    """Process-wide copy defaults from environment variables."""

    part_size_bytes: int = DEFAULT_PART_SIZE
    max_concurrency: int = DEFAULT_MAX_CONCURRENCY
    region: str = ""

    @classmethod
    def from_env(cls) -> "CopyConfig":
        """Load configuration from environment variables."""
        return cls(
            part_size_bytes=int(
                os.environ.get("COPY_PART_SIZE_BYTES", str(DEFAULT_PART_SIZE))
            ),
            max_concurrency=int(
                os.environ.get("COPY_MAX_CONCURRENCY", str(DEFAULT_MAX_CONCURRENCY))
            ),
            region=os.environ.get(
                "AWS_REGION", os.environ.get("AWS_DEFAULT_REGION", "")
            ),
        )


@dataclass(frozen=True)
class CopyOptions:
    """Private, validated copy of the options a caller passed to a copy call."""

    multipart_copy: bool = False
    part_size: int = DEFAULT_PART_SIZE
    content_length: Optional[int] = None
    copy_source_client: Any = None
    copy_source_region: str = ""
    max_concurrency: int = DEFAULT_MAX_CONCURRENCY
    passthrough: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_mapping(
        cls,
        options: Optional[Mapping[str, Any]],
        config: Optional[CopyConfig] = None,
        extra: Optional[Mapping[str, Any]] = None,
    ) -> "CopyOptions":
        """Split caller options into recognized settings and passthrough fields.

        ``extra`` holds passthrough fields contributed by a descriptor mapping;
        explicit ``options`` win on conflict. Neither mapping is modified.
        """
        config = config or CopyConfig.from_env()
        options = dict(options or {})
        multipart_copy = bool(options.get("multipart_copy", False))

        part_size = options.get("part_size", options.get("min_part_size"))
        if part_size is None:
            part_size = config.part_size_bytes
        if not _is_int(part_size) or (multipart_copy and part_size < MIN_PART_SIZE):
            raise InvalidArgumentError(
                f"part_size must be an integer >= {MIN_PART_SIZE} bytes, got {part_size!r}",
                details={"part_size": part_size},
            )

        content_length = options.get("content_length")
        if content_length is not None and (not _is_int(content_length) or content_length < 0):
            raise InvalidArgumentError(
                f"content_length must be a non-negative integer, got {content_length!r}",
                details={"content_length": content_length},
            )

        max_concurrency = options.get("max_concurrency", config.max_concurrency)
        if not _is_int(max_concurrency) or max_concurrency < 1:
            raise InvalidArgumentError(
                f"max_concurrency must be a positive integer, got {max_concurrency!r}",
                details={"max_concurrency": max_concurrency},
            )

        passthrough = dict(extra or {})
        passthrough.update(
            (name, value)
            for name, value in options.items()
            if name not in RECOGNIZED_OPTIONS
        )

        if multipart_copy:
            # Only the complete call carries passthrough fields on a multipart copy.
            unsupported = sorted(set(passthrough) - operation_parameters("CompleteMultipartUpload"))
            if unsupported:
                raise InvalidArgumentError(
                    f"{', '.join(unsupported)} cannot be applied to a multipart copy",
                    details={"unsupported_options": unsupported},
                )

        return cls(
            multipart_copy=multipart_copy,
            part_size=part_size,
            content_length=content_length,
            copy_source_client=options.get("copy_source_client"),
            copy_source_region=options.get("copy_source_region") or "",
            max_concurrency=max_concurrency,
            passthrough=passthrough,
        )


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)
