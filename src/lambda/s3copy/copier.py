"""Public server-side copy entry points: ``copy_to`` and ``copy_from``."""

import logging
import uuid
from typing import Any, Callable, Dict, Mapping, Optional

from s3copy import s3_client as backend
from s3copy.clients import client_for_region
from s3copy.config import CopyConfig, CopyOptions
from s3copy.exceptions import InvalidArgumentError
from s3copy.locator import ObjectLocator, resolve, split_descriptor
from s3copy.logger import get_logger, log_with_context
from s3copy.multipart import MultipartCopy
from s3copy.planner import plan
from s3copy.sizing import resolve_size

logger = get_logger(__name__)


def copy_to(
    s3_client,
    obj: Any,
    target: Any,
    options: Optional[Mapping[str, Any]] = None,
    config: Optional[CopyConfig] = None,
    client_factory: Callable = client_for_region,
) -> Dict[str, Any]:
    """Copy ``obj`` to ``target`` server-side.

    ``obj`` and ``target`` may each be a ``"bucket/key"`` string, a
    bucket/key mapping, or an object handle. Extra fields of a ``target``
    mapping are forwarded to the copy request like passthrough options.

    Example::

        copy_to(s3, "src-bucket/data/file.bin", {"bucket": "dst", "key": "file.bin"},
                {"multipart_copy": True, "RequestPayer": "requester"})
    """
    source = resolve(obj)
    destination, extra = split_descriptor(target)
    return _copy(s3_client, source, destination, options, extra, config, client_factory)


def copy_from(
    s3_client,
    obj: Any,
    source: Any = None,
    options: Optional[Mapping[str, Any]] = None,
    config: Optional[CopyConfig] = None,
    client_factory: Callable = client_for_region,
) -> Dict[str, Any]:
    """Copy ``source`` into ``obj`` server-side.

    When ``source`` is omitted, ``options["copy_source"]`` is used as the
    source wire string and is not forwarded to the backend as a field.
    """
    destination = resolve(obj)
    if source is None:
        if not options or "copy_source" not in options:
            raise InvalidArgumentError("copy_from requires a source or a copy_source option")
        source = options["copy_source"]
        options = {name: value for name, value in options.items() if name != "copy_source"}
    elif options and "copy_source" in options:
        raise InvalidArgumentError("pass either a source or a copy_source option, not both")
    source_locator, extra = split_descriptor(source)
    return _copy(s3_client, source_locator, destination, options, extra, config, client_factory)


def _copy(
    s3_client,
    source: ObjectLocator,
    destination: ObjectLocator,
    options: Optional[Mapping[str, Any]],
    extra: Dict[str, Any],
    config: Optional[CopyConfig],
    client_factory: Callable,
) -> Dict[str, Any]:
    copy_options = CopyOptions.from_mapping(options, config=config, extra=extra)
    operation_id = uuid.uuid4().hex
    strategy = "multipart" if copy_options.multipart_copy else "plain"

    log_with_context(
        logger,
        logging.INFO,
        "Copy started",
        operation_id=operation_id,
        copy_source=source.copy_source,
        destination=str(destination),
        strategy=strategy,
    )

    if not copy_options.multipart_copy:
        return backend.copy_object(
            s3_client,
            destination,
            source.copy_source,
            extra=copy_options.passthrough,
        )

    total_size = resolve_size(source, copy_options, s3_client, client_factory)
    copy_plan = plan(total_size, copy_options.part_size)
    return MultipartCopy(
        s3_client,
        destination,
        source.copy_source,
        copy_plan,
        max_concurrency=copy_options.max_concurrency,
        complete_extra=copy_options.passthrough,
        operation_id=operation_id,
    ).run()
