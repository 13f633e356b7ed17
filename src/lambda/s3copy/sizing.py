"""Source object size resolution."""

from typing import Callable

from s3copy.config import CopyOptions
from s3copy.locator import ObjectLocator
from s3copy.logger import get_logger
from s3copy.s3_client import head_object

logger = get_logger(__name__)


def source_client(
    source: ObjectLocator,
    options: CopyOptions,
    default_client,
    client_factory: Callable,
):
    """Pick the client that can see the source object.

    Priority: explicit ``copy_source_client``; a client built for
    ``copy_source_region``; the client of the handle the source came from;
    the operation's default client.
    """
    if options.copy_source_client is not None:
        return options.copy_source_client
    if options.copy_source_region:
        return client_factory(options.copy_source_region)
    if source.client is not None:
        return source.client
    return default_client


def resolve_size(
    source: ObjectLocator,
    options: CopyOptions,
    default_client,
    client_factory: Callable,
) -> int:
    """Return the source object's byte length."""
    if options.content_length is not None:
        return options.content_length

    client = source_client(source, options, default_client, client_factory)
    logger.info("Resolving size of %s", source)
    response = head_object(client, source)
    return response["ContentLength"]
