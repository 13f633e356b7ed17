"""ServerSideCopy Lambda: copies one object server-side, plain or multipart."""

import logging

import boto3

from s3copy.config import CopyConfig
from s3copy.copier import copy_from
from s3copy.logger import get_logger, log_with_context

logger = get_logger(__name__)


def handler(event: dict, context) -> dict:
    """Copy a single object from source to destination.

    Input event:
        {
            "source": "source-bucket/path/to/object.bin" | {"bucket": ..., "key": ...},
            "destination": "destination-bucket/path/to/object.bin" | {...},
            "options": {"multipart_copy": true, "part_size": 52428800, ...}
        }

    Returns:
        {
            "status": "SUCCESS",
            "source": "...",
            "destination": "...",
            "strategy": "plain" | "multipart",
        }
    """
    request_id = getattr(context, "aws_request_id", "local")
    config = CopyConfig.from_env()

    source = event["source"]
    destination = event["destination"]
    options = event.get("options") or {}
    strategy = "multipart" if options.get("multipart_copy") else "plain"

    log_with_context(
        logger,
        logging.INFO,
        "ServerSideCopy started",
        operation_id=request_id,
        source=source,
        destination=destination,
        strategy=strategy,
    )

    s3 = boto3.client("s3", region_name=config.region or None)

    try:
        copy_from(s3, destination, source, options, config=config)
    except Exception as e:
        log_with_context(
            logger,
            logging.ERROR,
            "ServerSideCopy failed",
            operation_id=request_id,
            source=source,
            destination=destination,
            error=str(e),
        )
        raise

    log_with_context(
        logger,
        logging.INFO,
        "ServerSideCopy complete",
        operation_id=request_id,
        source=source,
        destination=destination,
        strategy=strategy,
    )

    return {
        "status": "SUCCESS",
        "source": source,
        "destination": destination,
        "strategy": strategy,
    }
