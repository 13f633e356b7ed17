"""S3 client construction for copies whose source lives in another region."""

from typing import Optional

import boto3

from s3copy.logger import get_logger

logger = get_logger(__name__)


def client_for_region(region: str, session: Optional[boto3.session.Session] = None):
    """Create an S3 client bound to ``region``.

    Called at most once per copy operation; nothing is cached, so each call
    returns a fresh client using the session's (or default chain's) credentials.
    """
    session = session or boto3.session.Session()
    logger.debug("Creating S3 client for region %s", region)
    return session.client("s3", region_name=region)
