"""Normalize copy source/target descriptors into ``ObjectLocator`` values.

Accepted shapes:

* wire string ``"bucket/key[?versionId=id]"``, already URL-encoded
* mapping with ``bucket``/``key``/``version_id`` (or boto3 ``CopySource``
  casing ``Bucket``/``Key``/``VersionId``)
* any handle exposing bucket/key/version accessors, e.g. boto3 ``s3.Object``,
  ``s3.ObjectSummary`` and ``s3.ObjectVersion`` resources
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Tuple
from urllib.parse import quote, unquote

from s3copy.exceptions import InvalidArgumentError

VERSION_ID_SUFFIX = "?versionId="

_MAPPING_FIELDS = {
    "bucket": ("bucket", "Bucket"),
    "key": ("key", "Key"),
    "version_id": ("version_id", "VersionId"),
}


@dataclass(frozen=True)
class ObjectLocator:
    bucket: str
    key: str
    version_id: Optional[str] = None
    # Key exactly as it appeared in a wire string; never re-encoded.
    encoded_key: Optional[str] = field(default=None, compare=False, repr=False)
    # Client bound to the handle this locator was resolved from, if any.
    client: Any = field(default=None, compare=False, repr=False)

    @property
    def copy_source(self) -> str:
        """``bucket/key[?versionId=id]`` value for CopySource parameters."""
        key = self.encoded_key if self.encoded_key is not None else quote(self.key, safe="/")
        source = f"{self.bucket}/{key}"
        if self.version_id:
            source += f"{VERSION_ID_SUFFIX}{self.version_id}"
        return source

    def __str__(self) -> str:
        return f"s3://{self.bucket}/{self.key}"


def _from_string(value: str) -> ObjectLocator:
    bucket, sep, remainder = value.partition("/")
    encoded_key, _, version_id = remainder.partition(VERSION_ID_SUFFIX)
    if not sep or not bucket or not encoded_key:
        raise InvalidArgumentError(
            f"expected 'bucket/key[?versionId=id]', got {value!r}",
            details={"value": value},
        )
    return ObjectLocator(
        bucket=bucket,
        key=unquote(encoded_key),
        version_id=version_id or None,
        encoded_key=encoded_key,
    )


def _lookup(mapping: Mapping[str, Any], name: str) -> Any:
    for candidate in _MAPPING_FIELDS[name]:
        if mapping.get(candidate) is not None:
            return mapping[candidate]
    return None


def _from_mapping(value: Mapping[str, Any]) -> ObjectLocator:
    return _structured(
        _lookup(value, "bucket"),
        _lookup(value, "key"),
        _lookup(value, "version_id"),
        value,
    )


def _resource_identifiers(value: Any) -> Optional[list]:
    identifiers = getattr(getattr(value, "meta", None), "identifiers", None)
    return identifiers if isinstance(identifiers, list) else None


def _from_resource(value: Any, identifiers: list) -> ObjectLocator:
    # Only identifiers are read: other boto3 resource attributes trigger a load.
    bucket = value.bucket_name if "bucket_name" in identifiers else None
    key = version_id = None
    if "key" in identifiers:
        key = value.key
    elif "object_key" in identifiers:
        # ObjectVersion: (bucket_name, object_key, id)
        key = value.object_key
        version_id = value.id if "id" in identifiers else None
    return _structured(bucket, key, version_id, value, client=value.meta.client)


def _from_handle(value: Any) -> ObjectLocator:
    identifiers = _resource_identifiers(value)
    if identifiers is not None:
        return _from_resource(value, identifiers)
    bucket = getattr(value, "bucket_name", None) or getattr(value, "bucket", None)
    key = getattr(value, "key", None) or getattr(value, "object_key", None)
    version_id = getattr(value, "version_id", None)
    return _structured(bucket, key, version_id, value, client=getattr(value, "client", None))


def _structured(bucket, key, version_id, value, client=None) -> ObjectLocator:
    if not isinstance(bucket, str) or not bucket or not isinstance(key, str) or not key:
        raise InvalidArgumentError(
            f"expected a bucket and key, got {value!r}",
            details={"value": repr(value)},
        )
    if version_id is not None and not isinstance(version_id, str):
        raise InvalidArgumentError(
            f"version id must be a string, got {version_id!r}",
            details={"value": repr(value)},
        )
    return ObjectLocator(bucket=bucket, key=key, version_id=version_id or None, client=client)


def _is_handle(value: Any) -> bool:
    if _resource_identifiers(value) is not None:
        return True
    has_bucket = hasattr(value, "bucket_name") or hasattr(value, "bucket")
    has_key = hasattr(value, "key") or hasattr(value, "object_key")
    return has_bucket and has_key


def resolve(value: Any) -> ObjectLocator:
    """Resolve a wire string, mapping or handle into an ``ObjectLocator``."""
    if isinstance(value, ObjectLocator):
        return value
    if isinstance(value, str):
        return _from_string(value)
    if isinstance(value, Mapping):
        return _from_mapping(value)
    if _is_handle(value):
        return _from_handle(value)
    raise InvalidArgumentError(
        f"expected a 'bucket/key' string, a bucket/key mapping or an object handle, "
        f"got {type(value).__name__}",
        details={"value": repr(value)},
    )


def split_descriptor(value: Any) -> Tuple[ObjectLocator, Dict[str, Any]]:
    """Resolve ``value`` and return any non-location mapping fields alongside it.

    A target mapping like ``{"bucket": "b", "key": "k", "ContentType": "text/plain"}``
    carries copy options next to the location; those are returned as passthrough.
    """
    locator = resolve(value)
    if not isinstance(value, Mapping):
        return locator, {}
    location_keys = {name for names in _MAPPING_FIELDS.values() for name in names}
    extra = {name: item for name, item in value.items() if name not in location_keys}
    return locator, extra
