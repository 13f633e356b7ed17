"""Tests for custom exception hierarchy."""

import pytest

from s3copy.exceptions import (
    CopyError,
    InvalidArgumentError,
    NonRetryableError,
    NotFoundError,
    ObjectTooLargeError,
    SessionStateError,
    SizeTooSmallError,
)


class TestExceptionHierarchy:
    def test_copy_error_is_base(self):
        err = CopyError("test")
        assert isinstance(err, Exception)
        assert str(err) == "test"
        assert err.details == {}

    def test_copy_error_with_details(self):
        err = CopyError("test", details={"key": "value"})
        assert err.details == {"key": "value"}

    @pytest.mark.parametrize(
        "exc_class",
        [
            InvalidArgumentError,
            SizeTooSmallError,
            ObjectTooLargeError,
            NotFoundError,
            SessionStateError,
        ],
    )
    def test_non_retryable_subclasses(self, exc_class):
        err = exc_class("nope")
        assert isinstance(err, NonRetryableError)
        assert isinstance(err, CopyError)

    def test_invalid_argument_is_value_error(self):
        with pytest.raises(ValueError):
            raise InvalidArgumentError("bad descriptor")
