"""Multipart copy lifecycle: create, copy parts in parallel, complete or abort."""

import enum
import itertools
import logging
from concurrent.futures import FIRST_COMPLETED, ThreadPoolExecutor, wait
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from s3copy import s3_client as backend
from s3copy.exceptions import SessionStateError
from s3copy.locator import ObjectLocator
from s3copy.logger import get_logger, log_with_context
from s3copy.planner import CopyPlan, PartRange

logger = get_logger(__name__)


class SessionState(enum.Enum):
    CREATED = "CREATED"
    COPYING = "COPYING"
    ALL_PARTS_DONE = "ALL_PARTS_DONE"
    COMPLETED = "COMPLETED"
    ABORTING = "ABORTING"
    ABORTED = "ABORTED"


TERMINAL_STATES = (SessionState.COMPLETED, SessionState.ABORTED)


@dataclass
class MultipartUploadSession:
    upload_id: str
    destination: ObjectLocator
    completed_parts: Dict[int, str] = field(default_factory=dict)
    state: SessionState = SessionState.CREATED
    abort_error: Optional[BaseException] = None

    def ordered_parts(self) -> List[Dict[str, Any]]:
        return [
            {"ETag": self.completed_parts[part_number], "PartNumber": part_number}
            for part_number in sorted(self.completed_parts)
        ]


class MultipartCopy:
    """Drives one multipart copy to a single terminal outcome.

    Part copies are dispatched to a bounded thread pool. Only the
    coordinating thread (the one calling ``run``) records part results, so
    the session needs no lock. On the first failure no further parts are
    dispatched; in-flight parts settle, the upload is aborted once, and the
    original exception is re-raised.
    """

    def __init__(
        self,
        s3_client,
        destination: ObjectLocator,
        copy_source: str,
        plan: CopyPlan,
        max_concurrency: int = 10,
        complete_extra: Dict[str, Any] | None = None,
        operation_id: str = "",
    ):
        self.s3_client = s3_client
        self.destination = destination
        self.copy_source = copy_source
        self.plan = plan
        self.max_concurrency = max_concurrency
        self.complete_extra = dict(complete_extra or {})
        self.operation_id = operation_id
        self.session: Optional[MultipartUploadSession] = None

    def run(self) -> Dict[str, Any]:
        log_with_context(
            logger,
            logging.INFO,
            "Multipart copy started",
            operation_id=self.operation_id,
            copy_source=self.copy_source,
            destination=str(self.destination),
            total_size=self.plan.total_size,
            part_size=self.plan.part_size,
            part_count=self.plan.part_count,
        )
        upload_id = backend.create_multipart_upload(self.s3_client, self.destination)
        self.session = MultipartUploadSession(upload_id=upload_id, destination=self.destination)

        try:
            self._copy_parts()
            return self._complete()
        except Exception as e:
            self._abort(e)
            raise

    def _copy_part(self, part: PartRange) -> str:
        return backend.upload_part_copy(
            self.s3_client,
            self.destination,
            self.session.upload_id,
            part.part_number,
            self.copy_source,
            part.copy_source_range,
        )

    def _copy_parts(self) -> None:
        session = self.session
        session.state = SessionState.COPYING
        remaining = iter(self.plan.parts)
        failure: Optional[Exception] = None

        with ThreadPoolExecutor(max_workers=self.max_concurrency) as executor:
            in_flight = {
                executor.submit(self._copy_part, part): part
                for part in itertools.islice(remaining, self.max_concurrency)
            }
            while in_flight:
                done, _ = wait(in_flight, return_when=FIRST_COMPLETED)
                for future in done:
                    part = in_flight.pop(future)
                    try:
                        session.completed_parts[part.part_number] = future.result()
                    except Exception as e:
                        if failure is None:
                            failure = e
                        logger.warning(
                            "Part %d/%d failed for upload %s: %s",
                            part.part_number,
                            self.plan.part_count,
                            session.upload_id,
                            e,
                        )
                        continue
                    logger.info(
                        "Part %d/%d complete for %s",
                        part.part_number,
                        self.plan.part_count,
                        self.destination,
                    )
                if failure is None:
                    for part in itertools.islice(remaining, len(done)):
                        in_flight[executor.submit(self._copy_part, part)] = part

        if failure is not None:
            raise failure
        session.state = SessionState.ALL_PARTS_DONE

    def _complete(self) -> Dict[str, Any]:
        session = self.session
        if session.state is not SessionState.ALL_PARTS_DONE:
            raise SessionStateError(
                f"Cannot complete upload {session.upload_id} in state {session.state.value}",
                details={"upload_id": session.upload_id, "state": session.state.value},
            )
        result = backend.complete_multipart_upload(
            self.s3_client,
            self.destination,
            session.upload_id,
            session.ordered_parts(),
            extra=self.complete_extra,
        )
        session.state = SessionState.COMPLETED
        log_with_context(
            logger,
            logging.INFO,
            "Multipart copy complete",
            operation_id=self.operation_id,
            destination=str(self.destination),
            upload_id=session.upload_id,
            part_count=len(session.completed_parts),
        )
        return result

    def _abort(self, cause: Exception) -> None:
        session = self.session
        if session.state in TERMINAL_STATES or session.state is SessionState.ABORTING:
            # Upload already finished one way or the other; ``cause`` still propagates.
            log_with_context(
                logger,
                logging.ERROR,
                "Skipping abort of finished multipart upload",
                operation_id=self.operation_id,
                upload_id=session.upload_id,
                state=session.state.value,
                error=str(cause),
            )
            return
        session.state = SessionState.ABORTING
        log_with_context(
            logger,
            logging.WARNING,
            "Aborting multipart upload",
            operation_id=self.operation_id,
            destination=str(self.destination),
            upload_id=session.upload_id,
            error=str(cause),
        )
        try:
            backend.abort_multipart_upload(self.s3_client, self.destination, session.upload_id)
        except Exception as abort_error:
            session.abort_error = abort_error
            log_with_context(
                logger,
                logging.ERROR,
                "Failed to abort multipart upload",
                operation_id=self.operation_id,
                destination=str(self.destination),
                upload_id=session.upload_id,
                exc_info=True,
            )
        session.state = SessionState.ABORTED
