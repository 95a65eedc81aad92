from __future__ import annotations

import base64
import binascii
import logging
from concurrent.futures import Executor, Future
from datetime import datetime
from pathlib import Path
from typing import Optional, Protocol, Union

from ..common.datetime_utils import epoch_millis
from ..core.constants import PHOTO_FILENAME_TEMPLATE
from ..core.exceptions import BackendUnavailableError, ValidationError
from .model import AttendanceRecord
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)

PhotoPayload = Union[bytes, str]


class ObjectStorage(Protocol):
    def upload(self, filename: str, data: bytes) -> str:
        """Store `data` and return its path; raise on failure."""

        raise NotImplementedError


class LocalObjectStorage:
    """Object storage backed by a local directory (one bucket = one folder)."""

    def __init__(self, base_dir: Union[str, Path]):
        self._base_dir = Path(base_dir)

    def upload(self, filename: str, data: bytes) -> str:
        name = Path(filename).name
        if not name or name != filename:
            raise ValidationError(f"Invalid object name {filename!r}")

        target = self._base_dir / name
        try:
            self._base_dir.mkdir(parents=True, exist_ok=True)
            # x: an existing object is never overwritten
            with target.open("xb") as fh:
                fh.write(data)
        except OSError as exc:
            raise BackendUnavailableError(f"Could not store {name}: {exc}") from exc
        return name


def decode_photo(payload: PhotoPayload) -> bytes:
    """Accept raw bytes, a base64 string, or a `data:image/...;base64,` URL."""

    if isinstance(payload, (bytes, bytearray)):
        data = bytes(payload)
    else:
        text = payload.strip()
        if text.startswith("data:"):
            _, _, text = text.partition(",")
        try:
            data = base64.b64decode(text, validate=True)
        except (binascii.Error, ValueError) as exc:
            raise ValidationError("Photo is not valid base64") from exc
    if not data:
        raise ValidationError("Photo is empty")
    return data


def photo_filename(employee_ref: str, at: datetime) -> str:
    return PHOTO_FILENAME_TEMPLATE.format(employee_ref=employee_ref, epoch_ms=epoch_millis(at))


class PhotoAttacher:
    """Best-effort photo attachment for a check-in that is already persisted.

    Upload or bookkeeping failures are logged and swallowed; they never
    undo or fail the check-in. With an executor the upload runs in the
    background and `attach` returns immediately.
    """

    def __init__(
        self,
        storage: ObjectStorage,
        attendance: AttendanceRepository,
        *,
        executor: Optional[Executor] = None,
    ):
        self._storage = storage
        self._attendance = attendance
        self._executor = executor

    def attach(self, record: AttendanceRecord, photo: PhotoPayload, *, now: datetime) -> Optional[str]:
        filename = photo_filename(record.employee_ref, now)
        if self._executor is None:
            return self._upload(record, photo, filename)

        try:
            future = self._executor.submit(self._upload, record, photo, filename)
        except RuntimeError:
            logger.exception("photo upload could not be scheduled record=%s", record.record_id)
            return None
        future.add_done_callback(self._log_background_failure)
        return None

    def _upload(self, record: AttendanceRecord, photo: PhotoPayload, filename: str) -> Optional[str]:
        try:
            data = decode_photo(photo)
            path = self._storage.upload(filename, data)
            self._attendance.set_photo_ref(record_id=record.record_id, photo_ref=path)
        except Exception:
            logger.warning(
                "photo upload failed record=%s employee=%s file=%s",
                record.record_id,
                record.employee_ref,
                filename,
                exc_info=True,
            )
            return None

        logger.info("photo uploaded record=%s path=%s", record.record_id, path)
        return path

    @staticmethod
    def _log_background_failure(future: Future) -> None:
        if future.cancelled():
            logger.warning("background photo upload cancelled")
            return
        exc = future.exception()
        if exc is not None:
            logger.error("background photo upload crashed", exc_info=exc)
