# lms_media/services/multipart.py
"""
Upload session orchestrator voor multipart uploads.

De client uploadt de bytes zelf rechtstreeks naar de store; deze service
start de sessie, tekent per part een kortlevende URL, stuurt het manifest
door bij completion en breekt af op verzoek. Er wordt hier geen sessie-state
bijgehouden: de store is de enige eigenaar.
"""
from __future__ import annotations

import re
from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum
from time import perf_counter
from typing import Any, Dict, Iterable, List, Optional, Tuple

from botocore.exceptions import BotoCoreError, ClientError

from lms_media.aws.s3_errors import classify_store_error, is_no_such_upload
from lms_media.core.errors import InvalidRequest, UpstreamFailure
from lms_media.core.logging_config import logger
from lms_media.core.settings import settings
from lms_media.observability.metrics import (
    dropped_parts_counter,
    latency_hist,
    multipart_counter,
)
from lms_media.services.store import ObjectStore

_DIGITS = re.compile(r"[0-9]+")
_PART_NUMBER_FIELDS = ("partNumber", "part_number", "PartNumber")
_DIGEST_FIELDS = ("digest", "etag", "eTag", "ETag")


class SessionState(str, Enum):
    # Alleen documentatie: de echte state leeft in de store
    INITIATED = "Initiated"
    COMPLETED = "Completed"
    ABORTED = "Aborted"


@dataclass(frozen=True)
class InitiateResult:
    upload_id: str
    bucket: str
    key: str


@dataclass(frozen=True)
class PartAuthorization:
    part_number: int
    url: str
    expires_in: int


@dataclass(frozen=True)
class CompleteResult:
    location: str
    bucket: str
    key: str


@dataclass(frozen=True)
class AbortResult:
    aborted: bool
    outcome: str  # "aborted" | "noop"


def coerce_part_number(value: Any) -> Optional[int]:
    """Positive int, or None. Accepts ints and decimal-digit strings; bools and floats are rejected."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        number = value
    elif isinstance(value, str) and _DIGITS.fullmatch(value.strip()):
        try:
            number = int(value.strip())
        except ValueError:
            # langer dan de int-conversielimiet; nooit een geldig part number
            return None
    else:
        return None
    return number if number > 0 else None


def _first_present(entry: Dict[str, Any], fields: Iterable[str]) -> Any:
    for field in fields:
        if entry.get(field) is not None:
            return entry[field]
    return None


def normalize_parts(parts: Iterable[Any]) -> Tuple[List[Dict[str, Any]], int]:
    """
    Zet client-parts om naar [{"ETag", "PartNumber"}], oplopend op PartNumber.

    Kapotte entries (geen digest, part number <= 0 of geen integer) worden
    overgeslagen in plaats van de hele request te laten falen. Hetzelfde
    part number twee keer met dezelfde digest telt als een entry; met een
    andere digest is het manifest tegenstrijdig en volgt InvalidRequest.
    Retourneert (geldige parts, aantal gedropte entries).
    """
    by_number: Dict[int, str] = {}
    dropped = 0
    for entry in parts:
        if not isinstance(entry, dict):
            dropped += 1
            continue
        digest = _first_present(entry, _DIGEST_FIELDS)
        number = coerce_part_number(_first_present(entry, _PART_NUMBER_FIELDS))
        if not isinstance(digest, str) or not digest.strip() or number is None:
            dropped += 1
            continue
        # ETag exact doorgeven zoals de client hem kreeg (incl. quotes)
        seen = by_number.get(number)
        if seen is None:
            by_number[number] = digest
        elif seen != digest:
            raise InvalidRequest(
                f"partNumber {number} listed twice with different digests",
                code="DuplicatePartNumber",
            )
    valid = [{"ETag": by_number[n], "PartNumber": n} for n in sorted(by_number)]
    return valid, dropped


def _missing(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _require_text(message: str, **fields: Any) -> None:
    if any(_missing(v) for v in fields.values()):
        raise InvalidRequest(message, code="MissingField")
    for name, value in fields.items():
        if not isinstance(value, str):
            raise InvalidRequest(f"{name} must be a string", code="InvalidField")


@contextmanager
def _track(operation: str):
    t0 = perf_counter()
    outcome = {"result": "success"}
    try:
        yield outcome
    except InvalidRequest:
        outcome["result"] = "invalid"
        raise
    except UpstreamFailure:
        outcome["result"] = "upstream"
        raise
    except Exception:
        outcome["result"] = "error"
        raise
    finally:
        multipart_counter.labels(operation=operation, result=outcome["result"]).inc()
        latency_hist.labels(operation=operation).observe(perf_counter() - t0)


class MultipartOrchestrator:
    """Stateless mediator between an upload client and an ObjectStore."""

    def __init__(
        self,
        store: ObjectStore,
        *,
        expires_in: Optional[int] = None,
        default_content_type: Optional[str] = None,
    ):
        self.store = store
        self.expires_in = expires_in or settings.presign_expiry_sec
        self.default_content_type = default_content_type or settings.default_content_type

    @property
    def bucket(self) -> str:
        return self.store.bucket

    def initiate(self, key: Any, content_type: Any = None) -> InitiateResult:
        with _track("initiate"):
            _require_text("key is required", key=key)
            if _missing(content_type):
                content_type = self.default_content_type
            elif not isinstance(content_type, str):
                raise InvalidRequest("contentType must be a string", code="InvalidField")

            try:
                upload_id = self.store.create_multipart_upload(key, content_type)
            except (ClientError, BotoCoreError) as e:
                raise classify_store_error(e, operation="initiate", key=key) from e

            logger.info(
                "multipart_initiated",
                key=key,
                upload_id=upload_id,
                content_type=content_type,
                bucket=self.bucket,
            )
            return InitiateResult(upload_id=upload_id, bucket=self.bucket, key=key)

    def authorize_part(self, key: Any, upload_id: Any, part_number: Any) -> PartAuthorization:
        with _track("sign_part"):
            if _missing(part_number):
                raise InvalidRequest("key, uploadId, partNumber required", code="MissingField")
            _require_text("key, uploadId, partNumber required", key=key, uploadId=upload_id)
            number = coerce_part_number(part_number)
            if number is None:
                raise InvalidRequest(
                    "partNumber must be a positive integer",
                    code="InvalidPartNumber",
                )
            return self._sign(key, upload_id, number)

    def authorize_parts(self, key: Any, upload_id: Any, part_numbers: Any) -> List[PartAuthorization]:
        with _track("sign_parts"):
            _require_text("key, uploadId, partNumbers required", key=key, uploadId=upload_id)
            if not isinstance(part_numbers, list) or not part_numbers:
                raise InvalidRequest("partNumbers must be a non-empty list", code="MissingField")

            numbers: List[int] = []
            for raw in part_numbers:
                number = coerce_part_number(raw)
                if number is None:
                    raise InvalidRequest(
                        f"partNumber must be a positive integer (got {raw!r})",
                        code="InvalidPartNumber",
                    )
                if number not in numbers:
                    numbers.append(number)
            return [self._sign(key, upload_id, n) for n in numbers]

    def _sign(self, key: str, upload_id: str, part_number: int) -> PartAuthorization:
        try:
            url = self.store.presign_upload_part(key, upload_id, part_number, self.expires_in)
        except (ClientError, BotoCoreError) as e:
            err = classify_store_error(e, operation="sign_part", key=key, upload_id=upload_id)
            # Tekenen is lokaal; elke fout hier is een config-probleem aan onze kant
            raise UpstreamFailure(
                err.message,
                code=err.code or "SigningFailed",
                hint="Controleer de signing credentials (MINIO_ACCESS_KEY/MINIO_SECRET_KEY).",
                operation="sign_part",
            ) from e

        logger.debug(
            "multipart_part_signed",
            key=key,
            upload_id=upload_id,
            part_number=part_number,
            expires_in=self.expires_in,
        )
        return PartAuthorization(part_number=part_number, url=url, expires_in=self.expires_in)

    def complete(self, key: Any, upload_id: Any, parts: Any) -> CompleteResult:
        with _track("complete"):
            _require_text("key, uploadId and parts[] required", key=key, uploadId=upload_id)
            if not isinstance(parts, list) or not parts:
                raise InvalidRequest("key, uploadId and parts[] required", code="MissingField")

            valid, dropped = normalize_parts(parts)
            if dropped:
                dropped_parts_counter.inc(dropped)
                logger.warning(
                    "multipart_parts_dropped",
                    key=key,
                    upload_id=upload_id,
                    dropped=dropped,
                    kept=len(valid),
                )
            if not valid:
                raise InvalidRequest(
                    "parts[] contains no valid (partNumber, digest) entries",
                    code="NoValidParts",
                )

            try:
                location = self.store.complete_multipart_upload(key, upload_id, valid)
            except (ClientError, BotoCoreError) as e:
                raise classify_store_error(
                    e, operation="complete", key=key, upload_id=upload_id
                ) from e

            logger.info(
                "multipart_completed",
                key=key,
                upload_id=upload_id,
                parts=len(valid),
                location=location,
            )
            return CompleteResult(location=location, bucket=self.bucket, key=key)

    def abort(self, key: Any, upload_id: Any) -> AbortResult:
        with _track("abort") as outcome:
            _require_text("key and uploadId required", key=key, uploadId=upload_id)
            try:
                self.store.abort_multipart_upload(key, upload_id)
            except (ClientError, BotoCoreError) as e:
                if not is_no_such_upload(e):
                    raise classify_store_error(
                        e, operation="abort", key=key, upload_id=upload_id
                    ) from e
                # Niets meer in flight: zelfde netto effect als een geslaagde abort
                outcome["result"] = "noop"
                logger.info("multipart_abort_noop", key=key, upload_id=upload_id)
                return AbortResult(aborted=True, outcome="noop")

            logger.info("multipart_aborted", key=key, upload_id=upload_id)
            return AbortResult(aborted=True, outcome="aborted")
