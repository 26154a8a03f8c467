# lms_media/routers/multipart.py
from fastapi import APIRouter, Depends

from lms_media.auth.deps import Identity, require_identity
from lms_media.dependencies import get_orchestrator
from lms_media.schemas.uploads_multipart import (
    MultipartAbortIn,
    MultipartAbortOut,
    MultipartCompleteIn,
    MultipartCompleteOut,
    MultipartInitiateIn,
    MultipartInitiateOut,
    MultipartSignPartIn,
    MultipartSignPartOut,
    MultipartSignPartsIn,
    MultipartSignPartsOut,
)
from lms_media.services.multipart import MultipartOrchestrator, PartAuthorization

router = APIRouter(prefix="/api/multipart", tags=["multipart"])


def _part_out(auth: PartAuthorization) -> MultipartSignPartOut:
    return MultipartSignPartOut(
        url=auth.url, part_number=auth.part_number, expires_in=auth.expires_in
    )


@router.post("/initiate", response_model=MultipartInitiateOut)
def initiate(
    body: MultipartInitiateIn,
    identity: Identity = Depends(require_identity),
    orchestrator: MultipartOrchestrator = Depends(get_orchestrator),
) -> MultipartInitiateOut:
    res = orchestrator.initiate(body.target_key, body.content_type)
    return MultipartInitiateOut(upload_id=res.upload_id, bucket=res.bucket, key=res.key)


@router.post("/sign-part", response_model=MultipartSignPartOut)
def sign_part(
    body: MultipartSignPartIn,
    identity: Identity = Depends(require_identity),
    orchestrator: MultipartOrchestrator = Depends(get_orchestrator),
) -> MultipartSignPartOut:
    return _part_out(orchestrator.authorize_part(body.key, body.upload_id, body.part_number))


@router.post("/sign-parts", response_model=MultipartSignPartsOut)
def sign_parts(
    body: MultipartSignPartsIn,
    identity: Identity = Depends(require_identity),
    orchestrator: MultipartOrchestrator = Depends(get_orchestrator),
) -> MultipartSignPartsOut:
    auths = orchestrator.authorize_parts(body.key, body.upload_id, body.part_numbers)
    return MultipartSignPartsOut(parts=[_part_out(a) for a in auths])


@router.post("/complete", response_model=MultipartCompleteOut)
def complete(
    body: MultipartCompleteIn,
    identity: Identity = Depends(require_identity),
    orchestrator: MultipartOrchestrator = Depends(get_orchestrator),
) -> MultipartCompleteOut:
    res = orchestrator.complete(body.key, body.upload_id, body.parts)
    return MultipartCompleteOut(location=res.location, bucket=res.bucket, key=res.key)


@router.post("/abort", response_model=MultipartAbortOut)
def abort(
    body: MultipartAbortIn,
    identity: Identity = Depends(require_identity),
    orchestrator: MultipartOrchestrator = Depends(get_orchestrator),
) -> MultipartAbortOut:
    res = orchestrator.abort(body.key, body.upload_id)
    return MultipartAbortOut(aborted=res.aborted, outcome=res.outcome)
