from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from starlette.status import HTTP_400_BAD_REQUEST

from ingress_admission.admission.errors import AdmissionError
from ingress_admission.admission.plugin import IngressAdmission
from ingress_admission.api.deps import gate_from_app
from ingress_admission.api.schemas import AdmissionReview, review_response
from ingress_admission.observability.logging import get_logger
from ingress_admission.observability.middleware import bind_admission_context

router = APIRouter(prefix="/validate", tags=["admission"])

log = get_logger(__name__)


@router.post(
    "/ingresses",
    response_model=AdmissionReview,
    response_model_by_alias=True,
    response_model_exclude_none=True,
)
async def validate_ingress(
    review: AdmissionReview,
    gate: IngressAdmission = Depends(gate_from_app),
) -> AdmissionReview:
    if review.request is None:
        raise HTTPException(status_code=HTTP_400_BAD_REQUEST, detail="AdmissionReview has no request")

    req = review.request.to_domain()
    bind_admission_context(req)

    error: AdmissionError | None = None
    try:
        await gate.admit(req)
    except AdmissionError as e:
        error = e

    log.info("admission_reviewed", allowed=error is None)
    return review_response(api_version=review.api_version, uid=req.uid, error=error)
