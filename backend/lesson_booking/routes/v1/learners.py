# backend/lesson_booking/routes/v1/learners.py
"""
Learner routes - API v1

Endpoints:
    POST /ensure - List an account's learners, creating a default one if none exist
"""

from typing import List, NoReturn

from fastapi import APIRouter, Body, Depends, HTTPException, status

from ...api.dependencies import get_learner_service
from ...core.exceptions import DomainException
from ...schemas.learner import LearnerEnsureRequest, LearnerResponse
from ...services.learner_service import LearnerService

router = APIRouter(tags=["learners"])


def handle_domain_exception(exc: DomainException) -> NoReturn:
    """Convert domain exceptions to HTTP exceptions."""
    if hasattr(exc, "to_http_exception"):
        raise exc.to_http_exception()
    raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))


@router.post("/ensure", response_model=List[LearnerResponse])
def ensure_learner(
    payload: LearnerEnsureRequest = Body(...),
    learner_service: LearnerService = Depends(get_learner_service),
) -> List[LearnerResponse]:
    try:
        learners = learner_service.ensure_learner(payload.parent_id, payload.name)
    except DomainException as e:
        handle_domain_exception(e)
    return [LearnerResponse.model_validate(learner) for learner in learners]
