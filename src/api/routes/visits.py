"""Multi-visit validation and generation endpoints."""

from fastapi import APIRouter, Depends, Request

from api.dependencies import verify_api_key
from api.logging import logged_request
from api.models.requests import GenerateVisitsRequest, RecurrenceConfigIn
from api.models.responses import (
    CalendarEntryOut,
    ConflictOut,
    GeneratedSummaryOut,
    GenerateVisitsResponse,
    ValidationResponse,
)
from services import multi_visit

router = APIRouter(prefix="/v1/visits")


@router.post("/validate", response_model=ValidationResponse)
async def validate_visits_endpoint(
    request: Request,
    body: RecurrenceConfigIn,
    _api_key: str = Depends(verify_api_key),
):
    """Every problem with a booking config, without generating anything."""
    with logged_request(request, "/v1/visits/validate") as request_log:
        errors = multi_visit.validate(body.to_config())
        request_log.item_count = len(errors)
        return ValidationResponse(valid=not errors, errors=errors)


@router.post("/generate", response_model=GenerateVisitsResponse)
async def generate_visits_endpoint(
    request: Request,
    body: GenerateVisitsRequest,
    _api_key: str = Depends(verify_api_key),
):
    """
    Generate entries for a booking and check them against existing entries.

    Invalid configs return 422 with one detail per problem.
    """
    with logged_request(request, "/v1/visits/generate") as request_log:
        templates = [t.to_template() for t in body.templates]
        generated = multi_visit.generate(body.config.to_config(), templates)
        conflicts = multi_visit.detect_conflicts([e.to_entry() for e in body.existing], generated)

        request_log.item_count = len(generated)
        for conflict in conflicts:
            request_log.details.append(
                ("conflict", f"{conflict.generated.title} overlaps {conflict.existing.title}")
            )

        return GenerateVisitsResponse(
            entries=[CalendarEntryOut.model_validate(e) for e in generated],
            conflicts=[ConflictOut.model_validate(c) for c in conflicts],
            summary=GeneratedSummaryOut.model_validate(multi_visit.summarize_generated(generated)),
            preview=multi_visit.format_preview(generated),
        )
