"""Calendar entry classification endpoint."""

from fastapi import APIRouter, Depends, Request

from api.dependencies import verify_api_key
from api.logging import logged_request
from api.models.requests import ClassifyRequest
from api.models.responses import EnrichedEntryOut
from services.classifier import classify_all

router = APIRouter(prefix="/v1")


@router.post("/entries/classify", response_model=list[EnrichedEntryOut])
async def classify_entries_endpoint(
    request: Request,
    body: ClassifyRequest,
    _api_key: str = Depends(verify_api_key),
):
    """Classify raw calendar entries as work/personal with service and client label."""
    with logged_request(request, "/v1/entries/classify") as request_log:
        enriched = classify_all([e.to_entry() for e in body.entries])
        request_log.item_count = len(enriched)
        return [EnrichedEntryOut.model_validate(e) for e in enriched]
