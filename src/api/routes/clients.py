"""Client suggestion and label mapping endpoints."""

import asyncio

from fastapi import APIRouter, Depends, HTTPException, Request, status

from api.dependencies import get_mapping_store, verify_api_key
from api.logging import logged_request
from api.models.requests import MappingRequest, SuggestRequest
from api.models.responses import ClientSuggestionOut, ErrorCodes, MappingResponse
from core.database import MappingStore
from services import client_matching

router = APIRouter(prefix="/v1/clients")


@router.post("/suggest", response_model=list[ClientSuggestionOut])
async def suggest_clients_endpoint(
    request: Request,
    body: SuggestRequest,
    store: MappingStore = Depends(get_mapping_store),
    _api_key: str = Depends(verify_api_key),
):
    """Ranked client suggestions for an entry title and extracted label."""
    with logged_request(request, "/v1/clients/suggest") as request_log:
        mappings = await asyncio.to_thread(store.load)
        suggestions = client_matching.suggest(
            body.title,
            body.label,
            [c.to_client() for c in body.clients],
            mappings,
            body.threshold,
        )
        request_log.item_count = len(suggestions)
        return [ClientSuggestionOut.model_validate(s) for s in suggestions]


@router.put("/mappings", response_model=MappingResponse)
async def set_mapping_endpoint(
    request: Request,
    body: MappingRequest,
    store: MappingStore = Depends(get_mapping_store),
    _api_key: str = Depends(verify_api_key),
):
    """Link an entry label to a client for future suggestions."""
    with logged_request(request, "/v1/clients/mappings") as request_log:
        # Use thread pool for sync sqlite I/O
        mappings = await asyncio.to_thread(store.load)
        mappings = await asyncio.to_thread(
            client_matching.set_mapping, body.label, body.client_id, mappings, store
        )
        request_log.item_count = len(mappings)
        return MappingResponse(
            label=body.label,
            client_id=client_matching.get_client_id(body.label, mappings),
            mapping_count=len(mappings),
        )


@router.get("/mappings/{label}", response_model=MappingResponse)
async def get_mapping_endpoint(
    request: Request,
    label: str,
    store: MappingStore = Depends(get_mapping_store),
    _api_key: str = Depends(verify_api_key),
):
    with logged_request(request, "/v1/clients/mappings/{label}") as request_log:
        mappings = await asyncio.to_thread(store.load)
        client_id = client_matching.get_client_id(label, mappings)
        if client_id is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail={
                    "error": f"No client linked to '{label}'",
                    "code": ErrorCodes.CLIENT_NOT_FOUND,
                    "details": [],
                },
            )
        request_log.item_count = 1
        return MappingResponse(label=label, client_id=client_id, mapping_count=len(mappings))


@router.delete("/mappings/{label}", response_model=MappingResponse)
async def remove_mapping_endpoint(
    request: Request,
    label: str,
    store: MappingStore = Depends(get_mapping_store),
    _api_key: str = Depends(verify_api_key),
):
    with logged_request(request, "/v1/clients/mappings/{label}") as request_log:
        mappings = await asyncio.to_thread(store.load)
        mappings = await asyncio.to_thread(client_matching.remove_mapping, label, mappings, store)
        request_log.item_count = len(mappings)
        return MappingResponse(label=label, client_id=None, mapping_count=len(mappings))


@router.delete("/{client_id}/mappings", response_model=MappingResponse)
async def remove_client_mappings_endpoint(
    request: Request,
    client_id: str,
    store: MappingStore = Depends(get_mapping_store),
    _api_key: str = Depends(verify_api_key),
):
    """Drop every label linked to a client (e.g. when the client is deleted)."""
    with logged_request(request, "/v1/clients/{client_id}/mappings") as request_log:
        mappings = await asyncio.to_thread(store.load)
        mappings = await asyncio.to_thread(
            client_matching.remove_mappings_for_client, client_id, mappings, store
        )
        request_log.item_count = len(mappings)
        return MappingResponse(label="", client_id=client_id, mapping_count=len(mappings))
