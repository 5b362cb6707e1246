"""
Rabbitry Backend — Breed Route Handlers
========================================

What:  The five breed endpoints under /api/breeds.
How:   FastAPI validates path parameters and bodies against the schemas
       before the handler runs; handlers only call BreedService and pick the
       success status. Failures are raised, never returned; the handlers in
       rabbitry.main turn them into error bodies.

Route Inventory:
    GET    /api/breeds              list every breed      200
    GET    /api/breeds/{breed_id}   one breed             200 / 400 / 404
    POST   /api/breeds              add a breed           201 / 400 / 409
    PUT    /api/breeds              replace a breed       200 / 400 / 404 / 409
    DELETE /api/breeds/{breed_id}   delete a breed        200 / 400 / 404
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, Path, Response

from rabbitry.models.breed import BREED_ID_MAX
from rabbitry.schemas.breed import AddBreedRequest, BreedRecord, ErrorResponse
from rabbitry.services.breed_service import BreedService, get_breed_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Breeds"])

_SERVER_ERROR = {"description": "An unplanned error occurred", "model": ErrorResponse}
_BAD_ID = {"description": "Invalid breed ID", "model": ErrorResponse}
_BAD_BODY = {"description": "Invalid breed data", "model": ErrorResponse}
_NOT_FOUND = {"description": "Breed not found", "model": ErrorResponse}
_DUPLICATE = {"description": "Duplicate breed name", "model": ErrorResponse}


@router.get(
    "/breeds",
    response_model=List[BreedRecord],
    responses={500: _SERVER_ERROR},
    summary="List all breeds",
    description="Returns every breed ordered by name, with category and alternate names.",
)
async def list_breeds(
    service: BreedService = Depends(get_breed_service),
) -> List[BreedRecord]:
    return await service.list_breeds()


@router.get(
    "/breeds/{breed_id}",
    response_model=BreedRecord,
    responses={400: _BAD_ID, 404: _NOT_FOUND, 500: _SERVER_ERROR},
    summary="Get a single breed by ID",
    description="Returns one breed with its category and alternate names.",
)
async def get_breed(
    breed_id: int = Path(..., gt=0, le=BREED_ID_MAX, description="The ID of the breed to return"),
    service: BreedService = Depends(get_breed_service),
) -> BreedRecord:
    return await service.get_breed(breed_id)


@router.post(
    "/breeds",
    status_code=201,
    response_model=BreedRecord,
    responses={400: _BAD_BODY, 409: _DUPLICATE, 500: _SERVER_ERROR},
    summary="Add a new breed",
    description=(
        "Creates a breed and returns it with its generated ID. Categories that do "
        "not exist yet are created; existing ones are reused by name."
    ),
)
async def add_breed(
    request: AddBreedRequest,
    service: BreedService = Depends(get_breed_service),
) -> BreedRecord:
    return await service.add_breed(request)


@router.put(
    "/breeds",
    response_model=BreedRecord,
    responses={400: _BAD_BODY, 404: _NOT_FOUND, 409: _DUPLICATE, 500: _SERVER_ERROR},
    summary="Modify an existing breed",
    description=(
        "Replaces the name, description, categories and alternate names of the "
        "breed identified by the body's id."
    ),
)
async def modify_breed(
    breed: BreedRecord,
    service: BreedService = Depends(get_breed_service),
) -> BreedRecord:
    return await service.modify_breed(breed)


@router.delete(
    "/breeds/{breed_id}",
    status_code=200,
    response_class=Response,
    responses={
        200: {"description": "Breed deleted"},
        400: _BAD_ID,
        404: _NOT_FOUND,
        500: _SERVER_ERROR,
    },
    summary="Delete an existing breed",
    description="Deletes the breed together with its alternate names and category links.",
)
async def delete_breed(
    breed_id: int = Path(..., gt=0, le=BREED_ID_MAX, description="The ID of the breed to delete"),
    service: BreedService = Depends(get_breed_service),
) -> Response:
    await service.delete_breed(breed_id)
    return Response(status_code=200)
