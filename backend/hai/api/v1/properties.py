"""
Hai Backend - Properties Endpoints

API Endpoints:
    POST /properties - Create property
    GET /properties - List properties (or ?from=&to= for availability)
    GET /properties/{property_id} - Get property
    PUT /properties/{property_id} - Update property
    DELETE /properties/{property_id} - Delete property

Testing:
    curl -X POST http://localhost:8080/properties \\
      -H "Content-Type: application/json" \\
      -d '{"room_number": "101", "room_name": "Ocean Suite", "floor": 2, "room_count": 1}'

    curl "http://localhost:8080/properties?from=15112025&to=20112025"
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from hai.dependencies import get_property_repository, require_wire_date
from hai.errors import ValidationError
from hai.models.property import Property, PropertyCreate, PropertyUpdate
from hai.repositories.property import PropertyRepository

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post(
    "/properties",
    response_model=Property,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
)
async def create_property(
    request: PropertyCreate,
    repo: PropertyRepository = Depends(get_property_repository),
) -> Property:
    """Create a new property"""
    logger.info(f"Creating property {request.room_number}")
    return await repo.create(request)


@router.get("/properties", response_model=List[Property], response_model_exclude_none=True)
async def list_properties(
    from_date: Optional[str] = Query(None, alias="from", description="First night"),
    to_date: Optional[str] = Query(None, alias="to", description="Departure day"),
    repo: PropertyRepository = Depends(get_property_repository),
) -> List[Property]:
    """
    List properties

    With both `from` and `to`, only properties free for the whole range
    are returned.
    """
    if from_date or to_date:
        if not (from_date and to_date):
            raise ValidationError("Both 'from' and 'to' are required for an availability search")
        require_wire_date(from_date, '"from" date')
        require_wire_date(to_date, '"to" date')
        return await repo.search_available(from_date, to_date)

    return await repo.list()


@router.get("/properties/{property_id}", response_model=Property, response_model_exclude_none=True)
async def get_property(
    property_id: str,
    repo: PropertyRepository = Depends(get_property_repository),
) -> Property:
    """Get property by ID"""
    prop = await repo.get_by_id(property_id)

    if not prop:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Property not found"
        )

    return prop


@router.put("/properties/{property_id}", response_model=Property, response_model_exclude_none=True)
async def update_property(
    property_id: str,
    request: PropertyUpdate,
    repo: PropertyRepository = Depends(get_property_repository),
) -> Property:
    """Update property"""
    logger.info(f"Updating property: {property_id}")
    return await repo.update(property_id, request)


@router.delete("/properties/{property_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_property(
    property_id: str,
    repo: PropertyRepository = Depends(get_property_repository),
) -> Response:
    """Delete property"""
    await repo.delete(property_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
