"""
Hai Backend - Messages Endpoints

API Endpoints:
    POST /messages - Create message
    GET /messages - List messages (?reservationId= or ?date=)
    GET /messages/{message_id} - Get message
    PUT /messages/{message_id} - Update message
    DELETE /messages/{message_id} - Delete message
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from hai.dependencies import get_message_repository, require_wire_date
from hai.models.message import Message, MessageCreate, MessageUpdate
from hai.repositories.message import MessageRepository

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post(
    "/messages",
    response_model=Message,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
)
async def create_message(
    request: MessageCreate,
    repo: MessageRepository = Depends(get_message_repository),
) -> Message:
    """Create a new message"""
    require_wire_date(request.date, "date")
    return await repo.create(request)


@router.get("/messages", response_model=List[Message], response_model_exclude_none=True)
async def list_messages(
    reservation_id: Optional[str] = Query(None, alias="reservationId"),
    date: Optional[str] = Query(None),
    repo: MessageRepository = Depends(get_message_repository),
) -> List[Message]:
    """List messages of a reservation, of a day, or all (by date)"""
    if reservation_id:
        return await repo.list_by_reservation(reservation_id)

    if date:
        require_wire_date(date, "date")
        return await repo.list_by_date(date)

    return await repo.list()


@router.get("/messages/{message_id}", response_model=Message, response_model_exclude_none=True)
async def get_message(
    message_id: str,
    repo: MessageRepository = Depends(get_message_repository),
) -> Message:
    """Get message by ID"""
    message = await repo.get_by_id(message_id)

    if not message:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Message not found"
        )

    return message


@router.put("/messages/{message_id}", response_model=Message, response_model_exclude_none=True)
async def update_message(
    message_id: str,
    request: MessageUpdate,
    repo: MessageRepository = Depends(get_message_repository),
) -> Message:
    """Update message"""
    if request.date is not None:
        require_wire_date(request.date, "date")

    return await repo.update(message_id, request)


@router.delete("/messages/{message_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_message(
    message_id: str,
    repo: MessageRepository = Depends(get_message_repository),
) -> Response:
    """Delete message"""
    await repo.delete(message_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
