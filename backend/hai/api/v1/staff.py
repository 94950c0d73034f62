"""
Hai Backend - Staff Endpoints

API Endpoints:
    POST /staff - Create staff member
    GET /staff - List staff
    GET /staff/{staff_id} - Get staff member
    PUT /staff/{staff_id} - Update staff member
    DELETE /staff/{staff_id} - Delete staff member
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, Response, status

from hai.dependencies import get_staff_repository
from hai.models.staff import Staff, StaffCreate, StaffUpdate
from hai.repositories.staff import StaffRepository

router = APIRouter()


@router.post(
    "/staff",
    response_model=Staff,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
)
async def create_staff(
    request: StaffCreate,
    repo: StaffRepository = Depends(get_staff_repository),
) -> Staff:
    return await repo.create(request)


@router.get("/staff", response_model=List[Staff], response_model_exclude_none=True)
async def list_staff(repo: StaffRepository = Depends(get_staff_repository)) -> List[Staff]:
    return await repo.list()


@router.get("/staff/{staff_id}", response_model=Staff, response_model_exclude_none=True)
async def get_staff(
    staff_id: str,
    repo: StaffRepository = Depends(get_staff_repository),
) -> Staff:
    member = await repo.get_by_id(staff_id)

    if not member:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Staff not found"
        )

    return member


@router.put("/staff/{staff_id}", response_model=Staff, response_model_exclude_none=True)
async def update_staff(
    staff_id: str,
    request: StaffUpdate,
    repo: StaffRepository = Depends(get_staff_repository),
) -> Staff:
    return await repo.update(staff_id, request)


@router.delete("/staff/{staff_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_staff(
    staff_id: str,
    repo: StaffRepository = Depends(get_staff_repository),
) -> Response:
    await repo.delete(staff_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
