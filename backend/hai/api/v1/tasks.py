"""
Hai Backend - Tasks Endpoints

API Endpoints:
    POST /tasks - Create task
    GET /tasks - List tasks (?reservationId= for the tasks of a reservation)
    GET /tasks/{task_id} - Get task
    PUT /tasks/{task_id} - Update task (e.g. reassign staff_id)
    DELETE /tasks/{task_id} - Delete task
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from hai.dependencies import get_task_repository
from hai.models.task import Task, TaskCreate, TaskUpdate
from hai.repositories.task import TaskRepository

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post(
    "/tasks",
    response_model=Task,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
)
async def create_task(
    request: TaskCreate,
    repo: TaskRepository = Depends(get_task_repository),
) -> Task:
    """Create a new task"""
    logger.info(f"Creating task '{request.task_name}' for staff {request.staff_id}")
    return await repo.create(request)


@router.get("/tasks", response_model=List[Task], response_model_exclude_none=True)
async def list_tasks(
    reservation_id: Optional[str] = Query(None, alias="reservationId"),
    repo: TaskRepository = Depends(get_task_repository),
) -> List[Task]:
    """List tasks"""
    if reservation_id:
        return await repo.list_by_reservation(reservation_id)
    return await repo.list()


@router.get("/tasks/{task_id}", response_model=Task, response_model_exclude_none=True)
async def get_task(
    task_id: str,
    repo: TaskRepository = Depends(get_task_repository),
) -> Task:
    """Get task by ID"""
    task = await repo.get_by_id(task_id)

    if not task:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Task not found"
        )

    return task


@router.put("/tasks/{task_id}", response_model=Task, response_model_exclude_none=True)
async def update_task(
    task_id: str,
    request: TaskUpdate,
    repo: TaskRepository = Depends(get_task_repository),
) -> Task:
    """Update task"""
    logger.info(f"Updating task: {task_id}")
    return await repo.update(task_id, request)


@router.delete("/tasks/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_task(
    task_id: str,
    repo: TaskRepository = Depends(get_task_repository),
) -> Response:
    """Delete task"""
    await repo.delete(task_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
