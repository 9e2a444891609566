"""
Completion log API endpoints.
"""

from datetime import date
from uuid import UUID

from fastapi import APIRouter, HTTPException, Query, status

from nudge.api.deps import CompletionRepo, CurrentUserId
from nudge.models.schedule import Completion, CompletionCreate

router = APIRouter()


@router.get("", response_model=list[Completion])
async def list_completions(
    user_id: CurrentUserId,
    completion_repo: CompletionRepo,
    completion_date: date = Query(..., alias="date"),
):
    """
    List completions logged on a day.
    """
    return await completion_repo.get_completions_for_date(user_id, completion_date)


@router.post("", response_model=Completion, status_code=status.HTTP_201_CREATED)
async def create_completion(
    completion: CompletionCreate,
    user_id: CurrentUserId,
    completion_repo: CompletionRepo,
):
    """
    Mark an activity done.
    """
    return await completion_repo.create(user_id, completion)


@router.delete("/{completion_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_completion(
    completion_id: UUID,
    user_id: CurrentUserId,
    completion_repo: CompletionRepo,
):
    """
    Undo a completion.
    """
    deleted = await completion_repo.delete(user_id, completion_id)
    if not deleted:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Completion {completion_id} not found",
        )
