"""User routes."""

from fastapi import APIRouter, Body, Depends, status

from expense_tracker.api.responses import get_components, to_response
from expense_tracker.orchestrator import AppComponents


router = APIRouter()


@router.post("")
async def create_user(
    payload: dict = Body(...),
    components: AppComponents = Depends(get_components),
):
    result = await components.user_service.create(
        id=payload.get("id"),
        first_name=payload.get("first_name"),
        last_name=payload.get("last_name"),
        birthday=payload.get("birthday"),
        marital_status=payload.get("marital_status"),
    )
    return to_response(result, status.HTTP_201_CREATED)


@router.get("/{user_id}")
async def get_user_details(
    user_id: str,
    components: AppComponents = Depends(get_components),
):
    result = await components.user_service.get_details(user_id)
    return to_response(result)


@router.put("/{user_id}")
async def update_user(
    user_id: str,
    payload: dict = Body(...),
    components: AppComponents = Depends(get_components),
):
    result = await components.user_service.update(user_id, payload)
    return to_response(result)


@router.delete("/{user_id}")
async def delete_user(
    user_id: str,
    components: AppComponents = Depends(get_components),
):
    result = await components.user_service.delete(user_id)
    return to_response(result)
