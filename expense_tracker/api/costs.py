"""Expense, report and about routes."""

from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Body, Depends, status

from expense_tracker.api.responses import error_response, get_components, to_response
from expense_tracker.config import get_settings
from expense_tracker.orchestrator import AppComponents
from expense_tracker.validation import parse_int, validate_report_query


router = APIRouter()


@router.post("/add")
async def add_cost(
    payload: dict = Body(...),
    components: AppComponents = Depends(get_components),
):
    result = await components.expense_service.create(
        description=payload.get("description"),
        category=payload.get("category"),
        userid=payload.get("userid"),
        sum=payload.get("sum"),
        date=payload.get("date"),
    )
    return to_response(result, status.HTTP_201_CREATED)


@router.get("/report")
async def get_report(
    id: Optional[str] = None,
    year: Optional[str] = None,
    month: Optional[str] = None,
    components: AppComponents = Depends(get_components),
):
    error = validate_report_query(
        id,
        year,
        month,
        current_year=datetime.now(timezone.utc).year,
        min_year=get_settings().app.min_report_year,
    )
    if error:
        return error_response(error, status.HTTP_400_BAD_REQUEST)

    result = await components.report_aggregator.monthly_report(
        parse_int(id), parse_int(year), parse_int(month)
    )
    return to_response(result)


@router.get("/about")
async def get_about():
    return get_settings().app.developers_list


@router.put("/{expense_id}")
async def update_cost(
    expense_id: str,
    payload: dict = Body(...),
    components: AppComponents = Depends(get_components),
):
    result = await components.expense_service.update(expense_id, payload)
    return to_response(result)


@router.delete("/{expense_id}")
async def delete_cost(
    expense_id: str,
    components: AppComponents = Depends(get_components),
):
    result = await components.expense_service.delete(expense_id)
    return to_response(result)
