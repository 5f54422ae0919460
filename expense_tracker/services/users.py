"""
User Service

Creates, updates and deletes user profiles, and answers the
"user plus lifetime total" query by composing UserStore with the
ReportAggregator.

User ids are unique. Uniqueness is checked here before the insert, not
left to the store.
"""

from typing import TYPE_CHECKING, Any, Optional

import structlog
from pydantic import ValidationError

from expense_tracker.audit import AuditLogger
from expense_tracker.models.report import UserDetails
from expense_tracker.models.result import ErrorKind, ServiceResult
from expense_tracker.models.user import User, UserUpdate
from expense_tracker.services.storage import UserStore
from expense_tracker.validation import (
    describe_validation_error,
    parse_int,
    validate_user_id_param,
    validate_user_input,
)

if TYPE_CHECKING:
    from expense_tracker.reports import ReportAggregator


logger = structlog.get_logger(__name__)

USER_ALREADY_EXISTS = "User ID already exists."
USER_NOT_FOUND = "User not found."
USER_DELETED = "User deleted successfully."


class UserService:
    """Orchestrates user writes and the user details lookup."""

    def __init__(
        self,
        user_store: UserStore,
        aggregator: "ReportAggregator",
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._users = user_store
        self._aggregator = aggregator
        self._audit_logger = audit_logger

    async def create(
        self,
        id: Any,
        first_name: Any,
        last_name: Any,
        birthday: Any,
        marital_status: Any,
    ) -> ServiceResult:
        """
        Create a user with a caller-chosen id.

        Returns:
            ServiceResult with the stored User, or VALIDATION / CONFLICT /
            INTERNAL on failure
        """
        error = validate_user_input(id, first_name, last_name, birthday, marital_status)
        if error:
            return await self._reject("create_user", error)

        try:
            user = User(
                id=parse_int(id),
                first_name=first_name,
                last_name=last_name,
                birthday=birthday,
                marital_status=marital_status,
            )
        except ValidationError as e:
            return await self._reject("create_user", describe_validation_error(e))

        try:
            if await self._users.exists(user.id):
                logger.info("user_rejected_duplicate_id", id=user.id)
                return ServiceResult.fail(ErrorKind.CONFLICT, USER_ALREADY_EXISTS)
            saved = await self._users.create(user)
        except Exception as e:
            return await self._internal_error("create_user", e)

        if self._audit_logger:
            await self._audit_logger.log_user_created(saved.id)

        return ServiceResult.ok(saved)

    async def update(self, id: Any, changes: Any) -> ServiceResult:
        """Merge supplied fields into the user. The ``id`` itself never changes."""
        error = validate_user_id_param(id)
        if error:
            return await self._reject("update_user", error)

        try:
            fields = UserUpdate.model_validate(changes or {}).changes()
        except ValidationError as e:
            return await self._reject("update_user", describe_validation_error(e))

        user_id = parse_int(id)
        try:
            updated = await self._users.update(user_id, fields)
        except Exception as e:
            return await self._internal_error("update_user", e)

        if updated is None:
            return ServiceResult.fail(ErrorKind.NOT_FOUND, USER_NOT_FOUND)

        if self._audit_logger:
            await self._audit_logger.log_user_updated(user_id, sorted(fields))

        return ServiceResult.ok(updated)

    async def delete(self, id: Any) -> ServiceResult:
        """Delete the user. Their expenses are left in place."""
        error = validate_user_id_param(id)
        if error:
            return await self._reject("delete_user", error)

        user_id = parse_int(id)
        try:
            deleted = await self._users.delete(user_id)
        except Exception as e:
            return await self._internal_error("delete_user", e)

        if deleted is None:
            return ServiceResult.fail(ErrorKind.NOT_FOUND, USER_NOT_FOUND)

        if self._audit_logger:
            await self._audit_logger.log_user_deleted(user_id)

        return ServiceResult.ok(message=USER_DELETED)

    async def get_details(self, id: Any) -> ServiceResult:
        """
        Look up a user's names together with their lifetime expense total.

        Returns:
            ServiceResult with UserDetails (``total`` is 0 when the user has
            no expenses), or VALIDATION / NOT_FOUND / INTERNAL
        """
        error = validate_user_id_param(id)
        if error:
            return ServiceResult.fail(ErrorKind.VALIDATION, error)

        user_id = parse_int(id)
        try:
            user = await self._users.get_by_id(user_id)
            if user is None:
                return ServiceResult.fail(ErrorKind.NOT_FOUND, USER_NOT_FOUND)
            total = await self._aggregator.lifetime_total(user_id)
        except Exception as e:
            return await self._internal_error("get_user_details", e)

        return ServiceResult.ok(
            UserDetails(
                first_name=user.first_name,
                last_name=user.last_name,
                id=user.id,
                total=total,
            )
        )

    async def _reject(self, operation: str, message: str) -> ServiceResult:
        if self._audit_logger:
            await self._audit_logger.log_validation_failed(
                operation=operation,
                message=message,
                entity_type="user",
            )
        return ServiceResult.fail(ErrorKind.VALIDATION, message)

    async def _internal_error(self, operation: str, error: Exception) -> ServiceResult:
        logger.exception("operation_failed", operation=operation)
        if self._audit_logger:
            await self._audit_logger.log_operation_failed(operation, str(error))
        return ServiceResult.fail(ErrorKind.INTERNAL, str(error))
