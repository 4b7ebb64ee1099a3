from __future__ import annotations

import logging
from typing import Optional

from src.core.errors import BadRequestError, ForbiddenError, NotFoundError
from src.repositories.reports_repository import ReportsRepository

logger = logging.getLogger(__name__)

HALL_OWNER = "hall_owner"
SUB_USER = "sub_user"
SUPER_ADMIN = "super_admin"


class OwnerResolver:
    """Maps the calling user to the hall owner whose data they may report on."""

    def __init__(self, repository: ReportsRepository) -> None:
        self.repository = repository

    def resolve(self, user_id: str, requested_owner_id: Optional[str] = None) -> str:
        user = self.repository.get_user(user_id)
        if user is None:
            raise NotFoundError("User not found")

        if user.role == SUB_USER:
            if not user.parent_user_id:
                raise BadRequestError("Sub-user has no parent user assigned")
            return user.parent_user_id
        if user.role == HALL_OWNER:
            return user.id
        if user.role == SUPER_ADMIN:
            return requested_owner_id or user.id

        logger.info("Report access denied user_id=%s role=%s", user_id, user.role)
        raise ForbiddenError(
            "Access denied. Only hall owners, sub-users, and super admins can view reports."
        )
