from __future__ import annotations

import pytest

from src.core.errors import BadRequestError, ForbiddenError, NotFoundError
from src.services.owner_resolver import OwnerResolver


@pytest.fixture()
def resolver(repository) -> OwnerResolver:
    return OwnerResolver(repository=repository)


def test_hall_owner_reports_on_self(resolver: OwnerResolver) -> None:
    assert resolver.resolve("owner-1", "someone-else") == "owner-1"


def test_sub_user_reports_on_parent(resolver: OwnerResolver) -> None:
    assert resolver.resolve("staff-1") == "owner-1"


def test_sub_user_without_parent_is_rejected(resolver: OwnerResolver) -> None:
    with pytest.raises(BadRequestError):
        resolver.resolve("orphan-1")


def test_super_admin_may_pick_owner(resolver: OwnerResolver) -> None:
    assert resolver.resolve("admin-1", "owner-1") == "owner-1"
    assert resolver.resolve("admin-1") == "admin-1"


def test_other_roles_are_forbidden(resolver: OwnerResolver) -> None:
    with pytest.raises(ForbiddenError) as excinfo:
        resolver.resolve("guest-1")
    assert excinfo.value.status_code == 403


def test_unknown_user_is_not_found(resolver: OwnerResolver) -> None:
    with pytest.raises(NotFoundError):
        resolver.resolve("nobody")
