"""
Service layer utility functions.

Shared checks used across services so that every service reports missing
entities, permissions and blocked deletions the same way.
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Iterable, Optional, TypeVar, Union

from app.core.exceptions import (
    AccessDeniedError,
    ConflictError,
    EntityNotFoundError,
    InactiveUserError,
    ValidationError,
)
from app.models.user import User, UserRole

T = TypeVar("T")

CENT = Decimal("0.01")
STAFF_ROLES = (UserRole.STAFF, UserRole.ADMIN)
ADMIN_ROLES = (UserRole.ADMIN,)


def ensure_exists(
    entity: Optional[T],
    entity_name: str,
    entity_id: Optional[int] = None,
) -> T:
    """Return ``entity``, or raise EntityNotFoundError when the lookup found nothing."""
    if entity is None:
        raise EntityNotFoundError(entity_name, entity_id)
    return entity


def ensure_role(user: User, allowed: Iterable[UserRole], label: str) -> User:
    """
    Check that an active user holds one of the ``allowed`` roles.

    ``label`` names the requirement in the error, e.g. "Staff" or "Admin".
    Inactive accounts fail before the role is looked at.
    """
    if not user.is_active:
        raise InactiveUserError()
    if user.role not in tuple(allowed):
        raise AccessDeniedError(label, user.role.value)
    return user


def validate_date_range(
    start_date: Any,
    end_date: Any,
    start_field: str = "start_date",
    end_field: str = "end_date",
) -> None:
    # Stays are half-open, so equal dates are rejected too
    if end_date <= start_date:
        raise ValidationError(
            f"{end_field} must be after {start_field}",
            end_field,
            f"{end_date} (start: {start_date})",
        )


def ensure_no_related_records(
    count: int, entity_name: str, related_entity: str
) -> None:
    """Block a deletion while ``count`` dependent rows still point at the entity."""
    if count > 0:
        raise ConflictError(
            f"Cannot delete {entity_name} with existing {related_entity}",
            related_entity,
        )


def validate_unique_field(
    existing_entity: Optional[Any], field_name: str, entity_name: str
) -> None:
    if existing_entity:
        raise ConflictError(
            f"{entity_name} with this {field_name} already exists", entity_name
        )


def to_money(value: Union[Decimal, int, float, str, None]) -> Decimal:
    """Round a value to cents, half-up. ``None`` counts as zero."""
    if value is None:
        return Decimal("0.00")
    return Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP)
