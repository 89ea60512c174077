"""
Common response schemas for API endpoints.
"""

from typing import Any, Dict, Generic, List, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class MessageResponse(BaseModel):
    """Standard response for operations that return a success message."""

    message: str = Field(
        ...,
        description="Success message describing the completed operation",
        example="Resource deleted successfully",
    )


class UserRegistrationResponse(BaseModel):
    message: str = Field(..., example="User created successfully")
    user_id: int = Field(..., description="ID of the newly created user", example=123)


class CurrentUserResponse(BaseModel):
    """Response schema for /auth/me endpoint."""

    id: int = Field(..., description="User ID", example=1)
    username: str = Field(..., description="Username", example="maria")
    email: str = Field(..., description="User email address", example="maria@example.com")
    role: str = Field(..., description="User role (admin, staff, viewer)", example="staff")
    is_active: bool = Field(..., description="Whether the account is active", example=True)


class PaginatedResponse(BaseModel, Generic[T]):
    """Offset-paginated list with the total number of matching rows."""

    items: List[T]
    pagination: Dict[str, Any]

    @classmethod
    def create(cls, items: List[T], total_count: int, skip: int, limit: int):
        total_pages = (total_count + limit - 1) // limit if limit > 0 else 1
        current_page = (skip // limit) + 1 if limit > 0 else 1

        return cls(
            items=items,
            pagination={
                "total_count": total_count,
                "total_pages": total_pages,
                "current_page": current_page,
                "per_page": limit,
                "has_next": skip + limit < total_count,
                "has_previous": skip > 0,
                "count": len(items),
            },
        )
