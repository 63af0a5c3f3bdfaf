"""Category schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict

from halodompet.models.category import CategoryType


class CategoryCreate(BaseModel):
    # Loose types so the service can answer with its own messages
    name: str | None = None
    type: str | None = None


class CategoryDelete(BaseModel):
    id: int | None = None


class CategoryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int | None = None
    name: str
    type: CategoryType
    created_at: datetime


class CategoryListResponse(BaseModel):
    success: bool = True
    data: list[CategoryResponse]


class CategoryEnvelope(BaseModel):
    success: bool = True
    data: CategoryResponse
