"""HaloDompet - Category API endpoints."""

from fastapi import APIRouter

from halodompet.api.deps import Categories, CurrentUser
from halodompet.core.exceptions import UpstreamError, ValidationError
from halodompet.models.category import CategoryType
from halodompet.schemas.category import (
    CategoryCreate,
    CategoryDelete,
    CategoryEnvelope,
    CategoryListResponse,
    CategoryResponse,
)
from halodompet.schemas.common import MessageResponse

router = APIRouter(prefix="/categories", tags=["Categories"])


@router.get("", response_model=CategoryListResponse)
async def list_categories(
    user: CurrentUser,
    service: Categories,
    type: CategoryType | None = None,
) -> CategoryListResponse:
    """Shared default categories plus the user's own, optionally by type."""
    categories = await service.list_categories(user.id, type)
    return CategoryListResponse(data=[CategoryResponse.model_validate(c) for c in categories])


@router.post("", response_model=CategoryEnvelope)
async def create_category(
    data: CategoryCreate,
    user: CurrentUser,
    service: Categories,
) -> CategoryEnvelope:
    category = await service.create_category(user.id, data.name, data.type)
    if category is None:
        raise UpstreamError("Gagal membuat kategori. Mungkin kategori sudah ada.")
    return CategoryEnvelope(data=CategoryResponse.model_validate(category))


@router.delete("", response_model=MessageResponse)
async def delete_category(
    data: CategoryDelete,
    user: CurrentUser,
    service: Categories,
) -> MessageResponse:
    """Delete one of the user's own categories (body ``{"id": ...}``)."""
    if data.id is None:
        raise ValidationError("ID kategori harus diisi")
    if not await service.delete_category(user.id, data.id):
        raise UpstreamError(
            "Gagal menghapus kategori. Mungkin kategori tidak ditemukan atau bukan milik Anda."
        )
    return MessageResponse(message="Kategori berhasil dihapus")
