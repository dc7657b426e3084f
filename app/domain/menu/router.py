"""Menu routers - categories, products and product attributes"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_manager, get_current_user
from ...constants import RecordStatus
from ...database import get_db
from ...models import User
from ...shared.responses import ok, page
from .schemas import (
    AttributeCreate,
    AttributeResponse,
    AttributeUpdate,
    AttributeValueCreate,
    AttributeValueResponse,
    AttributeValueUpdate,
    CategoryCreate,
    CategoryResponse,
    CategoryUpdate,
    ProductCreate,
    ProductResponse,
)
from .service import AttributeService, CategoryService, ProductService

categories_router = APIRouter(prefix="/api/menu/categories", tags=["Menu categories"])
products_router = APIRouter(prefix="/api/menu/products", tags=["Menu products"])
attributes_router = APIRouter(prefix="/api/menu", tags=["Menu attributes"])


def get_category_service(db: Session = Depends(get_db)) -> CategoryService:
    return CategoryService(db)


def get_product_service(db: Session = Depends(get_db)) -> ProductService:
    return ProductService(db)


def get_attribute_service(db: Session = Depends(get_db)) -> AttributeService:
    return AttributeService(db)


# ============================================================================
# CATEGORIES
# ============================================================================


@categories_router.get("")
async def get_all_categories(
    current_user: User = Depends(get_current_user),
    service: CategoryService = Depends(get_category_service),
):
    return ok(service.get_all())


@categories_router.get("/search")
async def search_categories(
    search: Optional[str] = Query(None),
    archived: bool = Query(False),
    includeAllStatuses: bool = Query(False),
    sort: str = Query("sequence"),
    direction: str = Query("asc"),
    page_number: int = Query(0, ge=0, alias="page"),
    size: int = Query(10, ge=1, le=200),
    current_user: User = Depends(get_current_user),
    service: CategoryService = Depends(get_category_service),
):
    items, total = service.search(search, archived, includeAllStatuses, sort, direction, page_number, size)
    return ok(page([CategoryResponse.from_model(c) for c in items], page_number, size, total))


@categories_router.get("/hierarchy")
async def get_category_hierarchy(
    current_user: User = Depends(get_current_user),
    service: CategoryService = Depends(get_category_service),
):
    return ok(service.get_hierarchy())


@categories_router.post("")
async def create_category(
    data: CategoryCreate,
    saveAndNew: bool = Query(False),
    current_user: User = Depends(get_current_manager),
    service: CategoryService = Depends(get_category_service),
):
    category = service.create(data, current_user)
    message = "Category created, ready for the next one" if saveAndNew else "Category created successfully"
    return ok(CategoryResponse.from_model(category), message)


@categories_router.get("/{category_id}")
async def get_category(
    category_id: int,
    current_user: User = Depends(get_current_user),
    service: CategoryService = Depends(get_category_service),
):
    return ok(CategoryResponse.from_model(service.get_category(category_id)))


@categories_router.put("/{category_id}")
async def update_category(
    category_id: int,
    data: CategoryUpdate,
    current_user: User = Depends(get_current_manager),
    service: CategoryService = Depends(get_category_service),
):
    category = service.update(category_id, data, current_user)
    return ok(CategoryResponse.from_model(category), "Category updated successfully")


@categories_router.delete("/{category_id}")
async def delete_category(
    category_id: int,
    current_user: User = Depends(get_current_manager),
    service: CategoryService = Depends(get_category_service),
):
    return ok(service.delete(category_id, current_user), "Category deleted")


@categories_router.get("/{category_id}/product-count")
async def get_product_count(
    category_id: int,
    current_user: User = Depends(get_current_user),
    service: CategoryService = Depends(get_category_service),
):
    return ok(service.product_count(category_id))


@categories_router.get("/{category_id}/products")
async def get_category_products(
    category_id: int,
    current_user: User = Depends(get_current_user),
    service: CategoryService = Depends(get_category_service),
):
    return ok([ProductResponse.from_model(p) for p in service.products(category_id)])


@categories_router.put("/{category_id}/sequence")
async def update_category_sequence(
    category_id: int,
    sequence: int = Query(..., ge=0),
    current_user: User = Depends(get_current_manager),
    service: CategoryService = Depends(get_category_service),
):
    category = service.update_sequence(category_id, sequence, current_user)
    return ok(CategoryResponse.from_model(category), "Sequence updated")


@categories_router.put("/{category_id}/archive")
async def archive_category(
    category_id: int,
    current_user: User = Depends(get_current_manager),
    service: CategoryService = Depends(get_category_service),
):
    category = service.set_status(category_id, RecordStatus.INACTIVE, current_user)
    return ok(CategoryResponse.from_model(category), "Category archived")


@categories_router.put("/{category_id}/unarchive")
async def unarchive_category(
    category_id: int,
    current_user: User = Depends(get_current_manager),
    service: CategoryService = Depends(get_category_service),
):
    category = service.set_status(category_id, RecordStatus.ACTIVE, current_user)
    return ok(CategoryResponse.from_model(category), "Category restored")


# ============================================================================
# PRODUCTS
# ============================================================================


@products_router.get("")
async def list_products(
    categoryId: Optional[int] = Query(None),
    search: Optional[str] = Query(None),
    current_user: User = Depends(get_current_user),
    service: ProductService = Depends(get_product_service),
):
    return ok([ProductResponse.from_model(p) for p in service.list_products(categoryId, search)])


@products_router.post("")
async def create_product(
    data: ProductCreate,
    current_user: User = Depends(get_current_manager),
    service: ProductService = Depends(get_product_service),
):
    product = service.create(data, current_user)
    return ok(ProductResponse.from_model(product), "Product created successfully")


# ============================================================================
# ATTRIBUTES
# ============================================================================


@attributes_router.get("/attributes")
async def list_attributes(
    search: Optional[str] = Query(None),
    current_user: User = Depends(get_current_user),
    service: AttributeService = Depends(get_attribute_service),
):
    return ok([AttributeResponse.from_model(a) for a in service.list_attributes(search)])


@attributes_router.post("/attributes")
async def create_attribute(
    data: AttributeCreate,
    current_user: User = Depends(get_current_manager),
    service: AttributeService = Depends(get_attribute_service),
):
    attribute = service.create_attribute(data, current_user)
    return ok(AttributeResponse.from_model(attribute), "Attribute created successfully")


@attributes_router.get("/attributes/{attribute_id}")
async def get_attribute(
    attribute_id: int,
    current_user: User = Depends(get_current_user),
    service: AttributeService = Depends(get_attribute_service),
):
    return ok(AttributeResponse.from_model(service.get_attribute(attribute_id)))


@attributes_router.put("/attributes/{attribute_id}")
async def update_attribute(
    attribute_id: int,
    data: AttributeUpdate,
    current_user: User = Depends(get_current_manager),
    service: AttributeService = Depends(get_attribute_service),
):
    attribute = service.update_attribute(attribute_id, data, current_user)
    return ok(AttributeResponse.from_model(attribute), "Attribute updated successfully")


@attributes_router.delete("/attributes/{attribute_id}")
async def delete_attribute(
    attribute_id: int,
    current_user: User = Depends(get_current_manager),
    service: AttributeService = Depends(get_attribute_service),
):
    return ok(service.delete_attribute(attribute_id), "Attribute deleted")


@attributes_router.get("/attributes/{attribute_id}/values")
async def get_attribute_values(
    attribute_id: int,
    current_user: User = Depends(get_current_user),
    service: AttributeService = Depends(get_attribute_service),
):
    return ok([AttributeValueResponse.from_model(v) for v in service.get_values(attribute_id)])


@attributes_router.post("/attributes/{attribute_id}/values")
async def add_attribute_value(
    attribute_id: int,
    data: AttributeValueCreate,
    current_user: User = Depends(get_current_manager),
    service: AttributeService = Depends(get_attribute_service),
):
    value = service.add_value(attribute_id, data, current_user)
    return ok(AttributeValueResponse.from_model(value), "Value added successfully")


@attributes_router.put("/attribute-values/{value_id}")
async def update_attribute_value(
    value_id: int,
    data: AttributeValueUpdate,
    current_user: User = Depends(get_current_manager),
    service: AttributeService = Depends(get_attribute_service),
):
    value = service.update_value(value_id, data, current_user)
    return ok(AttributeValueResponse.from_model(value), "Value updated successfully")


@attributes_router.delete("/attribute-values/{value_id}")
async def delete_attribute_value(
    value_id: int,
    current_user: User = Depends(get_current_manager),
    service: AttributeService = Depends(get_attribute_service),
):
    return ok(service.delete_value(value_id, current_user), "Value deleted")
