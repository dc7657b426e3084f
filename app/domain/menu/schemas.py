"""Menu schemas - categories, products and product attributes"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from ...constants import DisplayType, RecordStatus, VariantCreationMode
from ...shared.validators import validate_color_code

# ============================================================================
# CATEGORIES
# ============================================================================


def _check_editable_status(v):
    if v == RecordStatus.DELETED:
        raise ValueError("Use the delete endpoint instead of setting DELETED")
    return v


class CategoryCreate(BaseModel):
    code: Optional[str] = Field(None, max_length=50)
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    status: RecordStatus = RecordStatus.ACTIVE
    parentId: Optional[int] = None
    sequence: Optional[int] = Field(None, ge=0)
    image: Optional[str] = Field(None, max_length=500)

    @field_validator("code")
    @classmethod
    def normalize_code(cls, v):
        if v is None:
            return v
        v = v.strip().upper()
        return v or None

    @field_validator("name")
    @classmethod
    def strip_name(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("Category name is required")
        return v

    @field_validator("status")
    @classmethod
    def check_status(cls, v):
        return _check_editable_status(v)


class CategoryUpdate(CategoryCreate):
    """Partial update, a field left out keeps its value; an explicit parentId of null moves to the root"""

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    status: Optional[RecordStatus] = None

    @field_validator("name")
    @classmethod
    def strip_name(cls, v):
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("Category name is required")
        return v


class CategoryResponse(BaseModel):
    id: int
    code: Optional[str] = None
    name: str
    description: Optional[str] = None
    status: str
    createdAt: datetime
    updatedAt: datetime
    createdBy: Optional[int] = None
    updatedBy: Optional[int] = None
    sequence: int
    image: Optional[str] = None
    parentId: Optional[int] = None
    parentName: Optional[str] = None
    level: int
    isRoot: bool
    hasChildren: bool
    hasProducts: bool
    childrenCount: int
    productsCount: int
    fullPath: str
    children: Optional[list["CategoryResponse"]] = None

    @classmethod
    def from_model(cls, category, children: Optional[list["CategoryResponse"]] = None) -> "CategoryResponse":
        path = []
        node = category
        # Walk up the parent chain; guarded against corrupt cyclic data
        while node is not None and len(path) < 50:
            path.append(node.name)
            node = node.parent
        path.reverse()

        live_children = [c for c in category.children if c.status != RecordStatus.DELETED.value]
        live_products = [p for p in category.products if p.status != RecordStatus.DELETED.value]
        return cls(
            id=category.id,
            code=category.code,
            name=category.name,
            description=category.description,
            status=category.status,
            createdAt=category.created_at,
            updatedAt=category.updated_at,
            createdBy=category.created_by,
            updatedBy=category.updated_by,
            sequence=category.sequence,
            image=category.image,
            parentId=category.parent_id,
            parentName=category.parent.name if category.parent else None,
            level=len(path) - 1,
            isRoot=category.parent_id is None,
            hasChildren=bool(live_children),
            hasProducts=bool(live_products),
            childrenCount=len(live_children),
            productsCount=len(live_products),
            fullPath=" / ".join(path),
            children=children,
        )


# ============================================================================
# PRODUCTS
# ============================================================================


class ProductCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    price: float = Field(..., ge=0)
    categoryId: Optional[int] = None
    status: RecordStatus = RecordStatus.ACTIVE


class ProductResponse(BaseModel):
    id: int
    name: str
    price: float
    categoryId: Optional[int] = None
    categoryName: Optional[str] = None
    status: str
    createdAt: datetime

    @classmethod
    def from_model(cls, product) -> "ProductResponse":
        return cls(
            id=product.id,
            name=product.name,
            price=product.price,
            categoryId=product.category_id,
            categoryName=product.category.name if product.category else None,
            status=product.status,
            createdAt=product.created_at,
        )


# ============================================================================
# ATTRIBUTES
# ============================================================================


class AttributeValueCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    colorCode: Optional[str] = None
    sequence: Optional[int] = Field(None, ge=0)
    textValue: Optional[str] = Field(None, max_length=255)
    description: Optional[str] = None

    @field_validator("name")
    @classmethod
    def strip_name(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("Value name is required")
        return v

    @field_validator("colorCode")
    @classmethod
    def check_color(cls, v):
        return validate_color_code(v)


class AttributeValueUpdate(AttributeValueCreate):
    name: Optional[str] = Field(None, min_length=1, max_length=255)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v):
        return v.strip() if v is not None else v


class AttributeCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    displayType: DisplayType = DisplayType.RADIO
    variantCreationMode: VariantCreationMode = VariantCreationMode.INSTANTLY
    description: Optional[str] = None
    status: RecordStatus = RecordStatus.ACTIVE
    values: list[AttributeValueCreate] = Field(default_factory=list)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("Attribute name is required")
        return v

    @field_validator("status")
    @classmethod
    def check_status(cls, v):
        return _check_editable_status(v)


class AttributeUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    displayType: Optional[DisplayType] = None
    variantCreationMode: Optional[VariantCreationMode] = None
    description: Optional[str] = None
    status: Optional[RecordStatus] = None

    @field_validator("status")
    @classmethod
    def check_status(cls, v):
        return _check_editable_status(v)


class AttributeValueResponse(BaseModel):
    id: int
    name: str
    colorCode: Optional[str] = None
    sequence: int
    textValue: Optional[str] = None
    description: Optional[str] = None
    attributeId: int
    attributeName: Optional[str] = None
    status: str

    @classmethod
    def from_model(cls, value) -> "AttributeValueResponse":
        return cls(
            id=value.id,
            name=value.name,
            colorCode=value.color_code,
            sequence=value.sequence,
            textValue=value.text_value,
            description=value.description,
            attributeId=value.attribute_id,
            attributeName=value.attribute.name if value.attribute else None,
            status=value.status,
        )


class AttributeResponse(BaseModel):
    id: int
    name: str
    displayType: str
    variantCreationMode: str
    description: Optional[str] = None
    status: str
    values: list[AttributeValueResponse]
    valuesCount: int
    createdAt: datetime
    updatedAt: datetime

    @classmethod
    def from_model(cls, attribute) -> "AttributeResponse":
        values = [
            AttributeValueResponse.from_model(v)
            for v in attribute.values
            if v.status != RecordStatus.DELETED.value
        ]
        return cls(
            id=attribute.id,
            name=attribute.name,
            displayType=attribute.display_type,
            variantCreationMode=attribute.variant_creation_mode,
            description=attribute.description,
            status=attribute.status,
            values=values,
            valuesCount=len(values),
            createdAt=attribute.created_at,
            updatedAt=attribute.updated_at,
        )
