"""Menu service - category hierarchy, products and product attributes"""

import logging
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...cache import CATEGORY_HIERARCHY_KEY, CATEGORY_LIST_KEY, cached, invalidate_category_cache
from ...constants import DisplayType, RecordStatus
from ...models import User
from ...models_menu import Attribute, AttributeValue, Category, Product
from .repository import MenuRepository
from .schemas import (
    AttributeCreate,
    AttributeUpdate,
    AttributeValueCreate,
    AttributeValueUpdate,
    CategoryCreate,
    CategoryResponse,
    CategoryUpdate,
    ProductCreate,
)

logger = logging.getLogger(__name__)

VISIBLE_STATUSES = [RecordStatus.ACTIVE.value, RecordStatus.INACTIVE.value]


def build_tree(categories: list[Category]) -> list[dict]:
    """Nest categories under their parents, siblings ordered by sequence then name"""
    by_parent: dict[Optional[int], list[Category]] = {}
    ids = {c.id for c in categories}
    for category in categories:
        # A node whose parent is hidden is shown at the root
        parent_id = category.parent_id if category.parent_id in ids else None
        by_parent.setdefault(parent_id, []).append(category)

    def nodes(parent_id: Optional[int]) -> list[CategoryResponse]:
        siblings = sorted(by_parent.get(parent_id, []), key=lambda c: (c.sequence, c.name.lower()))
        return [CategoryResponse.from_model(c, children=nodes(c.id)) for c in siblings]

    return [node.model_dump(mode="json") for node in nodes(None)]


@cached(CATEGORY_HIERARCHY_KEY, ttl=600)
def load_hierarchy(db: Session) -> list[dict]:
    return build_tree(MenuRepository.get_categories(db, VISIBLE_STATUSES))


@cached(CATEGORY_LIST_KEY, ttl=600)
def load_all_categories(db: Session) -> list[dict]:
    return [CategoryResponse.from_model(c).model_dump(mode="json") for c in MenuRepository.get_categories(db)]


class CategoryService:
    """Service layer for menu categories"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = MenuRepository()

    def get_category(self, category_id: int) -> Category:
        category = self.repo.get_category(self.db, category_id)
        if not category:
            raise HTTPException(status_code=404, detail="Category not found")
        return category

    def get_all(self) -> list[dict]:
        return load_all_categories(self.db)

    def get_hierarchy(self) -> list[dict]:
        return load_hierarchy(self.db)

    def search(
        self,
        search: Optional[str],
        archived: bool,
        include_all_statuses: bool,
        sort: str,
        direction: str,
        page: int,
        size: int,
    ) -> tuple[list[Category], int]:
        if include_all_statuses:
            statuses = VISIBLE_STATUSES
        elif archived:
            statuses = [RecordStatus.INACTIVE.value]
        else:
            statuses = [RecordStatus.ACTIVE.value]
        return self.repo.search_categories(self.db, statuses, search, f"{sort},{direction}", page, size)

    def _check_code(self, code: Optional[str], category_id: Optional[int] = None) -> None:
        if not code:
            return
        existing = self.repo.get_category_by_code(self.db, code)
        if existing and existing.id != category_id:
            raise HTTPException(status_code=409, detail=f"Category code '{code}' already exists")

    def _check_parent(self, parent_id: Optional[int], category_id: Optional[int] = None) -> None:
        """Parent must exist and must not be the category itself or one of its descendants"""
        if parent_id is None:
            return
        if parent_id == category_id:
            raise HTTPException(status_code=400, detail="A category cannot be its own parent")

        parent = self.repo.get_category(self.db, parent_id)
        if not parent:
            raise HTTPException(status_code=404, detail="Parent category not found")

        if category_id is None:
            return
        seen = set()
        node = parent
        while node is not None and node.id not in seen:
            if node.parent_id == category_id:
                raise HTTPException(
                    status_code=400, detail="A category cannot be moved under one of its descendants"
                )
            seen.add(node.id)
            node = node.parent

    def create(self, data: CategoryCreate, user: User) -> Category:
        logger.info(f"📥 Creating category '{data.name}'")
        self._check_code(data.code)
        self._check_parent(data.parentId)

        category = Category(
            code=data.code,
            name=data.name,
            description=data.description,
            status=data.status.value,
            parent_id=data.parentId,
            sequence=data.sequence if data.sequence is not None else self.repo.next_sequence(self.db, data.parentId),
            image=data.image,
            created_by=user.id,
        )
        self.db.add(category)
        self.db.commit()
        invalidate_category_cache()
        logger.info(f"✅ Category {category.id} '{category.name}' created")
        return self.get_category(category.id)

    def update(self, category_id: int, data: CategoryUpdate, user: User) -> Category:
        category = self.get_category(category_id)
        fields = data.model_fields_set

        if "code" in fields:
            self._check_code(data.code, category_id)
            category.code = data.code
        if "parentId" in fields:
            self._check_parent(data.parentId, category_id)
            category.parent_id = data.parentId
        if data.name is not None:
            category.name = data.name
        if "description" in fields:
            category.description = data.description
        if data.status is not None:
            category.status = data.status.value
        if data.sequence is not None:
            category.sequence = data.sequence
        if "image" in fields:
            category.image = data.image
        category.updated_by = user.id

        self.db.commit()
        invalidate_category_cache()
        logger.info(f"✅ Category {category_id} updated")
        return self.get_category(category_id)

    def delete(self, category_id: int, user: User) -> str:
        category = self.get_category(category_id)
        if any(c.status != RecordStatus.DELETED.value for c in category.children):
            raise HTTPException(status_code=400, detail="Cannot delete a category that has sub-categories")
        if self.repo.count_products(self.db, category_id):
            raise HTTPException(status_code=400, detail="Cannot delete a category that has products")

        category.status = RecordStatus.DELETED.value
        category.updated_by = user.id
        self.db.commit()
        invalidate_category_cache()
        logger.info(f"✅ Category {category_id} deleted")
        return f"Category '{category.name}' deleted"

    def set_status(self, category_id: int, status: RecordStatus, user: User) -> Category:
        """Archive (INACTIVE) or unarchive (ACTIVE) a category"""
        category = self.get_category(category_id)
        category.status = status.value
        category.updated_by = user.id
        self.db.commit()
        invalidate_category_cache()
        return self.get_category(category_id)

    def update_sequence(self, category_id: int, sequence: int, user: User) -> Category:
        category = self.get_category(category_id)
        category.sequence = sequence
        category.updated_by = user.id
        self.db.commit()
        invalidate_category_cache()
        return self.get_category(category_id)

    def product_count(self, category_id: int) -> int:
        self.get_category(category_id)
        return self.repo.count_products(self.db, category_id)

    def products(self, category_id: int) -> list[Product]:
        self.get_category(category_id)
        return self.repo.product_query(self.db, category_id=category_id).all()


class ProductService:
    """Service layer for the products priced by pre-orders"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = MenuRepository()

    def create(self, data: ProductCreate, user: User) -> Product:
        if data.categoryId is not None and not self.repo.get_category(self.db, data.categoryId):
            raise HTTPException(status_code=404, detail="Category not found")

        product = Product(
            name=data.name.strip(),
            price=data.price,
            category_id=data.categoryId,
            status=data.status.value,
            created_by=user.id,
        )
        self.db.add(product)
        self.db.commit()
        invalidate_category_cache()
        logger.info(f"✅ Product {product.id} '{product.name}' created")
        return product

    def list_products(self, category_id: Optional[int], search: Optional[str]) -> list[Product]:
        return self.repo.product_query(self.db, category_id=category_id, search=search).all()


class AttributeService:
    """Service layer for product attributes and their values"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = MenuRepository()

    def get_attribute(self, attribute_id: int) -> Attribute:
        attribute = self.repo.get_attribute(self.db, attribute_id)
        if not attribute:
            raise HTTPException(status_code=404, detail="Attribute not found")
        return attribute

    def list_attributes(self, search: Optional[str] = None) -> list[Attribute]:
        query = self.repo.attribute_query(self.db)
        if search and search.strip():
            query = query.filter(Attribute.name.ilike(f"%{search.strip()}%"))
        return query.order_by(Attribute.name.asc()).all()

    def _check_name(self, name: str, attribute_id: Optional[int] = None) -> None:
        existing = self.repo.get_attribute_by_name(self.db, name)
        if existing and existing.id != attribute_id:
            raise HTTPException(status_code=409, detail=f"Attribute '{name}' already exists")

    @staticmethod
    def _check_value(attribute: Attribute, display_type: str, name: str, color_code: Optional[str], value_id=None):
        if display_type == DisplayType.COLOR.value and not color_code:
            raise HTTPException(status_code=400, detail=f"Value '{name}' needs a color code for a COLOR attribute")

        for value in attribute.values:
            if value.status == RecordStatus.DELETED.value or (value_id is not None and value.id == value_id):
                continue
            if value.name.lower() == name.lower():
                raise HTTPException(
                    status_code=409, detail=f"Value '{name}' already exists for attribute '{attribute.name}'"
                )

    def _add_value(self, attribute: Attribute, data: AttributeValueCreate, user: User) -> AttributeValue:
        self._check_value(attribute, attribute.display_type, data.name, data.colorCode)
        live = [v for v in attribute.values if v.status != RecordStatus.DELETED.value]
        value = AttributeValue(
            name=data.name,
            color_code=data.colorCode,
            sequence=data.sequence if data.sequence is not None else len(live) + 1,
            text_value=data.textValue,
            description=data.description,
            created_by=user.id,
        )
        attribute.values.append(value)
        return value

    def create_attribute(self, data: AttributeCreate, user: User) -> Attribute:
        self._check_name(data.name)
        attribute = Attribute(
            name=data.name,
            display_type=data.displayType.value,
            variant_creation_mode=data.variantCreationMode.value,
            description=data.description,
            status=data.status.value,
            created_by=user.id,
        )
        for value in data.values:
            self._add_value(attribute, value, user)

        self.db.add(attribute)
        self.db.commit()
        logger.info(f"✅ Attribute {attribute.id} '{attribute.name}' created with {len(data.values)} values")
        return self.get_attribute(attribute.id)

    def update_attribute(self, attribute_id: int, data: AttributeUpdate, user: User) -> Attribute:
        attribute = self.get_attribute(attribute_id)
        if data.name is not None and data.name.strip():
            self._check_name(data.name.strip(), attribute_id)
            attribute.name = data.name.strip()
        if data.displayType is not None:
            if data.displayType == DisplayType.COLOR and any(
                v.status != RecordStatus.DELETED.value and not v.color_code for v in attribute.values
            ):
                raise HTTPException(status_code=400, detail="Every value needs a color code for a COLOR attribute")
            attribute.display_type = data.displayType.value
        if data.variantCreationMode is not None:
            attribute.variant_creation_mode = data.variantCreationMode.value
        if "description" in data.model_fields_set:
            attribute.description = data.description
        if data.status is not None:
            attribute.status = data.status.value
        attribute.updated_by = user.id

        self.db.commit()
        return self.get_attribute(attribute_id)

    def delete_attribute(self, attribute_id: int) -> str:
        attribute = self.get_attribute(attribute_id)
        name = attribute.name
        self.db.delete(attribute)
        self.db.commit()
        logger.info(f"✅ Attribute {attribute_id} '{name}' deleted")
        return f"Attribute '{name}' deleted"

    def get_values(self, attribute_id: int) -> list[AttributeValue]:
        attribute = self.get_attribute(attribute_id)
        return [v for v in attribute.values if v.status != RecordStatus.DELETED.value]

    def add_value(self, attribute_id: int, data: AttributeValueCreate, user: User) -> AttributeValue:
        attribute = self.get_attribute(attribute_id)
        value = self._add_value(attribute, data, user)
        self.db.commit()
        return self._get_value(value.id)

    def _get_value(self, value_id: int) -> AttributeValue:
        value = self.repo.get_attribute_value(self.db, value_id)
        if not value:
            raise HTTPException(status_code=404, detail="Attribute value not found")
        return value

    def update_value(self, value_id: int, data: AttributeValueUpdate, user: User) -> AttributeValue:
        value = self._get_value(value_id)
        attribute = value.attribute
        fields = data.model_fields_set

        name = data.name if data.name else value.name
        color_code = data.colorCode if "colorCode" in fields else value.color_code
        self._check_value(attribute, attribute.display_type, name, color_code, value_id=value.id)

        value.name = name
        value.color_code = color_code
        if data.sequence is not None:
            value.sequence = data.sequence
        if "textValue" in fields:
            value.text_value = data.textValue
        if "description" in fields:
            value.description = data.description
        value.updated_by = user.id

        self.db.commit()
        return self._get_value(value_id)

    def delete_value(self, value_id: int, user: User) -> str:
        value = self._get_value(value_id)
        value.status = RecordStatus.DELETED.value
        value.updated_by = user.id
        self.db.commit()
        return f"Value '{value.name}' deleted"
