"""Menu repository - categories, products and attributes"""

from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload, selectinload

from ...constants import RecordStatus
from ...models_menu import Attribute, AttributeValue, Category, Product
from ...shared.query_utils import apply_keyword, apply_sort, paginate

CATEGORY_SORT_COLUMNS = {
    "id": Category.id,
    "code": Category.code,
    "name": Category.name,
    "sequence": Category.sequence,
    "status": Category.status,
    "createdAt": Category.created_at,
    "updatedAt": Category.updated_at,
}


def _category_options():
    return (
        joinedload(Category.parent),
        selectinload(Category.children),
        selectinload(Category.products),
    )


class MenuRepository:
    """Repository for menu database operations"""

    # ------------------------------------------------------------------
    # Categories
    # ------------------------------------------------------------------

    @staticmethod
    def get_category(db: Session, category_id: int) -> Optional[Category]:
        return (
            db.query(Category)
            .options(*_category_options())
            .filter(Category.id == category_id, Category.status != RecordStatus.DELETED.value)
            .first()
        )

    @staticmethod
    def get_category_by_code(db: Session, code: str) -> Optional[Category]:
        return db.query(Category).filter(Category.code == code).first()

    @staticmethod
    def get_categories(db: Session, statuses: Optional[list[str]] = None) -> list[Category]:
        query = db.query(Category).options(*_category_options())
        if statuses:
            query = query.filter(Category.status.in_(statuses))
        else:
            query = query.filter(Category.status != RecordStatus.DELETED.value)
        return query.order_by(Category.sequence.asc(), Category.name.asc()).all()

    @staticmethod
    def search_categories(
        db: Session,
        statuses: list[str],
        search: Optional[str],
        sort_by: str,
        page: int,
        size: int,
    ) -> tuple[list[Category], int]:
        query = db.query(Category).options(*_category_options()).filter(Category.status.in_(statuses))
        query = apply_keyword(query, search, Category.name, Category.code, Category.description)
        query = apply_sort(query, sort_by, CATEGORY_SORT_COLUMNS, "sequence,asc")
        return paginate(query.order_by(Category.id.asc()), page, size)

    @staticmethod
    def next_sequence(db: Session, parent_id: Optional[int]) -> int:
        current = (
            db.query(func.max(Category.sequence))
            .filter(Category.parent_id == parent_id, Category.status != RecordStatus.DELETED.value)
            .scalar()
        )
        return (current or 0) + 1

    # ------------------------------------------------------------------
    # Products
    # ------------------------------------------------------------------

    @staticmethod
    def product_query(db: Session, category_id: Optional[int] = None, search: Optional[str] = None):
        query = (
            db.query(Product)
            .options(joinedload(Product.category))
            .filter(Product.status != RecordStatus.DELETED.value)
        )
        if category_id is not None:
            query = query.filter(Product.category_id == category_id)
        query = apply_keyword(query, search, Product.name)
        return query.order_by(Product.name.asc(), Product.id.asc())

    @staticmethod
    def count_products(db: Session, category_id: int) -> int:
        return (
            db.query(func.count(Product.id))
            .filter(Product.category_id == category_id, Product.status != RecordStatus.DELETED.value)
            .scalar()
        )

    # ------------------------------------------------------------------
    # Attributes
    # ------------------------------------------------------------------

    @staticmethod
    def attribute_query(db: Session):
        return (
            db.query(Attribute)
            .options(selectinload(Attribute.values))
            .filter(Attribute.status != RecordStatus.DELETED.value)
        )

    @classmethod
    def get_attribute(cls, db: Session, attribute_id: int) -> Optional[Attribute]:
        return cls.attribute_query(db).filter(Attribute.id == attribute_id).first()

    @staticmethod
    def get_attribute_by_name(db: Session, name: str) -> Optional[Attribute]:
        return db.query(Attribute).filter(func.lower(Attribute.name) == name.lower()).first()

    @staticmethod
    def get_attribute_value(db: Session, value_id: int) -> Optional[AttributeValue]:
        return (
            db.query(AttributeValue)
            .options(joinedload(AttributeValue.attribute))
            .filter(AttributeValue.id == value_id, AttributeValue.status != RecordStatus.DELETED.value)
            .first()
        )
