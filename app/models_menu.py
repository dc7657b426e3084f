"""Menu models: categories, products and product attributes"""

from sqlalchemy import Column, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from .constants import DisplayType, VariantCreationMode
from .database import Base
from .models import AuditMixin


class Category(AuditMixin, Base):
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, index=True)
    code = Column(String(50), unique=True, nullable=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    parent_id = Column(Integer, ForeignKey("categories.id"), nullable=True, index=True)
    sequence = Column(Integer, default=0, nullable=False)
    image = Column(String(500), nullable=True)

    parent = relationship("Category", remote_side=[id], back_populates="children")
    children = relationship("Category", back_populates="parent")
    products = relationship("Product", back_populates="category")


class Product(AuditMixin, Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    price = Column(Float, nullable=False, default=0)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=True, index=True)

    category = relationship("Category", back_populates="products")


class Attribute(AuditMixin, Base):
    __tablename__ = "product_attributes"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), unique=True, nullable=False)
    display_type = Column(String(20), default=DisplayType.RADIO.value, nullable=False)
    variant_creation_mode = Column(
        String(20), default=VariantCreationMode.INSTANTLY.value, nullable=False
    )
    description = Column(Text, nullable=True)

    values = relationship(
        "AttributeValue",
        back_populates="attribute",
        cascade="all, delete-orphan",
        order_by="AttributeValue.sequence",
    )


class AttributeValue(AuditMixin, Base):
    __tablename__ = "product_attribute_values"

    id = Column(Integer, primary_key=True, index=True)
    attribute_id = Column(
        Integer, ForeignKey("product_attributes.id", ondelete="CASCADE"), nullable=False
    )
    name = Column(String(255), nullable=False)
    color_code = Column(String(7), nullable=True)  # #RRGGBB, COLOR attributes only
    sequence = Column(Integer, default=0, nullable=False)
    text_value = Column(String(255), nullable=True)
    description = Column(Text, nullable=True)

    attribute = relationship("Attribute", back_populates="values")
