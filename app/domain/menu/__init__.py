"""Menu domain - categories, products and product attributes"""

from .router import attributes_router, categories_router, products_router

__all__ = ["categories_router", "products_router", "attributes_router"]
