# ------ sniffle/model/__init__.py ------

from .product import Product

__all__ = [
    "Product",
]
