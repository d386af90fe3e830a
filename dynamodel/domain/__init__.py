"""
Domain package for dynamodel.

Exports the concrete models of the application. Keep this package focused on
model definitions; persistence lives behind the adapters.
"""

from dynamodel.domain.product import PRODUCTS_TABLE, define_product_model

__all__ = [
    "PRODUCTS_TABLE",
    "define_product_model",
]
