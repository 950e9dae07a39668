"""
Model registration for the products app.
"""
from products.infrastructure.models import Feature, Product, ProductGroup, Release  # noqa: F401
