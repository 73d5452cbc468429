"""
Standard data libraries for the Floor Planner
"""

from .product_library import (
    SAMPLE_PRODUCTS,
    PRODUCT_MIME_TYPE,
    get_product_payload,
    encode_product_payload,
    get_categories,
)

__all__ = [
    'SAMPLE_PRODUCTS',
    'PRODUCT_MIME_TYPE',
    'get_product_payload',
    'encode_product_payload',
    'get_categories',
]
