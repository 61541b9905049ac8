"""
Catalog store.

Products are kept in process memory and reset on restart. The API depends on
the ``CatalogStore`` interface so tests can hand in their own instance.
"""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, List, Optional

from pydantic import ValidationError as PydanticValidationError

from errors import NotFoundError, ValidationError
from schemas import Product, ProductCreate, ProductUpdate, describe_validation_error

logger = logging.getLogger(__name__)

# Sample catalog loaded at startup
SEED_PRODUCTS: list[dict] = [
    {"id": 1, "title": "Biba Embroidered Kurta", "brand": "Biba", "price": 1299, "rating": 4.5, "category": "Women", "sizes": ["S", "M", "L"], "image": "https://images.unsplash.com/photo-1520975698519-2a9f6b4f8a3f?auto=format&fit=crop&w=800&q=60"},
    {"id": 2, "title": "Classic Men's Shirt", "brand": "UrbanVibe", "price": 999, "rating": 4.2, "category": "Men", "sizes": ["M", "L", "XL"], "image": "https://images.unsplash.com/photo-1520975915535-4f1c9aa8b3c0?auto=format&fit=crop&w=800&q=60"},
    {"id": 3, "title": "Casual Hoodie", "brand": "CozyCorner", "price": 1499, "rating": 4.3, "category": "Unisex", "sizes": ["M", "L", "XL"], "image": "https://images.unsplash.com/photo-1607746882042-944635dfe10e?auto=format&fit=crop&w=800&q=60"},
    {"id": 4, "title": "Summer Dress", "brand": "Luna", "price": 1599, "rating": 4.6, "category": "Women", "sizes": ["S", "M", "L"], "image": "https://images.unsplash.com/photo-1541099649105-f69ad21f3246?auto=format&fit=crop&w=800&q=60"},
    {"id": 5, "title": "Denim Jeans", "brand": "DenimPro", "price": 1999, "rating": 4.4, "category": "Men", "sizes": ["30", "32", "34", "36"], "image": "https://images.unsplash.com/photo-1495020689067-958852a7765e?auto=format&fit=crop&w=800&q=60"},
]


class CatalogStore(ABC):
    @abstractmethod
    def list(self) -> List[Product]:
        ...

    @abstractmethod
    def get(self, product_id: int) -> Product:
        ...

    @abstractmethod
    def create(self, fields: Dict[str, Any]) -> Product:
        ...

    @abstractmethod
    def update(self, product_id: int, fields: Dict[str, Any]) -> Product:
        ...

    @abstractmethod
    def delete(self, product_id: int) -> None:
        ...


def parse_new_product(fields: Dict[str, Any]) -> Dict[str, Any]:
    """Validate admin create input and fill in defaults."""
    if not fields.get("title") or not fields.get("price"):
        raise ValidationError("title and price required")
    try:
        return ProductCreate.model_validate(fields).to_fields()
    except PydanticValidationError as e:
        raise ValidationError(describe_validation_error(e)) from e


def parse_product_patch(product_id: int, fields: Dict[str, Any]) -> Dict[str, Any]:
    """Validate the supplied fields of a partial update.

    Lists such as ``sizes`` are replaced wholesale, never merged.
    """
    try:
        update = ProductUpdate.model_validate(fields)
    except PydanticValidationError as e:
        raise ValidationError(describe_validation_error(e)) from e
    if update.id is not None and update.id != product_id:
        raise ValidationError("product id cannot be changed")
    return update.to_patch()


class InMemoryCatalogStore(CatalogStore):
    def __init__(self, seed: Optional[Iterable[Dict[str, Any]]] = None) -> None:
        self._products: List[Product] = [Product(**p) for p in (seed or [])]
        self._next_id = max((p.id for p in self._products), default=0) + 1

    def list(self) -> List[Product]:
        return list(self._products)

    def get(self, product_id: int) -> Product:
        for product in self._products:
            if product.id == product_id:
                return product
        raise NotFoundError("product not found")

    def create(self, fields: Dict[str, Any]) -> Product:
        data = parse_new_product(fields)
        product = Product(id=self._next_id, **data)
        self._next_id += 1
        self._products.append(product)
        logger.info("Created product %s (%s)", product.id, product.title)
        return product

    def update(self, product_id: int, fields: Dict[str, Any]) -> Product:
        idx = self._index_of(product_id)
        if idx is None:
            raise NotFoundError("product not found")
        patch = parse_product_patch(product_id, fields)
        updated = self._products[idx].model_copy(update=patch)
        self._products[idx] = updated
        logger.info("Updated product %s fields=%s", product_id, sorted(patch))
        return updated

    def delete(self, product_id: int) -> None:
        before = len(self._products)
        self._products = [p for p in self._products if p.id != product_id]
        if len(self._products) != before:
            logger.info("Deleted product %s", product_id)

    def _index_of(self, product_id: int) -> Optional[int]:
        for idx, product in enumerate(self._products):
            if product.id == product_id:
                return idx
        return None


def seeded_store() -> InMemoryCatalogStore:
    return InMemoryCatalogStore(SEED_PRODUCTS)
