"""
Storefront Schemas

Clothing storefront models. Products live in the in-memory catalog; checkout
models only exist for the duration of one checkout request.
"""
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, List, Optional, Union

from pydantic import AliasChoices, BaseModel, Field, ValidationError, field_validator, model_validator

DEFAULT_CATEGORY = "Uncategorized"


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


def to_minor_units(price: float) -> int:
    """Convert a rupee price to paise, rounding half up (19.995 -> 2000)."""
    amount = Decimal(str(price)) * 100
    return int(amount.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def describe_validation_error(exc: ValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()) if p != "__root__")
        parts.append(f"{loc}: {err['msg']}" if loc else err["msg"])
    return "; ".join(parts)


class Product(BaseModel):
    id: int = Field(..., description="Catalog identifier, never reused")
    title: str = Field(..., description="Product title")
    brand: Optional[str] = Field(None, description="Brand name")
    price: float = Field(..., allow_inf_nan=False, gt=0, description="Price in INR")
    rating: float = Field(0, allow_inf_nan=False, ge=0, le=5, description="Average rating, 0-5")
    category: str = Field(DEFAULT_CATEGORY, description="Category, e.g., 'Women', 'Men', 'Unisex'")
    sizes: List[str] = Field(default_factory=list, description="Available sizes in display order")
    image: str = Field("", description="Image URL, may be empty")


class ProductCreate(BaseModel):
    title: str = Field(..., min_length=1)
    brand: Optional[str] = None
    price: float = Field(..., allow_inf_nan=False, gt=0)
    rating: Optional[float] = Field(None, allow_inf_nan=False, ge=0, le=5)
    category: Optional[str] = None
    sizes: Optional[List[str]] = None
    image: Optional[str] = None

    @field_validator("rating", mode="before")
    @classmethod
    def _rating_blank(cls, value):
        return _blank_to_none(value)

    def to_fields(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "brand": self.brand,
            "price": self.price,
            "rating": self.rating if self.rating is not None else 0,
            "category": self.category or DEFAULT_CATEGORY,
            "sizes": list(self.sizes or []),
            "image": self.image or "",
        }


class ProductUpdate(BaseModel):
    """Partial product. Only fields present in the payload are applied."""
    id: Optional[int] = None
    title: Optional[str] = Field(None, min_length=1)
    brand: Optional[str] = None
    price: Optional[float] = Field(None, allow_inf_nan=False, gt=0)
    rating: Optional[float] = Field(None, allow_inf_nan=False, ge=0, le=5)
    category: Optional[str] = None
    sizes: Optional[List[str]] = None
    image: Optional[str] = None

    @model_validator(mode="after")
    def _no_null_required_fields(self):
        for name in ("title", "price", "rating", "category", "sizes", "image"):
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self

    def to_patch(self) -> Dict[str, Any]:
        patch = self.model_dump(exclude_unset=True)
        patch.pop("id", None)
        return patch


# ----- Checkout -----

class CheckoutItem(BaseModel):
    id: Optional[Union[int, str]] = None
    title: str = Field(..., min_length=1)
    price: float = Field(..., allow_inf_nan=False, ge=0, description="Unit price in INR")
    quantity: int = Field(
        1,
        ge=1,
        validation_alias=AliasChoices("quantity", "qty"),
        description="Defaults to 1 when absent or zero",
    )

    @field_validator("quantity", mode="before")
    @classmethod
    def _default_quantity(cls, value):
        if value is None or value == 0:
            return 1
        return value


class CheckoutLineItem(BaseModel):
    name: str
    unit_amount: int = Field(..., ge=0, description="Unit price in paise")
    quantity: int = Field(..., ge=1)

    @classmethod
    def from_item(cls, item: CheckoutItem) -> "CheckoutLineItem":
        return cls(name=item.title, unit_amount=to_minor_units(item.price), quantity=item.quantity)

    def to_stripe(self, currency: str) -> Dict[str, Any]:
        return {
            "price_data": {
                "currency": currency,
                "product_data": {"name": self.name},
                "unit_amount": self.unit_amount,
            },
            "quantity": self.quantity,
        }
