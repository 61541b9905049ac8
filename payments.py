"""
Checkout session creation.

The builder turns cart items into provider line items and asks the provider for
a hosted checkout session. ``StripeCheckoutProvider`` is the production
provider; anything with a matching ``create_session`` can stand in for it.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Protocol, Sequence

import stripe
from pydantic import ValidationError as PydanticValidationError

from errors import ConfigurationError, ProviderError, ValidationError
from schemas import CheckoutItem, CheckoutLineItem, describe_validation_error

logger = logging.getLogger(__name__)

NOT_CONFIGURED_MESSAGE = "Stripe not configured on server. Set STRIPE_SECRET_KEY."


class CheckoutProvider(Protocol):
    def create_session(
        self,
        line_items: List[Dict[str, Any]],
        success_url: str,
        cancel_url: str,
    ) -> str:
        """Create a one-off payment session and return its redirect URL."""
        ...


class StripeCheckoutProvider:
    def __init__(self, api_key: str) -> None:
        self.api_key = api_key

    def create_session(self, line_items, success_url, cancel_url) -> str:
        try:
            session = stripe.checkout.Session.create(
                api_key=self.api_key,
                payment_method_types=["card"],
                line_items=line_items,
                mode="payment",
                success_url=success_url,
                cancel_url=cancel_url,
            )
        except stripe.StripeError as e:
            logger.exception("Stripe error")
            raise ProviderError("Stripe error", details=e.user_message or str(e)) from e

        url = getattr(session, "url", None)
        if not url:
            raise ProviderError("Stripe error", details="checkout session has no redirect url")
        return url


class CheckoutSessionBuilder:
    def __init__(
        self,
        provider: Optional[CheckoutProvider],
        currency: str = "inr",
        success_url: str = "https://example.com/success",
        cancel_url: str = "https://example.com/cancel",
    ) -> None:
        self.provider = provider
        self.currency = currency
        self.success_url = success_url
        self.cancel_url = cancel_url

    @property
    def configured(self) -> bool:
        return self.provider is not None

    def build_line_items(self, items: Sequence[Any]) -> List[CheckoutLineItem]:
        if not items or not isinstance(items, list):
            raise ValidationError("No items provided")

        line_items: List[CheckoutLineItem] = []
        for position, raw in enumerate(items):
            try:
                item = raw if isinstance(raw, CheckoutItem) else CheckoutItem.model_validate(raw)
            except PydanticValidationError as e:
                raise ValidationError(f"Invalid item at position {position}: {describe_validation_error(e)}") from e
            line_items.append(CheckoutLineItem.from_item(item))
        return line_items

    def create_session(
        self,
        items: Sequence[Any],
        success_url: Optional[str] = None,
        cancel_url: Optional[str] = None,
    ) -> str:
        """Return the provider's redirect URL for a new checkout session."""
        if self.provider is None:
            raise ConfigurationError(NOT_CONFIGURED_MESSAGE)

        line_items = self.build_line_items(items)
        return self.provider.create_session(
            [li.to_stripe(self.currency) for li in line_items],
            success_url or self.success_url,
            cancel_url or self.cancel_url,
        )
