"""Payment gateway client and payment-intent creation."""
from typing import Any, Callable, Dict, Optional
import stripe
from src.utils.errors import InternalError, ValidationError


class StripePaymentGateway:
    """Creates payment intents with the Stripe SDK."""

    def __init__(self, api_key: str, create_intent: Optional[Callable[..., Any]] = None):
        self.api_key = api_key
        self.create_intent = create_intent or stripe.PaymentIntent.create

    def create_payment_intent(
        self,
        amount: int,
        currency: str,
        metadata: Optional[Dict[str, Any]] = None
    ) -> Dict[str, str]:
        """
        Create a payment intent.

        Args:
            amount: Amount in minor currency units (cents)
            currency: ISO currency code
            metadata: Key/value pairs attached to the intent

        Returns:
            Dictionary with ``id`` and ``client_secret``

        Raises:
            InternalError: If the gateway is unreachable or rejects the request
        """
        try:
            intent = self.create_intent(
                api_key=self.api_key,
                amount=amount,
                currency=currency,
                metadata={key: str(value) for key, value in (metadata or {}).items()}
            )
        except stripe.APIConnectionError as e:
            print(f"[PAYMENT] Gateway request failed: {e}")
            raise InternalError("Payment gateway unavailable") from e
        except stripe.StripeError as e:
            print(f"[PAYMENT] Gateway rejected payment intent: {e.http_status} {e.user_message}")
            raise InternalError("Payment gateway rejected the request") from e

        return {"id": intent.id, "client_secret": intent.client_secret}


def create_order_payment(
    gateway,
    total_amount: Optional[float],
    currency: str,
    user_id: Optional[int] = None
) -> Dict[str, str]:
    """
    Create a payment intent for an order total.

    Args:
        gateway: Object with ``create_payment_intent(amount, currency, metadata)``
        total_amount: Order total in major units
        currency: ISO currency code
        user_id: Paying user, recorded in the intent metadata

    Returns:
        Dictionary with ``id`` and ``client_secret``
    """
    if not total_amount or total_amount <= 0:
        raise ValidationError("Total amount is required")

    amount = int(round(total_amount * 100))
    metadata = {"userId": user_id} if user_id is not None else {}
    return gateway.create_payment_intent(amount, currency, metadata)
