"""Payment element interface.

Card data never passes through the core: a hosted payment element collects
it, and the core only triggers submission and reads the outcome.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Optional


@dataclass
class PaymentResult:
    """Outcome of a payment submission."""

    success: bool
    payment_id: Optional[str] = None
    error: Optional[str] = None


class PaymentElement(ABC):
    """Hosted payment widget bound to the checkout form."""

    @property
    def ready(self) -> bool:
        """False until the widget has finished loading."""
        return True

    @abstractmethod
    async def confirm(self, amount: Decimal, billing: dict[str, Any]) -> PaymentResult:
        """
        Submit the widget for the given amount.

        Args:
            amount: Total to charge, rounded to cents
            billing: Customer name, email, phone and address

        Returns:
            PaymentResult; implementations report failures here, not by raising
        """
