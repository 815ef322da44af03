"""Domain services wrapping repositories."""
from .catalog import CatalogService, ReviewSummary
from .checkout import CheckoutService, CheckoutResult, CheckoutSummary, CustomerDetails
from .account import AccountService

__all__ = [
    "CatalogService",
    "ReviewSummary",
    "CheckoutService",
    "CheckoutResult",
    "CheckoutSummary",
    "CustomerDetails",
    "AccountService",
]
