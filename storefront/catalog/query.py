"""
Catalog Query Builder

Translates catalog view state (category, price range, rating, search, sort,
page) into a records-backend query: a filter expression, a sort expression
and a page window. Pure functions only; nothing here performs I/O.

Filter grammar:
    field = "value"      equality
    field >= n           comparison (also <=)
    field ~ "text"       substring match
    a && b, a || b       boolean combinators, (...) grouping
"""
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Optional, Tuple

from pydantic import BaseModel, Field, field_validator, model_validator

from storefront.services.money import to_decimal

ALL_CATEGORIES = "All"
CATEGORIES: Tuple[str, ...] = (ALL_CATEGORIES, "Men's Clothing", "Women's Clothing", "Accessories")
RATING_OPTIONS: Tuple[int, ...] = (0, 3, 4)
PRICE_CEILING = Decimal("500")
DEFAULT_PER_PAGE = 12

SORT_NEWEST = "newest"
SORT_PRICE_LOW = "price-low"
SORT_PRICE_HIGH = "price-high"
SORT_POPULARITY = "popularity"

SORT_EXPRESSIONS = {
    SORT_NEWEST: "-created",
    SORT_PRICE_LOW: "price",
    SORT_PRICE_HIGH: "-price",
    SORT_POPULARITY: "-reviews_count",
}
DEFAULT_SORT = SORT_EXPRESSIONS[SORT_NEWEST]


def _parse_bound(value) -> Decimal:
    if value is None or isinstance(value, bool):
        raise ValueError(f"invalid price bound {value!r}")
    if isinstance(value, float):
        value = str(value)
    try:
        bound = value if isinstance(value, Decimal) else Decimal(value)
    except (InvalidOperation, TypeError, ValueError):
        raise ValueError(f"invalid price bound {value!r}") from None
    if not bound.is_finite():
        raise ValueError(f"price bound must be finite, got {value!r}")
    return bound


class CatalogFilterState(BaseModel):
    """UI-level catalog state. Immutable: derive a new state with model_copy()."""
    category: str = ALL_CATEGORIES
    price_range: Tuple[Decimal, Decimal] = (Decimal("0"), PRICE_CEILING)
    min_rating: int = 0
    search_term: str = ""
    sort_key: str = SORT_NEWEST  # Unknown keys sort as newest
    page: int = Field(default=1, ge=1)
    per_page: int = Field(default=DEFAULT_PER_PAGE, ge=1)

    class Config:
        frozen = True

    @field_validator("category")
    @classmethod
    def check_category(cls, v):
        if v not in CATEGORIES:
            raise ValueError(f"category must be one of {CATEGORIES}")
        return v

    @field_validator("min_rating")
    @classmethod
    def check_min_rating(cls, v):
        if v not in RATING_OPTIONS:
            raise ValueError(f"min_rating must be one of {RATING_OPTIONS}")
        return v

    @field_validator("price_range", mode="before")
    @classmethod
    def convert_price_range(cls, v):
        if not isinstance(v, (list, tuple)) or len(v) != 2:
            raise ValueError("price_range must be a (min, max) pair")
        return tuple(_parse_bound(bound) for bound in v)

    @model_validator(mode="after")
    def check_price_bounds(self):
        low, high = self.price_range
        if not (0 <= low <= high <= PRICE_CEILING):
            raise ValueError(f"price_range must satisfy 0 <= min <= max <= {PRICE_CEILING}")
        return self


@dataclass(frozen=True)
class QueryDescriptor:
    """Backend list request derived from a CatalogFilterState."""
    filter: str
    sort: str
    page: int
    per_page: int
    clauses: Tuple[str, ...] = ()

    def to_params(self) -> dict:
        """Query-string parameters for the records list endpoint."""
        params = {"page": self.page, "perPage": self.per_page, "sort": self.sort}
        if self.filter:
            params["filter"] = self.filter
        return params


def quote(value: str) -> str:
    """Render a string literal, escaping backslashes and double quotes."""
    escaped = str(value).replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def format_number(value) -> str:
    """Render a number without a trailing '.0' for integral values."""
    number = to_decimal(value)
    if number == number.to_integral_value():
        return str(int(number))
    return format(number.normalize(), "f")


def eq(field: str, value: str) -> str:
    return f"{field} = {quote(value)}"


def sort_expression(sort_key: Optional[str]) -> str:
    """Map a UI sort key to a sort expression; unknown keys fall back to newest."""
    return SORT_EXPRESSIONS.get(sort_key or "", DEFAULT_SORT)


def filter_clauses(filters: CatalogFilterState, search_term: str = "") -> Tuple[str, ...]:
    """Clauses in order: category, price, rating, text search."""
    clauses = []

    if filters.category != ALL_CATEGORIES:
        clauses.append(eq("category", filters.category))

    low, high = filters.price_range
    clauses.append(f"price >= {format_number(low)} && price <= {format_number(high)}")

    if filters.min_rating > 0:
        clauses.append(f"rating >= {filters.min_rating}")

    # Blank terms are skipped; anything else is matched exactly as typed
    if search_term and search_term.strip():
        clauses.append(f"(name ~ {quote(search_term)} || description ~ {quote(search_term)})")

    return tuple(clauses)


def build_query(
    filters: CatalogFilterState,
    search_term: Optional[str] = None,
    sort_key: Optional[str] = None,
    page: Optional[int] = None,
    per_page: Optional[int] = None,
) -> QueryDescriptor:
    """
    Build the backend query for a catalog view.

    Arguments left as None are taken from `filters`. The page is encoded as
    requested; clamping to the last page is the backend's concern.
    """
    term = filters.search_term if search_term is None else search_term
    clauses = filter_clauses(filters, term)
    return QueryDescriptor(
        filter=" && ".join(clauses),
        sort=sort_expression(filters.sort_key if sort_key is None else sort_key),
        page=filters.page if page is None else page,
        per_page=filters.per_page if per_page is None else per_page,
        clauses=clauses,
    )


def clamp_quantity(requested: int, stock: int) -> int:
    """Clamp a quantity picker value to [1, stock] (at least 1)."""
    return max(1, min(requested, max(stock, 1)))
