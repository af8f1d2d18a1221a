"""
Core Data Models for Spendwise

These models define the strict schemas for every expense flowing
through the ledger. They are designed to:
1. Enforce the record invariants at construction time
2. Provide the validation predicates the CSV codec relies on
3. Be serializable for storage and logging

DESIGN DECISION: An Expense is frozen. Editing a record means building
a new one with the same id and replacing it in the collection.
"""

import re
from decimal import Decimal, InvalidOperation, getcontext
from enum import Enum
from typing import Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
)


UNCATEGORIZED = "Uncategorized"

# ASCII digits only; str.isdigit() and \d would accept other scripts.
_DATE_PATTERN = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")

# Sums of up to 10**18 amounts stay within the decimal context.
_SUM_HEADROOM = 18


# =============================================================================
# VALIDATION PREDICATES
# =============================================================================

def is_valid_date(value: str) -> bool:
    """Check that a value is a strict YYYY-MM-DD date string."""
    return bool(_DATE_PATTERN.fullmatch(value))


def is_usable_amount(amount: Decimal) -> bool:
    """Finite and small enough that ledger totals cannot overflow."""
    if not amount.is_finite():
        return False
    return amount.adjusted() <= getcontext().Emax - _SUM_HEADROOM


def parse_amount(value: str) -> Optional[Decimal]:
    """
    Parse an amount string into a Decimal.

    Returns None when the text is not a finite decimal number.
    NaN, Infinity and exponents like 1e1000000 are rejected rather
    than coerced.
    """
    try:
        amount = Decimal(value.strip())
    except InvalidOperation:
        return None
    if not is_usable_amount(amount):
        return None
    return amount


# =============================================================================
# CATEGORIES
# =============================================================================

class CategoryIcon(str, Enum):
    """
    Icons a category can be displayed with.

    DESIGN DECISION: A closed set instead of free-form icon names.
    Unknown names resolve to CIRCLE through `lookup`.
    """
    UTENSILS = "Utensils"
    CAR = "Car"
    HOME = "Home"
    SHOPPING_BAG = "ShoppingBag"
    SHOPPING_CART = "ShoppingCart"
    FILM = "Film"
    ZAP = "Zap"
    HEART = "Heart"
    COFFEE = "Coffee"
    PLANE = "Plane"
    WIFI = "Wifi"
    GIFT = "Gift"
    BOOK = "Book"
    SMARTPHONE = "Smartphone"
    BRIEFCASE = "Briefcase"
    GRADUATION_CAP = "GraduationCap"
    MUSIC = "Music"
    DUMBBELL = "Dumbbell"
    CIRCLE = "Circle"

    @classmethod
    def lookup(cls, name: str) -> "CategoryIcon":
        try:
            return cls(name)
        except ValueError:
            return cls.CIRCLE


class ExpenseCategory(BaseModel):
    """
    A category the presentation layer offers when recording expenses.

    The ledger core never validates Expense.category against these;
    categories are display metadata only.
    """
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1, max_length=100)
    color: str = Field(
        default="#6B7280",
        pattern="^#[0-9A-Fa-f]{6}$",
        description="Hex display color",
    )
    icon: CategoryIcon = CategoryIcon.CIRCLE

    @field_validator("icon", mode="before")
    @classmethod
    def resolve_icon(cls, v):
        if isinstance(v, str) and not isinstance(v, CategoryIcon):
            return CategoryIcon.lookup(v)
        return v


DEFAULT_CATEGORIES: tuple[ExpenseCategory, ...] = (
    ExpenseCategory(id="1", name="Food", color="#EF4444", icon=CategoryIcon.UTENSILS),
    ExpenseCategory(id="2", name="Transport", color="#F59E0B", icon=CategoryIcon.CAR),
    ExpenseCategory(id="3", name="Housing", color="#3B82F6", icon=CategoryIcon.HOME),
    ExpenseCategory(id="4", name="Entertainment", color="#8B5CF6", icon=CategoryIcon.FILM),
    ExpenseCategory(id="5", name="Utilities", color="#10B981", icon=CategoryIcon.ZAP),
    ExpenseCategory(id="6", name="Health", color="#EC4899", icon=CategoryIcon.HEART),
    ExpenseCategory(id="7", name="Shopping", color="#DB2777", icon=CategoryIcon.SHOPPING_BAG),
    ExpenseCategory(id="8", name="Other", color="#6B7280", icon=CategoryIcon.CIRCLE),
)


# =============================================================================
# CORE EXPENSE MODEL
# =============================================================================

class Expense(BaseModel):
    """
    One monetary event in the ledger.

    CRITICAL: `id` is assigned by whoever creates the record and is
    never regenerated. Reconciliation relies on it as the identity.
    """
    model_config = ConfigDict(frozen=True)

    id: str = Field(
        ...,
        min_length=1,
        description="Opaque identifier, stable for the record's lifetime",
    )
    amount: Decimal = Field(
        ...,
        ge=0,
        description="Non-negative amount, currency agnostic",
    )
    date: str = Field(
        ...,
        description="ISO calendar date (YYYY-MM-DD)",
    )
    category: str = Field(
        default=UNCATEGORIZED,
        description="Free-form category label",
    )
    description: str = Field(
        default="",
        description="Free text; commas and quotes survive CSV round-trips",
    )
    tags: list[str] = Field(
        default_factory=list,
        description="Ordered tags, duplicates preserved",
    )

    @field_validator("id")
    @classmethod
    def validate_id(cls, v: str) -> str:
        """Reject ids that are only whitespace."""
        if not v.strip():
            raise ValueError("Expense id cannot be blank")
        return v

    @field_validator("amount")
    @classmethod
    def validate_amount(cls, v: Decimal) -> Decimal:
        if not is_usable_amount(v):
            raise ValueError("Amount must be a finite number within range")
        return v

    @field_validator("date")
    @classmethod
    def validate_date(cls, v: str) -> str:
        if not is_valid_date(v):
            raise ValueError(f"Invalid date format: {v!r} (YYYY-MM-DD required)")
        return v


class LedgerPreferences(BaseModel):
    """
    Application preferences persisted next to the expense collection.

    The core only reads `daily_limit`; the rest is carried for the
    presentation layer.
    """

    daily_limit: Decimal = Field(default=Decimal("1000"), ge=0)
    currency: str = Field(default="₹", min_length=1, max_length=8)
    language: str = Field(default="en", pattern="^(en|hi)$")
    categories: list[ExpenseCategory] = Field(
        default_factory=lambda: list(DEFAULT_CATEGORIES)
    )

    def category_names(self) -> list[str]:
        return [category.name for category in self.categories]
