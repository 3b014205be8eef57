# storefront/domain/schemas.py
from decimal import Decimal
from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from storefront.domain.money import format_money, parse_money


class Record(BaseModel):
    """Baza dla rekordow trzymanych w storage (klucze JSON w camelCase)."""

    model_config = ConfigDict(populate_by_name=True)

    def to_json(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


def _money(value) -> str:
    return format_money(parse_money(value))


# =====================================================
# Rekordy storage
# =====================================================

class Item(Record):
    id: int
    name: str
    price: str = Field(..., description="Decimal string with two places")
    image: str = ""
    description: str = ""

    @field_validator("price", mode="before")
    @classmethod
    def normalize_price(cls, value):
        return _money(value)

    @property
    def unit_price(self) -> Decimal:
        return Decimal(self.price)


class Category(Record):
    id: int
    name: str
    items: List[Item] = Field(default_factory=list)
    image: Optional[str] = None

    def find_item(self, item_id: int) -> Item | None:
        return next((i for i in self.items if i.id == item_id), None)


class CartLine(Record):
    category_id: int = Field(..., alias="categoryId")
    item_id: int = Field(..., alias="itemId")
    quantity: int = Field(..., ge=1)


class OrderStatus(str, Enum):
    PENDING = "pending"
    SHIPPED = "shipped"
    CANCELLED = "cancelled"


class OrderLine(Record):
    name: str
    quantity: int = Field(..., ge=1)
    price: str

    @field_validator("price", mode="before")
    @classmethod
    def normalize_price(cls, value):
        return _money(value)

    @property
    def subtotal(self) -> Decimal:
        return Decimal(self.price) * self.quantity


class Order(Record):
    id: int
    date: str
    # starsze zamowienia w historii nie maja user/status
    user: Optional[str] = None
    items: List[OrderLine] = Field(default_factory=list)
    total: str
    status: OrderStatus = OrderStatus.PENDING

    @field_validator("total", mode="before")
    @classmethod
    def normalize_total(cls, value):
        return _money(value)


class User(Record):
    username: str
    full_name: str = Field("", alias="fullName")
    email: str = ""
    phone: str = ""
    address: str = ""
    password: str
    history: List[Order] = Field(default_factory=list)
    blocked: bool = False


class AdminAccount(Record):
    username: str
    password: str


# =====================================================
# API - wejscie
# =====================================================

class CategoryIn(BaseModel):
    name: str = ""
    image: Optional[str] = None


class CategoryRename(BaseModel):
    name: str = ""


class ItemIn(BaseModel):
    """Schema for adding or editing a catalog item."""

    name: str = ""
    price: Any = None
    description: str = ""
    image: Optional[str] = None


class CartItemIn(BaseModel):
    """Quantity is coerced by the cart engine, so anything is accepted here."""

    model_config = ConfigDict(populate_by_name=True)

    category_id: int = Field(..., alias="categoryId")
    item_id: int = Field(..., alias="itemId")
    quantity: Any = 1


class RegisterIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    full_name: str = Field("", alias="fullName")
    username: str = ""
    email: str = ""
    phone: str = ""
    address: str = ""
    password: str = ""


class LoginIn(BaseModel):
    username: str = ""
    password: str = ""


class PasswordChangeIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    old_password: str = Field("", alias="oldPassword")
    new_password: str = Field("", alias="newPassword")


class StatusIn(BaseModel):
    status: str


class BannersIn(BaseModel):
    images: List[str] = Field(default_factory=list)


# =====================================================
# API - wyjscie
# =====================================================

class CartLineOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    category_id: int = Field(..., alias="categoryId")
    item_id: int = Field(..., alias="itemId")
    name: str
    price: str
    quantity: int
    subtotal: str


class CartSummary(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    count: int = 0
    total: str = "0.00"
    lines: List[CartLineOut] = Field(default_factory=list)
    payment_method: str = Field("Cash on Delivery", alias="paymentMethod")


class UserOut(BaseModel):
    """User without password and history."""

    model_config = ConfigDict(populate_by_name=True, from_attributes=True)

    username: str
    full_name: str = Field("", alias="fullName")
    email: str = ""
    phone: str = ""
    address: str = ""
    blocked: bool = False


class SessionOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    logged_in_user: Optional[str] = Field(None, alias="loggedInUser")
    admin_logged_in: bool = Field(False, alias="adminLoggedIn")


class ReconcileOut(BaseModel):
    fixed: int
