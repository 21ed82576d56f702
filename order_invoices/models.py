"""Order-side collaborator shapes and the flat invoice record."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional, Tuple, Union

from dateutil import parser as dateutil_parser


class Role(str, enum.Enum):
    SUPER_ADMIN = "super_admin"
    ADMIN = "admin"
    CUSTOMER = "customer"

    @classmethod
    def parse(cls, value: Union[str, "Role"]) -> "Role":
        if isinstance(value, Role):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValueError(f"Unknown role: {value!r}") from None


def parse_timestamp(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value
    if value is None or str(value).strip() == "":
        raise ValueError("Timestamp is required.")
    return dateutil_parser.isoparse(str(value))


def _optional_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value)
    return text if text.strip() else None


def _number(value: Any, default: float = 0) -> Union[int, float]:
    if value is None or value == "":
        return default
    number = float(value)
    return int(number) if number.is_integer() else number


@dataclass(frozen=True)
class Account:
    id: str
    first_name: str
    last_name: str
    email: str
    role: Role = Role.CUSTOMER
    phone: Optional[str] = None
    status: str = "active"
    is_deleted: bool = False

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def is_blocked(self) -> bool:
        return self.status == "blocked"

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Account":
        return cls(
            id=str(data.get("id") or data["_id"]),
            first_name=str(data.get("firstName", "")),
            last_name=str(data.get("lastName", "")),
            email=str(data.get("email", "")),
            role=Role.parse(data.get("role", Role.CUSTOMER.value)),
            phone=_optional_str(data.get("phone")),
            status=str(data.get("status") or "active").lower(),
            is_deleted=bool(data.get("isDeleted", False)),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "firstName": self.first_name,
            "lastName": self.last_name,
            "email": self.email,
            "role": self.role.value,
            "phone": self.phone,
            "status": self.status,
            "isDeleted": self.is_deleted,
        }


@dataclass(frozen=True)
class ShippingAddress:
    full_name: str
    phone: str
    street: str
    city: str
    state: str = ""
    zip_code: str = ""
    country: str = "Bangladesh"
    email: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ShippingAddress":
        return cls(
            full_name=str(data.get("fullName", "") or ""),
            phone=str(data.get("phone", "") or ""),
            street=str(data.get("street", "") or ""),
            city=str(data.get("city", "") or ""),
            state=str(data.get("state", "") or ""),
            zip_code=str(data.get("zipCode", "") or ""),
            country=str(data.get("country", "") or "Bangladesh"),
            email=_optional_str(data.get("email")),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "fullName": self.full_name,
            "phone": self.phone,
            "street": self.street,
            "city": self.city,
            "state": self.state,
            "zipCode": self.zip_code,
            "country": self.country,
            "email": self.email,
        }


@dataclass(frozen=True)
class OrderItem:
    name: str
    price: Union[int, float]
    quantity: Union[int, float]
    subtotal: Union[int, float]
    product_id: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "OrderItem":
        return cls(
            name=str(data.get("name", "")),
            price=_number(data.get("price")),
            quantity=_number(data.get("quantity"), 1),
            subtotal=_number(data.get("subtotal")),
            product_id=_optional_str(data.get("product")),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "product": self.product_id,
            "name": self.name,
            "price": self.price,
            "quantity": self.quantity,
            "subtotal": self.subtotal,
        }


@dataclass(frozen=True)
class Order:
    id: str
    order_number: str
    user_id: str
    items: Tuple[OrderItem, ...]
    subtotal: Union[int, float]
    total: Union[int, float]
    shipping_address: ShippingAddress
    payment_method: str
    created_at: datetime
    shipping_cost: Union[int, float] = 0
    discount: Union[int, float] = 0
    tax: Union[int, float] = 0
    payment_status: str = "pending"
    transaction_id: Optional[str] = None
    customer_note: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Order":
        return cls(
            id=str(data.get("id") or data["_id"]),
            order_number=str(data["orderNumber"]),
            user_id=str(data["user"]),
            items=tuple(OrderItem.from_dict(item) for item in data.get("items", []) or []),
            subtotal=_number(data.get("subtotal")),
            shipping_cost=_number(data.get("shippingCost")),
            discount=_number(data.get("discount")),
            tax=_number(data.get("tax")),
            total=_number(data.get("total")),
            shipping_address=ShippingAddress.from_dict(data.get("shippingAddress", {}) or {}),
            payment_method=str(data.get("paymentMethod", "")),
            payment_status=str(data.get("paymentStatus", "pending")),
            transaction_id=_optional_str(data.get("transactionId")),
            customer_note=_optional_str(data.get("customerNote")),
            created_at=parse_timestamp(data.get("createdAt")),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "orderNumber": self.order_number,
            "user": self.user_id,
            "items": [item.to_dict() for item in self.items],
            "subtotal": self.subtotal,
            "shippingCost": self.shipping_cost,
            "discount": self.discount,
            "tax": self.tax,
            "total": self.total,
            "shippingAddress": self.shipping_address.to_dict(),
            "paymentMethod": self.payment_method,
            "paymentStatus": self.payment_status,
            "transactionId": self.transaction_id,
            "customerNote": self.customer_note,
            "createdAt": self.created_at.isoformat(),
        }


@dataclass(frozen=True)
class CompanyInfo:
    name: str
    address: str
    phone: str
    email: str


@dataclass(frozen=True)
class CustomerInfo:
    name: str
    email: str
    phone: str
    address: str
    city: str
    zip_code: Optional[str] = None


@dataclass(frozen=True)
class InvoiceItem:
    name: str
    quantity: Union[int, float]
    price: Union[int, float]
    subtotal: Union[int, float]


@dataclass(frozen=True)
class InvoiceRecord:
    """Flat, renderer-agnostic snapshot of one order's billing data.

    Totals are copied from the order as stored; nothing here recomputes them.
    """

    invoice_number: str
    order_number: str
    order_date: datetime
    company: CompanyInfo
    customer: CustomerInfo
    items: Tuple[InvoiceItem, ...]
    subtotal: Union[int, float]
    shipping_cost: Union[int, float]
    discount: Union[int, float]
    tax: Union[int, float]
    total: Union[int, float]
    payment_method: str
    payment_status: str
    transaction_id: Optional[str] = None
    notes: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "invoiceNumber": self.invoice_number,
            "orderNumber": self.order_number,
            "orderDate": self.order_date.isoformat(),
            "company": {
                "name": self.company.name,
                "address": self.company.address,
                "phone": self.company.phone,
                "email": self.company.email,
            },
            "customer": {
                "name": self.customer.name,
                "email": self.customer.email,
                "phone": self.customer.phone,
                "address": self.customer.address,
                "city": self.customer.city,
                "zipCode": self.customer.zip_code,
            },
            "items": [
                {
                    "name": item.name,
                    "quantity": item.quantity,
                    "price": item.price,
                    "subtotal": item.subtotal,
                }
                for item in self.items
            ],
            "subtotal": self.subtotal,
            "shippingCost": self.shipping_cost,
            "discount": self.discount,
            "tax": self.tax,
            "total": self.total,
            "paymentMethod": self.payment_method,
            "paymentStatus": self.payment_status,
            "transactionId": self.transaction_id,
            "notes": self.notes,
        }
