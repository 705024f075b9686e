# Overview: Typed views over backend JSON payloads with shape validation.

# inventra/schemas.py
"""
Response schemas.

Every payload a page renders goes through `from_payload`, which checks the keys
and types the templates rely on. A malformed response raises SchemaError (an
ApiError), so it reaches the user as a normal inline error message instead of
a template crash.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Generic, Optional, TypeVar, Union

from .api_client import ApiError


ROLE_MANAGER = "MANAGER"
ROLE_EMPLOYEE = "EMPLOYEE"
ROLES = (ROLE_MANAGER, ROLE_EMPLOYEE)


class SchemaError(ApiError):
    """Backend response did not have the expected shape."""


def _ctx(where: str, key: str) -> str:
    return f"{where}.{key}" if where else key


def _mapping(data: Any, where: str) -> dict:
    if not isinstance(data, dict):
        raise SchemaError(f"Unexpected response: {where or 'body'} must be an object")
    return data


def _text(data: dict, key: str, where: str, *, required: bool = True) -> Optional[str]:
    value = data.get(key)
    if value is None:
        if required:
            raise SchemaError(f"Unexpected response: missing {_ctx(where, key)}")
        return None
    if isinstance(value, bool) or not isinstance(value, (str, int)):
        raise SchemaError(f"Unexpected response: {_ctx(where, key)} must be a string")
    return str(value)


def _number(data: dict, key: str, where: str, *, default: Any = None) -> Any:
    value = data.get(key, default)
    if value is None:
        raise SchemaError(f"Unexpected response: missing {_ctx(where, key)}")
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise SchemaError(f"Unexpected response: {_ctx(where, key)} must be a number")
    return value


def _flag(data: dict, key: str, default: bool = True) -> bool:
    value = data.get(key, default)
    return bool(value)


def _list(data: dict, key: str, where: str) -> list:
    value = data.get(key)
    if value is None:
        raise SchemaError(f"Unexpected response: missing {_ctx(where, key)}")
    if not isinstance(value, list):
        raise SchemaError(f"Unexpected response: {_ctx(where, key)} must be a list")
    return value


# =============================================================================
# REFERENCE DATA
# =============================================================================

@dataclass(frozen=True)
class User:
    id: str
    name: str
    email: str
    role: str
    is_active: bool = True
    created_at: Optional[str] = None

    @property
    def is_manager(self) -> bool:
        return self.role == ROLE_MANAGER

    @classmethod
    def from_payload(cls, data: Any, where: str = "user") -> "User":
        data = _mapping(data, where)
        return cls(
            id=_text(data, "id", where),
            name=_text(data, "name", where),
            email=_text(data, "email", where),
            role=_text(data, "role", where),
            is_active=_flag(data, "isActive"),
            created_at=_text(data, "createdAt", where, required=False),
        )


@dataclass(frozen=True)
class Branch:
    id: str
    name: str
    address: Optional[str] = None
    phone: Optional[str] = None
    is_active: bool = True

    @classmethod
    def from_payload(cls, data: Any, where: str = "branch") -> "Branch":
        data = _mapping(data, where)
        return cls(
            id=_text(data, "id", where),
            name=_text(data, "name", where),
            address=_text(data, "address", where, required=False),
            phone=_text(data, "phone", where, required=False),
            is_active=_flag(data, "isActive"),
        )


@dataclass(frozen=True)
class Category:
    id: str
    name: str
    parent_id: Optional[str] = None
    is_active: bool = True

    @classmethod
    def from_payload(cls, data: Any, where: str = "category") -> "Category":
        data = _mapping(data, where)
        return cls(
            id=_text(data, "id", where),
            name=_text(data, "name", where),
            parent_id=_text(data, "parentId", where, required=False),
            is_active=_flag(data, "isActive"),
        )


@dataclass(frozen=True)
class Product:
    id: str
    name: str
    sku: str
    unit: str = "PCS"
    selling_price: Any = 0
    cost_price: Any = 0
    barcode: Optional[str] = None
    description: Optional[str] = None
    category_id: Optional[str] = None
    category_name: Optional[str] = None
    is_active: bool = True

    def matches(self, query: str) -> bool:
        """Case-insensitive match on name, SKU or barcode."""
        q = query.strip().lower()
        if not q:
            return True
        return (
            q in self.name.lower()
            or q in self.sku.lower()
            or (self.barcode is not None and q in self.barcode.lower())
        )

    @classmethod
    def from_payload(cls, data: Any, where: str = "product") -> "Product":
        data = _mapping(data, where)
        category = data.get("category")
        category_name = None
        if isinstance(category, dict):
            category_name = _text(category, "name", _ctx(where, "category"), required=False)
        return cls(
            id=_text(data, "id", where),
            name=_text(data, "name", where),
            sku=_text(data, "sku", where),
            unit=_text(data, "unit", where, required=False) or "PCS",
            selling_price=_number(data, "sellingPrice", where, default=0),
            cost_price=_number(data, "costPrice", where, default=0),
            barcode=_text(data, "barcode", where, required=False),
            description=_text(data, "description", where, required=False),
            category_id=_text(data, "categoryId", where, required=False),
            category_name=category_name,
            is_active=_flag(data, "isActive"),
        )


@dataclass(frozen=True)
class ProductRef:
    """Product as embedded in stock, invoice and report rows."""
    id: str
    name: str
    sku: str
    unit: str = "PCS"
    selling_price: Any = None

    @classmethod
    def from_payload(cls, data: Any, where: str = "product") -> "ProductRef":
        data = _mapping(data, where)
        price = data.get("sellingPrice")
        return cls(
            id=_text(data, "id", where, required=False) or "",
            name=_text(data, "name", where),
            sku=_text(data, "sku", where),
            unit=_text(data, "unit", where, required=False) or "PCS",
            selling_price=_number(data, "sellingPrice", where) if price is not None else None,
        )


@dataclass(frozen=True)
class BranchRef:
    id: str
    name: str
    address: Optional[str] = None
    phone: Optional[str] = None

    @classmethod
    def from_payload(cls, data: Any, where: str = "branch") -> "BranchRef":
        data = _mapping(data, where)
        return cls(
            id=_text(data, "id", where, required=False) or "",
            name=_text(data, "name", where),
            address=_text(data, "address", where, required=False),
            phone=_text(data, "phone", where, required=False),
        )


@dataclass(frozen=True)
class Actor:
    """`createdBy` block: who performed a stock change or rang up a sale."""
    name: str
    role: str = ""
    id: str = ""

    @classmethod
    def from_payload(cls, data: Any, where: str = "createdBy") -> "Actor":
        data = _mapping(data, where)
        return cls(
            name=_text(data, "name", where),
            role=_text(data, "role", where, required=False) or "",
            id=_text(data, "id", where, required=False) or "",
        )


# =============================================================================
# INVENTORY
# =============================================================================

@dataclass(frozen=True)
class StockItem:
    id: str
    quantity: Any
    branch: BranchRef
    product: ProductRef

    @classmethod
    def from_payload(cls, data: Any, where: str = "item") -> "StockItem":
        data = _mapping(data, where)
        return cls(
            id=_text(data, "id", where, required=False) or "",
            quantity=_number(data, "quantity", where),
            branch=BranchRef.from_payload(data.get("branch"), _ctx(where, "branch")),
            product=ProductRef.from_payload(data.get("product"), _ctx(where, "product")),
        )


@dataclass(frozen=True)
class StockTxn:
    id: str
    type: str
    qty_change: Any
    created_at: str
    product: ProductRef
    branch: BranchRef
    created_by: Actor
    note: Optional[str] = None

    @classmethod
    def from_payload(cls, data: Any, where: str = "txn") -> "StockTxn":
        data = _mapping(data, where)
        return cls(
            id=_text(data, "id", where, required=False) or "",
            type=_text(data, "type", where),
            qty_change=_number(data, "qtyChange", where),
            created_at=_text(data, "createdAt", where, required=False) or "",
            product=ProductRef.from_payload(data.get("product"), _ctx(where, "product")),
            branch=BranchRef.from_payload(data.get("branch"), _ctx(where, "branch")),
            created_by=Actor.from_payload(data.get("createdBy"), _ctx(where, "createdBy")),
            note=_text(data, "note", where, required=False),
        )


# =============================================================================
# INVOICES
# =============================================================================

@dataclass(frozen=True)
class InvoiceLine:
    qty: Any
    unit_price: Any
    line_total: Any
    product: ProductRef

    @classmethod
    def from_payload(cls, data: Any, where: str = "item") -> "InvoiceLine":
        data = _mapping(data, where)
        return cls(
            qty=_number(data, "qty", where),
            unit_price=_number(data, "unitPrice", where),
            line_total=_number(data, "lineTotal", where),
            product=ProductRef.from_payload(data.get("product"), _ctx(where, "product")),
        )


@dataclass(frozen=True)
class Invoice:
    """Completed sale as issued by the backend. Display-only."""
    invoice_no: Optional[str]
    created_at: str
    total: Any
    branch: BranchRef
    created_by: Actor
    items: tuple = ()
    note: Optional[str] = None
    public_id: Optional[str] = None

    @classmethod
    def from_payload(cls, data: Any, where: str = "invoice") -> "Invoice":
        data = _mapping(data, where)
        items = _list(data, "items", where)
        return cls(
            invoice_no=_text(data, "invoiceNo", where, required=False),
            created_at=_text(data, "createdAt", where, required=False) or "",
            total=_number(data, "total", where),
            branch=BranchRef.from_payload(data.get("branch"), _ctx(where, "branch")),
            created_by=Actor.from_payload(data.get("createdBy"), _ctx(where, "createdBy")),
            items=tuple(
                InvoiceLine.from_payload(item, f"{where}.items[{i}]")
                for i, item in enumerate(items)
            ),
            note=_text(data, "note", where, required=False),
            public_id=_text(data, "publicId", where, required=False),
        )


@dataclass(frozen=True)
class InvoiceRow:
    """Invoice as listed on the history page (no line items)."""
    public_id: str
    invoice_no: Optional[str]
    total: Any
    created_at: str
    branch: BranchRef
    created_by: Actor

    @classmethod
    def from_payload(cls, data: Any, where: str = "invoice") -> "InvoiceRow":
        data = _mapping(data, where)
        return cls(
            public_id=_text(data, "publicId", where),
            invoice_no=_text(data, "invoiceNo", where, required=False),
            total=_number(data, "total", where),
            created_at=_text(data, "createdAt", where, required=False) or "",
            branch=BranchRef.from_payload(data.get("branch"), _ctx(where, "branch")),
            created_by=Actor.from_payload(data.get("createdBy"), _ctx(where, "createdBy")),
        )


# =============================================================================
# REPORTS
# =============================================================================

@dataclass(frozen=True)
class SalesDay:
    day: str
    invoice_count: Any
    total_sales: Any

    @classmethod
    def from_payload(cls, data: Any, where: str = "day") -> "SalesDay":
        data = _mapping(data, where)
        return cls(
            day=_text(data, "day", where),
            invoice_count=_number(data, "invoiceCount", where, default=0),
            total_sales=_number(data, "totalSales", where, default=0),
        )


@dataclass(frozen=True)
class SalesSummary:
    range_from: str
    range_to: str
    invoice_count: Any
    total_sales: Any
    days: tuple = ()

    @classmethod
    def from_payload(cls, data: Any, where: str = "") -> "SalesSummary":
        data = _mapping(data, where)
        rng = data.get("range") or {}
        rng = _mapping(rng, _ctx(where, "range"))
        summary = _mapping(data.get("summary"), _ctx(where, "summary"))
        return cls(
            range_from=_text(rng, "from", "range", required=False) or "",
            range_to=_text(rng, "to", "range", required=False) or "",
            invoice_count=_number(summary, "invoiceCount", "summary", default=0),
            total_sales=_number(summary, "totalSales", "summary", default=0),
            days=tuple(
                SalesDay.from_payload(d, f"days[{i}]")
                for i, d in enumerate(_list(data, "days", where))
            ),
        )


@dataclass(frozen=True)
class TopProductRow:
    product: ProductRef
    qty: Any
    sales: Any

    @classmethod
    def from_payload(cls, data: Any, where: str = "row") -> "TopProductRow":
        data = _mapping(data, where)
        return cls(
            product=ProductRef.from_payload(data.get("product"), _ctx(where, "product")),
            qty=_number(data, "qty", where, default=0),
            sales=_number(data, "sales", where, default=0),
        )


@dataclass(frozen=True)
class LowStockRow:
    product: ProductRef
    branch: BranchRef
    quantity: Any
    threshold: Any = None

    @classmethod
    def from_payload(cls, data: Any, where: str = "item") -> "LowStockRow":
        data = _mapping(data, where)
        threshold = data.get("threshold")
        return cls(
            product=ProductRef.from_payload(data.get("product"), _ctx(where, "product")),
            branch=BranchRef.from_payload(data.get("branch"), _ctx(where, "branch")),
            quantity=_number(data, "quantity", where),
            threshold=_number(data, "threshold", where) if threshold is not None else None,
        )


@dataclass(frozen=True)
class ValuationRow:
    product: ProductRef
    quantity: Any
    cost_value: Any
    retail_value: Any

    @classmethod
    def from_payload(cls, data: Any, where: str = "item") -> "ValuationRow":
        data = _mapping(data, where)
        return cls(
            product=ProductRef.from_payload(data.get("product"), _ctx(where, "product")),
            quantity=_number(data, "quantity", where, default=0),
            cost_value=_number(data, "costValue", where, default=0),
            retail_value=_number(data, "retailValue", where, default=0),
        )


@dataclass(frozen=True)
class StockValuation:
    total_cost: Any
    total_retail: Any
    items: tuple = field(default_factory=tuple)

    @classmethod
    def from_payload(cls, data: Any, where: str = "") -> "StockValuation":
        data = _mapping(data, where)
        summary = _mapping(data.get("summary") or {}, _ctx(where, "summary"))
        return cls(
            total_cost=_number(summary, "totalCost", "summary", default=0),
            total_retail=_number(summary, "totalRetail", "summary", default=0),
            items=tuple(
                ValuationRow.from_payload(row, f"items[{i}]")
                for i, row in enumerate(_list(data, "items", where))
            ),
        )


# =============================================================================
# ENVELOPES AND RESULTS
# =============================================================================

T = TypeVar("T")


def unwrap(body: Any, key: str, schema: Callable[..., T]) -> T:
    """Validate `{key: {...}}` and build the schema object."""
    body = _mapping(body, "")
    if key not in body:
        raise SchemaError(f"Unexpected response: missing {key}")
    return schema(body[key], key)


def unwrap_list(body: Any, key: str, schema: Callable[..., T]) -> list[T]:
    """Validate `{key: [...]}` and build one schema object per element."""
    body = _mapping(body, "")
    return [schema(item, f"{key}[{i}]") for i, item in enumerate(_list(body, key, ""))]


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T
    ok: bool = True


@dataclass(frozen=True)
class Err:
    message: str
    status: int | None = None
    ok: bool = False


Result = Union[Ok, Err]


def attempt(fn: Callable[[], T], fallback: str = "Request failed") -> Result:
    """Run a backend call and turn ApiError into an Err instead of raising."""
    try:
        return Ok(fn())
    except ApiError as exc:
        return Err(exc.message or fallback, exc.status)
