# Inventra Test Suite - Shared Configuration and Fixtures
#
# This module provides:
# - FakeBackend: an in-process stand-in for the REST backend (httpx.MockTransport)
# - App / Flask test client fixtures wired to the fake backend
# - Session helpers (manager / employee logged in)
# - Failure message formatting

import json
from typing import Any, Callable, Dict, List, Optional, Tuple
from urllib.parse import unquote

import httpx
import pytest

from inventra import create_app
from inventra.token_store import TOKEN_KEY


# =============================================================================
# CONFIGURATION
# =============================================================================

BACKEND_URL = "http://backend.test"

MANAGER_TOKEN = "tok-manager"
EMPLOYEE_TOKEN = "tok-employee"

MANAGER = {
    "id": "u-1", "name": "Mala Manager", "email": "manager@inventra.lk",
    "role": "MANAGER", "isActive": True,
}
EMPLOYEE = {
    "id": "u-2", "name": "Eshan Employee", "email": "employee@inventra.lk",
    "role": "EMPLOYEE", "isActive": True,
}

PASSWORD = "secret123"


# =============================================================================
# FAILURE MESSAGE HELPER
# =============================================================================

class TestFailure(Exception):
    """
    Custom exception with detailed, human-readable failure messages.

    Structure:
    1. Scenario: What was being tested
    2. Expected: What should have happened
    3. Actual: What actually happened
    4. Code Location: Where to look in the codebase
    """
    __test__ = False

    def __init__(self, scenario: str, expected: str, actual: str, code_location: str, response=None):
        self.scenario = scenario
        self.expected = expected
        self.actual = actual
        self.code_location = code_location
        self.response = response
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        lines = [
            "",
            "=" * 80,
            "TEST FAILURE DETAILS",
            "=" * 80,
            f"SCENARIO: {self.scenario}",
            "-" * 80,
            f"EXPECTED: {self.expected}",
            f"ACTUAL: {self.actual}",
            "-" * 80,
            f"CODE LOCATION: {self.code_location}",
        ]
        if self.response is not None:
            lines.extend([
                "-" * 80,
                f"HTTP STATUS: {self.response.status_code}",
                f"RESPONSE BODY: {self.response.get_data(as_text=True)[:1000]}",
            ])
        lines.append("=" * 80)
        return "\n".join(lines)


def assert_page(
    response,
    expected_status: int,
    scenario: str,
    code_location: str,
    expected_body_contains: Optional[str] = None,
):
    """
    Assert a page response status and optionally body content.
    Raises TestFailure with detailed message on failure.
    """
    if response.status_code != expected_status:
        raise TestFailure(
            scenario=scenario,
            expected=f"HTTP {expected_status}",
            actual=f"HTTP {response.status_code}",
            code_location=code_location,
            response=response,
        )

    body = response.get_data(as_text=True)
    if expected_body_contains and expected_body_contains not in body:
        raise TestFailure(
            scenario=scenario,
            expected=f"Response body contains: {expected_body_contains}",
            actual=f"Response body: {body[:500]}",
            code_location=code_location,
            response=response,
        )


# =============================================================================
# FAKE BACKEND
# =============================================================================

def _product(pid, name, sku, price, *, barcode=None, active=True, unit="PCS"):
    return {
        "id": pid, "name": name, "sku": sku, "unit": unit,
        "sellingPrice": price, "costPrice": price // 2,
        "barcode": barcode, "categoryId": "c-1",
        "category": {"id": "c-1", "name": "Stationery"},
        "isActive": active,
    }


class FakeBackend:
    """
    In-memory backend answering the REST calls the frontend makes.

    Every request is recorded in `requests`. `stub()` overrides one
    (method, path) with a fixed answer; everything else is served from the
    seeded data below.
    """

    def __init__(self):
        self.requests: List[httpx.Request] = []
        self.stubs: Dict[Tuple[str, str], Callable[[httpx.Request], httpx.Response]] = {}
        self.tokens = {MANAGER_TOKEN: MANAGER, EMPLOYEE_TOKEN: EMPLOYEE}
        self.accounts = {
            MANAGER["email"]: (PASSWORD, MANAGER_TOKEN),
            EMPLOYEE["email"]: (PASSWORD, EMPLOYEE_TOKEN),
        }
        self.branches = [
            {"id": "b-1", "name": "Colombo Main", "address": "12 Galle Rd", "phone": "011-2345678", "isActive": True},
            {"id": "b-2", "name": "Kandy", "address": None, "phone": None, "isActive": True},
            {"id": "b-9", "name": "Closed Branch", "isActive": False},
        ]
        self.categories = [
            {"id": "c-1", "name": "Stationery", "parentId": None, "isActive": True},
            {"id": "c-2", "name": "Pens", "parentId": "c-1", "isActive": True},
        ]
        self.products = [
            _product("p-1", "Blue Pen", "PEN-001", 100, barcode="4790001"),
            _product("p-2", "Notebook A5", "NB-A5", 250),
            _product("p-3", "Old Eraser", "ER-OLD", 20, active=False),
        ]
        self.stock = {("b-1", "p-1"): 40, ("b-1", "p-2"): 3}
        self.txns: List[Dict[str, Any]] = []
        self.invoices: List[Dict[str, Any]] = []
        self.users = [dict(MANAGER), dict(EMPLOYEE)]

    # -- plumbing -----------------------------------------------------------

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    def stub(self, method: str, path: str, status: int = 200, json_body: Any = None):
        def respond(request):
            return httpx.Response(status, json=json_body)
        self.stubs[(method.upper(), path)] = respond

    def stub_error(self, method: str, path: str, exc: Exception):
        def respond(request):
            raise exc
        self.stubs[(method.upper(), path)] = respond

    def calls(self, method: Optional[str] = None, path: Optional[str] = None) -> List[httpx.Request]:
        return [
            r for r in self.requests
            if (method is None or r.method == method.upper())
            and (path is None or r.url.path == path)
        ]

    def seed_invoice(self, branch_id: str = "b-1", items=(("p-1", 2, 100),), note: Optional[str] = None) -> Dict[str, Any]:
        """Ring up a sale directly on the backend side (as the manager)."""
        data = {
            "branchId": branch_id,
            "items": [{"productId": p, "qty": q, "unitPrice": u} for p, q, u in items],
            "note": note,
        }
        return self._checkout(data, MANAGER).json()["invoice"]

    @staticmethod
    def body(request: httpx.Request) -> Any:
        return json.loads(request.content) if request.content else None

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        key = (request.method, request.url.path)
        if key in self.stubs:
            return self.stubs[key](request)
        return self._dispatch(request)

    def _user(self, request) -> Optional[Dict[str, Any]]:
        auth = request.headers.get("Authorization", "")
        if not auth.startswith("Bearer "):
            return None
        return self.tokens.get(auth[len("Bearer "):])

    @staticmethod
    def _error(status: int, message: str) -> httpx.Response:
        return httpx.Response(status, json={"message": message})

    # -- routes -------------------------------------------------------------

    def _dispatch(self, request: httpx.Request) -> httpx.Response:
        method, path = request.method, request.url.path
        params = request.url.params

        if (method, path) == ("GET", "/"):
            return httpx.Response(404, json={"message": "Not found"})

        if (method, path) == ("POST", "/auth/login"):
            data = self.body(request) or {}
            account = self.accounts.get(data.get("email"))
            if account is None or account[0] != data.get("password"):
                return self._error(401, "Invalid email or password")
            token = account[1]
            return httpx.Response(200, json={"token": token, "user": self.tokens[token]})

        user = self._user(request)
        if user is None:
            return self._error(401, "Unauthorized")

        if (method, path) == ("GET", "/auth/me"):
            return httpx.Response(200, json={"user": user})

        if (method, path) == ("GET", "/branches"):
            return httpx.Response(200, json={"branches": self.branches})
        if (method, path) == ("POST", "/branches"):
            branch = dict(self.body(request), id=f"b-{len(self.branches) + 10}", isActive=True)
            self.branches.append(branch)
            return httpx.Response(201, json={"branch": branch})

        if (method, path) == ("GET", "/categories"):
            return httpx.Response(200, json={"categories": self.categories})
        if (method, path) == ("POST", "/categories"):
            category = dict(self.body(request), id=f"c-{len(self.categories) + 10}", isActive=True)
            self.categories.append(category)
            return httpx.Response(201, json={"category": category})

        if (method, path) == ("GET", "/products"):
            search = params.get("search", "").lower()
            rows = [
                p for p in self.products
                if not search or search in p["name"].lower() or search in p["sku"].lower()
            ]
            category_id = params.get("categoryId")
            if category_id:
                rows = [p for p in rows if p.get("categoryId") == category_id]
            return httpx.Response(200, json={"products": rows})
        if (method, path) == ("POST", "/products"):
            data = self.body(request)
            product = _product(f"p-{len(self.products) + 10}", data["name"], data["sku"], data["sellingPrice"])
            self.products.append(product)
            return httpx.Response(201, json={"product": product})
        if method == "DELETE" and path.startswith("/products/"):
            pid = path.rsplit("/", 1)[1]
            for p in self.products:
                if p["id"] == pid:
                    p["isActive"] = False
                    return httpx.Response(200, json={"ok": True})
            return self._error(404, "Product not found")

        if (method, path) == ("GET", "/inventory"):
            return httpx.Response(200, json={"items": self._stock_rows(params.get("branchId"))})
        if (method, path) == ("GET", "/inventory/txns"):
            rows = [t for t in self.txns if t["branch"]["id"] == params.get("branchId")]
            if params.get("productId"):
                rows = [t for t in rows if t["product"]["id"] == params.get("productId")]
            return httpx.Response(200, json={"txns": rows})
        if method == "POST" and path.startswith("/inventory/"):
            return self._stock_action(path.rsplit("/", 1)[1], self.body(request), user)

        if (method, path) == ("POST", "/sales/checkout"):
            return self._checkout(self.body(request), user)

        if (method, path) == ("GET", "/invoices"):
            rows = list(reversed(self.invoices))
            if params.get("branchId"):
                rows = [i for i in rows if i["branch"]["id"] == params.get("branchId")]
            if params.get("search"):
                rows = [i for i in rows if params.get("search") in i["invoiceNo"]]
            rows = rows[: int(params.get("take", "50"))]
            listed = [{k: v for k, v in i.items() if k != "items"} for i in rows]
            return httpx.Response(200, json={"invoices": listed})
        if method == "GET" and path.startswith("/invoices/"):
            public_id = unquote(path[len("/invoices/"):])
            for inv in self.invoices:
                if inv["publicId"] == public_id:
                    return httpx.Response(200, json={"invoice": inv})
            return self._error(404, "Invoice not found")

        if path.startswith("/users") or path.startswith("/reports"):
            if user["role"] != "MANAGER":
                return self._error(403, "Forbidden")

        if (method, path) == ("GET", "/users"):
            return httpx.Response(200, json={"users": self.users})
        if (method, path) == ("POST", "/users"):
            new_user = dict(self.body(request), id=f"u-{len(self.users) + 10}", isActive=True)
            new_user.pop("password", None)
            self.users.append(new_user)
            return httpx.Response(201, json={"user": new_user})
        if method == "PUT" and path.startswith("/users/"):
            uid = path.rsplit("/", 1)[1]
            for u in self.users:
                if u["id"] == uid:
                    u.update(self.body(request))
                    return httpx.Response(200, json={"user": u})
            return self._error(404, "User not found")
        if method == "POST" and path.startswith("/users/") and path.endswith("/reset-password"):
            return httpx.Response(200, json={"ok": True})

        if (method, path) == ("GET", "/reports/sales-summary"):
            total = sum(i["total"] for i in self.invoices)
            return httpx.Response(200, json={
                "range": {"from": params.get("from"), "to": params.get("to")},
                "summary": {"invoiceCount": len(self.invoices), "totalSales": total},
                "days": [{"day": "2026-10-16", "invoiceCount": len(self.invoices), "totalSales": total}],
            })
        if (method, path) in (("GET", "/reports/top-products"), ("GET", "/reports/top-selling")):
            top = [{"product": {"id": "p-1", "name": "Blue Pen", "sku": "PEN-001"}, "qty": 12, "sales": 1200}]
            return httpx.Response(200, json={"top": top})
        if (method, path) == ("GET", "/reports/low-stock"):
            threshold = int(params.get("threshold", "5"))
            rows = [r for r in self._stock_rows(params.get("branchId")) if r["quantity"] <= threshold]
            items = [dict(r, threshold=threshold) for r in rows]
            return httpx.Response(200, json={"items": items})
        if (method, path) == ("GET", "/reports/stock-valuation"):
            return httpx.Response(200, json={
                "summary": {"totalCost": 1375, "totalRetail": 4750},
                "items": [{"product": {"id": "p-1", "name": "Blue Pen", "sku": "PEN-001"},
                           "quantity": 40, "costValue": 2000, "retailValue": 4000}],
            })

        return self._error(404, "Not found")

    # -- domain helpers -----------------------------------------------------

    def _find(self, rows, rid):
        for row in rows:
            if row["id"] == rid:
                return row
        return None

    def _stock_rows(self, branch_id):
        rows = []
        for (bid, pid), qty in self.stock.items():
            if branch_id and bid != branch_id:
                continue
            rows.append({
                "id": f"{bid}:{pid}",
                "quantity": qty,
                "branch": self._find(self.branches, bid),
                "product": self._find(self.products, pid),
            })
        return rows

    def _stock_action(self, action, data, user):
        if user["role"] != "MANAGER":
            return self._error(403, "Forbidden")
        key = (data["branchId"], data["productId"])
        current = self.stock.get(key, 0)
        if action == "receive":
            change = data["quantity"]
        elif action == "adjust":
            change = data["newQuantity"] - current
        elif action in ("sale", "damage"):
            change = -data["quantity"]
            if current + change < 0:
                return self._error(400, "Insufficient stock")
        else:
            return self._error(404, "Not found")
        self.stock[key] = current + change
        self.txns.append({
            "id": f"t-{len(self.txns) + 1}",
            "type": action.upper(),
            "qtyChange": change,
            "createdAt": "2026-10-16T08:30:00.000Z",
            "note": data.get("note"),
            "product": self._find(self.products, data["productId"]),
            "branch": self._find(self.branches, data["branchId"]),
            "createdBy": {"id": user["id"], "name": user["name"], "role": user["role"]},
        })
        return httpx.Response(200, json={"item": {"quantity": self.stock[key]}})

    def _checkout(self, data, user):
        branch = self._find(self.branches, data.get("branchId"))
        if branch is None:
            return self._error(400, "Branch not found")
        lines = []
        for item in data.get("items", []):
            product = self._find(self.products, item["productId"])
            key = (branch["id"], item["productId"])
            if self.stock.get(key, 0) < item["qty"]:
                return self._error(400, f"Insufficient stock for {product['name']}")
            lines.append({
                "qty": item["qty"],
                "unitPrice": item["unitPrice"],
                "lineTotal": item["qty"] * item["unitPrice"],
                "product": product,
            })
        for line in lines:
            self.stock[(branch["id"], line["product"]["id"])] -= line["qty"]
        number = len(self.invoices) + 1
        invoice = {
            "publicId": f"pub-{number}",
            "invoiceNo": f"INV-{number:06d}",
            "createdAt": "2026-10-16T08:30:00.000Z",
            "total": sum(line["lineTotal"] for line in lines),
            "note": data.get("note"),
            "branch": branch,
            "createdBy": {"id": user["id"], "name": user["name"], "role": user["role"]},
            "items": lines,
        }
        self.invoices.append(invoice)
        return httpx.Response(201, json={"invoice": invoice})


# =============================================================================
# PYTEST FIXTURES
# =============================================================================

@pytest.fixture
def fake_backend() -> FakeBackend:
    """Fresh backend state for each test."""
    return FakeBackend()


@pytest.fixture
def app(fake_backend: FakeBackend):
    """Flask app whose backend calls all go to the fake backend."""
    return create_app({
        "TESTING": True,
        "SECRET_KEY": "test-secret",
        "API_BASE_URL": BACKEND_URL,
        "API_TRANSPORT": fake_backend.transport,
    })


@pytest.fixture
def client(app):
    """Browser-like client with no stored token."""
    return app.test_client()


def login_as(client, token: str):
    """Put a bearer token in the session as if the user had logged in."""
    with client.session_transaction() as sess:
        sess[TOKEN_KEY] = token


@pytest.fixture
def manager_client(client):
    """Client logged in as a MANAGER."""
    login_as(client, MANAGER_TOKEN)
    return client


@pytest.fixture
def employee_client(client):
    """Client logged in as an EMPLOYEE."""
    login_as(client, EMPLOYEE_TOKEN)
    return client


# =============================================================================
# TEST MARKERS
# =============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "smoke: Quick smoke tests for critical paths")
    config.addinivalue_line("markers", "auth: Login / logout / token tests")
    config.addinivalue_line("markers", "rbac: Role-based page access tests")
    config.addinivalue_line("markers", "api: Backend client and schema tests")
    config.addinivalue_line("markers", "products: Catalog page tests")
    config.addinivalue_line("markers", "inventory: Inventory page tests")
    config.addinivalue_line("markers", "sales: Cart and checkout tests")
    config.addinivalue_line("markers", "invoices: Invoice history and receipt tests")
    config.addinivalue_line("markers", "users: User management tests")
    config.addinivalue_line("markers", "reports: Report page tests")
    config.addinivalue_line("markers", "cli: Flask CLI command tests")
