"""
Reference data provider.

Current user, branches, categories and products are needed by almost every
page. They are fetched at most once per request (one navigation) and cached on
flask.g, keyed by the token that fetched them. A token change or an explicit
invalidate() after a mutation drops the cache so the next read re-fetches.
"""
from __future__ import annotations

from typing import Any, Callable, Optional

from flask import g

from ..api_client import get_api_client
from ..schemas import Branch, Category, Product, User, unwrap, unwrap_list


_CACHE_ATTR = "_inventra_reference"


def _cache() -> dict:
    token = get_api_client().token_store.get_token()
    cache = getattr(g, _CACHE_ATTR, None)
    if cache is None or cache.get("__token__") != token:
        cache = {"__token__": token}
        setattr(g, _CACHE_ATTR, cache)
    return cache


def _cached(key: Any, loader: Callable[[], Any]) -> Any:
    cache = _cache()
    if key not in cache:
        cache[key] = loader()
    return cache[key]


def invalidate(*keys: str) -> None:
    """Drop cached entries (all of them when no key is given)."""
    cache = getattr(g, _CACHE_ATTR, None)
    if cache is None:
        return
    if not keys:
        g.pop(_CACHE_ATTR, None)
        return
    for key in list(cache):
        name = key[0] if isinstance(key, tuple) else key
        if name in keys:
            cache.pop(key, None)


def current_user() -> User:
    return _cached("me", lambda: unwrap(get_api_client().get("/auth/me"), "user", User.from_payload))


def branches() -> list[Branch]:
    return _cached("branches", lambda: unwrap_list(get_api_client().get("/branches"), "branches", Branch.from_payload))


def active_branches() -> list[Branch]:
    return [b for b in branches() if b.is_active]


def categories() -> list[Category]:
    return _cached(
        "categories",
        lambda: unwrap_list(get_api_client().get("/categories"), "categories", Category.from_payload),
    )


def active_categories() -> list[Category]:
    return [c for c in categories() if c.is_active]


def products(search: Optional[str] = None, category_id: Optional[str] = None) -> list[Product]:
    search = (search or "").strip() or None
    category_id = category_id or None
    params = {"search": search, "categoryId": category_id}
    return _cached(
        ("products", search, category_id),
        lambda: unwrap_list(get_api_client().get("/products", params=params), "products", Product.from_payload),
    )


def active_products() -> list[Product]:
    return [p for p in products() if p.is_active]


def find_product(product_id: str) -> Optional[Product]:
    for product in products():
        if product.id == product_id:
            return product
    return None
