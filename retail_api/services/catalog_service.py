import logging
import math
import re
from datetime import datetime, timezone
from typing import Optional

from pymongo import ASCENDING, DESCENDING, ReturnDocument

from retail_api.core.errors import NotFoundError, ValidationError
from retail_api.db.mongo import PRODUCTS
from retail_api.utils.serializers import serialize_doc, to_object_id

logger = logging.getLogger("retail_api.catalog")

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10

SORT_KEYS = {
    "priceAsc": [("price", ASCENDING)],
    "priceDesc": [("price", DESCENDING)],
    "latest": [("createdAt", DESCENDING)],
}


def coerce_positive_int(raw, default: int) -> int:
    """Parses a query value; anything that is not a positive number falls back to the default."""
    try:
        value = int(float(raw))
    except (TypeError, ValueError, OverflowError):
        return default
    return value if value > 0 else default


def parse_price(raw: Optional[str], field: str) -> Optional[float]:
    """An empty bound means no bound; anything else must be a finite number."""
    if raw is None or not raw.strip():
        return None
    try:
        value = float(raw)
    except ValueError:
        raise ValidationError(f"{field} must be a number")
    if not math.isfinite(value):
        raise ValidationError(f"{field} must be a number")
    return value


def build_product_query(search: Optional[str] = None, category: Optional[str] = None,
                        min_price: Optional[float] = None, max_price: Optional[float] = None) -> dict:
    query = {}
    if search:
        query["name"] = {"$regex": re.escape(search), "$options": "i"}
    if category:
        query["category"] = category
    price = {}
    if min_price is not None:
        price["$gte"] = min_price
    if max_price is not None:
        price["$lte"] = max_price
    if price:
        query["price"] = price
    return query


def resolve_sort(sort: Optional[str]):
    # unknown keys leave ordering to the database
    return SORT_KEYS.get(sort)


def list_products(db, search=None, category=None, min_price=None, max_price=None,
                  sort=None, page=None, limit=None) -> dict:
    page = coerce_positive_int(page, DEFAULT_PAGE)
    limit = coerce_positive_int(limit, DEFAULT_LIMIT)
    query = build_product_query(search, category, min_price, max_price)

    total = db[PRODUCTS].count_documents(query)
    cursor = db[PRODUCTS].find(query)
    order = resolve_sort(sort)
    if order:
        cursor = cursor.sort(order)
    items = list(cursor.skip((page - 1) * limit).limit(limit))

    return {
        "items": serialize_doc(items),
        "page": page,
        "totalPages": math.ceil(total / limit),
        "totalCount": total,
    }


def create_product(db, fields: dict) -> dict:
    now = datetime.now(timezone.utc)
    product = dict(fields, createdAt=now, updatedAt=now)
    product["_id"] = db[PRODUCTS].insert_one(product).inserted_id
    logger.info("Created product %s", product["_id"])
    return serialize_doc(product)


def get_product(db, product_id: str) -> dict:
    product = db[PRODUCTS].find_one({"_id": to_object_id(product_id)})
    if not product:
        raise NotFoundError("Product not found")
    return serialize_doc(product)


def update_product(db, product_id: str, fields: dict) -> dict:
    """Applies only the given fields; everything else keeps its stored value."""
    oid = to_object_id(product_id)
    update = dict(fields, updatedAt=datetime.now(timezone.utc))
    product = db[PRODUCTS].find_one_and_update(
        {"_id": oid}, {"$set": update}, return_document=ReturnDocument.AFTER
    )
    if not product:
        raise NotFoundError("Product not found")
    logger.info("Updated product %s fields=%s", product_id, sorted(fields))
    return serialize_doc(product)


def delete_product(db, product_id: str) -> dict:
    res = db[PRODUCTS].delete_one({"_id": to_object_id(product_id)})
    if res.deleted_count == 0:
        raise NotFoundError("Product not found")
    logger.info("Deleted product %s", product_id)
    return {"message": "Product removed"}
