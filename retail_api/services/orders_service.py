import logging
from datetime import datetime, timezone
from typing import List

from bson import ObjectId
from pymongo import ReturnDocument

from retail_api.core.errors import ValidationError, NotFoundError
from retail_api.db.mongo import ORDERS, USERS
from retail_api.utils.serializers import serialize_doc, to_object_id

logger = logging.getLogger("retail_api.orders")

PAYMENT_STATUSES = ("Pending", "Paid", "Failed")
ORDER_STATUSES = ("Processing", "Shipped", "Delivered", "Cancelled")


def create_order(db, user_id, items: List[dict], total_price: float) -> dict:
    if not items:
        raise ValidationError("No items in the order")

    now = datetime.now(timezone.utc)
    order = {
        "user": to_object_id(user_id),
        "items": [dict(item, product=ObjectId(item["product"])) for item in items],
        "totalPrice": total_price,
        "paymentStatus": PAYMENT_STATUSES[0],
        "orderStatus": ORDER_STATUSES[0],
        "createdAt": now,
        "updatedAt": now,
    }
    order["_id"] = db[ORDERS].insert_one(order).inserted_id
    logger.info("User %s placed order %s with %d items", user_id, order["_id"], len(items))
    return serialize_doc(order)


def list_my_orders(db, user_id) -> list:
    return serialize_doc(list(db[ORDERS].find({"user": to_object_id(user_id)})))


def _attach_users(db, orders: list) -> list:
    """Replaces each order's user id with the owner's name and email."""
    user_ids = list({o["user"] for o in orders if o.get("user")})
    users = {}
    if user_ids:
        for u in db[USERS].find({"_id": {"$in": user_ids}}, {"name": 1, "email": 1}):
            users[u["_id"]] = u
    for o in orders:
        o["user"] = users.get(o.get("user"))
    return orders


def get_order(db, order_id: str) -> dict:
    order = db[ORDERS].find_one({"_id": to_object_id(order_id)})
    if not order:
        raise NotFoundError("Order not found")
    return serialize_doc(_attach_users(db, [order])[0])


def list_all_orders(db) -> list:
    return serialize_doc(_attach_users(db, list(db[ORDERS].find())))


def update_order_status(db, order_id: str, order_status: str) -> dict:
    # stored verbatim: no enum check and no transition rules
    order = db[ORDERS].find_one_and_update(
        {"_id": to_object_id(order_id)},
        {"$set": {"orderStatus": order_status, "updatedAt": datetime.now(timezone.utc)}},
        return_document=ReturnDocument.AFTER,
    )
    if not order:
        raise NotFoundError("Order not found")
    if order_status not in ORDER_STATUSES:
        logger.warning("Order %s set to non-standard status %r", order_id, order_status)
    return {"message": "Order status updated", "order": serialize_doc(order)}
