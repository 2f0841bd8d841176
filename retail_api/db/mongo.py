import logging
import threading

from pymongo import MongoClient, ASCENDING
from pymongo.server_api import ServerApi
from pymongo.errors import PyMongoError

from retail_api.core.config import MONGO_URI, MONGO_DB_NAME

logger = logging.getLogger("retail_api.db")

USERS = "users"
PRODUCTS = "products"
ORDERS = "orders"

client = None
_client_lock = threading.Lock()


def get_client() -> MongoClient:
    global client
    if client is not None:
        return client
    with _client_lock:
        if client is None:
            if not MONGO_URI:
                raise RuntimeError("MONGO_URI not configured. See .env")
            new_client = MongoClient(MONGO_URI, server_api=ServerApi('1'))
            try:
                new_client.admin.command('ping')
                logger.info("Connected to MongoDB database %s", MONGO_DB_NAME)
            except PyMongoError as e:
                logger.error("Could not connect to MongoDB: %s", e)
            ensure_indexes(new_client[MONGO_DB_NAME])
            client = new_client
    return client


def ensure_indexes(db):
    try:
        db[USERS].create_index([("email", ASCENDING)], unique=True)
        db[ORDERS].create_index([("user", ASCENDING)])
        db[PRODUCTS].create_index([("category", ASCENDING)])
    except PyMongoError as e:
        logger.error("Could not ensure indexes: %s", e)


def get_db():
    return get_client()[MONGO_DB_NAME]
