from bson import ObjectId
from bson.errors import InvalidId

from retail_api.core.errors import ValidationError


def to_object_id(id_str: str) -> ObjectId:
    try:
        return ObjectId(id_str)
    except (InvalidId, TypeError):
        raise ValidationError("Invalid id")


def serialize_doc(doc):
    """
    Converts every ObjectId inside a Mongo document (including nested
    item snapshots and joined users) to its string form so FastAPI can
    encode the result.
    """
    if doc is None:
        return None
    if isinstance(doc, ObjectId):
        return str(doc)
    if isinstance(doc, dict):
        return {k: serialize_doc(v) for k, v in doc.items()}
    if isinstance(doc, list):
        return [serialize_doc(v) for v in doc]
    return doc
