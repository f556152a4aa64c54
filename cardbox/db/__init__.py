from cardbox.db.crud import PROTECTED_FIELDS, ResourceStore, parse_id
from cardbox.db.database import get_session, init_db

__all__ = [
    "PROTECTED_FIELDS",
    "ResourceStore",
    "get_session",
    "init_db",
    "parse_id",
]
