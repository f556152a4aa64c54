"""
Cardbox services.

Resource stores and the business logic built on them.
"""

from cardbox.services.auth import (
    decode_access_token,
    generate_access_token,
    hash_password,
    parse_expiry,
    verify_password,
)
from cardbox.services.cards import CardStore, card_store
from cardbox.services.collections import CollectionStore, collection_store
from cardbox.services.scores import StudyResult, next_points
from cardbox.services.users import UserStore, is_admin, user_store

__all__ = [
    "CardStore",
    "CollectionStore",
    "StudyResult",
    "UserStore",
    "card_store",
    "collection_store",
    "decode_access_token",
    "generate_access_token",
    "hash_password",
    "is_admin",
    "next_points",
    "parse_expiry",
    "user_store",
    "verify_password",
]
