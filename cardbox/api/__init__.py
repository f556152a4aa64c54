from cardbox.api.auth import router as auth_router
from cardbox.api.cards import router as cards_router
from cardbox.api.collections import router as collections_router
from cardbox.api.health import router as health_router
from cardbox.api.me import router as me_router
from cardbox.api.scores import router as scores_router
from cardbox.api.users import router as users_router

__all__ = [
    "auth_router",
    "cards_router",
    "collections_router",
    "health_router",
    "me_router",
    "scores_router",
    "users_router",
]
