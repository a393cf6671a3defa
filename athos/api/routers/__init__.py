"""API routers package."""

from athos.api.routers.content import router as content_router
from athos.api.routers.health import router as health_router
from athos.api.routers.learning_path import router as learning_path_router
from athos.api.routers.progress import router as progress_router
from athos.api.routers.quizzes import router as quizzes_router

__all__ = [
    "content_router",
    "health_router",
    "learning_path_router",
    "progress_router",
    "quizzes_router",
]
