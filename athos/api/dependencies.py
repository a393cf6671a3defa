"""FastAPI dependency injection for services and authentication.

Services are built once at startup into a ServiceContainer kept on
``app.state``; the dependencies below hand them to route handlers.
"""

from typing import Annotated
from uuid import UUID

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from athos.modules.learning_path.service import LearningPathTracker
from athos.modules.progress.service import ProgressService
from athos.modules.quiz.service import QuizService
from athos.shared.exceptions import AuthenticationError
from athos.shared.service_registry import ServiceContainer
from athos.shared.tokens import decode_access_token

# Security scheme; missing credentials are reported by get_current_user_id
security = HTTPBearer(auto_error=False)


# ===================
# Service Dependencies
# ===================

def get_services(request: Request) -> ServiceContainer:
    """Get the service container built at startup."""
    return request.app.state.container


Services = Annotated[ServiceContainer, Depends(get_services)]


def get_progress_service(services: Services) -> ProgressService:
    return services.progress


def get_quiz_service(services: Services) -> QuizService:
    return services.quizzes


def get_learning_path_tracker(services: Services) -> LearningPathTracker:
    return services.learning_paths


# ===================
# Authentication Dependencies
# ===================

async def get_current_user_id(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    services: Services,
) -> UUID:
    """Validate the bearer token and return the learner id.

    Raises:
        AuthenticationError: If the token is missing, invalid or expired
    """
    if credentials is None:
        raise AuthenticationError("Authentication required")
    return decode_access_token(credentials.credentials, services.settings)


# ===================
# Type Aliases for Dependencies
# ===================

CurrentUserId = Annotated[UUID, Depends(get_current_user_id)]
ProgressServiceDep = Annotated[ProgressService, Depends(get_progress_service)]
QuizServiceDep = Annotated[QuizService, Depends(get_quiz_service)]
LearningPathDep = Annotated[LearningPathTracker, Depends(get_learning_path_tracker)]
