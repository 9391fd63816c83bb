"""
FastAPI dependency injection configuration for the use cases.
"""

from typing import Annotated
from uuid import UUID

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from slidetrack.application.unit_of_work import UnitOfWork
from slidetrack.application.use_cases import (
    CloseSessionUseCase,
    CreateDeckUseCase,
    DeckAnalyticsUseCase,
    DeleteDeckUseCase,
    GetDeckUseCase,
    GetPublicDeckUseCase,
    ListDecksUseCase,
    OpenSessionUseCase,
    RecordNavigationUseCase,
    ResolveViewerUseCase,
    UpdateDeckUseCase,
    ViewerDetailUseCase,
)
from slidetrack.data.repositories import (
    DeckRepository,
    NavigationRepository,
    SessionRepository,
    ViewerRepository,
)
from slidetrack.infra.auth.jwt_auth import get_jwt_auth
from slidetrack.infra.config.database import get_db_session
from slidetrack.infra.config.logging_config import get_logger
from slidetrack.infra.config.settings import Settings, get_settings

DEV_USER_ID = UUID("12345678-1234-5678-9012-123456789012")


async def get_current_user_id(
    authorization: Annotated[str, Header()] = None,
) -> UUID:
    """Extract the deck owner's user ID from the bearer JWT."""
    settings = get_settings()
    logger = get_logger("auth")

    # Skip auth in development if disabled
    if settings.disable_auth:
        logger.info("auth.disabled", user_id=str(DEV_USER_ID))
        return DEV_USER_ID

    if not authorization:
        logger.info("auth.missing_header")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authorization header required",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        scheme, token = authorization.split()
        if scheme.lower() != "bearer":
            raise ValueError("Invalid scheme")
    except ValueError:
        logger.info("auth.invalid_header_format")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authorization header format",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user_id = get_jwt_auth().extract_user_id_from_token(token)
    logger.info("auth.ok", user_id=str(user_id))
    return user_id


def build_unit_of_work(session: AsyncSession) -> UnitOfWork:
    """Bind the SQLAlchemy repositories to one session."""
    return UnitOfWork(
        session=session,
        deck_repo=DeckRepository(session),
        viewer_repo=ViewerRepository(session),
        session_repo=SessionRepository(session),
        navigation_repo=NavigationRepository(session),
    )


async def get_unit_of_work(
    session: Annotated[AsyncSession, Depends(get_db_session)],
) -> UnitOfWork:
    return build_unit_of_work(session)


# Type aliases for cleaner dependency injection
CurrentUserId = Annotated[UUID, Depends(get_current_user_id)]
UnitOfWorkDep = Annotated[UnitOfWork, Depends(get_unit_of_work)]
SettingsDep = Annotated[Settings, Depends(get_settings)]


def get_resolve_viewer_use_case(uow: UnitOfWorkDep) -> ResolveViewerUseCase:
    return ResolveViewerUseCase(uow)


def get_open_session_use_case(uow: UnitOfWorkDep) -> OpenSessionUseCase:
    return OpenSessionUseCase(uow)


def get_close_session_use_case(uow: UnitOfWorkDep) -> CloseSessionUseCase:
    return CloseSessionUseCase(uow)


def get_record_navigation_use_case(uow: UnitOfWorkDep) -> RecordNavigationUseCase:
    return RecordNavigationUseCase(uow)


def get_deck_analytics_use_case(
    uow: UnitOfWorkDep, settings: SettingsDep
) -> DeckAnalyticsUseCase:
    return DeckAnalyticsUseCase(
        uow,
        window_days=settings.analytics_window_days,
        recent_limit=settings.recent_viewers_limit,
    )


def get_viewer_detail_use_case(uow: UnitOfWorkDep) -> ViewerDetailUseCase:
    return ViewerDetailUseCase(uow)


def get_create_deck_use_case(uow: UnitOfWorkDep, settings: SettingsDep) -> CreateDeckUseCase:
    return CreateDeckUseCase(uow, token_bytes=settings.share_token_bytes)


def get_list_decks_use_case(uow: UnitOfWorkDep) -> ListDecksUseCase:
    return ListDecksUseCase(uow)


def get_get_deck_use_case(uow: UnitOfWorkDep) -> GetDeckUseCase:
    return GetDeckUseCase(uow)


def get_public_deck_use_case(uow: UnitOfWorkDep) -> GetPublicDeckUseCase:
    return GetPublicDeckUseCase(uow)


def get_update_deck_use_case(uow: UnitOfWorkDep) -> UpdateDeckUseCase:
    return UpdateDeckUseCase(uow)


def get_delete_deck_use_case(uow: UnitOfWorkDep) -> DeleteDeckUseCase:
    return DeleteDeckUseCase(uow)
