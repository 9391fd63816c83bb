"""
Deck management router for owners.

This module provides endpoints for deck operations:
- POST /decks: Register an uploaded deck and issue its share link
- GET /decks: List the owner's decks, newest first
- GET /decks/{deck_id}: Deck details
- PATCH /decks/{deck_id}: Rename or toggle the share link
- DELETE /decks/{deck_id}: Delete the deck and all tracking data
- GET /decks/{deck_id}/analytics: Engagement dashboard
- GET /decks/{deck_id}/viewers/{viewer_id}: Per-viewer session drill-down
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Response, status

from slidetrack.api.schemas.analytics import DeckAnalyticsResponse, ViewerDetailResponse
from slidetrack.api.schemas.deck import (
    CreateDeckRequest,
    DeckListResponse,
    DeckOut,
    UpdateDeckRequest,
)
from slidetrack.application.use_cases import (
    CreateDeckUseCase,
    DeckAnalyticsUseCase,
    DeleteDeckUseCase,
    GetDeckUseCase,
    ListDecksUseCase,
    UpdateDeckUseCase,
    ViewerDetailUseCase,
)
from slidetrack.infra.config.dependencies import (
    CurrentUserId,
    SettingsDep,
    get_create_deck_use_case,
    get_deck_analytics_use_case,
    get_delete_deck_use_case,
    get_get_deck_use_case,
    get_list_decks_use_case,
    get_update_deck_use_case,
    get_viewer_detail_use_case,
)

router = APIRouter(prefix="/decks", tags=["decks"])


@router.post("", response_model=DeckOut, status_code=status.HTTP_201_CREATED)
async def create_deck(
    request: CreateDeckRequest,
    current_user: CurrentUserId,
    settings: SettingsDep,
    use_case: CreateDeckUseCase = Depends(get_create_deck_use_case),
) -> DeckOut:
    """
    Register a deck whose PDF has been processed.

    Args:
        request: Title, page count and file metadata
        current_user: Authenticated owner ID
        use_case: Deck creation use case

    Returns:
        DeckOut: The deck with its share link
    """
    deck = await use_case.execute(
        owner_id=current_user,
        title=request.title,
        total_pages=request.total_pages,
        file_name=request.file_name,
        file_size=request.file_size,
    )
    return DeckOut.from_entity(deck, settings.share_url(deck.public_token))


@router.get("", response_model=DeckListResponse)
async def list_decks(
    current_user: CurrentUserId,
    settings: SettingsDep,
    use_case: ListDecksUseCase = Depends(get_list_decks_use_case),
) -> DeckListResponse:
    decks = await use_case.execute(current_user)
    return DeckListResponse(
        items=[DeckOut.from_entity(d, settings.share_url(d.public_token)) for d in decks],
        total=len(decks),
    )


@router.get("/{deck_id}", response_model=DeckOut)
async def get_deck(
    deck_id: UUID,
    current_user: CurrentUserId,
    settings: SettingsDep,
    use_case: GetDeckUseCase = Depends(get_get_deck_use_case),
) -> DeckOut:
    deck = await use_case.execute(deck_id, current_user)
    return DeckOut.from_entity(deck, settings.share_url(deck.public_token))


@router.patch("/{deck_id}", response_model=DeckOut)
async def update_deck(
    deck_id: UUID,
    request: UpdateDeckRequest,
    current_user: CurrentUserId,
    settings: SettingsDep,
    use_case: UpdateDeckUseCase = Depends(get_update_deck_use_case),
) -> DeckOut:
    """Rename a deck or switch its share link on or off; the link itself never changes."""
    deck = await use_case.execute(
        deck_id=deck_id,
        owner_id=current_user,
        title=request.title,
        is_active=request.is_active,
    )
    return DeckOut.from_entity(deck, settings.share_url(deck.public_token))


@router.delete("/{deck_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_deck(
    deck_id: UUID,
    current_user: CurrentUserId,
    use_case: DeleteDeckUseCase = Depends(get_delete_deck_use_case),
) -> Response:
    await use_case.execute(deck_id, current_user)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{deck_id}/analytics", response_model=DeckAnalyticsResponse)
async def get_deck_analytics(
    deck_id: UUID,
    current_user: CurrentUserId,
    settings: SettingsDep,
    use_case: DeckAnalyticsUseCase = Depends(get_deck_analytics_use_case),
) -> DeckAnalyticsResponse:
    result = await use_case.execute(deck_id, owner_id=current_user)
    return DeckAnalyticsResponse.from_result(
        result, settings.share_url(result.deck.public_token)
    )


@router.get("/{deck_id}/viewers/{viewer_id}", response_model=ViewerDetailResponse)
async def get_viewer_detail(
    deck_id: UUID,
    viewer_id: UUID,
    current_user: CurrentUserId,
    use_case: ViewerDetailUseCase = Depends(get_viewer_detail_use_case),
) -> ViewerDetailResponse:
    result = await use_case.execute(deck_id, viewer_id, owner_id=current_user)
    return ViewerDetailResponse.from_result(result)
