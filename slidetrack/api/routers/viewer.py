"""
Public viewer router.

Endpoints called by the share-link viewer page:
- GET /viewer/deck/{token}: Deck title and page count behind a share link
- POST /viewer/access: Identify the recipient by email (counts one open)
- POST /viewer/session/start: Open a viewing session
- POST /viewer/track: Record a slide change
- POST /viewer/session/end: Close a session with its measured duration
"""

from fastapi import APIRouter, Depends, Request, status

from slidetrack.api.errors import InvalidInputRoute
from slidetrack.api.schemas.deck import PublicDeckOut
from slidetrack.api.schemas.viewer import (
    EndSessionRequest,
    NavigationEventOut,
    SessionOut,
    StartSessionRequest,
    TrackNavigationRequest,
    ViewerAccessRequest,
    ViewerAccessResponse,
    ViewerOut,
)
from slidetrack.application.use_cases import (
    CloseSessionUseCase,
    GetPublicDeckUseCase,
    OpenSessionUseCase,
    RecordNavigationUseCase,
    ResolveViewerUseCase,
)
from slidetrack.infra.config.dependencies import (
    get_close_session_use_case,
    get_open_session_use_case,
    get_public_deck_use_case,
    get_record_navigation_use_case,
    get_resolve_viewer_use_case,
)

router = APIRouter(prefix="/viewer", tags=["viewer"], route_class=InvalidInputRoute)


@router.get("/deck/{token}", response_model=PublicDeckOut)
async def get_shared_deck(
    token: str,
    use_case: GetPublicDeckUseCase = Depends(get_public_deck_use_case),
) -> PublicDeckOut:
    """Resolve a share link. Inactive and unknown links both answer 404."""
    deck = await use_case.execute(token)
    return PublicDeckOut.from_entity(deck)


@router.post("/access", response_model=ViewerAccessResponse)
async def access_deck(
    request: ViewerAccessRequest,
    public_deck: GetPublicDeckUseCase = Depends(get_public_deck_use_case),
    resolve_viewer: ResolveViewerUseCase = Depends(get_resolve_viewer_use_case),
) -> ViewerAccessResponse:
    """
    Identify a recipient for the deck behind ``token``.

    Returns the same viewer for the same email on every visit; each call
    counts as one open.
    """
    deck = await public_deck.execute(request.token)
    viewer, is_new = await resolve_viewer.execute(
        deck_id=deck.id,
        email=request.email,
        first_name=request.first_name,
        last_name=request.last_name,
        company=request.company,
    )
    return ViewerAccessResponse(
        viewer=ViewerOut.from_entity(viewer),
        deck=PublicDeckOut.from_entity(deck),
        is_new=is_new,
    )


@router.post(
    "/session/start", response_model=SessionOut, status_code=status.HTTP_201_CREATED
)
async def start_session(
    body: StartSessionRequest,
    request: Request,
    use_case: OpenSessionUseCase = Depends(get_open_session_use_case),
) -> SessionOut:
    session = await use_case.execute(
        viewer_id=body.viewer_id,
        deck_id=body.deck_id,
        user_agent=request.headers.get("user-agent"),
        ip_address=request.client.host if request.client else None,
    )
    return SessionOut.from_entity(session)


@router.post(
    "/track", response_model=NavigationEventOut, status_code=status.HTTP_201_CREATED
)
async def track_navigation(
    body: TrackNavigationRequest,
    use_case: RecordNavigationUseCase = Depends(get_record_navigation_use_case),
) -> NavigationEventOut:
    event = await use_case.execute(
        session_id=body.session_id,
        viewer_id=body.viewer_id,
        deck_id=body.deck_id,
        slide_number=body.slide_number,
        time_spent=body.time_spent,
    )
    return NavigationEventOut.from_entity(event)


@router.post("/session/end", response_model=SessionOut)
async def end_session(
    body: EndSessionRequest,
    use_case: CloseSessionUseCase = Depends(get_close_session_use_case),
) -> SessionOut:
    session = await use_case.execute(session_id=body.session_id, duration=body.duration)
    return SessionOut.from_entity(session)
