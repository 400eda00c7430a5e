"""Theme endpoints. All routes require authentication and answer any HTTP verb."""

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.routing import Route, client_ip, register_routes
from app.core.analytics import Analytics, get_analytics
from app.core.dependencies import get_current_user
from app.core.exceptions import BadRequestError, NotFoundError
from app.db.postgres import get_db
from app.models.user import User
from app.schemas.theme import CreateThemeRequest, ListThemesRequest, ThemeIdRequest, ThemeResponse, UpdateThemeRequest
from app.services import theme_service

router = APIRouter(prefix="/theme", tags=["theme"])


async def list_themes(
    body: ListThemesRequest | None = None,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> list[ThemeResponse]:
    body = body or ListThemesRequest()
    return await theme_service.list_themes(db, user.id, body.include_global)


async def get_theme(
    body: ThemeIdRequest | None = None,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> ThemeResponse:
    """Fetch a single theme the caller can see (their own, or a global one)."""
    body = body or ThemeIdRequest()
    if body.id is None:
        raise BadRequestError("No theme id was provided.")

    theme = await theme_service.get_theme(db, body.id)
    if not theme.is_global and theme.user_id != user.id:
        raise NotFoundError("The theme couldn't be found.")
    return theme


async def create_theme(
    request: Request,
    body: CreateThemeRequest | None = None,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    analytics: Analytics = Depends(get_analytics),
) -> ThemeResponse:
    body = body or CreateThemeRequest()
    if not body.label:
        raise BadRequestError("No label was provided.")

    theme = await theme_service.create_theme(
        db, user.id, body.label, body.colors, body.custom_css, body.custom_html
    )

    await analytics.track(user.id, "theme created", {"$ip": client_ip(request), "theme": theme.id})
    return theme


async def update_theme(
    request: Request,
    body: UpdateThemeRequest | None = None,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    analytics: Analytics = Depends(get_analytics),
) -> ThemeResponse:
    body = body or UpdateThemeRequest()
    if body.id is None:
        raise BadRequestError("No theme id was provided.")
    if not body.label:
        raise BadRequestError("No label was provided.")

    theme = await theme_service.update_theme(
        db, body.id, user.id, body.label, body.colors, body.custom_css, body.custom_html
    )

    await analytics.track(user.id, "theme updated", {"$ip": client_ip(request), "theme": theme.id})
    return theme


async def delete_theme(
    request: Request,
    body: ThemeIdRequest | None = None,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    analytics: Analytics = Depends(get_analytics),
) -> ThemeResponse:
    body = body or ThemeIdRequest()
    if body.id is None:
        raise BadRequestError("No theme id was provided.")

    theme = await theme_service.delete_theme(db, body.id, user.id)

    await analytics.track(user.id, "theme deleted", {"$ip": client_ip(request), "theme": theme.id})
    return theme


register_routes(
    router,
    [
        Route("/list", list_themes, auth=True),
        Route("/get", get_theme, auth=True),
        Route("/create", create_theme, auth=True),
        Route("/update", update_theme, auth=True),
        Route("/delete", delete_theme, auth=True),
    ],
)
