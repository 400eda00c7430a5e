from uuid import UUID

from pydantic import Field

from app.schemas.common import CamelModel

ThemeColors = dict[str, str]


class ThemeResponse(CamelModel):
    id: UUID
    user_id: UUID | None = None
    label: str
    colors: ThemeColors | None = None
    custom_css: str | None = None
    custom_html: str | None = None
    is_global: bool = Field(default=False, alias="global")


class ListThemesRequest(CamelModel):
    include_global: bool = True


class ThemeIdRequest(CamelModel):
    id: UUID | None = None


class CreateThemeRequest(CamelModel):
    label: str | None = None
    colors: ThemeColors | None = None
    custom_css: str | None = None
    custom_html: str | None = None


class UpdateThemeRequest(CreateThemeRequest):
    id: UUID | None = None
