"""Template contracts: Pydantic models shared by the store, service and API."""
from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Callable, NamedTuple, Optional

from pydantic import BaseModel, ConfigDict, Field

from .errors import InvalidTemplateTypeError


class AvailableTemplates(str, Enum):
    LANDING = "landing"
    INSIGHTS = "insights"

    @classmethod
    def parse(cls, value: str | AvailableTemplates) -> AvailableTemplates:
        """Return the enum member for ``value`` or raise InvalidTemplateTypeError."""
        try:
            return cls(value)
        except ValueError:
            raise InvalidTemplateTypeError(
                f"Unknown dashboard template type: {value!r}",
                allowed=sorted(m.value for m in cls),
            ) from None


class GridSize(str, Enum):
    SM = "sm"
    MD = "md"
    LG = "lg"
    XL = "xl"


# ── Layout ──
class GridItem(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(alias="i")
    title: Optional[str] = None
    x: int = 0
    y: int = 0
    w: int
    h: int
    min_h: Optional[int] = Field(default=None, alias="minH")
    max_h: Optional[int] = Field(default=None, alias="maxH")
    static: bool = False


class TemplateConfig(BaseModel):
    sm: list[GridItem] = []
    md: list[GridItem] = []
    lg: list[GridItem] = []
    xl: list[GridItem] = []


class LayoutField(NamedTuple):
    name: str
    size: GridSize
    items: Callable[[TemplateConfig], list[GridItem]]


LAYOUT_FIELDS: tuple[LayoutField, ...] = (
    LayoutField("sm", GridSize.SM, lambda config: config.sm),
    LayoutField("md", GridSize.MD, lambda config: config.md),
    LayoutField("lg", GridSize.LG, lambda config: config.lg),
    LayoutField("xl", GridSize.XL, lambda config: config.xl),
)


# ── Templates ──
class TemplateBase(BaseModel):
    name: AvailableTemplates
    display_name: str


class BaseDashboardTemplate(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: AvailableTemplates
    display_name: str
    template_config: TemplateConfig


class DashboardTemplateRecord(BaseModel):
    id: Optional[int] = None
    user_identity_id: int
    template_base: TemplateBase
    template_config: TemplateConfig
    is_default: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class DashboardTemplateUpdate(BaseModel):
    """Update payload. Only ``template_config`` is applied; other fields are ignored."""

    template_base: Optional[TemplateBase] = None
    is_default: Optional[bool] = None
    template_config: TemplateConfig = Field(default_factory=TemplateConfig)
