"""Base template registry: system-defined seed layouts per dashboard type."""

from collections.abc import Iterable, Mapping
from types import MappingProxyType

from ..errors import InvalidTemplateTypeError
from ..schemas import (
    AvailableTemplates,
    BaseDashboardTemplate,
    GridItem,
    TemplateConfig,
)


def _widget(widget_id: str, title: str, x: int, y: int, w: int, h: int, **extra) -> GridItem:
    return GridItem(id=widget_id, title=title, x=x, y=y, w=w, h=h, **extra)


_LANDING = BaseDashboardTemplate(
    name=AvailableTemplates.LANDING,
    display_name="Landing Page",
    template_config=TemplateConfig(
        sm=[
            _widget("landing-recommendations", "Recommendations", 0, 0, 1, 4, min_h=2),
            _widget("landing-favorites", "Favorite services", 0, 4, 1, 3),
            _widget("landing-explore", "Explore capabilities", 0, 7, 1, 3),
        ],
        md=[
            _widget("landing-recommendations", "Recommendations", 0, 0, 2, 4, min_h=2),
            _widget("landing-favorites", "Favorite services", 0, 4, 1, 3),
            _widget("landing-explore", "Explore capabilities", 1, 4, 1, 3),
        ],
        lg=[
            _widget("landing-recommendations", "Recommendations", 0, 0, 2, 4, min_h=2),
            _widget("landing-favorites", "Favorite services", 2, 0, 1, 4),
            _widget("landing-explore", "Explore capabilities", 0, 4, 3, 3),
        ],
        xl=[
            _widget("landing-recommendations", "Recommendations", 0, 0, 2, 4, min_h=2),
            _widget("landing-favorites", "Favorite services", 2, 0, 1, 4),
            _widget("landing-explore", "Explore capabilities", 3, 0, 1, 4),
        ],
    ),
)

_INSIGHTS = BaseDashboardTemplate(
    name=AvailableTemplates.INSIGHTS,
    display_name="Insights",
    template_config=TemplateConfig(
        sm=[
            _widget("insights-advisor", "Advisor recommendations", 0, 0, 1, 3),
            _widget("insights-vulnerabilities", "Vulnerabilities", 0, 3, 1, 3),
        ],
        md=[
            _widget("insights-advisor", "Advisor recommendations", 0, 0, 1, 3),
            _widget("insights-vulnerabilities", "Vulnerabilities", 1, 0, 1, 3),
        ],
        lg=[
            _widget("insights-advisor", "Advisor recommendations", 0, 0, 2, 3),
            _widget("insights-vulnerabilities", "Vulnerabilities", 2, 0, 1, 3),
        ],
        xl=[
            _widget("insights-advisor", "Advisor recommendations", 0, 0, 2, 3),
            _widget("insights-vulnerabilities", "Vulnerabilities", 2, 0, 2, 3),
        ],
    ),
)

BUILTIN_TEMPLATES: tuple[BaseDashboardTemplate, ...] = (_LANDING, _INSIGHTS)


class BaseTemplateRegistry:
    """Read-only lookup of base templates keyed by dashboard type."""

    def __init__(self, templates: Iterable[BaseDashboardTemplate]):
        self._templates: Mapping[AvailableTemplates, BaseDashboardTemplate] = MappingProxyType(
            {template.name: template for template in templates}
        )

    def lookup(self, template_type: str | AvailableTemplates) -> BaseDashboardTemplate:
        """Return the base template for ``template_type``.

        Raises InvalidTemplateTypeError for unknown types, including known enum
        members this registry was not seeded with.
        """
        dashboard = AvailableTemplates.parse(template_type)
        template = self._templates.get(dashboard)
        if template is None:
            raise InvalidTemplateTypeError(
                f"No base template registered for {dashboard.value!r}",
                registered=sorted(t.value for t in self._templates),
            )
        return template

    def list_all(self) -> list[BaseDashboardTemplate]:
        return list(self._templates.values())


def default_registry() -> BaseTemplateRegistry:
    """Registry seeded with the built-in base templates."""
    return BaseTemplateRegistry(BUILTIN_TEMPLATES)
