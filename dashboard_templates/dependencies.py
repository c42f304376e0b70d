"""FastAPI dependency injection providers."""

from fastapi import Depends, HTTPException, Request, status

from .config import DashboardConfig, get_config
from .database import get_session_factory
from .engine.base_templates import BaseTemplateRegistry, default_registry
from .engine.template_service import TemplateService
from .engine.template_store import MAX_ROW_ID, TemplateStore

_config_instance: DashboardConfig | None = None
_registry: BaseTemplateRegistry | None = None
_template_service: TemplateService | None = None


def get_app_config() -> DashboardConfig:
    """Get the application config singleton."""
    global _config_instance
    if _config_instance is None:
        _config_instance = get_config()
    return _config_instance


def get_registry() -> BaseTemplateRegistry:
    global _registry
    if _registry is None:
        _registry = default_registry()
    return _registry


def get_template_service(
    config: DashboardConfig = Depends(get_app_config),
) -> TemplateService:
    """Get the template service singleton bound to the app's session factory."""
    global _template_service
    if _template_service is None:
        store = TemplateStore(db_session_factory=get_session_factory(config))
        _template_service = TemplateService(store, get_registry())
    return _template_service


def get_current_user_id(
    request: Request,
    config: DashboardConfig = Depends(get_app_config),
) -> int:
    """Resolve the caller's user id from the identity header set upstream."""
    raw = (request.headers.get(config.identity_header) or "").strip()
    try:
        user_id = int(raw) if raw.isdecimal() else None
    except ValueError:
        user_id = None
    if user_id is None or user_id > MAX_ROW_ID:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Missing or invalid {config.identity_header} header",
        )
    return user_id
