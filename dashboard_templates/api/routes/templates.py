"""Dashboard template routes: per-user layout templates."""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status

from ...dependencies import get_current_user_id, get_template_service
from ...engine.template_service import TemplateService
from ...schemas import (
    BaseDashboardTemplate,
    DashboardTemplateRecord,
    DashboardTemplateUpdate,
)

router = APIRouter(prefix="/dashboard-templates", tags=["dashboard-templates"])


@router.get("/", response_model=list[DashboardTemplateRecord])
async def list_templates(
    dashboard: Optional[str] = Query(default=None),
    user_id: int = Depends(get_current_user_id),
    service: TemplateService = Depends(get_template_service),
):
    """List the caller's templates, optionally for a single dashboard type."""
    return await service.get_templates(user_id, dashboard)


@router.get("/base-templates", response_model=list[BaseDashboardTemplate])
async def list_base_templates(
    service: TemplateService = Depends(get_template_service),
):
    return service.list_base_templates()


@router.get("/base-templates/{dashboard}", response_model=BaseDashboardTemplate)
async def get_base_template(
    dashboard: str,
    service: TemplateService = Depends(get_template_service),
):
    return service.get_base_template(dashboard)


@router.patch("/{template_id}", response_model=DashboardTemplateRecord)
async def update_template(
    template_id: int,
    body: DashboardTemplateUpdate,
    user_id: int = Depends(get_current_user_id),
    service: TemplateService = Depends(get_template_service),
):
    """Replace the submitted layout sizes of a template owned by the caller."""
    return await service.update_template(template_id, user_id, body)


@router.post("/{template_id}/copy", response_model=DashboardTemplateRecord, status_code=201)
async def copy_template(
    template_id: int,
    user_id: int = Depends(get_current_user_id),
    service: TemplateService = Depends(get_template_service),
):
    return await service.copy_template(user_id, template_id)


@router.post("/{template_id}/default", response_model=DashboardTemplateRecord)
async def switch_default(
    template_id: int,
    user_id: int = Depends(get_current_user_id),
    service: TemplateService = Depends(get_template_service),
):
    """Make this template the caller's default for its dashboard type."""
    return await service.switch_default(user_id, template_id)


@router.delete("/{template_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_template(
    template_id: int,
    user_id: int = Depends(get_current_user_id),
    service: TemplateService = Depends(get_template_service),
):
    await service.delete_template(user_id, template_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
