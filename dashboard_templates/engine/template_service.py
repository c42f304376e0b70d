"""Template Service: ownership-checked template operations and default switching."""

from typing import Optional

from ..errors import NotAuthorizedError
from ..schemas import (
    LAYOUT_FIELDS,
    AvailableTemplates,
    BaseDashboardTemplate,
    DashboardTemplateRecord,
    DashboardTemplateUpdate,
    TemplateBase,
)
from ..utils.grid_validators import validate_grid_item
from ..utils.logging import get_logger
from .base_templates import BaseTemplateRegistry
from .template_store import TemplateStore

logger = get_logger("engine.template_service")


class TemplateService:
    """Orchestrates template reads and mutations for a single caller identity.

    Not-found and ownership checks always run before anything is written. Store
    failures surface as StoreError on the first attempt.
    """

    def __init__(self, store: TemplateStore, registry: BaseTemplateRegistry):
        self._store = store
        self._registry = registry

    async def _load_owned(self, template_id: int, user_id: int) -> DashboardTemplateRecord:
        template = await self._store.find_by_id(template_id)
        if template.user_identity_id != user_id:
            raise NotAuthorizedError(
                "Dashboard template belongs to another user",
                template_id=template_id,
                user_id=user_id,
            )
        return template

    async def get_templates(
        self, user_id: int, template_type: Optional[str] = None
    ) -> list[DashboardTemplateRecord]:
        """Return the user's templates, seeding the base template on first access to a type."""
        if not template_type:
            return await self._store.find_all_by_user(user_id)

        dashboard = AvailableTemplates.parse(template_type)
        templates = await self._store.find_by_user_and_type(user_id, dashboard)
        if templates:
            return templates

        base = self._registry.lookup(dashboard)
        seeded = await self._store.create(DashboardTemplateRecord(
            user_identity_id=user_id,
            template_base=TemplateBase(name=base.name, display_name=base.display_name),
            template_config=base.template_config.model_copy(deep=True),
            is_default=True,
        ))
        logger.info("template_seeded", id=seeded.id, user_id=user_id, dashboard=dashboard.value)
        return [seeded]

    async def update_template(
        self, template_id: int, user_id: int, payload: DashboardTemplateUpdate
    ) -> DashboardTemplateRecord:
        """Replace the non-empty layout fields of a template's configuration.

        Every item in every submitted field is validated before the single
        write, so an invalid item leaves the stored configuration untouched.
        Empty fields keep their stored items.
        """
        template = await self._load_owned(template_id, user_id)

        replacements = {}
        for field in LAYOUT_FIELDS:
            items = field.items(payload.template_config)
            for item in items:
                validate_grid_item(item, field.size)
            if items:
                replacements[field.name] = [item.model_copy() for item in items]

        template.template_config = template.template_config.model_copy(update=replacements)
        await self._store.update_config(template_id, template.template_config)
        logger.info("template_updated", id=template_id, user_id=user_id, fields=sorted(replacements))
        return template

    def list_base_templates(self) -> list[BaseDashboardTemplate]:
        return self._registry.list_all()

    def get_base_template(self, template_type: str) -> BaseDashboardTemplate:
        return self._registry.lookup(AvailableTemplates.parse(template_type))

    async def copy_template(self, account_id: int, template_id: int) -> DashboardTemplateRecord:
        """Copy any existing template into ``account_id``'s templates as a non-default."""
        source = await self._store.find_by_id(template_id)
        copy = await self._store.create(DashboardTemplateRecord(
            user_identity_id=account_id,
            template_base=source.template_base.model_copy(),
            template_config=source.template_config.model_copy(deep=True),
        ))
        logger.info("template_copied", id=copy.id, source_id=template_id, account_id=account_id)
        return copy

    async def delete_template(self, account_id: int, template_id: int) -> None:
        await self._load_owned(template_id, account_id)
        await self._store.delete(template_id)
        logger.info("template_deleted", id=template_id, account_id=account_id)

    async def switch_default(self, account_id: int, template_id: int) -> DashboardTemplateRecord:
        """Make ``template_id`` the single default within its (account, type) group."""
        template = await self._load_owned(template_id, account_id)
        await self._store.set_default(account_id, template.template_base.name, template_id)
        template.is_default = True
        logger.info(
            "template_default_switched",
            id=template_id,
            account_id=account_id,
            dashboard=template.template_base.name.value,
        )
        return template
