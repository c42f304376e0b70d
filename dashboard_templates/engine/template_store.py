"""Template Store: persistence of dashboard templates over an async session factory."""

import json
from functools import wraps

from sqlalchemy import case, delete, select, update
from sqlalchemy.exc import SQLAlchemyError

from ..errors import NotFoundError, StoreError
from ..models.dashboard_template import DashboardTemplate
from ..schemas import (
    AvailableTemplates,
    DashboardTemplateRecord,
    TemplateBase,
    TemplateConfig,
)
from ..utils.logging import get_logger

logger = get_logger("engine.template_store")

# SQLite INTEGER is a signed 64-bit value
MAX_ROW_ID = 2**63 - 1


def _store_operation(fn):
    """Re-raise driver failures as StoreError, chained to the original."""

    @wraps(fn)
    async def wrapper(*args, **kwargs):
        try:
            return await fn(*args, **kwargs)
        except (SQLAlchemyError, OverflowError) as exc:
            logger.error("store_error", operation=fn.__name__, error=str(exc))
            raise StoreError(f"{fn.__name__} failed", operation=fn.__name__) from exc

    return wrapper


def _dump_config(config: TemplateConfig) -> str:
    return json.dumps(config.model_dump(mode="json", by_alias=True))


def _to_record(row: DashboardTemplate) -> DashboardTemplateRecord:
    return DashboardTemplateRecord(
        id=row.id,
        user_identity_id=row.user_identity_id,
        template_base=TemplateBase(name=row.name, display_name=row.display_name),
        template_config=TemplateConfig.model_validate(json.loads(row.template_config_json)),
        is_default=row.is_default,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


class TemplateStore:
    """Single-statement CRUD over the ``dashboard_templates`` table.

    Returns detached ``DashboardTemplateRecord`` values; ORM rows never leave
    the session that loaded them.
    """

    def __init__(self, db_session_factory=None):
        self._db_session_factory = db_session_factory

    def set_db_session_factory(self, factory) -> None:
        self._db_session_factory = factory

    @_store_operation
    async def find_by_id(self, template_id: int) -> DashboardTemplateRecord:
        if not -MAX_ROW_ID <= template_id <= MAX_ROW_ID:
            raise NotFoundError("Dashboard template not found", template_id=template_id)
        async with self._db_session_factory() as session:
            row = (await session.execute(
                select(DashboardTemplate).where(DashboardTemplate.id == template_id)
            )).scalar_one_or_none()
            if row is None:
                raise NotFoundError("Dashboard template not found", template_id=template_id)
            return _to_record(row)

    @_store_operation
    async def find_by_user_and_type(
        self, user_id: int, template_type: AvailableTemplates
    ) -> list[DashboardTemplateRecord]:
        async with self._db_session_factory() as session:
            rows = (await session.execute(
                select(DashboardTemplate)
                .where(
                    DashboardTemplate.user_identity_id == user_id,
                    DashboardTemplate.name == template_type.value,
                )
                .order_by(DashboardTemplate.id)
            )).scalars().all()
            return [_to_record(row) for row in rows]

    @_store_operation
    async def find_all_by_user(self, user_id: int) -> list[DashboardTemplateRecord]:
        async with self._db_session_factory() as session:
            rows = (await session.execute(
                select(DashboardTemplate)
                .where(DashboardTemplate.user_identity_id == user_id)
                .order_by(DashboardTemplate.id)
            )).scalars().all()
            return [_to_record(row) for row in rows]

    @_store_operation
    async def create(self, template: DashboardTemplateRecord) -> DashboardTemplateRecord:
        """Insert ``template`` and return it with its assigned id and timestamps."""
        async with self._db_session_factory() as session:
            row = DashboardTemplate(
                user_identity_id=template.user_identity_id,
                name=template.template_base.name.value,
                display_name=template.template_base.display_name,
                template_config_json=_dump_config(template.template_config),
                is_default=template.is_default,
            )
            session.add(row)
            await session.commit()
            await session.refresh(row)
            return _to_record(row)

    @_store_operation
    async def update_config(self, template_id: int, config: TemplateConfig) -> None:
        """Overwrite the configuration column only."""
        async with self._db_session_factory() as session:
            await session.execute(
                update(DashboardTemplate)
                .where(DashboardTemplate.id == template_id)
                .values(template_config_json=_dump_config(config))
                .execution_options(synchronize_session=False)
            )
            await session.commit()

    @_store_operation
    async def update_default_flag(
        self, user_id: int, template_type: AvailableTemplates, value: bool
    ) -> None:
        """Set ``is_default`` on every template of ``template_type`` owned by ``user_id``."""
        async with self._db_session_factory() as session:
            await session.execute(
                update(DashboardTemplate)
                .where(
                    DashboardTemplate.user_identity_id == user_id,
                    DashboardTemplate.name == template_type.value,
                )
                .values(is_default=value)
                .execution_options(synchronize_session=False)
            )
            await session.commit()

    @_store_operation
    async def set_default(
        self, user_id: int, template_type: AvailableTemplates, template_id: int
    ) -> None:
        """Mark ``template_id`` as the only default of its (user, type) group.

        One UPDATE flips the whole group, so no reader ever sees two defaults.
        """
        async with self._db_session_factory() as session:
            async with session.begin():
                await session.execute(
                    update(DashboardTemplate)
                    .where(
                        DashboardTemplate.user_identity_id == user_id,
                        DashboardTemplate.name == template_type.value,
                    )
                    .values(is_default=case((DashboardTemplate.id == template_id, True), else_=False))
                    .execution_options(synchronize_session=False)
                )

    @_store_operation
    async def delete(self, template_id: int) -> None:
        async with self._db_session_factory() as session:
            await session.execute(
                delete(DashboardTemplate).where(DashboardTemplate.id == template_id)
            )
            await session.commit()
