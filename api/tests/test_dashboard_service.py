import asyncio
from decimal import Decimal

import pytest
from dashboard_service import (
    DashboardService,
    ItemIdMismatchError,
    ItemNotFoundError,
)
from database import SEED_ITEMS, init_db
from models import DashboardItem
from schemas import DashboardItemPayload
from sqlalchemy import delete
from sqlalchemy.ext.asyncio import async_sessionmaker
from sqlalchemy.orm.exc import StaleDataError
from tests.helper import create_test_engine


def run_with_service(scenario):
    """새 in-memory DB를 seed한 뒤 scenario(service, session)를 실행"""

    async def _run():
        engine = create_test_engine()
        try:
            await init_db(engine)
            async with async_sessionmaker(engine, expire_on_commit=False)() as session:
                return await scenario(DashboardService(session), session)
        finally:
            await engine.dispose()

    return asyncio.run(_run())


def test_init_db_seeds_only_once():
    async def _run():
        engine = create_test_engine()
        try:
            first = await init_db(engine)
            second = await init_db(engine)
            async with async_sessionmaker(engine)() as session:
                items = await DashboardService(session).list_items()
            return first, second, items
        finally:
            await engine.dispose()

    first, second, items = asyncio.run(_run())
    assert first is True
    assert second is False
    assert len(items) == len(SEED_ITEMS)
    assert items[0].value == Decimal("125000.50")


def test_create_ignores_caller_id():
    async def scenario(service, session):
        return await service.create_item(
            DashboardItemPayload(id=1, title="New", value=Decimal("2.25"))
        )

    item = run_with_service(scenario)
    assert item.id == len(SEED_ITEMS) + 1
    assert item.title == "New"
    assert item.category == ""
    assert item.created_at is not None


def test_update_rejects_mismatched_id():
    async def scenario(service, session):
        with pytest.raises(ItemIdMismatchError):
            await service.update_item(1, DashboardItemPayload(id=2, title="x"))
        return await service.get_item(1)

    item = run_with_service(scenario)
    assert item.title == "Sales Revenue"


def test_get_missing_item_raises():
    async def scenario(service, session):
        with pytest.raises(ItemNotFoundError) as exc_info:
            await service.get_item(404)
        return exc_info.value

    assert run_with_service(scenario).item_id == 404


def test_update_conflict_on_deleted_row_is_not_found(monkeypatch):
    async def scenario(service, session):
        real_commit = session.commit

        async def commit_after_concurrent_delete():
            # 다른 요청이 먼저 행을 지운 상황을 흉내낸다
            await session.rollback()
            await session.execute(delete(DashboardItem).where(DashboardItem.id == 2))
            await real_commit()
            raise StaleDataError("UPDATE statement matched 0 rows")

        monkeypatch.setattr(session, "commit", commit_after_concurrent_delete)
        with pytest.raises(ItemNotFoundError):
            await service.update_item(2, DashboardItemPayload(id=2, title="x"))

    run_with_service(scenario)


def test_update_conflict_on_existing_row_propagates(monkeypatch):
    async def scenario(service, session):
        async def conflicting_commit():
            raise StaleDataError("UPDATE statement matched 0 rows")

        monkeypatch.setattr(session, "commit", conflicting_commit)
        with pytest.raises(StaleDataError):
            await service.update_item(2, DashboardItemPayload(id=2, title="x"))

        monkeypatch.undo()
        return await service.get_item(2)

    item = run_with_service(scenario)
    assert item.title == "Active Users"
