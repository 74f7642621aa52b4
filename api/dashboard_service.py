import logging
from datetime import datetime, timezone
from typing import List

from models import DashboardItem
from schemas import DashboardItemPayload
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.exc import StaleDataError

logger = logging.getLogger(__name__)


class ItemNotFoundError(Exception):
    """요청한 id의 아이템이 없음"""

    def __init__(self, item_id: int) -> None:
        super().__init__(f"DashboardItem {item_id} not found")
        self.item_id = item_id


class ItemIdMismatchError(Exception):
    """경로의 id와 본문의 Id가 다름"""

    def __init__(self, path_id: int, body_id: int) -> None:
        super().__init__(f"Path id {path_id} does not match body Id {body_id}")
        self.path_id = path_id
        self.body_id = body_id


class DashboardService:
    """DashboardItem 테이블에 대한 CRUD를 캡슐화한 서비스 클래스

    요청마다 주입된 AsyncSession 하나를 사용한다.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    # private method
    async def _exists(self, item_id: int) -> bool:
        found = await self.session.scalar(
            select(DashboardItem.id).where(DashboardItem.id == item_id)
        )
        return found is not None

    async def _get_or_raise(self, item_id: int) -> DashboardItem:
        item = await self.session.get(DashboardItem, item_id)
        if item is None:
            raise ItemNotFoundError(item_id)
        return item

    # public method
    async def list_items(self) -> List[DashboardItem]:
        result = await self.session.scalars(
            select(DashboardItem).order_by(DashboardItem.id)
        )
        return list(result.all())

    async def get_item(self, item_id: int) -> DashboardItem:
        return await self._get_or_raise(item_id)

    async def create_item(self, payload: DashboardItemPayload) -> DashboardItem:
        """새 아이템을 저장한다. 요청 본문의 Id는 무시하고 DB가 부여한다."""
        db_item = DashboardItem(
            title=payload.title,
            description=payload.description,
            value=payload.value,
            category=payload.category,
            created_at=payload.created_at or datetime.now(timezone.utc),
        )
        self.session.add(db_item)
        await self.session.commit()

        # DB에서 자동 생성된 ID 등을 로드
        await self.session.refresh(db_item)
        logger.info("Created DashboardItem %s", db_item.id)
        return db_item

    async def update_item(self, item_id: int, payload: DashboardItemPayload) -> None:
        """아이템 전체를 payload 값으로 덮어쓴다.

        Raises:
            ItemIdMismatchError: payload.id != item_id
            ItemNotFoundError: 아이템이 없거나, 갱신 도중 다른 요청이 삭제한 경우
            StaleDataError: 충돌이 발생했지만 아이템이 아직 존재하는 경우
        """
        if payload.id != item_id:
            raise ItemIdMismatchError(item_id, payload.id)

        db_item = await self._get_or_raise(item_id)
        db_item.title = payload.title
        db_item.description = payload.description
        db_item.value = payload.value
        db_item.category = payload.category
        # 전체 덮어쓰기의 유일한 예외: CreatedAt이 생략되면 기존 값 유지
        if payload.created_at is not None:
            db_item.created_at = payload.created_at

        try:
            await self.session.commit()
        except StaleDataError:
            await self.session.rollback()
            if not await self._exists(item_id):
                raise ItemNotFoundError(item_id)
            logger.error("Concurrent update conflict on DashboardItem %s", item_id)
            raise

    async def delete_item(self, item_id: int) -> None:
        db_item = await self._get_or_raise(item_id)
        await self.session.delete(db_item)
        await self.session.commit()
        logger.info("Deleted DashboardItem %s", item_id)
