import logging
from datetime import datetime, timezone
from decimal import Decimal

from models import Base, DashboardItem
from settings import get_settings
from sqlalchemy import insert, inspect
from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker, create_async_engine

logger = logging.getLogger(__name__)

settings = get_settings()

engine = create_async_engine(settings.async_database_url, pool_pre_ping=True)
AsyncSessionLocal = async_sessionmaker(engine, expire_on_commit=False)

# 최초 스키마 생성 시 한 번만 넣는 데모 데이터 (CreatedAt 고정)
SEED_CREATED_AT = datetime(2024, 1, 1, tzinfo=timezone.utc)

SEED_ITEMS = [
    {
        "title": "Sales Revenue",
        "description": "Q1 2024 Revenue",
        "value": Decimal("125000.50"),
        "category": "Revenue",
        "created_at": SEED_CREATED_AT,
    },
    {
        "title": "Active Users",
        "description": "Monthly Active Users",
        "value": Decimal("15420"),
        "category": "Users",
        "created_at": SEED_CREATED_AT,
    },
    {
        "title": "Conversion Rate",
        "description": "Current Conversion Rate",
        "value": Decimal("3.75"),
        "category": "Metrics",
        "created_at": SEED_CREATED_AT,
    },
    {
        "title": "Customer Satisfaction",
        "description": "CSAT Score",
        "value": Decimal("4.6"),
        "category": "Satisfaction",
        "created_at": SEED_CREATED_AT,
    },
    {
        "title": "Orders Processed",
        "description": "Total Orders This Month",
        "value": Decimal("8945"),
        "category": "Orders",
        "created_at": SEED_CREATED_AT,
    },
]


def _create_schema(sync_conn) -> bool:
    """테이블이 없을 때만 생성하고, 생성 여부를 반환"""
    if inspect(sync_conn).has_table(DashboardItem.__tablename__):
        return False
    Base.metadata.create_all(sync_conn)
    return True


async def init_db(bind: AsyncEngine) -> bool:
    """스키마를 만들고 처음 생성된 경우에만 seed 데이터를 넣는다.

    Args:
        bind (AsyncEngine): 초기화할 데이터베이스 엔진

    Returns:
        bool: 이번 호출에서 테이블이 새로 생성되었으면 True
    """
    async with bind.begin() as conn:
        created = await conn.run_sync(_create_schema)
        if created:
            # id는 DB가 순서대로 부여 (1..5)
            await conn.execute(insert(DashboardItem), SEED_ITEMS)

    if created:
        logger.info("Database created and seeded with %d items", len(SEED_ITEMS))
    else:
        logger.info("Database already exists")
    return created
