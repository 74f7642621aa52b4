from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool


def create_test_engine():
    """In-memory SQLite async engine (커넥션 하나를 공유해야 테이블이 유지됨)"""
    return create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )


def prepare_test_app():
    """Create FastAPI test app backed by a fresh in-memory DB.

    스키마 생성과 seed는 TestClient가 lifespan을 실행할 때 이루어진다.
    """
    import database
    import main

    engine = create_test_engine()
    TestingSession = async_sessionmaker(engine, expire_on_commit=False)

    # Monkeypatch DB
    database.engine = engine
    database.AsyncSessionLocal = TestingSession

    return main.app
