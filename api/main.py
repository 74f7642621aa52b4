import logging
from contextlib import asynccontextmanager
from typing import List

import database
from dashboard_service import DashboardService, ItemIdMismatchError, ItemNotFoundError
from dependencies import get_dashboard_service
from fastapi import Depends, FastAPI, HTTPException, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from logging_config import setup_logging
from schemas import DashboardItemPayload, DashboardItemResponse
from settings import get_settings
from sqlalchemy.exc import InterfaceError, OperationalError

# 설정 및 로깅 초기화
settings = get_settings()
setup_logging(settings.log_level, settings.json_logs)

logger = logging.getLogger(__name__)


# fastapi의 생명주기
@asynccontextmanager
async def lifespan(app: FastAPI):
    """애플리케이션의 생명주기를 관리한다.

    시작 시 스키마 생성과 seed를 한 번 수행한 뒤 요청을 받는다.
    DB에 연결할 수 없으면 재시도 없이 시작을 중단한다.

    Args:
        app (FastAPI): FastAPI 애플리케이션 인스턴스

    Yields:
        None: 컨텍스트가 유지되는 동안 애플리케이션 실행
    """
    engine = database.engine
    try:
        await database.init_db(engine)
    except (OperationalError, InterfaceError):
        logger.exception("Database initialization failed")
        raise

    app.state.sessionmaker = database.AsyncSessionLocal

    yield
    # 종료 시 커넥션 풀 정리
    await engine.dispose()


app = FastAPI(title="Dashboard API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(OperationalError)
@app.exception_handler(InterfaceError)
async def database_unavailable_handler(request: Request, exc: Exception):
    """요청 처리 중 DB에 닿지 못하면 503으로 응답"""
    logger.error("Database unavailable during %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=503, content={"detail": "Database unavailable"})


# API 엔드포인트
@app.get("/api/dashboard", response_model=List[DashboardItemResponse])
async def list_items(service: DashboardService = Depends(get_dashboard_service)):
    """모든 대시보드 아이템을 반환한다."""
    return await service.list_items()


@app.get("/api/dashboard/{item_id}", response_model=DashboardItemResponse)
async def get_item(
    item_id: int, service: DashboardService = Depends(get_dashboard_service)
):
    try:
        return await service.get_item(item_id)
    except ItemNotFoundError:
        raise HTTPException(status_code=404)


@app.post("/api/dashboard", response_model=DashboardItemResponse, status_code=201)
async def create_item(
    payload: DashboardItemPayload,
    request: Request,
    response: Response,
    service: DashboardService = Depends(get_dashboard_service),
):
    """새로운 대시보드 아이템을 생성한다. 본문의 Id는 무시된다."""
    db_item = await service.create_item(payload)

    # 생성된 리소스를 조회할 수 있는 위치
    response.headers["Location"] = str(request.url_for("get_item", item_id=db_item.id))
    return db_item


@app.put("/api/dashboard/{item_id}", status_code=204)
async def update_item(
    item_id: int,
    payload: DashboardItemPayload,
    service: DashboardService = Depends(get_dashboard_service),
):
    """아이템 전체를 덮어쓴다 (부분 수정 아님)."""
    try:
        await service.update_item(item_id, payload)
    except ItemIdMismatchError:
        raise HTTPException(status_code=400)
    except ItemNotFoundError:
        raise HTTPException(status_code=404)
    return Response(status_code=204)


@app.delete("/api/dashboard/{item_id}", status_code=204)
async def delete_item(
    item_id: int, service: DashboardService = Depends(get_dashboard_service)
):
    try:
        await service.delete_item(item_id)
    except ItemNotFoundError:
        raise HTTPException(status_code=404)
    return Response(status_code=204)
