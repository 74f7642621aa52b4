import logging
from pathlib import Path
from typing import AsyncIterator, List, Optional, Tuple

import httpx
from fastapi import Depends, FastAPI, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates
from logging_config import setup_logging
from pydantic import ValidationError
from schemas import DashboardItemResponse
from settings import get_settings

settings = get_settings()
setup_logging(settings.log_level, settings.json_logs)

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).parent / "templates"
templates = Jinja2Templates(directory=str(TEMPLATES_DIR))

app = FastAPI(title="Dashboard Web")


async def get_api_client() -> AsyncIterator[httpx.AsyncClient]:
    """Dashboard API를 호출하는 httpx 클라이언트"""
    async with httpx.AsyncClient(base_url=settings.api_base_url, timeout=10.0) as client:
        yield client


async def load_dashboard_data(
    client: httpx.AsyncClient,
) -> Tuple[Optional[List[DashboardItemResponse]], Optional[str]]:
    """API에서 아이템 목록을 가져온다.

    Returns:
        (items, error_message): 성공 시 error_message는 None, 실패 시 items는 None
    """
    try:
        resp = await client.get("/api/dashboard")
    except httpx.HTTPError as e:
        logger.warning("Dashboard API request failed: %s", e)
        return None, f"Failed to connect to API: {e}"

    if not resp.is_success:
        return None, f"API returned status code: {resp.status_code}"

    # 2xx여도 본문이 JSON 배열이 아니거나 항목이 스키마와 맞지 않을 수 있음
    try:
        items = [DashboardItemResponse.model_validate(item) for item in resp.json()]
    except (ValueError, TypeError, ValidationError) as e:
        logger.warning("Dashboard API returned an unreadable body: %s", e)
        return None, f"Failed to connect to API: {e}"
    return items, None


# GET/POST 모두 목록을 다시 불러와 렌더링
@app.api_route("/", methods=["GET", "POST"], response_class=HTMLResponse)
async def index(request: Request, client: httpx.AsyncClient = Depends(get_api_client)):
    items, error_message = await load_dashboard_data(client)
    return templates.TemplateResponse(
        request,
        "index.html",
        {"items": items, "error_message": error_message},
    )
