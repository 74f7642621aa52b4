from typing import AsyncIterator

from dashboard_service import DashboardService
from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession


async def get_session(request: Request) -> AsyncIterator[AsyncSession]:
    """요청마다 새 AsyncSession을 열고, 응답 후 닫는다."""
    async with request.app.state.sessionmaker() as session:
        yield session


def get_dashboard_service(
    session: AsyncSession = Depends(get_session),
) -> DashboardService:
    """AsyncSession -> DashboardService"""
    return DashboardService(session)
