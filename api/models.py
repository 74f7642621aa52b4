from sqlalchemy import Column, DateTime, Integer, Numeric, Text
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass


class DashboardItem(Base):
    __tablename__ = "dashboard_items"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    # 문자열 컬럼은 null 대신 빈 문자열로 저장
    title = Column(Text, nullable=False, default="")
    description = Column(Text, nullable=False, default="")
    value = Column(Numeric(18, 4), nullable=False)
    category = Column(Text, nullable=False, default="")

    # UTC 기준 timezone-aware timestamp로 저장
    created_at = Column(DateTime(timezone=True), nullable=False)
