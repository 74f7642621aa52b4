from datetime import datetime, timezone
from decimal import Decimal
from typing import Annotated, Optional

from pydantic import BaseModel, ConfigDict, PlainSerializer, field_validator
from pydantic.alias_generators import to_pascal

# JSON 응답에서는 문자열이 아닌 숫자로 내보낸다.
# float 변환이라 유효숫자 15자리를 넘는 값은 JSON에서 정밀도가 떨어진다.
DecimalNumber = Annotated[
    Decimal, PlainSerializer(float, return_type=float, when_used="json")
]


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """naive datetime은 UTC로 간주하고, aware datetime은 UTC로 변환"""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class DashboardItemBase(BaseModel):
    # JSON 필드명은 Id, Title, ... (PascalCase), snake_case 입력도 허용
    model_config = ConfigDict(alias_generator=to_pascal, populate_by_name=True)

    title: str = ""
    description: str = ""
    value: DecimalNumber = Decimal(0)
    category: str = ""

    @field_validator("title", "description", "category", mode="before")
    @classmethod
    def _null_to_empty(cls, v):
        return "" if v is None else v


class DashboardItemPayload(DashboardItemBase):
    """POST/PUT 요청 본문.

    POST에서는 id가 무시되고, PUT에서는 경로의 id와 일치해야 한다.
    """

    id: int = 0
    created_at: Optional[datetime] = None

    _created_at_utc = field_validator("created_at")(as_utc)


class DashboardItemResponse(DashboardItemBase):
    model_config = ConfigDict(
        alias_generator=to_pascal, populate_by_name=True, from_attributes=True
    )

    id: int
    created_at: datetime

    # SQLite 등 tz 정보를 잃는 드라이버 대비
    _created_at_utc = field_validator("created_at")(as_utc)
