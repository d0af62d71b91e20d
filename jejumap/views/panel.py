import html
from datetime import datetime

from pydantic import BaseModel, Field

from jejumap.dtos.travel_models import Accommodation, Location, ScheduleEntry
from jejumap.utils.time_utils import is_current_time_in_range

# 일정표 컬럼 (장소, 이동, 체류, 도착, 출발)
SCHEDULE_COLUMNS = ("장소", "이동", "체류", "도착", "출발")


class PlaceDetail(BaseModel):
    title: str
    thumbnail: str = ""
    category: str = ""
    address: str = ""
    phone: str = ""


class ScheduleRow(BaseModel):
    place: str
    travel_time: str = ""
    stay_time: str = ""
    arrival: str
    departure: str
    highlighted: bool = False


class DaySchedule(BaseModel):
    """
    일차 패널.
    해당 일차 일정이 없으면 title / rows 가 None 이고 숙소 정보만 표시합니다.
    """
    day: str
    title: str | None = None
    columns: tuple[str, ...] = SCHEDULE_COLUMNS
    rows: list[ScheduleRow] | None = None
    accommodations: list[Accommodation] = Field(default_factory=list)

    @property
    def has_table(self) -> bool:
        return self.rows is not None

    @property
    def highlighted_rows(self) -> list[ScheduleRow]:
        return [row for row in self.rows or [] if row.highlighted]


def build_place_detail(location: Location) -> PlaceDetail:
    # 도로명 주소가 없으면 지번 주소
    return PlaceDetail(
        title=location.title,
        thumbnail=location.thumbnail or "",
        category=location.description or "",
        address=location.road_address or location.address or "",
        phone=location.phone or "",
    )


def build_day_schedule(
    day: str,
    entries: list[ScheduleEntry],
    accommodations: list[Accommodation],
    now: datetime,
) -> DaySchedule:
    if not entries:
        return DaySchedule(day=day, accommodations=list(accommodations))

    rows = [
        ScheduleRow(
            place=entry.place,
            travel_time=entry.travel_time or "",
            stay_time=entry.stay_time or "",
            arrival=entry.arrival,
            departure=entry.departure,
            highlighted=is_current_time_in_range(entry.arrival, entry.departure, now),
        )
        for entry in entries
    ]
    return DaySchedule(day=day, title=f"{day.upper()} 일정표", rows=rows, accommodations=list(accommodations))


def info_window_content(title: str) -> str:
    return f'<div style="padding:6px 12px;font-size:13px;">{html.escape(title)}</div>'
