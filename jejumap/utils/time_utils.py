import logging
import re
from datetime import datetime
from typing import Literal

from jejumap.dtos.map_models import LatLng, MapWidget

logger = logging.getLogger(__name__)

DayKey = Literal["day1", "day2", "day3", "day4", "day5"]

# 일차 순서 (순서가 의미를 가짐)
DAY_KEYS: tuple[str, ...] = ("day1", "day2", "day3", "day4", "day5")

# 지도 기준점: 한라산
HALLASAN = LatLng(lat=33.3617, lng=126.5292)

_MERIDIEM_PATTERN = re.compile(r"(AM|PM)", re.IGNORECASE)
_TWELVE_HOUR_PATTERN = re.compile(r"^(\d{1,2}):(\d{2})\s*(AM|PM)$", re.IGNORECASE)
_TWENTY_FOUR_HOUR_PATTERN = re.compile(r"^(\d{1,2}):(\d{2})$")


def parse_day_key(value: str | None) -> str | None:
    """일차 키가 맞으면 그대로, 아니면 None"""
    return value if value in DAY_KEYS else None


def convert_to_24_hour(time: str) -> str:
    """
    12시간제 시간 문자열을 24시간제 "HH:MM" 으로 변환합니다.

    Args:
        time (str): "1:05PM", "12:00AM" 형태의 문자열. AM/PM 표기가 없으면 이미 24시간제로 간주.

    Returns:
        str: 변환된 "HH:MM" 문자열. 형식이 맞지 않으면 입력을 그대로 돌려줍니다 (예외 없음).
    """
    if time is None:
        return ""
    value = time.strip()
    if not _MERIDIEM_PATTERN.search(value):
        return value

    match = _TWELVE_HOUR_PATTERN.match(value)
    if not match:
        logger.warning(f"[ time_utils ] 시간 형식 오류 : {time}")
        return value

    hour, minute, meridiem = int(match.group(1)), int(match.group(2)), match.group(3).upper()
    if not 1 <= hour <= 12 or minute > 59:
        logger.warning(f"[ time_utils ] 시간 범위 오류 : {time}")
        return value

    if meridiem == "AM" and hour == 12:
        hour = 0
    elif meridiem == "PM" and hour != 12:
        hour += 12
    return f"{hour:02d}:{minute:02d}"


def _minute_of_day(time: str) -> int | None:
    match = _TWENTY_FOUR_HOUR_PATTERN.match(convert_to_24_hour(time))
    if not match:
        return None
    hour, minute = int(match.group(1)), int(match.group(2))
    if hour > 23 or minute > 59:
        return None
    return hour * 60 + minute


def is_current_time_in_range(arrival: str, departure: str, now: datetime | None = None) -> bool:
    """
    현재 시각이 [도착, 출발] 구간 안에 있는지 분 단위로 비교합니다. 양 끝 포함.
    """
    start = _minute_of_day(arrival)
    end = _minute_of_day(departure)
    if start is None or end is None:
        return False

    now = now or datetime.now()
    current = now.hour * 60 + now.minute
    return start <= current <= end


def get_title_day_map(days: dict[str, list[str]]) -> dict[str, str]:
    # 장소 이름 -> 처음 등장한 일차
    title_day_map: dict[str, str] = {}
    for day in DAY_KEYS:
        for title in days.get(day) or []:
            title_day_map.setdefault(title, day)
    return title_day_map


def move_to_visible_center(
    map: MapWidget | None,
    left_offset: float = 0,
    bottom_offset: float = 0,
    reference: LatLng = HALLASAN,
) -> None:
    """
    사이드 패널이 지도를 가리는 만큼 기준점(한라산)을 옮겨 화면에 보이도록 중심을 이동합니다.
    """
    if map is None:
        return
    projection = map.get_projection()
    point = projection.container_point_from_coords(reference)
    shifted = point.shift(left_offset / 2, -bottom_offset / 2)
    map.set_center(projection.coords_from_container_point(shifted))
