"""
지도 화면 상태 관리.

선택된 카테고리 / 장소 / 일차 세 가지 상태를 기준으로 마커, 사이드 패널, 지도 중심을 동기화합니다.
모든 상태 변경은 하나의 이벤트 루프에서 일어나며, 타이머는 세 가지뿐입니다.
- 일차 선택 후 레이아웃이 자리잡을 때까지 기다렸다가 지도 중심 이동 (settle_delay)
- 선택이 모두 해제된 뒤 닫힘 애니메이션 동안 패널 유지 (hide_delay)
- 일정표 강조를 위한 현재 시각 갱신 (poll_interval)
"""
import asyncio
import logging
from datetime import datetime
from typing import Callable, Protocol

from jejumap.dtos.travel_models import (
    Accommodation,
    AccommodationDocument,
    ListDocument,
    Location,
    ScheduleDocument,
)
from jejumap.utils.time_utils import DAY_KEYS, get_title_day_map, move_to_visible_center, parse_day_key
from jejumap.views.map_hook import DEFAULT_LEVEL, MapHandle
from jejumap.dtos.map_models import LatLng, MapWidget, MarkerImage
from jejumap.views.map_sdk import MapMarker
from jejumap.views.panel import DaySchedule, PlaceDetail, build_day_schedule, build_place_detail, info_window_content

logger = logging.getLogger(__name__)

CATEGORIES: tuple[str, ...] = ("travel", "cafe", "all", *DAY_KEYS)

CATEGORY_LABELS = {
    "travel": "여행지 보기",
    "cafe": "카페 보기",
    "all": "전체 보기",
    "day1": "1일차",
    "day2": "2일차",
    "day3": "3일차",
    "day4": "4일차",
    "day5": "5일차",
}

# 일차별 마커 이미지
MARKER_ICONS = {
    "day1": "/assets/markerColor/markerred.png",
    "day2": "/assets/markerColor/markerorange.png",
    "day3": "/assets/markerColor/markeryellow.png",
    "day4": "/assets/markerColor/markergreen.png",
    "day5": "/assets/markerColor/markerblue.png",
}
NORMAL_MARKER_ICON = "/assets/markerColor/markernormal.png"
ACCOMMODATION_MARKER_ICON = "/assets/markerColor/markerhotel.png"

MOBILE_MAX_WIDTH = 600
# 사이드 패널 폭을 고려한 지도 중심 보정값 (px)
DAY_PANEL_LEFT_OFFSET = 480
CLOSED_PANEL_LEFT_OFFSET = 350
MOBILE_EXTRA_BOTTOM_OFFSET = -1100
MARKER_CLICK_SHIFT_X = 200


class TravelDataSource(Protocol):
    async def fetch_list_data(self) -> ListDocument | None: ...

    async def fetch_schedule_data(self) -> ScheduleDocument | None: ...

    async def fetch_accommodation_data(self) -> AccommodationDocument | None: ...


class LocationResolver(Protocol):
    async def fetch_locations(self, places: list[str]) -> list[Location]: ...


class MapView:
    def __init__(
        self,
        handle: MapHandle,
        data_source: TravelDataSource,
        resolver: LocationResolver,
        viewport_width: int = 1280,
        panel_height: int = 0,
        settle_delay: float = 0.1,
        hide_delay: float = 0.4,
        poll_interval: float = 60,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.handle = handle
        self.data_source = data_source
        self.resolver = resolver
        self.viewport_width = viewport_width
        self.panel_height = panel_height
        self.settle_delay = settle_delay
        self.hide_delay = hide_delay
        self.poll_interval = poll_interval
        self.clock = clock

        # 선택 상태
        self.selected_category: str = "travel"
        self.selected_location: Location | None = None
        self.selected_day: str | None = None
        self.panel_visible = False

        # 장소 데이터
        self.travel_list: list[str] = []
        self.cafe_list: list[str] = []
        self.days: dict[str, list[str]] = {}
        self.schedule = ScheduleDocument()
        self.accommodations = AccommodationDocument()
        self.locations: list[Location] = []
        self.accommodation_locations: list[tuple[Accommodation, Location]] = []
        self.now = clock()

        self._markers: list[MapMarker] = []
        self._accommodation_markers: list[MapMarker] = []
        self._request_id = 0
        self._poll_task: asyncio.Task | None = None
        self._hide_timer: asyncio.TimerHandle | None = None
        self._recenter_timer: asyncio.TimerHandle | None = None
        self._disposed = False

    @property
    def map(self) -> MapWidget | None:
        return self.handle.map

    @property
    def is_mobile(self) -> bool:
        return self.viewport_width <= MOBILE_MAX_WIDTH

    @property
    def markers(self) -> list[MapMarker]:
        return list(self._markers)

    @property
    def accommodation_markers(self) -> list[MapMarker]:
        return list(self._accommodation_markers)

    # ------------------------------------------------------------------
    # 생명주기
    # ------------------------------------------------------------------
    async def mount(self) -> None:
        """지도 생성, 현재 시각 갱신 시작, 초기 데이터 로드"""
        await self.handle.init()
        if self.map is not None:
            self.map.set_level(DEFAULT_LEVEL)
        self._poll_task = asyncio.create_task(self._poll_now())
        await self.load_initial_data()

    def dispose(self) -> None:
        if self._disposed:
            return
        self._disposed = True
        if self._poll_task is not None:
            self._poll_task.cancel()
            self._poll_task = None
        self._cancel_hide_timer()
        self._cancel_recenter_timer()
        self._clear_markers()
        self.handle.dispose()
        logger.info("[ map_view ] 지도 화면 정리 완료")

    async def _poll_now(self) -> None:
        while True:
            await asyncio.sleep(self.poll_interval)
            self.refresh_now()

    def refresh_now(self) -> None:
        self.now = self.clock()

    def resize(self, viewport_width: int, panel_height: int | None = None) -> None:
        self.viewport_width = viewport_width
        if panel_height is not None:
            self.panel_height = panel_height

    # ------------------------------------------------------------------
    # 데이터 로드
    # ------------------------------------------------------------------
    async def load_initial_data(self) -> None:
        try:
            list_data = await self.data_source.fetch_list_data()
            schedule = await self.data_source.fetch_schedule_data()
            accommodations = await self.data_source.fetch_accommodation_data()
        except Exception as e:
            logger.error(f"[ map_view ] 초기 데이터 로드 실패 : {e}")
            return

        list_data = list_data or ListDocument()
        self.travel_list = list(list_data.travel_list)
        self.cafe_list = list(list_data.cafe_list)
        self.days = dict(list_data.days)
        self.schedule = schedule or ScheduleDocument()
        self.accommodations = accommodations or AccommodationDocument()

        # 데이터가 준비되면 기본 상태로 초기화
        self.selected_category = "travel"
        self.selected_location = None
        self.selected_day = None
        self._sync_panel()
        await self.load_markers()

    def titles_for(self, category: str) -> tuple[list[str], dict[str, str]]:
        """
        카테고리의 장소 이름 목록과 장소 -> 일차 태그.
        일차 카테고리는 검색 결과 이름과 상관없이 모두 그 일차로 태그하므로 태그 맵이 비어 있습니다.
        """
        if category == "all":
            titles = list(dict.fromkeys(title for day in DAY_KEYS for title in self.days.get(day) or []))
            return titles, get_title_day_map(self.days)
        if category == "travel":
            return list(self.travel_list), {}
        if category == "cafe":
            return list(self.cafe_list), {}
        return list(self.days.get(category) or []), {}

    def _accommodations_for(self, category: str) -> list[Accommodation]:
        if category == "all":
            return self.accommodations.for_day(None)
        if parse_day_key(category):
            return self.accommodations.for_day(category)
        return []

    async def _resolve_accommodations(self, accommodations: list[Accommodation]) -> list[tuple[Accommodation, Location]]:
        if not accommodations:
            return []
        # 숙소별로 따로 검색해야 검색 결과 이름이 달라도 숙소와 짝을 맞출 수 있음
        results = await asyncio.gather(*(self.resolver.fetch_locations([item.name]) for item in accommodations))
        return [(item, resolved[0]) for item, resolved in zip(accommodations, results) if resolved]

    async def load_markers(self) -> bool:
        """
        현재 카테고리의 장소를 검색해 마커를 교체합니다.
        더 최신 요청이 있으면 늦게 도착한 응답은 버리고 False 를 반환합니다.
        """
        self._request_id += 1
        request_id = self._request_id
        category = self.selected_category
        titles, day_tags = self.titles_for(category)

        locations, accommodation_locations = await asyncio.gather(
            self.resolver.fetch_locations(titles),
            self._resolve_accommodations(self._accommodations_for(category)),
        )

        if self._disposed or request_id != self._request_id:
            logger.info(f"[ map_view ] 오래된 응답 무시 : {category} (request_id={request_id})")
            return False

        self.locations = [
            location.model_copy(update={"day_key": parse_day_key(category) or day_tags.get(location.title)})
            for location in locations
        ]
        self.accommodation_locations = accommodation_locations
        self._render_markers()
        return True

    # ------------------------------------------------------------------
    # 사용자 동작
    # ------------------------------------------------------------------
    async def select_category(self, category: str) -> bool:
        if category not in CATEGORIES:
            raise ValueError(f"알 수 없는 카테고리입니다: {category}")

        self.selected_category = category
        day = parse_day_key(category)
        if day is not None:
            self.selected_day = day
            self.selected_location = None
            self._sync_panel()
            self._schedule_day_recenter()
        else:
            self.selected_day = None
            self.selected_location = None
            self._cancel_recenter_timer()
            self._hide_panel_now()
            move_to_visible_center(self.map, self._closed_left_offset(), 0)

        return await self.load_markers()

    def click_marker(self, location: Location) -> None:
        self.selected_location = location
        self.selected_day = None
        self._cancel_recenter_timer()
        self._sync_panel()

        if self.map is None:
            return
        # 사이드 패널을 고려하여 오른쪽으로 이동
        projection = self.map.get_projection()
        point = projection.container_point_from_coords(LatLng(lat=location.lat, lng=location.lng))
        self.map.set_center(projection.coords_from_container_point(point.shift(MARKER_CLICK_SHIFT_X, 0)))

    def close_panel(self) -> None:
        self.selected_location = None
        self.selected_day = None
        self._cancel_recenter_timer()
        self._hide_panel_now()
        move_to_visible_center(self.map, self._closed_left_offset(), 0)

    # ------------------------------------------------------------------
    # 패널
    # ------------------------------------------------------------------
    def panel(self) -> PlaceDetail | DaySchedule | None:
        if not self.panel_visible:
            return None
        if self.selected_location is not None:
            return build_place_detail(self.selected_location)
        if self.selected_day is not None:
            return build_day_schedule(
                self.selected_day,
                self.schedule.entries(self.selected_day),
                self.accommodations.for_day(self.selected_day),
                self.now,
            )
        # 닫히는 중
        return None

    def _sync_panel(self) -> None:
        if self.selected_location is not None or self.selected_day is not None:
            self._cancel_hide_timer()
            self.panel_visible = True
            return
        if not self.panel_visible or self._hide_timer is not None:
            return
        loop = asyncio.get_running_loop()
        self._hide_timer = loop.call_later(self.hide_delay, self._hide_panel)

    def _hide_panel(self) -> None:
        self._hide_timer = None
        if self.selected_location is None and self.selected_day is None:
            self.panel_visible = False

    def _hide_panel_now(self) -> None:
        # 닫기 버튼, 일차 외 카테고리 선택은 유예 없이 바로 숨김
        self._cancel_hide_timer()
        self.panel_visible = False

    def _cancel_hide_timer(self) -> None:
        if self._hide_timer is not None:
            self._hide_timer.cancel()
            self._hide_timer = None

    # ------------------------------------------------------------------
    # 지도 중심
    # ------------------------------------------------------------------
    def _closed_left_offset(self) -> int:
        return 0 if self.is_mobile else CLOSED_PANEL_LEFT_OFFSET

    def _schedule_day_recenter(self) -> None:
        self._cancel_recenter_timer()
        loop = asyncio.get_running_loop()
        self._recenter_timer = loop.call_later(self.settle_delay, self._recenter_for_day)

    def _recenter_for_day(self) -> None:
        self._recenter_timer = None
        if self.map is None or self.selected_day is None or self.selected_location is not None:
            return
        if self.is_mobile:
            left_offset = 0
            bottom_offset = self.panel_height + MOBILE_EXTRA_BOTTOM_OFFSET
        else:
            left_offset = DAY_PANEL_LEFT_OFFSET
            bottom_offset = 0
        move_to_visible_center(self.map, left_offset, bottom_offset)

    def _cancel_recenter_timer(self) -> None:
        if self._recenter_timer is not None:
            self._recenter_timer.cancel()
            self._recenter_timer = None

    # ------------------------------------------------------------------
    # 마커
    # ------------------------------------------------------------------
    def marker_icon(self, location: Location) -> str:
        if self.selected_category in ("travel", "cafe"):
            return NORMAL_MARKER_ICON
        return MARKER_ICONS.get(location.day_key, NORMAL_MARKER_ICON)

    def _clear_markers(self) -> None:
        for marker in self._markers + self._accommodation_markers:
            marker.set_map(None)
        self._markers = []
        self._accommodation_markers = []

    def _create_marker(self, location: Location, icon: str) -> MapMarker:
        marker = self.handle.sdk.create_marker(self.map, LatLng(lat=location.lat, lng=location.lng), MarkerImage(src=icon))
        content = info_window_content(location.title)
        marker.on("mouseover", lambda: marker.open_info(content))
        marker.on("mouseout", marker.close_info)
        marker.on("click", lambda: self.click_marker(location))
        return marker

    def _render_markers(self) -> None:
        self._clear_markers()
        if self.map is None:
            return
        self._markers = [self._create_marker(location, self.marker_icon(location)) for location in self.locations]
        self._accommodation_markers = [
            self._create_marker(location, ACCOMMODATION_MARKER_ICON)
            for _, location in self.accommodation_locations
        ]
        logger.info(
            f"[ map_view ] 마커 렌더링 : {self.selected_category} "
            f"장소 {len(self._markers)}개, 숙소 {len(self._accommodation_markers)}개"
        )
