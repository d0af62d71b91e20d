import asyncio
from datetime import datetime

import pytest

from jejumap.dtos.map_models import ContainerPoint, LatLng
from jejumap.dtos.travel_models import AccommodationDocument, ListDocument, Location, ScheduleDocument
from jejumap.utils.time_utils import HALLASAN
from jejumap.views.map_hook import MapHandle
from jejumap.views.map_view import (
    ACCOMMODATION_MARKER_ICON,
    MARKER_ICONS,
    NORMAL_MARKER_ICON,
    MapView,
)
from jejumap.views.panel import DaySchedule, PlaceDetail, build_place_detail

pytestmark = pytest.mark.anyio


class FakeProjection:
    def container_point_from_coords(self, coords):
        return ContainerPoint(x=coords.lng * 100, y=coords.lat * 100)

    def coords_from_container_point(self, point):
        return LatLng(lat=point.y / 100, lng=point.x / 100)


class FakeMap:
    def __init__(self, center, level):
        self.center = center
        self.level = level

    def get_projection(self):
        return FakeProjection()

    def set_center(self, coords):
        self.center = coords

    def set_level(self, level):
        self.level = level


class FakeMarker:
    def __init__(self, map, position, image):
        self.map = map
        self.position = position
        self.image = image
        self.handlers = {}
        self.info = None

    def set_map(self, map):
        self.map = map

    def on(self, event, handler):
        self.handlers[event] = handler

    def open_info(self, content):
        self.info = content

    def close_info(self):
        self.info = None

    def trigger(self, event):
        self.handlers[event]()


class FakeSDK:
    def __init__(self):
        self.script_urls = []
        self.maps = []

    async def load(self, script_url):
        self.script_urls.append(script_url)

    def create_map(self, container, center, level):
        widget = FakeMap(center, level)
        self.maps.append(widget)
        return widget

    def create_marker(self, map, position, image):
        return FakeMarker(map, position, image)


class FakeDataSource:
    def __init__(self, list_data=None, schedule=None, accommodations=None, error=None):
        self.list_data = list_data
        self.schedule = schedule
        self.accommodations = accommodations
        self.error = error

    async def fetch_list_data(self):
        if self.error:
            raise self.error
        return self.list_data

    async def fetch_schedule_data(self):
        return self.schedule

    async def fetch_accommodation_data(self):
        return self.accommodations


# 장소 이름 -> 좌표 (없는 이름은 검색 실패로 취급)
COORDS = {
    "성산일출봉": (33.46, 126.94),
    "우도": (33.50, 126.95),
    "협재해변": (33.39, 126.24),
    "카페 델문도": (33.54, 126.66),
    "오설록": (33.30, 126.29),
    "제주 신라호텔": (33.25, 126.41),
}


class FakeResolver:
    def __init__(self):
        self.calls = []
        self.gates = {}

    async def fetch_locations(self, places):
        self.calls.append(list(places))
        for place in places:
            if place in self.gates:
                await self.gates[place].wait()
        return [
            Location(title=place, lat=COORDS[place][0], lng=COORDS[place][1], road_address=f"{place} 도로명 주소")
            for place in places
            if place in COORDS
        ]


LIST_DATA = ListDocument.model_validate({
    "travelList": ["성산일출봉", "협재해변"],
    "cafeList": ["카페 델문도"],
    "days": {
        "day1": ["성산일출봉", "우도"],
        "day2": ["우도", "오설록"],
        "day3": ["협재해변", "없는 장소"],
    },
})

SCHEDULE = ScheduleDocument.model_validate({
    "day3": [
        {"place": "협재해변", "travelTime": "40분", "stayTime": "2시간", "arrival": "09:00", "departure": "11:00"},
        {"place": "오설록", "travelTime": "20분", "stayTime": "1시간", "arrival": "11:20", "departure": "12:20"},
    ]
})

ACCOMMODATIONS = AccommodationDocument.model_validate({
    "accommodations": [
        {"name": "제주 신라호텔", "link": "https://example.com/shilla", "checkIn": "15:00", "day": "day3"},
    ]
})


class Clock:
    def __init__(self, now):
        self.now = now

    def __call__(self):
        return self.now


def make_view(data_source=None, resolver=None, clock=None, **kwargs):
    sdk = FakeSDK()
    handle = MapHandle(sdk, container="map", app_key="js-key")
    view = MapView(
        handle,
        data_source or FakeDataSource(LIST_DATA, SCHEDULE, ACCOMMODATIONS),
        resolver or FakeResolver(),
        settle_delay=kwargs.pop("settle_delay", 0.01),
        hide_delay=kwargs.pop("hide_delay", 0.05),
        poll_interval=kwargs.pop("poll_interval", 60),
        clock=clock or Clock(datetime(2025, 5, 3, 10, 0)),
        **kwargs,
    )
    return view, sdk


def titles(view):
    return [location.title for location in view.locations]


async def test_map_handle_initializes_once():
    sdk = FakeSDK()
    handle = MapHandle(sdk, container="map", app_key="js-key")

    first = await handle.init()
    second = await handle.init()

    assert first is second
    assert handle.is_loaded
    assert len(sdk.maps) == 1
    assert first.center == HALLASAN and first.level == 10
    assert "appkey=js-key" in sdk.script_urls[0]
    assert "libraries=services" in sdk.script_urls[0]

    handle.dispose()
    assert handle.map is None
    assert await handle.init() is None


async def test_mount_shows_travel_markers():
    view, sdk = make_view()
    await view.mount()
    try:
        assert view.selected_category == "travel"
        assert titles(view) == ["성산일출봉", "협재해변"]
        assert [marker.image.src for marker in view.markers] == [NORMAL_MARKER_ICON] * 2
        assert all(marker.map is sdk.maps[0] for marker in view.markers)
        assert view.panel_visible is False
        assert view.panel() is None
    finally:
        view.dispose()


async def test_load_failure_is_swallowed():
    view, _ = make_view(data_source=FakeDataSource(error=RuntimeError("network down")))
    await view.mount()
    try:
        assert view.locations == []
        assert view.travel_list == []
    finally:
        view.dispose()


async def test_selecting_day_after_travel_shows_day_schedule():
    view, sdk = make_view()
    await view.mount()
    try:
        await view.select_category("travel")
        view.click_marker(view.locations[0])
        assert isinstance(view.panel(), PlaceDetail)

        await view.select_category("day3")

        assert view.selected_location is None
        assert view.selected_day == "day3"
        # "없는 장소" 는 검색 결과가 없어 제외
        assert titles(view) == ["협재해변"]
        assert [marker.image.src for marker in view.markers] == [MARKER_ICONS["day3"]]

        panel = view.panel()
        assert isinstance(panel, DaySchedule)
        assert panel.title == "DAY3 일정표"
        assert [row.place for row in panel.rows] == ["협재해변", "오설록"]
        assert [item.name for item in panel.accommodations] == ["제주 신라호텔"]
    finally:
        view.dispose()


async def test_day_view_adds_accommodation_markers():
    view, _ = make_view()
    await view.mount()
    try:
        await view.select_category("day3")
        assert [marker.image.src for marker in view.accommodation_markers] == [ACCOMMODATION_MARKER_ICON]

        await view.select_category("cafe")
        assert view.accommodation_markers == []
    finally:
        view.dispose()


class RenamingResolver(FakeResolver):
    # 검색 결과 이름이 요청한 이름과 다른 경우 (예: 협재해변 -> 협재해변 해수욕장)
    async def fetch_locations(self, places):
        locations = await super().fetch_locations(places)
        return [location.model_copy(update={"title": f"{location.title} 해수욕장"}) for location in locations]


async def test_day_markers_keep_day_icon_when_search_renames_place():
    view, _ = make_view(resolver=RenamingResolver())
    await view.mount()
    try:
        await view.select_category("day3")

        assert titles(view) == ["협재해변 해수욕장"]
        assert all(location.day_key == "day3" for location in view.locations)
        assert all(marker.image.src == MARKER_ICONS["day3"] for marker in view.markers)
    finally:
        view.dispose()


async def test_day_without_schedule_shows_accommodations_only():
    view, _ = make_view()
    await view.mount()
    try:
        await view.select_category("day1")

        panel = view.panel()
        assert isinstance(panel, DaySchedule)
        assert panel.has_table is False
        assert panel.title is None and panel.rows is None
        assert panel.highlighted_rows == []
        assert panel.accommodations == []
    finally:
        view.dispose()


async def test_day_with_empty_place_list():
    data_source = FakeDataSource(
        ListDocument.model_validate({"travelList": [], "cafeList": [], "days": {"day4": []}}),
        ScheduleDocument(),
        AccommodationDocument(),
    )
    view, _ = make_view(data_source=data_source)
    await view.mount()
    try:
        assert await view.select_category("day4") is True
        assert view.locations == []
        assert view.markers == []
        assert view.panel().has_table is False

        assert await view.select_category("day5") is True
        assert view.markers == []
    finally:
        view.dispose()


async def test_all_category_merges_days_with_first_day_tag():
    view, _ = make_view()
    await view.mount()
    try:
        await view.select_category("all")

        assert titles(view) == ["성산일출봉", "우도", "오설록", "협재해변"]
        tags = {location.title: location.day_key for location in view.locations}
        assert tags == {"성산일출봉": "day1", "우도": "day1", "오설록": "day2", "협재해변": "day3"}
        assert view.markers[2].image.src == MARKER_ICONS["day2"]
        assert view.selected_day is None
        assert len(view.accommodation_markers) == 1
    finally:
        view.dispose()


async def test_schedule_rows_highlight_current_time():
    clock = Clock(datetime(2025, 5, 3, 10, 0))
    view, _ = make_view(clock=clock, poll_interval=0.01)
    await view.mount()
    try:
        await view.select_category("day3")
        assert [row.highlighted for row in view.panel().rows] == [True, False]

        clock.now = datetime(2025, 5, 3, 11, 30)
        await asyncio.sleep(0.05)
        assert [row.highlighted for row in view.panel().rows] == [False, True]
    finally:
        view.dispose()


async def test_marker_click_recenters_beside_panel():
    view, sdk = make_view()
    await view.mount()
    try:
        await view.select_category("day1")
        marker = view.markers[1]
        marker.trigger("click")

        assert view.selected_location.title == "우도"
        assert view.selected_day is None
        center = sdk.maps[0].center
        assert center.lat == pytest.approx(33.50)
        assert center.lng == pytest.approx(126.95 + 2.0)

        panel = view.panel()
        assert panel.title == "우도"
        assert panel.address == "우도 도로명 주소"
    finally:
        view.dispose()


async def test_marker_hover_opens_info_window():
    view, _ = make_view()
    await view.mount()
    try:
        marker = view.markers[0]
        marker.trigger("mouseover")
        assert "성산일출봉" in marker.info
        marker.trigger("mouseout")
        assert marker.info is None
    finally:
        view.dispose()


async def test_day_selection_recenters_after_settle_delay():
    view, sdk = make_view(settle_delay=0.03)
    await view.mount()
    try:
        widget = sdk.maps[0]
        widget.set_center(LatLng(lat=0, lng=0))
        await view.select_category("day2")
        assert widget.center == LatLng(lat=0, lng=0)

        await asyncio.sleep(0.1)
        assert widget.center.lat == pytest.approx(HALLASAN.lat)
        assert widget.center.lng == pytest.approx(HALLASAN.lng + 2.4)
    finally:
        view.dispose()


async def test_mobile_day_selection_uses_panel_height():
    view, sdk = make_view(viewport_width=400, panel_height=300)
    await view.mount()
    try:
        await view.select_category("day2")
        await asyncio.sleep(0.05)
        center = sdk.maps[0].center
        # bottom offset = 300 - 1100 = -800 -> y 는 400px 아래로
        assert center.lat == pytest.approx(HALLASAN.lat + 4.0)
        assert center.lng == pytest.approx(HALLASAN.lng)
    finally:
        view.dispose()


async def test_close_panel_hides_immediately():
    view, sdk = make_view(hide_delay=5)
    await view.mount()
    try:
        await view.select_category("day3")
        view.close_panel()

        assert view.selected_day is None and view.selected_location is None
        assert view.panel_visible is False
        assert view.panel() is None
        assert sdk.maps[0].center.lng == pytest.approx(HALLASAN.lng + 1.75)
    finally:
        view.dispose()


async def test_switching_to_non_day_category_hides_panel_immediately():
    view, _ = make_view(hide_delay=5)
    await view.mount()
    try:
        await view.select_category("day3")
        assert view.panel_visible is True

        await view.select_category("travel")
        assert view.panel_visible is False
    finally:
        view.dispose()


async def test_data_reload_keeps_panel_for_grace_period():
    view, _ = make_view()
    await view.mount()
    try:
        await view.select_category("day3")
        await view.load_initial_data()

        assert view.selected_day is None
        assert view.panel_visible is True
        assert view.panel() is None

        await asyncio.sleep(0.1)
        assert view.panel_visible is False
    finally:
        view.dispose()


async def test_reopening_panel_after_close():
    view, _ = make_view()
    await view.mount()
    try:
        await view.select_category("day3")
        view.close_panel()
        await view.select_category("day1")

        await asyncio.sleep(0.1)
        assert view.panel_visible is True
        assert view.panel().day == "day1"
    finally:
        view.dispose()


async def test_stale_category_response_is_discarded():
    resolver = FakeResolver()
    view, _ = make_view(resolver=resolver)
    await view.mount()
    try:
        gate = asyncio.Event()
        resolver.gates["카페 델문도"] = gate

        slow = asyncio.create_task(view.select_category("cafe"))
        await asyncio.sleep(0)
        assert await view.select_category("day2") is True

        gate.set()
        assert await slow is False
        assert view.selected_category == "day2"
        assert titles(view) == ["우도", "오설록"]
    finally:
        view.dispose()


async def test_unknown_category_is_rejected():
    view, _ = make_view()
    with pytest.raises(ValueError):
        await view.select_category("day9")


async def test_dispose_clears_markers_and_timers():
    view, _ = make_view()
    await view.mount()
    await view.select_category("day3")
    markers = view.markers + view.accommodation_markers
    view.close_panel()

    view.dispose()

    assert all(marker.map is None for marker in markers)
    assert view.map is None
    assert view._hide_timer is None
    assert view._poll_task is None
    view.dispose()


def test_place_detail_falls_back_to_lot_address():
    location = Location(title="우도", lat=33.5, lng=126.95, address="제주특별자치도 제주시 우도면", road_address="")

    detail = build_place_detail(location)

    assert detail.model_dump() == {
        "title": "우도",
        "thumbnail": "",
        "category": "",
        "address": "제주특별자치도 제주시 우도면",
        "phone": "",
    }
