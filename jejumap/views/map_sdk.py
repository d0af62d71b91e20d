"""
지도 SDK 추상화.

지도 화면은 전역 SDK 객체 대신 이 프로토콜을 구현한 객체를 주입받아 사용합니다.
실제 카카오맵 연동(브라우저 브리지 등)이나 테스트용 가짜 구현 모두 같은 인터페이스를 따릅니다.
좌표 값 타입과 지도 위젯 인터페이스는 jejumap.dtos.map_models 에 있습니다.
"""
from typing import Any, Callable, Protocol

from jejumap.dtos.map_models import LatLng, MapWidget, MarkerImage


class MapMarker(Protocol):
    def set_map(self, map: MapWidget | None) -> None: ...

    def on(self, event: str, handler: Callable[[], None]) -> None: ...

    def open_info(self, content: str) -> None: ...

    def close_info(self) -> None: ...


class MapSDK(Protocol):
    async def load(self, script_url: str) -> None: ...

    def create_map(self, container: Any, center: LatLng, level: int) -> MapWidget: ...

    def create_marker(self, map: MapWidget, position: LatLng, image: MarkerImage) -> MapMarker: ...
