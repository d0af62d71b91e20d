from typing import Protocol

from pydantic import BaseModel, ConfigDict


class LatLng(BaseModel):
    model_config = ConfigDict(frozen=True)

    lat: float
    lng: float


class ContainerPoint(BaseModel):
    # 지도 컨테이너 기준 픽셀 좌표
    model_config = ConfigDict(frozen=True)

    x: float
    y: float

    def shift(self, dx: float = 0, dy: float = 0) -> "ContainerPoint":
        return ContainerPoint(x=self.x + dx, y=self.y + dy)


class MarkerImage(BaseModel):
    model_config = ConfigDict(frozen=True)

    src: str
    width: int = 30
    height: int = 42


class MapProjection(Protocol):
    def container_point_from_coords(self, coords: LatLng) -> ContainerPoint: ...

    def coords_from_container_point(self, point: ContainerPoint) -> LatLng: ...


class MapWidget(Protocol):
    def get_projection(self) -> MapProjection: ...

    def set_center(self, coords: LatLng) -> None: ...

    def set_level(self, level: int) -> None: ...
