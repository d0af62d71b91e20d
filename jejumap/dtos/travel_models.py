from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    # 프론트엔드 JSON 은 camelCase, 파이썬 필드는 snake_case
    # 정의되지 않은 필드도 그대로 보관 (문서 저장소 본문 유지)
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    def to_document(self) -> dict:
        return self.model_dump(by_alias=True, exclude_unset=True)


class Location(CamelModel):
    title: str
    lat: float
    lng: float
    description: str | None = ""
    address: str | None = ""
    road_address: str | None = ""
    url: str | None = ""
    phone: str | None = ""
    thumbnail: str | None = ""
    day_key: str | None = None


class ListDocument(CamelModel):
    travel_list: list[str] = Field(default_factory=list)
    cafe_list: list[str] = Field(default_factory=list)
    days: dict[str, list[str]] = Field(default_factory=dict)


class ScheduleEntry(CamelModel):
    place: str
    travel_time: str | None = ""
    stay_time: str | None = ""
    arrival: str
    departure: str


class ScheduleDocument(CamelModel):
    day1: list[ScheduleEntry] | None = None
    day2: list[ScheduleEntry] | None = None
    day3: list[ScheduleEntry] | None = None
    day4: list[ScheduleEntry] | None = None
    day5: list[ScheduleEntry] | None = None

    def entries(self, day: str) -> list[ScheduleEntry]:
        return getattr(self, day, None) or []


class Accommodation(CamelModel):
    name: str
    link: str | None = ""
    check_in: str | None = ""
    check_out: str | None = ""
    parking: str | None = ""
    note: str | None = ""
    day: str | None = None


class AccommodationDocument(CamelModel):
    accommodations: list[Accommodation] = Field(default_factory=list)

    def for_day(self, day: str | None) -> list[Accommodation]:
        if day is None:
            return list(self.accommodations)
        return [item for item in self.accommodations if item.day == day]


class PostRequest(BaseModel):
    category: str | None = None
    title: str | None = None
    content: str | None = None
    date: str | None = None

    def missing_fields(self) -> list[str]:
        return [name for name in ("category", "title", "content", "date") if not getattr(self, name)]
