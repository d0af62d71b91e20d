import logging
from typing import Any
from urllib.parse import urlencode

from jejumap.config import settings
from jejumap.dtos.map_models import LatLng, MapWidget
from jejumap.utils.time_utils import HALLASAN
from jejumap.views.map_sdk import MapSDK

logger = logging.getLogger(__name__)

KAKAO_SDK_URL = "https://dapi.kakao.com/v2/maps/sdk.js"
DEFAULT_LEVEL = 10
DEFAULT_CENTER = HALLASAN


def sdk_script_url(app_key: str | None) -> str:
    """카카오맵 SDK 스크립트 주소 (autoload 끄고 services 라이브러리 포함)"""
    query = urlencode({"appkey": app_key or "", "autoload": "false", "libraries": "services"})
    return f"{KAKAO_SDK_URL}?{query}"


class MapHandle:
    """
    지도 인스턴스를 소유하는 핸들.
    init() 으로 SDK 로드 및 지도 생성을 한 번만 수행하고, dispose() 로 정리합니다.
    """

    def __init__(
        self,
        sdk: MapSDK,
        container: Any,
        center: LatLng = DEFAULT_CENTER,
        level: int = DEFAULT_LEVEL,
        app_key: str | None = None,
    ):
        self.sdk = sdk
        self.container = container
        self.center = center
        self.level = level
        self.app_key = app_key if app_key is not None else settings.KAKAO_JS_KEY
        self._map: MapWidget | None = None
        self._disposed = False

    @property
    def map(self) -> MapWidget | None:
        return self._map

    @property
    def is_loaded(self) -> bool:
        return self._map is not None

    async def init(self) -> MapWidget | None:
        if self._disposed:
            logger.warning("[ map_hook ] 이미 정리된 지도 핸들입니다.")
            return None
        if self._map is not None:
            return self._map

        if not self.app_key:
            logger.warning("[ map_hook ] KAKAO_JS_KEY가 설정되어 있지 않습니다.")
        await self.sdk.load(sdk_script_url(self.app_key))

        # load() 대기 중 다른 호출이 먼저 생성했을 수 있음
        if self._map is None and not self._disposed:
            self._map = self.sdk.create_map(self.container, self.center, self.level)
            logger.info(f"[ map_hook ] 지도 생성 완료 : level={self.level}")
        return self._map

    def dispose(self) -> None:
        if self._disposed:
            return
        self._disposed = True
        self._map = None
        logger.info("[ map_hook ] 지도 핸들 정리")
