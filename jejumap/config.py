import os
from dotenv import load_dotenv

load_dotenv()


class Settings:
    # 문서 저장소 연결 문자열 (예: mysql+aiomysql://..., sqlite+aiosqlite:///./jeju.db)
    DATABASE_URL: str | None = os.getenv("DATABASE_URL")
    SQL_ECHO: bool = os.getenv("SQL_ECHO", "false").lower() == "true"

    # 카카오맵 JavaScript 키 (지도 SDK 로드용)
    KAKAO_JS_KEY: str | None = os.getenv("KAKAO_JS_KEY")
    # 카카오 REST API 키 (키워드 장소 검색용)
    KAKAO_REST_KEY: str | None = os.getenv("KAKAO_REST_KEY")

    # 지도 화면이 데이터를 받아오는 내부 API 주소
    API_BASE_URL: str = os.getenv("API_BASE_URL", "http://localhost:8000")
    CORS_ORIGINS: list[str] = [
        origin.strip()
        for origin in os.getenv("CORS_ORIGINS", "http://localhost:3000").split(",")
        if origin.strip()
    ]

    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()
    LOG_FILE: str = os.getenv("LOG_FILE", "app.log")


settings = Settings()
