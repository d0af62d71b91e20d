import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import HTTPException, RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse

from jejumap.config import settings
from jejumap.repository.db import lifespan
from jejumap.routers.documents.accommodation_router import router as accommodation_router
from jejumap.routers.documents.list_router import router as list_router
from jejumap.routers.documents.place_router import router as place_router
from jejumap.routers.documents.schedule_router import router as schedule_router
from jejumap.routers.posts.post_router import router as post_router

# 로그 설정
logging.basicConfig(
    filename=settings.LOG_FILE,  # 파일로 저장
    level=getattr(logging, settings.LOG_LEVEL, logging.INFO),  # 로그 레벨 설정
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'  # 로그 형식
)
logger = logging.getLogger(__name__)

# FastAPI 애플리케이션 생성
app = FastAPI(lifespan=lifespan)


# CORS 설정
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def request_log_middleware(request: Request, call_next):
    """
    요청 경로와 응답 상태 코드를 기록하는 미들웨어
    """
    logger.info(f"요청 경로: {request.method} {request.url.path}")
    response = await call_next(request)
    logger.info(f"응답 상태: {request.url.path} -> {response.status_code}")
    return response


# 요청 데이터 검증 오류 처리
@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    request_data = exc.body  # 검증에 실패한 요청 데이터

    error_details = exc.errors()  # Pydantic 검증 오류 내용 가져오기
    logger.warning(f"검증 실패: {error_details} / 요청 데이터: {request_data}")

    return JSONResponse(
        status_code=422,
        content=jsonable_encoder({
            "message": "요청 데이터 검증 실패",
            "errors": error_details,
            "request_data": request_data
        })
    )


@app.exception_handler(HTTPException)
async def custom_http_exception_handler(request: Request, exc: HTTPException):
    """
    HTTPException 처리
    """
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.detail},
    )


@app.get("/")
async def root():
    return HTMLResponse(
        """
        <html lang="ko">
        <head>
            <meta charset="UTF-8">
            <title>양이랑 제주 여행!</title>
        </head>
        <body>
            <h1>양이랑 제주 여행!</h1>
            <p>API 서버가 정상적으로 작동 중입니다.</p>
        </body>
        </html>
        """
    )


# 라우터 추가
app.include_router(list_router, prefix="/api/list", tags=["list"])
app.include_router(schedule_router, prefix="/api/schedule", tags=["schedule"])
app.include_router(accommodation_router, prefix="/api/accommodations", tags=["accommodations"])
app.include_router(place_router, prefix="/api/places", tags=["places"])
app.include_router(post_router, prefix="/api/posts", tags=["posts"])


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
