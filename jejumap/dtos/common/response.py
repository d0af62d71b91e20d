from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from sqlmodel import SQLModel


class N1JSONResponse(JSONResponse):
    # 생성자
    def __init__(self, data=None, message=None, status_code=200, error_detail=None, **kwargs):
        # 성공일 때는 data 를 그대로 (문서 또는 null), 에러일 때는 message/error
        if status_code < 400:
            if isinstance(data, list):
                content = [item.model_dump() if isinstance(item, SQLModel) else item for item in data]
            else:
                content = data.model_dump() if isinstance(data, SQLModel) else data
            if message is not None and isinstance(content, dict):
                content = {"message": message, **content}
        else:
            content = {"message": message}
            if error_detail is not None:
                content["error"] = str(error_detail)
        # 부모인 JSONResponse생성 및 초기화
        super().__init__(content=jsonable_encoder(content), status_code=status_code, **kwargs)


class SuccessResponse(N1JSONResponse):
    def __init__(self, data=None, message=None, status_code=200, **kwargs):
        super().__init__(data=data, message=message, status_code=status_code, **kwargs)


class ErrorResponse(N1JSONResponse):
    def __init__(self, message="서버 내부 오류", error_detail=None, status_code=500, **kwargs):
        super().__init__(data=None, message=message, error_detail=error_detail, status_code=status_code, **kwargs)
