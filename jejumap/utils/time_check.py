import functools
import inspect
import logging
import time

logger = logging.getLogger(__name__)


def time_check(func):
    """_summary_
    Args:
        func (_type_): 측정 하고 싶은 함수 입력 (동기/비동기 모두 가능)
    Description:
        함수의 실행시간을 측정해 로그로 남기는 데코레이터 함수
    """

    def _log(started: float):
        execution_time = time.perf_counter() - started
        logger.info(f"💡[ time_check ] {func.__qualname__} 함수 실행시간 : {execution_time:.4f}초")

    if inspect.iscoroutinefunction(func):
        @functools.wraps(func)
        async def async_wrapper(*args, **kwargs):
            started = time.perf_counter()
            try:
                return await func(*args, **kwargs)
            finally:
                _log(started)
        return async_wrapper

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        started = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            _log(started)
    return wrapper
