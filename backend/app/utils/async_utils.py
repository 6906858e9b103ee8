"""
异步工具模块
提供在同步上下文中运行异步代码的工具函数
"""

import asyncio
from typing import Any, Coroutine, TypeVar

T = TypeVar('T')


def run_async(coro: Coroutine[Any, Any, T]) -> T:
    """
    在同步上下文中运行异步协程（如 Celery 任务）

    使用方式：
        result = run_async(some_async_function())
    """
    with AsyncRunner() as runner:
        return runner.run(coro)


class AsyncRunner:
    """
    异步运行器，Celery worker 中复用同一个事件循环运行多个协程

    使用方式：
        with AsyncRunner() as runner:
            result1 = runner.run(async_func1())
            result2 = runner.run(async_func2())
    """

    def __init__(self):
        self._loop = asyncio.new_event_loop()
        asyncio.set_event_loop(self._loop)

    def run(self, coro: Coroutine[Any, Any, T]) -> T:
        """运行异步协程"""
        return self._loop.run_until_complete(coro)

    def close(self):
        """关闭事件循环（先清理未完成的异步生成器）"""
        if self._loop and not self._loop.is_closed():
            self._loop.run_until_complete(self._loop.shutdown_asyncgens())
            self._loop.close()
            asyncio.set_event_loop(None)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
