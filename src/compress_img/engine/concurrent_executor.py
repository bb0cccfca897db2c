"""并发执行器模块。

按输入顺序执行压缩任务，可选线程池并发和单项超时。
"""

import logging
import threading
import time
from collections.abc import Callable, Iterator, Sequence
from concurrent.futures import Future, ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError

from ..exceptions import ErrorHandler, ItemTimeoutError
from ..models.compression_config import CompressionRequest
from ..models.compression_result import CompressionOutcome
from ..utils.message_formatter import MessageFormatter


logger = logging.getLogger(__name__)

TaskFunction = Callable[[CompressionRequest], CompressionOutcome]


class TrackedTask:
    """记录开始时间的任务包装，超时从任务真正开始运行时计算"""

    def __init__(self, request: CompressionRequest, task_function: TaskFunction):
        self.request = request
        self.started = threading.Event()
        self.started_at = 0.0
        self._task_function = task_function

    def __call__(self) -> CompressionOutcome:
        self.started_at = time.monotonic()
        self.started.set()
        return self._task_function(self.request)


class ConcurrentExecutor:
    """通用并发执行器

    结果始终按输入顺序产出。max_workers 为 1 且未设置超时时直接顺序执行，
    否则使用线程池。

    单项超时从该项开始运行时计时。超时的线程无法被强制终止：它会一直占用
    所在线程池的工作线程，因此尚未开始的任务会转移到新的线程池继续执行。
    进程退出时仍会等待这些线程结束。
    """

    def __init__(self, max_workers: int = 1, item_timeout: float | None = None):
        """初始化并发执行器

        Args:
            max_workers: 最大并发数
            item_timeout: 单项超时秒数，None 表示不限制
        """
        if max_workers <= 0:
            raise ValueError("max_workers must be greater than 0")
        if item_timeout is not None and item_timeout <= 0:
            raise ValueError("item_timeout must be greater than 0")

        self.max_workers = max_workers
        self.item_timeout = item_timeout

    def iter_results(
        self,
        requests: Sequence[CompressionRequest],
        task_function: TaskFunction,
    ) -> Iterator[CompressionOutcome]:
        """按输入顺序逐个产出结果

        Args:
            requests: 压缩任务列表
            task_function: 单项处理函数

        Yields:
            CompressionOutcome: 单项结果
        """
        if not requests:
            return

        if self.max_workers == 1 and self.item_timeout is None:
            for request in requests:
                yield self._log_result(task_function(request), request)
            return

        tasks = [TrackedTask(request, task_function) for request in requests]
        executors = [ThreadPoolExecutor(max_workers=self.max_workers)]
        futures = [executors[0].submit(task) for task in tasks]
        try:
            for index, task in enumerate(tasks):
                try:
                    outcome = self._collect_result(futures[index], task)
                except FutureTimeoutError:
                    outcome = self._timeout_outcome(task.request)
                    self._reschedule_pending(tasks, futures, index + 1, executors)
                yield outcome
        finally:
            for executor in executors:
                # 不等待超时后仍在运行的线程
                executor.shutdown(wait=False, cancel_futures=True)

    def _collect_result(self, future: Future, task: TrackedTask) -> CompressionOutcome:
        """等待单项结果，异常时转换为失败结果

        Raises:
            FutureTimeoutError: 该项开始运行后超过 item_timeout 仍未完成
        """
        try:
            if self.item_timeout is None:
                result = future.result()
            else:
                # 前面的任务都已完成或已转移，本项必然会开始运行
                task.started.wait()
                deadline = task.started_at + self.item_timeout
                result = future.result(timeout=max(deadline - time.monotonic(), 0))
        except FutureTimeoutError:
            raise
        except Exception as e:
            return ErrorHandler.handle_compression_error(
                e, task.request.identifier, "并发任务处理"
            )

        return self._log_result(result, task.request)

    def _reschedule_pending(
        self,
        tasks: list[TrackedTask],
        futures: list[Future],
        start: int,
        executors: list[ThreadPoolExecutor],
    ) -> None:
        """把尚未开始的任务转移到新的线程池，避免排在卡住的线程之后"""
        pending = [i for i in range(start, len(tasks)) if futures[i].cancel()]
        if not pending:
            return

        executor = ThreadPoolExecutor(max_workers=self.max_workers)
        executors.append(executor)
        for i in pending:
            futures[i] = executor.submit(tasks[i])
        logger.debug(f"{len(pending)} 个待处理任务转移到新的线程池")

    def _timeout_outcome(self, request: CompressionRequest) -> CompressionOutcome:
        error = ItemTimeoutError(
            MessageFormatter.item_timeout(request.identifier, self.item_timeout or 0),
            request.identifier,
        )
        return ErrorHandler.handle_compression_error(
            error, request.identifier, "并发任务处理"
        )

    @staticmethod
    def _log_result(
        result: CompressionOutcome, request: CompressionRequest
    ) -> CompressionOutcome:
        if result.success:
            logger.debug(f"处理成功: {request.identifier}")
        else:
            logger.debug(f"处理失败: {request.identifier} - {result.error}")
        return result
