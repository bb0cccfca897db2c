"""批量处理器模块。

对一组压缩任务逐项执行并汇总，单项失败不会中断整个批次。
"""

from collections.abc import Callable, Sequence
from contextlib import closing
from functools import partial

from ..codec.base import Codec
from ..core.compression_engine import process_image
from ..core.reporter import summarize
from ..models.compression_config import CompressionRequest
from ..models.compression_result import BatchReport, CompressionOutcome
from ..utils.logging_helpers import get_logger
from .concurrent_executor import ConcurrentExecutor


logger = get_logger()

ResultCallback = Callable[[CompressionOutcome], None]


class BatchProcessor:
    """批量图像处理器

    输入中可以混入已经失败的 CompressionOutcome（例如请求体中无法解码的条目），
    它们按原位置保留在报告中，不参与执行。
    """

    def __init__(
        self,
        codec: Codec,
        max_workers: int = 1,
        item_timeout: float | None = None,
    ):
        """初始化批量处理器

        Args:
            codec: 编解码器
            max_workers: 最大并发数，1 为顺序处理
            item_timeout: 单项超时秒数
        """
        self.codec = codec
        self.concurrent_executor = ConcurrentExecutor(max_workers, item_timeout)

    def process(
        self,
        items: Sequence[CompressionRequest | CompressionOutcome],
        on_result: ResultCallback | None = None,
    ) -> BatchReport:
        """处理一批任务

        Args:
            items: 压缩任务或预先失败的结果，按输入顺序
            on_result: 每得到一项结果（按输入顺序）时回调，用于实时输出

        Returns:
            BatchReport: 按输入顺序排列的结果和成功项汇总
        """
        requests = [item for item in items if isinstance(item, CompressionRequest)]
        executed = self.concurrent_executor.iter_results(
            requests, partial(process_image, codec=self.codec)
        )

        ordered: list[CompressionOutcome] = []
        with closing(executed):
            for item in items:
                outcome = next(executed) if isinstance(item, CompressionRequest) else item
                ordered.append(outcome)
                if on_result is not None:
                    on_result(outcome)

        report = summarize(ordered)
        logger.info(report.get_summary())
        return report
