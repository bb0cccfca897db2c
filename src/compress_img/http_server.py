"""本地图像压缩 HTTP 服务。

提供上传页面和 JSON 接口，图像数据以 base64 / data URI 形式传输。
"""

from pathlib import Path
from typing import Any

import uvicorn
from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import FileResponse, JSONResponse
from fastapi.staticfiles import StaticFiles
from pydantic import BaseModel, Field
from starlette.datastructures import Headers
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from . import __version__
from .compressor import ImageCompressor
from .config import get_config
from .core.reporter import format_savings
from .exceptions import ValidationError
from .models import (
    CompressFilesBody,
    CompressImageBody,
    CompressionOutcome,
    DownloadBatchBody,
    ErrorKind,
)
from .utils.file_helpers import build_data_uri, encode_base64
from .utils.logging_helpers import configure_logging, get_logger


logger = get_logger()

STATIC_DIR = Path(__file__).parent / "static"

BODY_TOO_LARGE = "Request body too large"


class ServerSettings(BaseModel):
    """HTTP 服务配置，显式传入 create_app"""

    host: str = Field(description="监听地址")
    port: int = Field(gt=0, lt=65536, description="监听端口")
    max_body_bytes: int = Field(gt=0, description="请求体大小上限（字节）")
    max_workers: int = Field(1, gt=0, description="批量接口的并发数")
    item_timeout: float | None = Field(None, gt=0, description="单项超时秒数")
    static_dir: Path = Field(STATIC_DIR, description="静态页面目录")

    @classmethod
    def from_config(cls) -> "ServerSettings":
        """从全局配置（含环境变量覆盖）构建"""
        app_config = get_config()
        return cls(
            host=app_config.server.HOST,
            port=app_config.server.PORT,
            max_body_bytes=app_config.server.max_body_bytes,
            max_workers=app_config.compression.MAX_WORKERS,
            item_timeout=app_config.compression.ITEM_TIMEOUT,
        )


class ResponseBuilder:
    """JSON 响应构建器"""

    @staticmethod
    def error(message: str, status_code: int) -> JSONResponse:
        return JSONResponse(status_code=status_code, content={"error": message})

    @staticmethod
    def compressed_image(outcome: CompressionOutcome) -> dict[str, Any]:
        """POST /api/compress 的成功响应"""
        return {
            "success": True,
            "compressedImage": build_data_uri(outcome.data or b"", outcome.format),
            "originalSize": outcome.original_size,
            "compressedSize": outcome.compressed_size,
            "savings": format_savings(outcome.savings_percent),
            "format": outcome.format.value,
        }

    @staticmethod
    def batch_item(name: Any, outcome: CompressionOutcome) -> dict[str, Any]:
        """POST /api/compress-file 中单个条目的结果"""
        if not outcome.success:
            return {"name": name, "success": False, "error": outcome.error}

        return {
            "name": name,
            "success": True,
            "originalSize": outcome.original_size,
            "compressedSize": outcome.compressed_size,
            "savings": format_savings(outcome.savings_percent),
            "format": outcome.format.value,
            "data": encode_base64(outcome.data or b""),
        }


class BodySizeLimitMiddleware:
    """请求体大小限制

    先检查 Content-Length，再统计实际收到的字节数，分块传输的请求同样受限。
    读取过程中超限时抛出 413 HTTPException，由应用的异常处理器生成响应。
    """

    def __init__(self, app: ASGIApp, max_body_bytes: int):
        self.app = app
        self.max_body_bytes = max_body_bytes

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        content_length = Headers(scope=scope).get("content-length")
        if content_length and content_length.isdigit():
            if int(content_length) > self.max_body_bytes:
                response = ResponseBuilder.error(
                    BODY_TOO_LARGE, status.HTTP_413_REQUEST_ENTITY_TOO_LARGE
                )
                await response(scope, receive, send)
                return

        received = 0

        async def limited_receive() -> Message:
            nonlocal received
            message = await receive()
            if message["type"] == "http.request":
                received += len(message.get("body", b""))
                if received > self.max_body_bytes:
                    raise HTTPException(
                        status.HTTP_413_REQUEST_ENTITY_TOO_LARGE, detail=BODY_TOO_LARGE
                    )
            return message

        await self.app(scope, limited_receive, send)


def _format_validation_error(exc: RequestValidationError) -> str:
    messages = [
        f"{'.'.join(str(loc) for loc in err['loc'] if loc != 'body')}: {err['msg']}"
        for err in exc.errors()
    ]
    return "; ".join(messages) or "Invalid request"


def create_app(
    settings: ServerSettings | None = None,
    compressor: ImageCompressor | None = None,
) -> FastAPI:
    """创建 FastAPI 应用

    Args:
        settings: 服务配置，默认从全局配置构建
        compressor: 压缩器，默认按 settings 创建

    Returns:
        FastAPI: 应用实例
    """
    settings = settings or ServerSettings.from_config()
    compressor = compressor or ImageCompressor(
        max_workers=settings.max_workers, item_timeout=settings.item_timeout
    )

    app = FastAPI(title="Image Compressor", version=__version__)
    app.state.settings = settings
    app.state.compressor = compressor

    app.add_middleware(BodySizeLimitMiddleware, max_body_bytes=settings.max_body_bytes)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_error(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        return ResponseBuilder.error(str(exc.detail), exc.status_code)

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return ResponseBuilder.error(
            _format_validation_error(exc), status.HTTP_400_BAD_REQUEST
        )

    @app.get("/", include_in_schema=False)
    def index() -> FileResponse:
        return FileResponse(settings.static_dir / "index.html")

    if settings.static_dir.is_dir():
        app.mount("/static", StaticFiles(directory=settings.static_dir), name="static")

    @app.get("/api/health")
    def health() -> dict[str, Any]:
        return {
            "status": "ok",
            "version": __version__,
            "formats": compressor.supported_formats(),
        }

    @app.post("/api/compress")
    def compress_image(body: CompressImageBody):
        if not body.image_data:
            return ResponseBuilder.error(
                "No image data provided", status.HTTP_400_BAD_REQUEST
            )

        try:
            outcome = compressor.compress_data(
                body.image_data, quality=body.quality, format=body.format
            )
        except ValidationError as e:
            return ResponseBuilder.error(e.message, status.HTTP_400_BAD_REQUEST)
        except Exception as e:
            logger.exception("Compression error")
            return ResponseBuilder.error(str(e), status.HTTP_500_INTERNAL_SERVER_ERROR)

        if not outcome.success:
            logger.error(f"Compression error: {outcome.error}")
            status_code = (
                status.HTTP_400_BAD_REQUEST
                if outcome.error_kind == ErrorKind.INVALID_INPUT
                else status.HTTP_500_INTERNAL_SERVER_ERROR
            )
            return ResponseBuilder.error(outcome.error or "Compression failed", status_code)

        return ResponseBuilder.compressed_image(outcome)

    @app.post("/api/compress-file")
    def compress_files(body: CompressFilesBody):
        files = body.files
        if not files or not isinstance(files, list):
            return ResponseBuilder.error("No files provided", status.HTTP_400_BAD_REQUEST)

        names: list[Any] = []
        items: list[tuple[str, str | None]] = []
        for index, entry in enumerate(files):
            entry = entry if isinstance(entry, dict) else {}
            name = entry.get("name")
            data = entry.get("data")
            names.append(name)
            items.append(
                (str(name) if name else str(index), data if isinstance(data, str) else None)
            )

        try:
            report = compressor.compress_data_batch(
                items, quality=body.quality, format=body.format
            )
        except ValidationError as e:
            return ResponseBuilder.error(e.message, status.HTTP_400_BAD_REQUEST)
        except Exception as e:
            logger.exception("Batch compression error")
            return ResponseBuilder.error(str(e), status.HTTP_500_INTERNAL_SERVER_ERROR)

        return {
            "success": True,
            "results": [
                ResponseBuilder.batch_item(name, outcome)
                for name, outcome in zip(names, report.results, strict=True)
            ],
        }

    @app.post("/api/download-batch")
    def download_batch(body: DownloadBatchBody):
        """批量下载占位接口

        不会生成压缩包，只返回文件数量，客户端需要逐个下载。
        """
        files = body.files
        if not files or not isinstance(files, list):
            return ResponseBuilder.error(
                "No files to download", status.HTTP_400_BAD_REQUEST
            )

        logger.warning("download-batch 未实现打包，仅返回文件数量")
        return {
            "success": True,
            "message": "Archive packaging is not implemented; download files individually",
            "count": len(files),
            "implemented": False,
        }

    return app


def main() -> None:
    """启动 HTTP 服务"""
    configure_logging()
    settings = ServerSettings.from_config()
    logger.info(f"Image Compressor running at http://{settings.host}:{settings.port}")
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
