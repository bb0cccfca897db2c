"""HTTP 请求体模型。

字段名沿用浏览器上传页使用的 camelCase 命名。
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from ..config import CompressionDefaults


_DEFAULTS = CompressionDefaults()


class CompressImageBody(BaseModel):
    """POST /api/compress 请求体"""

    model_config = ConfigDict(populate_by_name=True)

    image_data: str | None = Field(None, alias="imageData")
    quality: int = Field(_DEFAULTS.QUALITY, description="压缩质量 1-100")
    format: str | None = Field(None, description="输出格式，缺省时按源图推断")


class CompressFilesBody(BaseModel):
    """POST /api/compress-file 请求体

    files 不做结构校验，单个条目的错误记录在该条目的结果中。
    """

    files: Any = None
    quality: int = Field(_DEFAULTS.QUALITY, description="压缩质量 1-100")
    format: str | None = None


class DownloadBatchBody(BaseModel):
    """POST /api/download-batch 请求体"""

    files: Any = None
