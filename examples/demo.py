#!/usr/bin/env python3
"""图像压缩演示脚本。

展示 compress_img 库的核心功能，包括：
- 单文件压缩与格式转换
- 不同质量的体积对比
- 批量压缩与汇总
- 内存数据（data URI）压缩
"""

import base64
import io
import shutil
from pathlib import Path

from PIL import Image, ImageDraw

from compress_img import ImageCompressor
from compress_img.core.reporter import format_bytes


def get_output_dir(subdir: str = "") -> Path:
    """获取输出目录 - 使用项目的 tmp 目录"""
    project_root = Path(__file__).parent.parent
    output_dir = project_root / "tmp" / "examples"
    if subdir:
        output_dir = output_dir / subdir
    output_dir.mkdir(parents=True, exist_ok=True)
    return output_dir


def create_sample_image(path: Path, size: tuple[int, int] = (800, 600)) -> Path:
    """生成带渐变和色块的素材图片"""
    img = Image.new("RGB", size, "white")
    draw = ImageDraw.Draw(img)
    width, height = size
    for x in range(width):
        shade = x * 255 // width
        draw.line([(x, 0), (x, height)], fill=(shade, 128, 255 - shade))
    for i in range(30):
        x, y = (i * 53) % width, (i * 37) % height
        draw.ellipse([x, y, x + 80, y + 80], fill=(i * 8 % 256, 40, i * 5 % 256))
    img.save(path)
    return path


def demo_single_file(compressor: ImageCompressor, source: Path):
    """单文件压缩演示"""
    print("=== 单文件压缩演示 ===")

    for fmt in ["jpeg", "webp", "png"]:
        outcome = compressor.compress_file(source, quality=75, format=fmt)
        if outcome.success:
            print(f"  ✅ {fmt:5s} {outcome.get_summary()} -> {outcome.output_path.name}")
        else:
            print(f"  ❌ {fmt:5s} {outcome.error}")


def demo_quality_comparison(compressor: ImageCompressor, source: Path):
    """质量对比演示"""
    print("\n=== 质量对比演示 ===")

    data = source.read_bytes()
    for quality in [20, 50, 80, 95]:
        outcome = compressor.compress_data(data, quality=quality, format="jpeg")
        print(
            f"  Q{quality:3d}: {format_bytes(outcome.compressed_size):>10s} "
            f"(节省 {outcome.savings_percent:.1f}%)"
        )


def demo_batch(compressor: ImageCompressor, sources: list[Path]):
    """批量压缩演示"""
    print("\n=== 批量压缩演示 ===")

    report = compressor.compress_files(
        sources,
        quality=70,
        format="webp",
        on_result=lambda r: print(f"  {'✅' if r.success else '❌'} {r.identifier}"),
    )
    print(f"  📊 {report.get_summary()}")


def demo_data_uri(compressor: ImageCompressor, source: Path):
    """data URI 压缩演示"""
    print("\n=== data URI 压缩演示 ===")

    payload = "data:image/png;base64," + base64.b64encode(source.read_bytes()).decode()
    outcome = compressor.compress_data(payload, quality=60, format="webp")

    with Image.open(io.BytesIO(outcome.data)) as img:
        print(f"  ✅ {img.format} {img.size} {outcome.get_summary()}")


def main():
    output_dir = get_output_dir("demo")
    sources = [
        create_sample_image(output_dir / "sample.png"),
        create_sample_image(output_dir / "small.png", (320, 240)),
        output_dir / "missing.png",
    ]

    compressor = ImageCompressor(max_workers=2)
    print(f"可用格式: {', '.join(compressor.supported_formats())}\n")

    demo_single_file(compressor, sources[0])
    demo_quality_comparison(compressor, sources[0])
    demo_batch(compressor, sources)
    demo_data_uri(compressor, sources[0])

    print(f"\n📁 输出目录: {output_dir}")
    if input("清理输出目录? [y/N] ").strip().lower() == "y":
        shutil.rmtree(output_dir)


if __name__ == "__main__":
    main()
