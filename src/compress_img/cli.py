"""命令行批量压缩工具。

    compress-img photo.png *.jpg -q 70 -f webp
"""

import logging
from pathlib import Path
from typing import Optional

import typer

from . import __version__
from .compressor import ImageCompressor
from .config import get_config
from .core.reporter import format_bytes
from .engine.config import ConfigBuilder
from .exceptions import CompressionError
from .models import CompressionOutcome
from .utils.logging_helpers import configure_logging, get_logger


logger = get_logger()

app = typer.Typer(add_completion=False, help="Fast local image compression tool")


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"compress-img {__version__}")
        raise typer.Exit()


def _parse_quality(raw: str) -> int:
    """解析并验证质量参数，非法时抛出 ValidationError"""
    try:
        quality = int(raw.strip())
    except ValueError:
        quality = 0
    return ConfigBuilder.validate_quality(quality)


def _savings_color(savings: float) -> str | None:
    if savings > 30:
        return typer.colors.GREEN
    if savings > 10:
        return typer.colors.YELLOW
    return None


def print_outcome(outcome: CompressionOutcome) -> None:
    """输出单个文件的结果"""
    if not outcome.success:
        typer.secho(
            f"✗ {outcome.identifier}: {outcome.error}\n",
            fg=typer.colors.RED,
            err=True,
        )
        return

    saved = typer.style(
        f"(saved {outcome.savings_percent:.1f}%)",
        fg=_savings_color(outcome.savings_percent),
    )
    typer.secho(f"✓ {outcome.identifier}", fg=typer.colors.BRIGHT_BLACK)
    typer.echo(
        f"  {format_bytes(outcome.original_size)} → "
        f"{format_bytes(outcome.compressed_size)} {saved}"
    )
    typer.secho(f"  Output: {outcome.output_path}\n", fg=typer.colors.BRIGHT_BLACK)


@app.command()
def compress(
    files: list[Path] = typer.Argument(..., help="Image file(s) to compress"),
    quality: str = typer.Option(
        str(get_config().compression.QUALITY),
        "--quality",
        "-q",
        help="Compression quality, a whole number 1-100 (7.5 is rejected, not rounded)",
    ),
    format: Optional[str] = typer.Option(
        None, "--format", "-f", help="Output format (jpeg|webp|png|avif)"
    ),
    suffix: str = typer.Option(
        get_config().compression.SUFFIX,
        "--suffix",
        "-o",
        help="Output filename suffix",
    ),
    replace: bool = typer.Option(
        False, "--replace", help="Overwrite original file (use with caution!)"
    ),
    jobs: int = typer.Option(
        get_config().compression.MAX_WORKERS,
        "--jobs",
        "-j",
        min=1,
        help="Number of images compressed in parallel",
    ),
    timeout: Optional[float] = typer.Option(
        None,
        "--timeout",
        help=(
            "Per-image timeout in seconds. A timed-out image is reported as failed, "
            "but the process waits for its encoder call to return before exiting"
        ),
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
) -> None:
    """Compress image files with Pillow and report the savings."""
    configure_logging(logging.DEBUG if verbose else logging.WARNING)

    try:
        quality_level = _parse_quality(quality)

        typer.secho(f"\nCompressing {len(files)} image(s)...\n", fg=typer.colors.BLUE)

        compressor = ImageCompressor(max_workers=jobs, item_timeout=timeout)
        report = compressor.compress_files(
            files,
            quality=quality_level,
            format=format,
            suffix=suffix,
            replace=replace,
            on_result=print_outcome,
        )

        if report.get_success_count() > 0:
            typer.secho(
                f"\n✓ Successfully compressed "
                f"{report.get_success_count()}/{report.get_total_count()} image(s)",
                fg=typer.colors.GREEN,
                bold=True,
            )
            typer.secho(
                f"Total: {format_bytes(report.total_original_size)} → "
                f"{format_bytes(report.total_compressed_size)} "
                f"(saved {report.savings_percent:.1f}%)",
                fg=typer.colors.GREEN,
            )
    except CompressionError as e:
        typer.secho(f"Error: {e.message}", fg=typer.colors.RED, err=True)
        raise typer.Exit(1) from e
    except Exception as e:
        logger.debug("未处理的异常", exc_info=True)
        typer.secho(f"Error: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(1) from e


def main() -> None:
    """命令行入口"""
    app()


if __name__ == "__main__":
    main()
