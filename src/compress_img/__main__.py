"""Entry point for python -m compress_img.

默认运行命令行压缩工具。
"""

from .cli import main


if __name__ == "__main__":
    main()
