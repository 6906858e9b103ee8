"""
测试图片生成工具
"""

import io

from PIL import Image


def make_image_bytes(
    width: int,
    height: int,
    color=(255, 0, 0, 255),
    mode: str = "RGBA",
    fmt: str = "PNG"
) -> bytes:
    """生成指定尺寸、颜色与格式的图片字节"""
    if mode != "RGBA" and isinstance(color, tuple):
        color = color[:len(mode)] if len(mode) > 1 else color[0]
    image = Image.new(mode, (width, height), color)
    buffer = io.BytesIO()
    image.save(buffer, format=fmt)
    return buffer.getvalue()
