"""
图片编码与拼接

单张图片直接无损重编码为PNG；多张图片按输入顺序从左到右拼接到同一画布，
画布宽度为各图宽度之和、高度为最大高度，较矮的图片垂直居中。
"""

import base64
import io
from contextlib import ExitStack
from dataclasses import dataclass
from typing import List, Sequence

from PIL import Image, ImageOps, UnidentifiedImageError

from app.core.ai.exceptions import DecodeError
from app.core.log_utils import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class EncodedMedia:
    """编码后的图片载荷"""
    data: bytes
    mime_type: str
    width: int
    height: int

    def encode_base64(self) -> str:
        """以base64文本形式返回载荷（部分接口只接收文本编码的图片）"""
        return base64.b64encode(self.data).decode("ascii")


class MediaEncoder:
    """
    图片载荷编码器

    无状态，可在多个生成任务之间共享。输出固定为PNG且不写入任何元数据，
    相同输入总是得到逐字节相同的输出。
    """

    OUTPUT_FORMAT = "PNG"
    OUTPUT_MIME_TYPE = "image/png"
    COMPRESS_LEVEL = 6

    # PNG可直接保存的模式，其余模式（如CMYK）转换为RGBA
    PNG_MODES = ("1", "L", "LA", "I", "P", "RGB", "RGBA")

    def encode(self, images: Sequence[bytes], max_count: int) -> EncodedMedia:
        """
        编码一组图片

        Args:
            images: 按顺序排列的原始图片字节
            max_count: 调用方允许的最大张数（由调用方校验，这里只做记录）

        Returns:
            EncodedMedia: PNG载荷及其尺寸

        Raises:
            ValueError: 没有提供任何图片
            DecodeError: 某张图片无法解码
        """
        if not images:
            raise ValueError("at least one image is required")

        if len(images) > max_count:
            logger.warning(
                "图片数量超过调用方上限",
                image_count=len(images),
                max_count=max_count
            )

        with ExitStack() as stack:
            decoded = self._decode_all(images, stack)

            if len(decoded) == 1:
                output = self._normalize_mode(decoded[0], stack)
            else:
                output = self._composite(decoded, stack)

            data = self._to_png(output)
            width, height = output.size

        logger.info(
            "图片编码完成",
            image_count=len(images),
            width=width,
            height=height,
            size_bytes=len(data)
        )
        return EncodedMedia(data=data, mime_type=self.OUTPUT_MIME_TYPE, width=width, height=height)

    def _decode_all(self, images: Sequence[bytes], stack: ExitStack) -> List[Image.Image]:
        decoded = []
        for index, raw in enumerate(images):
            try:
                image = stack.enter_context(Image.open(io.BytesIO(raw)))
                image.load()
                # 按EXIF方向标记旋转，拼接尺寸以旋转后的图片为准
                upright = ImageOps.exif_transpose(image)
            except (UnidentifiedImageError, OSError, ValueError, Image.DecompressionBombError) as e:
                logger.warning("图片解码失败", image_index=index, error=str(e))
                raise DecodeError(index=index, reason=str(e)) from e
            if upright is not image:
                stack.callback(upright.close)
            decoded.append(upright)
        return decoded

    def _normalize_mode(self, image: Image.Image, stack: ExitStack) -> Image.Image:
        if image.mode in self.PNG_MODES:
            return image
        converted = image.convert("RGBA")
        stack.callback(converted.close)
        return converted

    def _composite(self, images: List[Image.Image], stack: ExitStack) -> Image.Image:
        total_width = sum(image.width for image in images)
        max_height = max(image.height for image in images)

        canvas = Image.new("RGBA", (total_width, max_height), (0, 0, 0, 0))
        stack.callback(canvas.close)

        x_offset = 0
        for image in images:
            rgba = image if image.mode == "RGBA" else image.convert("RGBA")
            if rgba is not image:
                stack.callback(rgba.close)
            y_offset = (max_height - rgba.height) // 2
            canvas.paste(rgba, (x_offset, y_offset))
            x_offset += rgba.width

        return canvas

    def _to_png(self, image: Image.Image) -> bytes:
        buffer = io.BytesIO()
        # 不把源图片的色彩配置与EXIF写入输出
        image.save(
            buffer,
            format=self.OUTPUT_FORMAT,
            optimize=False,
            compress_level=self.COMPRESS_LEVEL,
            icc_profile=None,
            exif=b""
        )
        return buffer.getvalue()


_default_encoder = MediaEncoder()


def encode(images: Sequence[bytes], max_count: int) -> EncodedMedia:
    """使用默认编码器编码图片"""
    return _default_encoder.encode(images, max_count)
