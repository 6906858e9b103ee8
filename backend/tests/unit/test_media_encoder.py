"""
图片编码器单元测试
单张重编码、多张水平拼接、垂直居中、确定性输出与解码错误
"""

import io

import pytest
from PIL import Image

from app.core.ai.exceptions import DecodeError
from app.core.media import EncodedMedia, MediaEncoder, encode
from tests.utils import make_image_bytes

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"


def _open(media: EncodedMedia) -> Image.Image:
    image = Image.open(io.BytesIO(media.data))
    image.load()
    return image


@pytest.mark.unit
class TestMediaEncoder:
    """MediaEncoder 测试类"""

    def setup_method(self):
        self.encoder = MediaEncoder()

    def test_single_image_keeps_dimensions(self):
        """测试单张图片尺寸不变，输出为PNG"""
        raw = make_image_bytes(37, 21)
        media = self.encoder.encode([raw], max_count=4)

        assert media.mime_type == "image/png"
        assert media.data.startswith(PNG_SIGNATURE)
        assert (media.width, media.height) == (37, 21)
        assert _open(media).size == (37, 21)

    def test_single_jpeg_is_reencoded_as_png(self):
        """测试JPEG输入被重编码为PNG"""
        raw = make_image_bytes(16, 16, mode="RGB", fmt="JPEG")
        media = self.encoder.encode([raw], max_count=4)

        assert media.data.startswith(PNG_SIGNATURE)
        assert _open(media).format == "PNG"

    def test_cmyk_is_converted(self):
        """测试PNG不支持的模式转换为RGBA"""
        raw = make_image_bytes(10, 10, color=(0, 0, 0, 0), mode="CMYK", fmt="JPEG")
        media = self.encoder.encode([raw], max_count=4)
        assert _open(media).mode == "RGBA"

    def test_exif_orientation_is_applied(self):
        """测试按EXIF方向标记旋转：横存竖拍的照片输出为竖图，且不再带EXIF"""
        image = Image.new("RGB", (40, 10), (255, 0, 0))
        exif = Image.Exif()
        exif[0x0112] = 6
        buffer = io.BytesIO()
        image.save(buffer, format="JPEG", exif=exif.tobytes())

        media = self.encoder.encode([buffer.getvalue()], max_count=4)

        assert (media.width, media.height) == (10, 40)
        output = _open(media)
        assert output.size == (10, 40)
        assert not output.getexif()

    def test_exif_orientation_in_composite(self):
        """测试拼接时以旋转后的尺寸计算画布"""
        image = Image.new("RGB", (40, 10), (0, 0, 255))
        exif = Image.Exif()
        exif[0x0112] = 6
        buffer = io.BytesIO()
        image.save(buffer, format="JPEG", exif=exif.tobytes())

        media = self.encoder.encode([buffer.getvalue(), make_image_bytes(20, 20)], max_count=4)

        assert (media.width, media.height) == (10 + 20, 40)

    def test_composite_dimensions(self, sample_images):
        """测试拼接画布：宽度为各图宽度之和，高度为最大高度"""
        media = self.encoder.encode(sample_images, max_count=4)
        assert (media.width, media.height) == (40 + 20, 50)

    def test_composite_order_and_vertical_centering(self, sample_images):
        """测试按输入顺序从左到右排列，较矮的图片垂直居中"""
        media = self.encoder.encode(sample_images, max_count=4)
        canvas = _open(media).convert("RGBA")

        # 第一张 40x30 红色，位于 x∈[0,40)，y∈[10,40)
        assert canvas.getpixel((0, 10)) == (255, 0, 0, 255)
        assert canvas.getpixel((39, 39)) == (255, 0, 0, 255)
        assert canvas.getpixel((5, 9))[3] == 0
        assert canvas.getpixel((5, 40))[3] == 0

        # 第二张 20x50 蓝色，填满 x∈[40,60)
        assert canvas.getpixel((40, 0)) == (0, 0, 255, 255)
        assert canvas.getpixel((59, 49)) == (0, 0, 255, 255)

    def test_odd_height_difference_rounds_down(self):
        """测试高度差为奇数时向下取整"""
        images = [make_image_bytes(4, 3), make_image_bytes(4, 6, (0, 255, 0, 255))]
        canvas = _open(self.encoder.encode(images, max_count=4)).convert("RGBA")

        # (6 - 3) // 2 == 1
        assert canvas.getpixel((0, 0))[3] == 0
        assert canvas.getpixel((0, 1)) == (255, 0, 0, 255)
        assert canvas.getpixel((0, 3)) == (255, 0, 0, 255)
        assert canvas.getpixel((0, 4))[3] == 0

    def test_output_is_deterministic(self, sample_images):
        """测试相同输入得到逐字节相同的输出"""
        first = self.encoder.encode(sample_images, max_count=4)
        second = MediaEncoder().encode(list(sample_images), max_count=4)
        assert first.data == second.data

    def test_decode_error_reports_index(self):
        """测试无法解码的图片报告其序号"""
        images = [make_image_bytes(4, 4), b"definitely not an image"]

        with pytest.raises(DecodeError) as exc_info:
            self.encoder.encode(images, max_count=4)

        assert exc_info.value.index == 1
        assert "#2" in str(exc_info.value)

    def test_empty_input_rejected(self):
        """测试空输入"""
        with pytest.raises(ValueError):
            self.encoder.encode([], max_count=4)

    def test_exceeding_max_count_still_encodes(self):
        """测试超过上限只记录警告，仍然编码全部图片"""
        images = [make_image_bytes(2, 2) for _ in range(3)]
        media = self.encoder.encode(images, max_count=2)
        assert media.width == 6

    def test_base64_and_module_helper(self):
        """测试base64文本与模块级 encode"""
        media = encode([make_image_bytes(3, 3)], max_count=1)
        assert media.encode_base64().startswith("iVBORw0KGgo")
