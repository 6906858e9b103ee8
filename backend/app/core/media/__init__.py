"""
媒体编码模块
将用户上传的图片转换为远程生成接口需要的载荷
"""

from .encoder import MediaEncoder, EncodedMedia, encode

__all__ = ["MediaEncoder", "EncodedMedia", "encode"]
