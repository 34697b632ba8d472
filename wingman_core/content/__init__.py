"""媒体内容编码：文件/缓冲区 -> MediaPart。"""

from wingman_core.content.encoder import encode, encode_file, encode_files, from_base64

__all__ = ["encode", "encode_file", "encode_files", "from_base64"]
