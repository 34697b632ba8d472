"""媒体内容编码。

把截图文件、录音文件或录音缓冲区转换成可以内联发送给模型的 MediaPart。
不校验图片/音频本身的结构，任何字节序列都原样 base64 编码后转发。
"""

import asyncio
import base64
import binascii
from pathlib import Path
from typing import List, Sequence, Union

from wingman_core.domain.exceptions import EncodingFailure
from wingman_core.domain.models import MediaPart


PNG_MIME = "image/png"
MP3_MIME = "audio/mp3"

IMAGE_MIME_TYPES = frozenset({"image/png", "image/jpeg", "image/webp"})

PathLike = Union[str, Path]


def is_supported_mime(mime_type: str) -> bool:
    """截图类型固定；音频类型由录音端决定，所以接受任意 audio/*。"""

    base = mime_type.split(";", 1)[0].strip().lower()
    if base in IMAGE_MIME_TYPES:
        return True
    return base.startswith("audio/") and len(base) > len("audio/")


def _check_mime(mime_type: str, source: object) -> None:
    if not mime_type or not is_supported_mime(mime_type):
        raise EncodingFailure(f"Unsupported media type: {mime_type!r}", source=source)


def encode(source_bytes: bytes, mime_type: str) -> MediaPart:
    _check_mime(mime_type, "<buffer>")
    if not source_bytes:
        raise EncodingFailure("Media source is empty", source="<buffer>")
    data = base64.b64encode(source_bytes).decode("ascii")
    return MediaPart(mime_type=mime_type, data=data)


def from_base64(data: str, mime_type: str) -> MediaPart:
    """包装 UI 端已经编码好的 base64 数据（如录音 Blob）。

    只校验 base64 字符集，不重新编码。
    """

    _check_mime(mime_type, "<base64>")
    payload = (data or "").strip()
    if payload.startswith("data:") and "," in payload:
        # data:audio/webm;base64,xxxx
        payload = payload.split(",", 1)[1]
    if not payload:
        raise EncodingFailure("Media source is empty", source="<base64>")
    try:
        base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise EncodingFailure(f"Invalid base64 payload: {exc}", source="<base64>") from exc
    return MediaPart(mime_type=mime_type, data=payload)


async def encode_file(path: PathLike, mime_type: str = PNG_MIME) -> MediaPart:
    file_path = Path(path)
    _check_mime(mime_type, str(file_path))
    try:
        raw = await asyncio.to_thread(file_path.read_bytes)
    except OSError as exc:
        raise EncodingFailure(f"Cannot read {file_path}: {exc}", source=str(file_path)) from exc
    if not raw:
        raise EncodingFailure(f"{file_path} is empty", source=str(file_path))
    return encode(raw, mime_type)


async def encode_files(paths: Sequence[PathLike], mime_type: str = PNG_MIME) -> List[MediaPart]:
    """并发读取多个文件；返回顺序与 paths 一致。"""

    return list(await asyncio.gather(*(encode_file(p, mime_type) for p in paths)))
