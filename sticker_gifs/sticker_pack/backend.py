from pathlib import Path
from typing import Any, Optional, Protocol

from httpx import AsyncClient

from ..consts import SMALL_GIF_SIZE
from ..convert import (
    apng_to_gif,
    encode_frames_to_gif,
    render_lottie_frames,
    resize_gif,
)
from ..source_fetch import download_file


class ConversionBackend(Protocol):
    async def download(self, url: str, path: Path) -> Any: ...

    async def apng_to_gif(self, src: Path, dst: Path) -> Any: ...

    async def render_lottie(
        self,
        src: Path,
        frame_dir: Path,
        size: Optional[tuple[int, int]] = None,
    ) -> Any: ...

    async def encode_frames(self, frame_dir: Path, dst: Path) -> Any: ...

    async def resize_gif(
        self,
        src: Path,
        dst: Path,
        size: tuple[int, int] = SMALL_GIF_SIZE,
    ) -> Any: ...


class ToolBackend:
    """downloads with httpx, converts with Pillow, rlottie, ffmpeg and gifsicle"""

    def __init__(
        self,
        cli: AsyncClient,
        ffmpeg_path: Optional[str] = None,
        gifsicle_path: Optional[str] = None,
    ) -> None:
        self.cli = cli
        self.ffmpeg_path = ffmpeg_path
        self.gifsicle_path = gifsicle_path

    async def download(self, url: str, path: Path) -> Path:
        return await download_file(url, path, cli=self.cli)

    async def apng_to_gif(self, src: Path, dst: Path) -> Path:
        return await apng_to_gif(src, dst)

    async def render_lottie(
        self,
        src: Path,
        frame_dir: Path,
        size: Optional[tuple[int, int]] = None,
    ) -> int:
        return await render_lottie_frames(src, frame_dir, size)

    async def encode_frames(self, frame_dir: Path, dst: Path) -> Path:
        return await encode_frames_to_gif(frame_dir, dst, self.ffmpeg_path)

    async def resize_gif(
        self,
        src: Path,
        dst: Path,
        size: tuple[int, int] = SMALL_GIF_SIZE,
    ) -> Path:
        return await resize_gif(src, dst, size, self.gifsicle_path)
