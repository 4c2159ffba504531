import asyncio
from collections.abc import Sequence
from pathlib import Path
from typing import Optional

from cookit.loguru import warning_suppress
from loguru import logger
from PIL import Image, ImageSequence
from rlottie_python import LottieAnimation

from .config import get_config
from .consts import (
    FFMPEG_FILTER_COMPLEX,
    FFMPEG_INPUT_FRAMERATE,
    FRAME_FILENAME_GLOB,
    FRAME_FILENAME_PATTERN,
    FRAME_FILENAME_TEMPLATE,
    SMALL_GIF_SIZE,
)

STDERR_TAIL_LINES = 5


class ProcessError(RuntimeError):
    def __init__(
        self,
        args: Sequence[str],
        returncode: Optional[int],
        stderr: bytes = b"",
    ):
        self.cmd = list(args)
        self.returncode = returncode
        self.stderr = stderr
        super().__init__(self.cmd, returncode, stderr)

    @property
    def stderr_tail(self) -> str:
        lines = self.stderr.decode("u8", "replace").strip().splitlines()
        return "\n".join(lines[-STDERR_TAIL_LINES:])

    def __str__(self) -> str:
        msg = f"`{self.cmd[0]}` exited with code {self.returncode}"
        if tail := self.stderr_tail:
            msg = f"{msg}: {tail}"
        return msg


async def run_process(*args: str) -> bytes:
    logger.debug(f"Running {list(args)}")
    proc = await asyncio.create_subprocess_exec(
        *args,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
    )
    stdout, stderr = await proc.communicate()
    if proc.returncode != 0:
        raise ProcessError(args, proc.returncode, stderr)
    return stdout


def build_encode_args(
    frame_dir: Path,
    dst: Path,
    ffmpeg_path: Optional[str] = None,
) -> list[str]:
    return [
        get_config().ffmpeg_path if ffmpeg_path is None else ffmpeg_path,
        "-y",
        "-framerate", str(FFMPEG_INPUT_FRAMERATE),
        "-i", str(frame_dir / FRAME_FILENAME_PATTERN),
        "-filter_complex", FFMPEG_FILTER_COMPLEX,
        str(dst),
    ]  # fmt: skip


def build_resize_args(
    src: Path,
    dst: Path,
    size: tuple[int, int] = SMALL_GIF_SIZE,
    gifsicle_path: Optional[str] = None,
) -> list[str]:
    width, height = size
    return [
        get_config().gifsicle_path if gifsicle_path is None else gifsicle_path,
        "--resize", f"{width}x{height}",
        "-i", str(src),
        "-o", str(dst),
    ]  # fmt: skip


async def encode_frames_to_gif(
    frame_dir: Path,
    dst: Path,
    ffmpeg_path: Optional[str] = None,
) -> Path:
    await run_process(*build_encode_args(frame_dir, dst, ffmpeg_path))
    return dst


async def resize_gif(
    src: Path,
    dst: Path,
    size: tuple[int, int] = SMALL_GIF_SIZE,
    gifsicle_path: Optional[str] = None,
) -> Path:
    await run_process(*build_resize_args(src, dst, size, gifsicle_path))
    return dst


def convert_apng_to_gif(src: Path, dst: Path) -> int:
    frames: list[Image.Image] = []
    durations: list[float] = []
    with Image.open(src) as im:
        for frame in ImageSequence.Iterator(im):
            frames.append(frame.convert("RGBA"))
            durations.append(frame.info.get("duration") or 100)

    if not frames:
        raise ValueError(f"No frames decoded from `{src}`")

    first, *rest = frames
    first.save(
        dst,
        format="GIF",
        save_all=True,
        append_images=rest,
        duration=durations,
        loop=0,
        disposal=2,
    )
    return len(frames)


async def apng_to_gif(src: Path, dst: Path) -> Path:
    count = await asyncio.to_thread(convert_apng_to_gif, src, dst)
    logger.debug(f"Converted {count} frames of `{src.name}`")
    return dst


def render_lottie_to_frames(
    src: Path,
    frame_dir: Path,
    size: Optional[tuple[int, int]] = None,
) -> int:
    with LottieAnimation.from_file(str(src)) as anim:
        total = anim.lottie_animation_get_totalframe()
        if not total:
            raise ValueError(f"Animation `{src}` has no frames")
        width, height = size or anim.lottie_animation_get_size()
        for i in range(total):
            anim.render_pillow_frame(frame_num=i, width=width, height=height).save(
                frame_dir / FRAME_FILENAME_TEMPLATE.format(i),
            )
    return total


async def render_lottie_frames(
    src: Path,
    frame_dir: Path,
    size: Optional[tuple[int, int]] = None,
) -> int:
    return await asyncio.to_thread(render_lottie_to_frames, src, frame_dir, size)


def clear_frames(frame_dir: Path) -> int:
    if not frame_dir.is_dir():
        return 0
    removed = 0
    for path in frame_dir.glob(FRAME_FILENAME_GLOB):
        with warning_suppress(f"Failed to remove frame `{path}`"):
            path.unlink()
            removed += 1
    return removed
