from collections.abc import Awaitable
from pathlib import Path
from typing import Any, Callable, Optional

from loguru import logger

from ..consts import SMALL_GIF_SIZE
from ..convert import clear_frames
from ..models import Sticker, StickerFormatType
from ..source_fetch import apng_url, lottie_url
from ..utils import discard_file, format_error
from .backend import ConversionBackend
from .layout import PackLayout
from .outcome import StickerOutcome

STEP_MKDIR = "mkdir"
STEP_DOWNLOAD = "download"
STEP_CONVERT = "convert"
STEP_RESIZE = "resize"
STEP_PROCESS = "process"

SMALL_PASS = "143"
LARGE_PASS = "large"


def render_step(pass_name: str) -> str:
    return f"render:{pass_name}"


def encode_step(pass_name: str) -> str:
    return f"encode:{pass_name}"


async def run_step(
    outcome: StickerOutcome,
    step: str,
    path: Path,
    func: Callable[[], Awaitable[Any]],
    check_output: bool = True,
) -> bool:
    """
    await `func`, record the result into `outcome`,
    a failed step never raises, whatever it left at `path` is removed
    """
    try:
        await func()
        if check_output and (not path.exists()):
            raise FileNotFoundError(f"Step finished but `{path}` was not created")
    except Exception as e:
        logger.warning(
            f"    Step {step} of sticker `{outcome.sticker.name}` failed"
            f": {format_error(e)}",
        )
        logger.opt(exception=e).debug("Stacktrace")
        discard_file(path)
        outcome.fail(step, path, exc=e)
        return False
    outcome.done(step, path)
    return True


def prepare_dirs(
    outcome: StickerOutcome,
    layout: PackLayout,
    format_type: StickerFormatType,
) -> bool:
    try:
        layout.ensure_dirs(format_type)
    except OSError as e:
        logger.warning(
            f"    Failed to create directories of pack `{layout.pack_name}`"
            f": {format_error(e)}",
        )
        outcome.fail(STEP_MKDIR, layout.base_path, exc=e)
        return False
    return True


async def download_if_missing(
    outcome: StickerOutcome,
    backend: ConversionBackend,
    url: str,
    path: Path,
    label: str,
) -> bool:
    if path.exists():
        outcome.skip(STEP_DOWNLOAD, path)
        return True
    logger.info(f"    Downloading {label}...")
    return await run_step(
        outcome,
        STEP_DOWNLOAD,
        path,
        lambda: backend.download(url, path),
    )


async def process_apng_sticker(
    layout: PackLayout,
    sticker: Sticker,
    backend: ConversionBackend,
    media_base: Optional[str] = None,
) -> StickerOutcome:
    outcome = StickerOutcome(layout.pack_name, sticker)
    if not prepare_dirs(outcome, layout, StickerFormatType.APNG):
        return outcome

    apng_path = layout.apng_path(sticker)
    gif_large_path = layout.gif_large_path(sticker)
    gif_small_path = layout.gif_small_path(sticker)

    await download_if_missing(
        outcome,
        backend,
        apng_url(sticker.id, media_base),
        apng_path,
        "APNG",
    )

    if gif_large_path.exists():
        outcome.skip(STEP_CONVERT, gif_large_path)
    elif not apng_path.exists():
        reason = "the APNG doesn't exist"
        logger.error(f"    Can't convert `{sticker.name}` to GIF because {reason}!")
        outcome.fail(STEP_CONVERT, gif_large_path, reason=reason)
    else:
        logger.info("    Converting large...")
        if await run_step(
            outcome,
            STEP_CONVERT,
            gif_large_path,
            lambda: backend.apng_to_gif(apng_path, gif_large_path),
        ):
            logger.info("    Conversion of large complete")

    if gif_small_path.exists():
        outcome.skip(STEP_RESIZE, gif_small_path)
    elif not gif_large_path.exists():
        reason = "the large version doesn't exist"
        logger.error(f"    Can't resize GIF to 143 because {reason}!")
        outcome.fail(STEP_RESIZE, gif_small_path, reason=reason)
    else:
        logger.info("    Resizing 143...")
        if await run_step(
            outcome,
            STEP_RESIZE,
            gif_small_path,
            lambda: backend.resize_gif(gif_large_path, gif_small_path, SMALL_GIF_SIZE),
        ):
            logger.info("    Resizing of 143 complete")

    return outcome


async def render_lottie_pass(
    outcome: StickerOutcome,
    backend: ConversionBackend,
    lottie_path: Path,
    scratch_dir: Path,
    dst: Path,
    pass_name: str,
    size: Optional[tuple[int, int]],
) -> bool:
    if removed := clear_frames(scratch_dir):
        logger.debug(f"    Removed {removed} stale frames before render")
    try:
        if not await run_step(
            outcome,
            render_step(pass_name),
            scratch_dir,
            lambda: backend.render_lottie(lottie_path, scratch_dir, size),
            check_output=False,
        ):
            logger.warning(f"    Skipped encoding ({pass_name}) because render failed")
            return False
        logger.info(f"    Render complete ({pass_name})")
        return await run_step(
            outcome,
            encode_step(pass_name),
            dst,
            lambda: backend.encode_frames(scratch_dir, dst),
        )
    finally:
        clear_frames(scratch_dir)
        logger.debug("    Scratch folder cleaned")


async def process_lottie_sticker(
    layout: PackLayout,
    sticker: Sticker,
    backend: ConversionBackend,
    scratch_dir: Path,
    lottie_base: Optional[str] = None,
) -> StickerOutcome:
    outcome = StickerOutcome(layout.pack_name, sticker)
    if not prepare_dirs(outcome, layout, StickerFormatType.LOTTIE):
        return outcome

    lottie_path = layout.lottie_path(sticker)
    passes = (
        (SMALL_PASS, layout.gif_small_path(sticker), SMALL_GIF_SIZE),
        (LARGE_PASS, layout.gif_large_path(sticker), None),
    )

    await download_if_missing(
        outcome,
        backend,
        lottie_url(sticker.id, lottie_base),
        lottie_path,
        "Lottie",
    )

    for pass_name, dst, size in passes:
        if dst.exists():
            outcome.skip(encode_step(pass_name), dst)
            continue
        if not lottie_path.exists():
            reason = "the Lottie file doesn't exist"
            logger.error(f"    Can't render GIF ({pass_name}) because {reason}!")
            outcome.fail(encode_step(pass_name), dst, reason=reason)
            continue
        await render_lottie_pass(
            outcome,
            backend,
            lottie_path,
            scratch_dir,
            dst,
            pass_name,
            size,
        )

    return outcome


async def process_sticker(
    layout: PackLayout,
    sticker: Sticker,
    backend: ConversionBackend,
    scratch_dir: Path,
    media_base: Optional[str] = None,
    lottie_base: Optional[str] = None,
) -> StickerOutcome:
    format_type = sticker.format
    if format_type is StickerFormatType.APNG:
        return await process_apng_sticker(layout, sticker, backend, media_base)
    if format_type is StickerFormatType.LOTTIE:
        return await process_lottie_sticker(
            layout,
            sticker,
            backend,
            scratch_dir,
            lottie_base,
        )

    logger.warning(
        f"    Sticker `{sticker.name}` has unsupported format type"
        f" {sticker.format_type}, skipped",
    )
    return StickerOutcome(layout.pack_name, sticker, unsupported=True)
