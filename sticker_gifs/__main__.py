import argparse
import asyncio
from collections.abc import Sequence
from pathlib import Path
from typing import Optional

from loguru import logger
from pydantic import ValidationError

from .config import ConfigModel, load_config
from .consts import DESCRIPTION
from .log import setup_logger
from .models import StickerPack
from .source_fetch import create_client, fetch_sticker_pack_list, load_snapshot
from .sticker_pack import RunReport, StickerPackProcessor, ToolBackend
from .utils import format_error


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sticker-gifs",
        description=DESCRIPTION,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Convert packs listed in ./data.json into ./stickers
  sticker-gifs

  # Fetch the pack list from the API and keep a snapshot of it
  STICKER_GIFS_TOKEN=... sticker-gifs --online --save-snapshot data.json

  # Only convert some packs
  sticker-gifs --pack "Wumpus Beyond" "Hello Kitty"
        """,
    )
    parser.add_argument(
        "-o",
        "--online",
        action="store_true",
        help="List sticker packs from the API instead of the snapshot file",
    )
    parser.add_argument("--token", help="API credential (default: $STICKER_GIFS_TOKEN)")
    parser.add_argument("--snapshot", type=Path, help="Sticker pack snapshot to read")
    parser.add_argument(
        "--save-snapshot",
        type=Path,
        help="With --online, store the fetched pack list to this file",
    )
    parser.add_argument("--output", type=Path, help="Output root directory")
    parser.add_argument("--scratch", type=Path, help="Scratch directory for frames")
    parser.add_argument(
        "--pack",
        nargs="+",
        dest="packs",
        metavar="NAME",
        help="Only process these packs (case-insensitive)",
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    return parser


async def load_packs(
    cfg: ConfigModel,
    online: bool = False,
    save_snapshot: Optional[Path] = None,
    **client_kw,
) -> list[StickerPack]:
    if not online:
        return load_snapshot(cfg.snapshot_path)
    if not cfg.token:
        raise ValueError("A token is required to fetch sticker packs online")
    return await fetch_sticker_pack_list(
        cfg.token,
        cfg.api_base,
        save_to=save_snapshot,
        **client_kw,
    )


async def run(
    cfg: ConfigModel,
    online: bool = False,
    save_snapshot: Optional[Path] = None,
    pack_names: Optional[Sequence[str]] = None,
) -> RunReport:
    async with create_client(proxy=cfg.proxy, timeout=cfg.timeout) as cli:
        packs = await load_packs(cfg, online, save_snapshot, cli=cli)
        logger.info(f"Loaded {len(packs)} sticker packs")
        processor = StickerPackProcessor(
            cfg.output_dir,
            cfg.scratch_dir,
            ToolBackend(cli, cfg.ffmpeg_path, cfg.gifsicle_path),
            media_base=cfg.media_base,
            lottie_base=cfg.lottie_base,
            pack_names=pack_names,
        )
        return await processor.run(packs)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        cfg = load_config(
            token=args.token,
            snapshot_path=args.snapshot,
            output_dir=args.output,
            scratch_dir=args.scratch,
            log_level="DEBUG" if args.debug else None,
        )
    except ValidationError as e:
        logger.critical(f"Invalid configuration: {e}")
        return 1
    setup_logger(cfg.log_level)

    if args.save_snapshot and not args.online:
        logger.warning("--save-snapshot has no effect without --online")

    try:
        asyncio.run(run(cfg, args.online, args.save_snapshot, args.packs))
    except Exception as e:
        logger.critical(f"Run aborted: {format_error(e)}")
        logger.opt(exception=e).debug("Stacktrace")
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
