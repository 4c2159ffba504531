from contextlib import nullcontext
from pathlib import Path
from typing import TYPE_CHECKING, Optional, Union

from cookit import copy_func_arg_annotations
from httpx import AsyncClient
from loguru import logger
from yarl import URL

from .config import get_config
from .models import StickerPack, parse_sticker_packs

if TYPE_CHECKING:
    from httpx import Response


@copy_func_arg_annotations(AsyncClient)
def create_client(**kwargs):
    cfg = get_config()
    return AsyncClient(
        **{
            "proxy": cfg.proxy,
            "timeout": cfg.timeout,
            "follow_redirects": True,
            **kwargs,
        },
    )


def apng_url(sticker_id: Union[str, int], base: Optional[str] = None) -> str:
    base_url = URL(get_config().media_base if base is None else base)
    return str((base_url / f"{sticker_id}.png").with_query(passthrough="true"))


def lottie_url(sticker_id: Union[str, int], base: Optional[str] = None) -> str:
    base_url = URL(get_config().lottie_base if base is None else base)
    return str(base_url / f"{sticker_id}.json")


async def fetch_sticker_packs(
    token: str,
    api_base: Optional[str] = None,
    cli: Optional[AsyncClient] = None,
) -> "Response":
    base_url = URL(get_config().api_base if api_base is None else api_base)
    url = str(base_url.joinpath("users", "@me", "sticker-packs"))
    ctx = create_client() if cli is None else nullcontext(cli)
    async with ctx as ctx_cli:
        logger.debug(f"Fetching sticker pack list from {url}")
        resp = await ctx_cli.get(
            url,
            headers={"accept": "*/*", "authorization": token},
        )
        return resp.raise_for_status()


async def fetch_sticker_pack_list(
    token: str,
    api_base: Optional[str] = None,
    cli: Optional[AsyncClient] = None,
    save_to: Optional[Path] = None,
) -> list[StickerPack]:
    resp = await fetch_sticker_packs(token, api_base, cli)
    if save_to:
        save_snapshot(save_to, resp.content)
    return parse_sticker_packs(resp.text)


def load_snapshot(path: Path) -> list[StickerPack]:
    logger.debug(f"Loading sticker pack snapshot from `{path}`")
    return parse_sticker_packs(path.read_text("u8"))


def save_snapshot(path: Path, content: bytes) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(content)
    logger.info(f"Saved sticker pack snapshot to `{path}`")


async def download_file(
    url: str,
    path: Path,
    cli: Optional[AsyncClient] = None,
) -> Path:
    ctx = create_client() if cli is None else nullcontext(cli)
    async with ctx as ctx_cli:
        resp = (await ctx_cli.get(url)).raise_for_status()
    path.write_bytes(resp.content)
    return path
