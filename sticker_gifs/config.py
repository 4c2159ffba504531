import os
from collections.abc import Mapping
from functools import lru_cache
from pathlib import Path
from typing import Any, Optional

from cookit.pyd import model_with_alias_generator, type_validate_python
from pydantic import BaseModel

from .consts import SNAPSHOT_FILENAME

CONFIG_PREFIX = "sticker_gifs_"


@model_with_alias_generator(lambda x: f"{CONFIG_PREFIX}{x}")
class ConfigModel(BaseModel):
    token: Optional[str] = None
    proxy: Optional[str] = None
    timeout: float = 30

    output_dir: Path = Path("./stickers")
    scratch_dir: Path = Path("./temp")
    snapshot_path: Path = Path(f"./{SNAPSHOT_FILENAME}")

    api_base: str = "https://discord.com/api/v9"
    media_base: str = "https://media.discordapp.net/stickers"
    lottie_base: str = "https://discord.com/stickers"

    ffmpeg_path: str = "ffmpeg"
    gifsicle_path: str = "gifsicle"

    log_level: str = "INFO"


def load_config(
    environ: Optional[Mapping[str, str]] = None,
    **overrides: Any,
) -> ConfigModel:
    """
    read config from environment (`STICKER_GIFS_*`, case-insensitive),
    keyword overrides use field names and win over environment,
    `None` overrides are ignored
    """
    env = os.environ if environ is None else environ
    data: dict[str, Any] = {
        k.lower(): v for k, v in env.items() if k.lower().startswith(CONFIG_PREFIX)
    }
    data.update(
        {f"{CONFIG_PREFIX}{k}": v for k, v in overrides.items() if v is not None},
    )
    return type_validate_python(ConfigModel, data)


@lru_cache
def get_config() -> ConfigModel:
    """environment config used as fallback by module level helpers"""
    return load_config()
