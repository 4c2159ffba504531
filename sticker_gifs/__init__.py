from .config import ConfigModel, get_config, load_config
from .models import Sticker, StickerFormatType, StickerPack, parse_sticker_packs
from .sticker_pack import (
    ConversionBackend,
    PackLayout,
    RunReport,
    StickerOutcome,
    StickerPackProcessor,
    ToolBackend,
    process_sticker,
)

__version__ = "0.1.0"

__all__ = [
    "ConfigModel",
    "ConversionBackend",
    "PackLayout",
    "RunReport",
    "Sticker",
    "StickerFormatType",
    "StickerOutcome",
    "StickerPack",
    "StickerPackProcessor",
    "ToolBackend",
    "get_config",
    "load_config",
    "parse_sticker_packs",
    "process_sticker",
]
