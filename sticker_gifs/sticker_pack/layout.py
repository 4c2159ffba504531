from functools import cached_property
from pathlib import Path

from ..consts import (
    APNG_DIR_NAME,
    GIF_LARGE_DIR_NAME,
    GIF_SMALL_DIR_NAME,
    LOTTIE_DIR_NAME,
)
from ..models import Sticker, StickerFormatType, StickerPack
from ..utils import sanitize_name


class PackLayout:
    def __init__(self, base_path: Path, pack_name: str):
        self.base_path = base_path
        self.pack_name = pack_name

    @classmethod
    def from_pack(cls, output_dir: Path, pack: StickerPack) -> "PackLayout":
        return cls(output_dir / sanitize_name(pack.name, "pack"), pack.name)

    @cached_property
    def apng_dir(self) -> Path:
        return self.base_path / APNG_DIR_NAME

    @cached_property
    def lottie_dir(self) -> Path:
        return self.base_path / LOTTIE_DIR_NAME

    @cached_property
    def gif_small_dir(self) -> Path:
        return self.base_path / GIF_SMALL_DIR_NAME

    @cached_property
    def gif_large_dir(self) -> Path:
        return self.base_path / GIF_LARGE_DIR_NAME

    def dirs_for(self, format_type: StickerFormatType) -> tuple[Path, ...]:
        source_dir = (
            self.lottie_dir if format_type is StickerFormatType.LOTTIE else self.apng_dir
        )
        return (source_dir, self.gif_small_dir, self.gif_large_dir)

    def ensure_dirs(self, format_type: StickerFormatType) -> None:
        for path in self.dirs_for(format_type):
            path.mkdir(parents=True, exist_ok=True)

    @staticmethod
    def sticker_filename(sticker: Sticker, suffix: str) -> str:
        return f"{sanitize_name(sticker.name, str(sticker.id))}{suffix}"

    def apng_path(self, sticker: Sticker) -> Path:
        return self.apng_dir / self.sticker_filename(sticker, ".png")

    def lottie_path(self, sticker: Sticker) -> Path:
        return self.lottie_dir / self.sticker_filename(sticker, ".json")

    def gif_small_path(self, sticker: Sticker) -> Path:
        return self.gif_small_dir / self.sticker_filename(sticker, ".gif")

    def gif_large_path(self, sticker: Sticker) -> Path:
        return self.gif_large_dir / self.sticker_filename(sticker, ".gif")
