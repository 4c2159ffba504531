from enum import IntEnum
from typing import Optional, Union
from typing_extensions import TypeAlias

from cookit.pyd import type_validate_json
from pydantic import BaseModel


class StickerFormatType(IntEnum):
    PNG = 1
    APNG = 2
    LOTTIE = 3
    GIF = 4


class Sticker(BaseModel):
    id: Union[str, int]
    name: str
    format_type: int

    @property
    def format(self) -> Optional[StickerFormatType]:
        try:
            return StickerFormatType(self.format_type)
        except ValueError:
            return None


class StickerPack(BaseModel):
    name: str
    stickers: list[Sticker] = []


class StickerPackEntry(BaseModel):
    sticker_pack: StickerPack


StickerPackList: TypeAlias = list[StickerPackEntry]


def parse_sticker_packs(raw: str) -> list[StickerPack]:
    return [x.sticker_pack for x in type_validate_json(StickerPackList, raw)]
