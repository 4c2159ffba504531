from pathlib import Path
from typing import Any, Callable, Optional

import pytest
from loguru import logger

from sticker_gifs.consts import FRAME_FILENAME_GLOB, FRAME_FILENAME_TEMPLATE
from sticker_gifs.models import Sticker, StickerPack

SNAPSHOT_JSON = """
[
  {
    "sticker_pack": {
      "id": "847199849233514549",
      "name": "Pack1",
      "stickers": [
        {"id": 111, "name": "wave", "format_type": 2, "tags": "wave"},
        {"id": "222", "name": "dance", "format_type": 3}
      ]
    }
  },
  {
    "sticker_pack": {
      "name": "Pack2",
      "stickers": [{"id": "333", "name": "static", "format_type": 1}]
    }
  }
]
"""


class FakeBackend:
    """records calls and writes placeholder files instead of running tools"""

    def __init__(
        self,
        fail: Optional[dict[str, Callable[..., bool]]] = None,
        partial: bool = False,
    ) -> None:
        self.fail = fail or {}
        self.partial = partial
        self.calls: list[tuple[Any, ...]] = []
        self.frames_before_render: list[int] = []

    def call(self, name: str, *args: Any, output: Optional[Path] = None):
        self.calls.append((name, *args))
        if (check := self.fail.get(name)) and check(*args):
            if self.partial and output is not None:
                output.write_bytes(b"partial")
            raise RuntimeError(f"{name} failed")
        if output is not None:
            output.write_bytes(b"GIF89a" if output.suffix == ".gif" else b"data")

    @property
    def names(self) -> list[str]:
        return [x[0] for x in self.calls]

    async def download(self, url: str, path: Path):
        self.call("download", url, path, output=path)

    async def apng_to_gif(self, src: Path, dst: Path):
        self.call("apng_to_gif", src, dst, output=dst)

    async def render_lottie(
        self,
        src: Path,
        frame_dir: Path,
        size: Optional[tuple[int, int]] = None,
    ):
        self.frames_before_render.append(len(list(frame_dir.glob(FRAME_FILENAME_GLOB))))
        self.call("render_lottie", src, frame_dir, size)
        for i in range(3):
            (frame_dir / FRAME_FILENAME_TEMPLATE.format(i)).write_bytes(b"png")

    async def encode_frames(self, frame_dir: Path, dst: Path):
        self.call("encode_frames", frame_dir, dst, output=dst)

    async def resize_gif(self, src: Path, dst: Path, size: tuple[int, int] = (143, 143)):
        self.call("resize_gif", src, dst, size, output=dst)


def always(*_: Any) -> bool:
    return True


def frame_files(path: Path) -> list[Path]:
    return sorted(path.glob(FRAME_FILENAME_GLOB))


@pytest.fixture
def log_messages():
    messages: list[str] = []
    handler_id = logger.add(
        lambda m: messages.append(m.record["message"]),
        level="DEBUG",
    )
    yield messages
    logger.remove(handler_id)


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def scratch_dir(tmp_path: Path) -> Path:
    path = tmp_path / "temp"
    path.mkdir()
    return path


@pytest.fixture
def apng_sticker() -> Sticker:
    return Sticker(id=111, name="wave", format_type=2)


@pytest.fixture
def lottie_sticker() -> Sticker:
    return Sticker(id="222", name="dance", format_type=3)


@pytest.fixture
def pack1(apng_sticker: Sticker) -> StickerPack:
    return StickerPack(name="Pack1", stickers=[apng_sticker])
