from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import Optional

from cookit.loguru import warning_suppress
from loguru import logger

from ..convert import clear_frames
from ..models import StickerPack
from .backend import ConversionBackend
from .layout import PackLayout
from .outcome import RunReport, StickerOutcome
from .process import STEP_PROCESS, process_sticker


class StickerPackProcessor:
    def __init__(
        self,
        output_dir: Path,
        scratch_dir: Path,
        backend: ConversionBackend,
        media_base: Optional[str] = None,
        lottie_base: Optional[str] = None,
        pack_names: Optional[Iterable[str]] = None,
    ) -> None:
        self.output_dir = output_dir
        self.scratch_dir = scratch_dir
        self.backend = backend
        self.media_base = media_base
        self.lottie_base = lottie_base
        self.pack_names = (
            {x.lower() for x in pack_names} if pack_names is not None else None
        )

    def filter_packs(self, packs: Sequence[StickerPack]) -> list[StickerPack]:
        if self.pack_names is None:
            return list(packs)
        selected = [x for x in packs if x.name.lower() in self.pack_names]
        if missing := self.pack_names - {x.name.lower() for x in selected}:
            logger.warning(f"Packs not found in list: {', '.join(sorted(missing))}")
        return selected

    def prepare_scratch_dir(self) -> None:
        # failing here aborts the run
        self.scratch_dir.mkdir(parents=True, exist_ok=True)
        if removed := clear_frames(self.scratch_dir):
            logger.info(f"Removed {removed} stale frames from scratch folder")

    async def process_pack(
        self,
        pack: StickerPack,
        report: Optional[RunReport] = None,
    ) -> list[StickerOutcome]:
        layout = PackLayout.from_pack(self.output_dir, pack)
        outcomes: list[StickerOutcome] = []
        total = len(pack.stickers)
        for i, sticker in enumerate(pack.stickers, 1):
            logger.info(f"  Processing sticker `{sticker.name}` [{i} / {total}]")
            try:
                outcome = await process_sticker(
                    layout,
                    sticker,
                    self.backend,
                    self.scratch_dir,
                    self.media_base,
                    self.lottie_base,
                )
            except Exception as e:
                outcome = StickerOutcome(layout.pack_name, sticker)
                outcome.fail(STEP_PROCESS, layout.base_path, exc=e)
                with warning_suppress(f"  Failed to process sticker `{sticker.name}`"):
                    raise
            outcomes.append(outcome)
            if report is not None:
                report.outcomes.append(outcome)
        return outcomes

    async def run(self, packs: Sequence[StickerPack]) -> RunReport:
        self.prepare_scratch_dir()
        report = RunReport()

        selected = self.filter_packs(packs)
        total = len(selected)
        for i, pack in enumerate(selected, 1):
            logger.info(f"Processing pack `{pack.name}` [{i} / {total}]")
            await self.process_pack(pack, report)

        if report.failed:
            logger.warning(f"Finished with failures: {report.summary()}")
            for outcome in report.failed:
                for step in outcome.failed_steps:
                    logger.warning(
                        f"  - `{outcome.pack_name}` / `{outcome.sticker.name}`"
                        f" {step.step}: {step.message}",
                    )
        else:
            logger.success(f"Finished: {report.summary()}")
        return report
