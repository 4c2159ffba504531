from .backend import ConversionBackend as ConversionBackend
from .backend import ToolBackend as ToolBackend
from .layout import PackLayout as PackLayout
from .manager import StickerPackProcessor as StickerPackProcessor
from .outcome import RunReport as RunReport
from .outcome import StepResult as StepResult
from .outcome import StepStatus as StepStatus
from .outcome import StickerOutcome as StickerOutcome
from .process import process_apng_sticker as process_apng_sticker
from .process import process_lottie_sticker as process_lottie_sticker
from .process import process_sticker as process_sticker
