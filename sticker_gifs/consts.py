import re

DESCRIPTION = "Export chat platform sticker packs as GIF renditions"

SNAPSHOT_FILENAME = "data.json"

APNG_DIR_NAME = "APNG"
LOTTIE_DIR_NAME = "Lottie"
GIF_SMALL_DIR_NAME = "GIF-143"
GIF_LARGE_DIR_NAME = "GIF-Large"

SMALL_GIF_SIZE = (143, 143)

FRAME_FILENAME_TEMPLATE = "frame-{}.png"
FRAME_FILENAME_PATTERN = "frame-%d.png"
FRAME_FILENAME_GLOB = "frame-*.png"

FFMPEG_INPUT_FRAMERATE = 60
FFMPEG_FILTER_COMPLEX = (
    "[0:v] fps=50,split [a][b];[a] palettegen [p];[b][p] paletteuse"
)

UNSAFE_NAME_CHARS_REGEX = re.compile(r'[\x00-\x1f\x7f<>:"/\\|?*]')
MAX_NAME_BYTES = 200
