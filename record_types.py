# record_types.py
# Magic literals and entry kinds found in Wallpaper Engine PKG/TEX files

TEX_MAGIC = b"TEXV0005"
TEX_INFO_MAGIC = b"TEXI0001"
TEX_CONTAINER_PREFIX = "TEXB000"
MAGIC_LENGTH = 8
MAGIC_SEPARATOR_LENGTH = 1

SUPPORTED_CONTAINER_VERSIONS = (1, 2, 3)
CODEC_FORMAT_VERSION = 3

# FreeImage code meaning "no codec-owned format"
FIF_UNKNOWN = -1

# Mipmap formats at or above this value are codec-owned
CODEC_FORMAT_BASE = 1000

LZ4_COMPRESSED_FLAG = 1

TEX_EXTENSION = ".tex"

ENTRY_TYPE_BINARY = "binary"
ENTRY_TYPE_TEX = "tex"
