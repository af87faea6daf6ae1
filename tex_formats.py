# tex_formats.py
"""
Closed format vocabularies of the TEX container and the functions that map
raw on-disk codes onto them.

Two independent vocabularies meet here: the texture-level pixel format stored
in the TEX header (TexFormat) and the container-level FreeImage format stored
in TEXB0003 containers. Both are folded into one MipmapFormat before any pixel
consumer sees the data.
"""

from enum import IntEnum, IntFlag

from record_types import CODEC_FORMAT_BASE, FIF_UNKNOWN
from tex_errors import UnrecognizedEnumValueError


class TexFormat(IntEnum):
    RGBA8888 = 0
    DXT5 = 4
    DXT3 = 6
    DXT1 = 7
    RG88 = 8
    R8 = 9


class TexFlags(IntFlag):
    NONE = 0
    NO_INTERPOLATION = 1
    CLAMP_UVS = 2
    IS_GIF = 4
    UNK3 = 8
    UNK4 = 16
    IS_VIDEO_TEXTURE = 32
    UNK6 = 64
    UNK7 = 128


class FreeImageFormat(IntEnum):
    UNKNOWN = FIF_UNKNOWN
    BMP = 0
    ICO = 1
    JPEG = 2
    JNG = 3
    KOALA = 4
    LBM = 5
    MNG = 6
    PBM = 7
    PBMRAW = 8
    PCD = 9
    PCX = 10
    PGM = 11
    PGMRAW = 12
    PNG = 13
    PPM = 14
    PPMRAW = 15
    RAS = 16
    TARGA = 17
    TIFF = 18
    WBMP = 19
    PSD = 20
    CUT = 21
    XBM = 22
    XPM = 23
    DDS = 24
    GIF = 25
    HDR = 26
    FAXG3 = 27
    SGI = 28
    EXR = 29
    J2K = 30
    JP2 = 31
    PFM = 32
    PICT = 33
    RAW = 34
    MP4 = 35


class MipmapFormat(IntEnum):
    INVALID = 0
    RGBA8888 = 1
    R8 = 2
    RG88 = 3
    COMPRESSED_DXT5 = 4
    COMPRESSED_DXT3 = 5
    COMPRESSED_DXT1 = 6
    IMAGE_BMP = CODEC_FORMAT_BASE + FreeImageFormat.BMP
    IMAGE_ICO = CODEC_FORMAT_BASE + FreeImageFormat.ICO
    IMAGE_JPEG = CODEC_FORMAT_BASE + FreeImageFormat.JPEG
    IMAGE_JNG = CODEC_FORMAT_BASE + FreeImageFormat.JNG
    IMAGE_KOALA = CODEC_FORMAT_BASE + FreeImageFormat.KOALA
    IMAGE_LBM = CODEC_FORMAT_BASE + FreeImageFormat.LBM
    IMAGE_MNG = CODEC_FORMAT_BASE + FreeImageFormat.MNG
    IMAGE_PBM = CODEC_FORMAT_BASE + FreeImageFormat.PBM
    IMAGE_PBMRAW = CODEC_FORMAT_BASE + FreeImageFormat.PBMRAW
    IMAGE_PCD = CODEC_FORMAT_BASE + FreeImageFormat.PCD
    IMAGE_PCX = CODEC_FORMAT_BASE + FreeImageFormat.PCX
    IMAGE_PGM = CODEC_FORMAT_BASE + FreeImageFormat.PGM
    IMAGE_PGMRAW = CODEC_FORMAT_BASE + FreeImageFormat.PGMRAW
    IMAGE_PNG = CODEC_FORMAT_BASE + FreeImageFormat.PNG
    IMAGE_PPM = CODEC_FORMAT_BASE + FreeImageFormat.PPM
    IMAGE_PPMRAW = CODEC_FORMAT_BASE + FreeImageFormat.PPMRAW
    IMAGE_RAS = CODEC_FORMAT_BASE + FreeImageFormat.RAS
    IMAGE_TARGA = CODEC_FORMAT_BASE + FreeImageFormat.TARGA
    IMAGE_TIFF = CODEC_FORMAT_BASE + FreeImageFormat.TIFF
    IMAGE_WBMP = CODEC_FORMAT_BASE + FreeImageFormat.WBMP
    IMAGE_PSD = CODEC_FORMAT_BASE + FreeImageFormat.PSD
    IMAGE_CUT = CODEC_FORMAT_BASE + FreeImageFormat.CUT
    IMAGE_XBM = CODEC_FORMAT_BASE + FreeImageFormat.XBM
    IMAGE_XPM = CODEC_FORMAT_BASE + FreeImageFormat.XPM
    IMAGE_DDS = CODEC_FORMAT_BASE + FreeImageFormat.DDS
    IMAGE_GIF = CODEC_FORMAT_BASE + FreeImageFormat.GIF
    IMAGE_HDR = CODEC_FORMAT_BASE + FreeImageFormat.HDR
    IMAGE_FAXG3 = CODEC_FORMAT_BASE + FreeImageFormat.FAXG3
    IMAGE_SGI = CODEC_FORMAT_BASE + FreeImageFormat.SGI
    IMAGE_EXR = CODEC_FORMAT_BASE + FreeImageFormat.EXR
    IMAGE_J2K = CODEC_FORMAT_BASE + FreeImageFormat.J2K
    IMAGE_JP2 = CODEC_FORMAT_BASE + FreeImageFormat.JP2
    IMAGE_PFM = CODEC_FORMAT_BASE + FreeImageFormat.PFM
    IMAGE_PICT = CODEC_FORMAT_BASE + FreeImageFormat.PICT
    IMAGE_RAW = CODEC_FORMAT_BASE + FreeImageFormat.RAW
    VIDEO_MP4 = CODEC_FORMAT_BASE + FreeImageFormat.MP4

    @property
    def is_codec_owned(self):
        return self.value >= CODEC_FORMAT_BASE

    @property
    def is_block_compressed(self):
        return self in BLOCK_COMPRESSED_FORMATS


BLOCK_COMPRESSED_FORMATS = frozenset((
    MipmapFormat.COMPRESSED_DXT5,
    MipmapFormat.COMPRESSED_DXT3,
    MipmapFormat.COMPRESSED_DXT1,
))

PIXEL_TO_MIPMAP_FORMAT = {
    TexFormat.RGBA8888: MipmapFormat.RGBA8888,
    TexFormat.DXT5: MipmapFormat.COMPRESSED_DXT5,
    TexFormat.DXT3: MipmapFormat.COMPRESSED_DXT3,
    TexFormat.DXT1: MipmapFormat.COMPRESSED_DXT1,
    TexFormat.R8: MipmapFormat.R8,
    TexFormat.RG88: MipmapFormat.RG88,
}

BYTES_PER_PIXEL = {
    MipmapFormat.RGBA8888: 4,
    MipmapFormat.RG88: 2,
    MipmapFormat.R8: 1,
}


def decode_pixel_format(code):
    try:
        return TexFormat(code)
    except ValueError:
        raise UnrecognizedEnumValueError("pixel format", code, "format") from None


def decode_flags(value):
    """Decode the header flag word; unknown bits are kept as-is."""
    if value < 0:
        raise UnrecognizedEnumValueError("texture flags", value, "flags")
    return TexFlags(value)


def decode_container_image_format(code):
    try:
        return FreeImageFormat(code)
    except ValueError:
        raise UnrecognizedEnumValueError("container image format", code, "image_format") from None


def image_to_mipmap_format(image_format):
    return MipmapFormat(CODEC_FORMAT_BASE + image_format.value)


def resolve_mipmap_format(container_format, pixel_format):
    """
    Pick the single mipmap format used by every mipmap of a container.

    A container that declares a FreeImage format owns its bytes outright (an
    opaque tag >= 1000). Otherwise the texture's own pixel format decides.
    """
    if container_format != FreeImageFormat.UNKNOWN:
        return image_to_mipmap_format(container_format)
    return PIXEL_TO_MIPMAP_FORMAT[pixel_format]


def bytes_per_pixel(mipmap_format):
    return BYTES_PER_PIXEL[mipmap_format]
