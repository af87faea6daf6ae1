# tex_reader.py
"""
Reader for Wallpaper Engine TEX records.

A TEX record is two magics (TEXV0005, TEXI0001), a fixed header and one
image container (TEXB0001/2/3). The container's trailing digit selects the
layout of every mipmap that follows it:

    TEXB0001  width, height, payload
    TEXB0002  width, height, lz4 flag, decompressed size, payload
    TEXB0003  same as 0002, plus a FreeImage format code in the prologue

Every mipmap goes through a normalization pass right after it is read: LZ4
payloads are inflated, and DXT block payloads are decoded to RGBA8888 (or
left untouched, tag included, when block decoding is turned off).
"""

import logging
from dataclasses import dataclass, replace
from typing import Optional, Tuple

import lz4.block

from record_types import (
    CODEC_FORMAT_VERSION,
    FIF_UNKNOWN,
    LZ4_COMPRESSED_FLAG,
    MAGIC_LENGTH,
    MAGIC_SEPARATOR_LENGTH,
    SUPPORTED_CONTAINER_VERSIONS,
    TEX_CONTAINER_PREFIX,
    TEX_INFO_MAGIC,
    TEX_MAGIC,
)
from tex_errors import DecompressionError, TexError, UnsupportedVersionError
from tex_formats import (
    FreeImageFormat,
    MipmapFormat,
    TexFlags,
    TexFormat,
    decode_container_image_format,
    decode_flags,
    decode_pixel_format,
    resolve_mipmap_format,
)
from texture_decoder import decoder_for

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TextureHeader:
    format: TexFormat
    flags: TexFlags
    texture_width: int
    texture_height: int
    image_width: int
    image_height: int
    unk_int0: int

    @property
    def is_animated(self) -> bool:
        return bool(self.flags & TexFlags.IS_GIF)


@dataclass(frozen=True)
class Mipmap:
    width: int
    height: int
    lz4_compressed: bool
    decompressed_bytes_count: int
    data: bytes
    version: int
    format: MipmapFormat


@dataclass(frozen=True)
class TexImage:
    mipmaps: Tuple[Mipmap, ...]

    @property
    def first_mipmap(self) -> Optional[Mipmap]:
        return self.mipmaps[0] if self.mipmaps else None


@dataclass(frozen=True)
class ImageContainer:
    magic: str
    image_format: FreeImageFormat
    images: Tuple[TexImage, ...]
    version: int


@dataclass(frozen=True)
class TextureRecord:
    name: str
    magic1: str
    magic2: str
    header: TextureHeader
    image_container: ImageContainer
    is_animated: bool = False

    def mipmap(self, image_index=0, mipmap_index=0) -> Mipmap:
        return self.image_container.images[image_index].mipmaps[mipmap_index]


def read_header(reader) -> TextureHeader:
    tex_format = decode_pixel_format(reader.read_u32("format"))
    flags = decode_flags(reader.read_i32("flags"))
    return TextureHeader(
        format=tex_format,
        flags=flags,
        texture_width=reader.read_u32("texture_width"),
        texture_height=reader.read_u32("texture_height"),
        image_width=reader.read_u32("image_width"),
        image_height=reader.read_u32("image_height"),
        unk_int0=reader.read_i32("unk_int0"),
    )


def read_mipmap(reader, version, mipmap_format) -> Mipmap:
    """Read one raw mipmap record laid out for the given structural version."""
    if version not in SUPPORTED_CONTAINER_VERSIONS:
        raise UnsupportedVersionError(f"mipmap version {version} is not supported", "version")
    width = reader.read_u32("width")
    height = reader.read_u32("height")
    if version == 1:
        lz4_compressed = False
        decompressed_bytes_count = 0
    else:
        lz4_compressed = reader.read_u32("lz4_compressed") == LZ4_COMPRESSED_FLAG
        decompressed_bytes_count = reader.read_u32("decompressed_bytes_count")
    data = reader.read_length_prefixed_bytes("data")
    return Mipmap(
        width=width,
        height=height,
        lz4_compressed=lz4_compressed,
        decompressed_bytes_count=decompressed_bytes_count,
        data=data,
        version=version,
        format=mipmap_format,
    )


def lz4_decompress(data, decompressed_size):
    try:
        result = lz4.block.decompress(data, uncompressed_size=decompressed_size)
    except lz4.block.LZ4BlockError as e:
        raise DecompressionError(f"LZ4 decompression failed: {e}", "data") from e
    except (OverflowError, ValueError, MemoryError) as e:
        # declared size does not fit a buffer
        raise DecompressionError(
            f"cannot decompress to {decompressed_size} bytes: {e}", "data") from e
    if len(result) != decompressed_size:
        raise DecompressionError(
            f"LZ4 produced {len(result)} bytes, header declares {decompressed_size}", "data")
    return result


def normalize_mipmap(mipmap, decode_blocks=True) -> Mipmap:
    if mipmap.lz4_compressed:
        logger.debug("LZ4 mipmap %dx%d: %d -> %d bytes", mipmap.width, mipmap.height,
                     len(mipmap.data), mipmap.decompressed_bytes_count)
        mipmap = replace(mipmap, data=lz4_decompress(mipmap.data, mipmap.decompressed_bytes_count),
                         lz4_compressed=False)
    if mipmap.format.is_codec_owned:
        return mipmap
    if mipmap.format.is_block_compressed and decode_blocks:
        rgba = decoder_for(mipmap.format).decode_to_rgba(
            mipmap.data, mipmap.width, mipmap.height, mipmap.format)
        mipmap = replace(mipmap, data=rgba, format=MipmapFormat.RGBA8888)
    return mipmap


def read_image(reader, version, mipmap_format, decode_blocks=True) -> TexImage:
    mipmap_count = reader.read_u32("mipmap_count")
    mipmaps = []
    for index in range(mipmap_count):
        try:
            mipmap = normalize_mipmap(read_mipmap(reader, version, mipmap_format), decode_blocks)
        except TexError as e:
            raise e.located(f"mipmap {index}")
        mipmaps.append(mipmap)
    return TexImage(tuple(mipmaps))


def parse_container_version(magic):
    digit = magic[len(TEX_CONTAINER_PREFIX):]
    if not magic.startswith(TEX_CONTAINER_PREFIX) or not digit.isdigit():
        raise UnsupportedVersionError(f"unknown image container magic {magic!r}", "magic")
    version = int(digit)
    if version not in SUPPORTED_CONTAINER_VERSIONS:
        raise UnsupportedVersionError(f"image container version {version} is not supported", "magic")
    return version


def read_image_container(reader, tex_format, decode_blocks=True) -> ImageContainer:
    magic = reader.read_fixed_string(MAGIC_LENGTH, "container magic")
    reader.read_bytes(MAGIC_SEPARATOR_LENGTH, "container magic")
    version = parse_container_version(magic)

    image_count = reader.read_u32("image_count")
    if version == CODEC_FORMAT_VERSION:
        format_code = reader.read_i32("image_format")
    else:
        format_code = FIF_UNKNOWN
    image_format = decode_container_image_format(format_code)
    mipmap_format = resolve_mipmap_format(image_format, tex_format)
    logger.debug("%s: %d image(s), container format %s, mipmap format %s",
                 magic, image_count, image_format.name, mipmap_format.name)

    images = []
    for index in range(image_count):
        try:
            images.append(read_image(reader, version, mipmap_format, decode_blocks))
        except TexError as e:
            raise e.located(f"image {index}")
    return ImageContainer(
        magic=magic,
        image_format=image_format,
        images=tuple(images),
        version=version,
    )


def read_magic(reader, expected, field):
    """Return the magic as text, or None when the raw bytes differ from expected."""
    raw = reader.read_bytes(MAGIC_LENGTH, field)
    if raw != expected:
        return None
    reader.read_bytes(MAGIC_SEPARATOR_LENGTH, field)
    return raw.decode('ascii')


def read_texture(reader, name, decode_blocks=True) -> Optional[TextureRecord]:
    """
    Decode one TEX record starting at the reader's current position.

    Returns None when the stream is not a static TEXV0005 texture (wrong
    magic, or an animated/GIF texture); callers skip those. Raises a TexError
    subclass when the record is a texture but cannot be decoded.
    """
    magic1 = read_magic(reader, TEX_MAGIC, "magic1")
    if magic1 is None:
        return None
    magic2 = read_magic(reader, TEX_INFO_MAGIC, "magic2")
    if magic2 is None:
        return None

    try:
        header = read_header(reader)
    except TexError as e:
        raise e.located("header")
    if header.is_animated:
        logger.debug("%s is an animated texture, skipping", name)
        return None

    container = read_image_container(reader, header.format, decode_blocks)
    return TextureRecord(
        name=name,
        magic1=magic1,
        magic2=magic2,
        header=header,
        image_container=container,
        is_animated=False,
    )
