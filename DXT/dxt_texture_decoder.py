# DXT/dxt_texture_decoder.py
import io
import logging
from PIL import Image
from tex_errors import DecompressionError
from tex_formats import MipmapFormat
from texture_decoder import TextureDecoder

logger = logging.getLogger(__name__)

FOURCC_NAMES = {
    MipmapFormat.COMPRESSED_DXT1: "DXT1",
    MipmapFormat.COMPRESSED_DXT3: "DXT3",
    MipmapFormat.COMPRESSED_DXT5: "DXT5",
}

class DXTTextureDecoder(TextureDecoder):
    """Block-decompresses DXT1/DXT3/DXT5 payloads by handing them to Pillow's DDS reader."""

    def create_dds_header(self, width, height, texture_format, mip_count=0):
        fourcc = FOURCC_NAMES[texture_format]
        header = bytearray(128)
        header[0:4] = b"DDS "
        header[4:8] = (124).to_bytes(4, "little")
        flags = 0x1 | 0x2 | 0x4 | 0x1000 | 0x80000
        if mip_count > 0:
            flags |= 0x20000
        header[8:12] = flags.to_bytes(4, "little")
        header[12:16] = height.to_bytes(4, "little")
        header[16:20] = width.to_bytes(4, "little")
        header[20:24] = self.expected_size(width, height, texture_format).to_bytes(4, "little")
        header[24:28] = (0).to_bytes(4, "little")
        header[28:32] = mip_count.to_bytes(4, "little")
        header[76:80] = (32).to_bytes(4, "little")
        header[80:84] = (0x4).to_bytes(4, "little")
        header[84:88] = fourcc.encode('ascii')
        caps1 = 0x1000
        if mip_count > 0:
            caps1 |= 0x400008
        header[108:112] = caps1.to_bytes(4, "little")
        return header

    def expected_size(self, width, height, texture_format):
        block_size = 8 if texture_format == MipmapFormat.COMPRESSED_DXT1 else 16
        num_blocks_wide = max(1, (width + 3) // 4)
        num_blocks_high = max(1, (height + 3) // 4)
        return num_blocks_wide * num_blocks_high * block_size

    def decode_texture(self, texture_data, width, height, texture_format):
        if texture_format not in FOURCC_NAMES:
            raise DecompressionError(f"{texture_format.name} is not a DXT block format")
        if width == 0 or height == 0:
            return Image.new("RGBA", (width, height))
        needed = self.expected_size(width, height, texture_format)
        if len(texture_data) < needed:
            raise DecompressionError(
                f"{FOURCC_NAMES[texture_format]} payload for {width}x{height} needs {needed} bytes, "
                f"got {len(texture_data)}")
        dds_data = bytes(self.create_dds_header(width, height, texture_format)) + bytes(texture_data[:needed])
        try:
            with io.BytesIO(dds_data) as dds_file:
                img = Image.open(dds_file)
                img = img.convert("RGBA")
        except (OSError, ValueError) as e:
            raise DecompressionError(f"{FOURCC_NAMES[texture_format]} block decode failed: {e}") from e
        logger.debug("Decoded %s %dx%d into RGBA", FOURCC_NAMES[texture_format], width, height)
        return img
