import pytest

from DXT.dxt_texture_decoder import DXTTextureDecoder
from Raw.raw_texture_decoder import RawTextureDecoder
from tex_errors import DecompressionError
from tex_formats import MipmapFormat
from texture_decoder import decoder_for
import tex_builders as tb


def test_decoder_selection():
    assert isinstance(decoder_for(MipmapFormat.COMPRESSED_DXT5), DXTTextureDecoder)
    assert isinstance(decoder_for(MipmapFormat.R8), RawTextureDecoder)
    with pytest.raises(DecompressionError):
        decoder_for(MipmapFormat.IMAGE_PNG)


class TestRaw:
    decoder = RawTextureDecoder()

    def test_rgba_passthrough(self):
        data = bytes(range(16))
        img = self.decoder.decode_texture(data, 2, 2, MipmapFormat.RGBA8888)
        assert img.mode == "RGBA"
        assert img.size == (2, 2)
        assert img.tobytes() == data

    def test_r8_is_grey_and_opaque(self):
        rgba = self.decoder.decode_to_rgba(b'\x10\x80', 2, 1, MipmapFormat.R8)
        assert rgba == bytes([0x10, 0x10, 0x10, 255, 0x80, 0x80, 0x80, 255])

    def test_rg88_uses_second_byte_as_luminance(self):
        rgba = self.decoder.decode_to_rgba(b'\x40\xc0', 1, 1, MipmapFormat.RG88)
        assert rgba == bytes([0xc0, 0xc0, 0xc0, 0x40])

    def test_short_payload(self):
        with pytest.raises(DecompressionError):
            self.decoder.decode_texture(b'\x00' * 7, 2, 2, MipmapFormat.RG88)

    def test_trailing_bytes_are_ignored(self):
        img = self.decoder.decode_texture(b'\x01\x02\x03', 1, 1, MipmapFormat.R8)
        assert img.getpixel((0, 0)) == (1, 1, 1, 255)

    def test_zero_sized_mipmap(self):
        assert self.decoder.decode_to_rgba(b'', 0, 4, MipmapFormat.RGBA8888) == b''


class TestDXT:
    decoder = DXTTextureDecoder()

    @pytest.mark.parametrize("fmt, width, height, size", [
        (MipmapFormat.COMPRESSED_DXT1, 4, 4, 8),
        (MipmapFormat.COMPRESSED_DXT1, 1, 1, 8),
        (MipmapFormat.COMPRESSED_DXT1, 5, 4, 16),
        (MipmapFormat.COMPRESSED_DXT5, 8, 8, 64),
        (MipmapFormat.COMPRESSED_DXT3, 2, 6, 32),
    ])
    def test_expected_size(self, fmt, width, height, size):
        assert self.decoder.expected_size(width, height, fmt) == size

    def test_dds_header_layout(self):
        header = self.decoder.create_dds_header(8, 4, MipmapFormat.COMPRESSED_DXT5)
        assert len(header) == 128
        assert header[:4] == b"DDS "
        assert header[84:88] == b"DXT5"
        assert int.from_bytes(header[12:16], "little") == 4
        assert int.from_bytes(header[16:20], "little") == 8

    def test_partial_block_is_clipped(self):
        img = self.decoder.decode_texture(tb.RED_DXT1_BLOCK, 2, 3, MipmapFormat.COMPRESSED_DXT1)
        assert img.size == (2, 3)
        assert img.getpixel((1, 2)) == (255, 0, 0, 255)

    def test_short_payload(self):
        with pytest.raises(DecompressionError):
            self.decoder.decode_texture(b'\x00' * 15, 4, 4, MipmapFormat.COMPRESSED_DXT5)

    def test_non_block_format(self):
        with pytest.raises(DecompressionError):
            self.decoder.decode_texture(b'\x00' * 64, 4, 4, MipmapFormat.RGBA8888)
