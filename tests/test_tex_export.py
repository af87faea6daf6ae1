import io

import pytest
from PIL import Image

from binary_reader import BinaryReader
from tex_export import mipmap_to_image, output_extension, save_texture
from tex_formats import FreeImageFormat, TexFormat
from tex_reader import read_texture
import tex_builders as tb


def encoded_image(fmt, color=(0, 128, 255), size=(3, 2)):
    buffer = io.BytesIO()
    Image.new("RGB", size, color).save(buffer, fmt)
    return buffer.getvalue()


def codec_texture(data, image_format, name="codec"):
    body = tb.texture(tb.container(3, [[tb.mipmap_v2(3, 2, data)]], image_format=image_format),
                      fmt=TexFormat.RGBA8888)
    return read_texture(BinaryReader(io.BytesIO(body)), name)


def pixel_texture(data, width, height, fmt, name="pixels"):
    body = tb.texture(tb.container(2, [[tb.mipmap_v2(width, height, data)]]), fmt=fmt)
    return read_texture(BinaryReader(io.BytesIO(body)), name)


def test_rgba_texture_is_saved_as_png(tmp_path):
    data = bytes([255, 0, 0, 255, 0, 255, 0, 128])
    texture = pixel_texture(data, 2, 1, TexFormat.RGBA8888, name="two")
    path = save_texture(texture, tmp_path)
    assert path == tmp_path / "two.png"
    with Image.open(path) as img:
        assert img.format == "PNG"
        assert img.mode == "RGBA"
        assert img.tobytes() == data


def test_r8_texture_is_expanded(tmp_path):
    texture = pixel_texture(b'\x20', 1, 1, TexFormat.R8)
    path = save_texture(texture, tmp_path / "nested" / "dir")
    with Image.open(path) as img:
        assert img.convert("RGBA").getpixel((0, 0)) == (0x20, 0x20, 0x20, 255)


def test_dxt_texture_exports_decoded_pixels(tmp_path):
    texture = pixel_texture(tb.RED_DXT1_BLOCK, 4, 4, TexFormat.DXT1, name="red")
    path = save_texture(texture, tmp_path)
    with Image.open(path) as img:
        assert img.size == (4, 4)
        assert img.getpixel((3, 3)) == (255, 0, 0, 255)


@pytest.mark.parametrize("pil_format, image_format, extension", [
    ("PNG", FreeImageFormat.PNG, "png"),
    ("JPEG", FreeImageFormat.JPEG, "jpg"),
    ("BMP", FreeImageFormat.BMP, "bmp"),
])
def test_codec_bytes_are_written_unchanged(tmp_path, pil_format, image_format, extension):
    data = encoded_image(pil_format)
    texture = codec_texture(data, image_format)
    assert output_extension(texture) == extension
    path = save_texture(texture, tmp_path)
    assert path.name == f"codec.{extension}"
    assert path.read_bytes() == data


def test_codec_image_is_opened_by_pillow():
    texture = codec_texture(encoded_image("PNG", color=(1, 2, 3)), FreeImageFormat.PNG)
    img = mipmap_to_image(texture.mipmap())
    assert img.size == (3, 2)
    assert img.convert("RGB").getpixel((0, 0)) == (1, 2, 3)


def test_mp4_payload_keeps_video_extension(tmp_path):
    payload = b'\x00\x00\x00\x18ftypmp42' + b'\x00' * 16
    texture = codec_texture(payload, FreeImageFormat.MP4, name="clip")
    path = save_texture(texture, tmp_path)
    assert path.name == "clip.mp4"
    assert path.read_bytes() == payload


def test_existing_file_is_kept_without_overwrite(tmp_path):
    texture = pixel_texture(b'\x01\x02\x03\x04', 1, 1, TexFormat.RGBA8888, name="keep")
    existing = tmp_path / "keep.png"
    existing.write_bytes(b'old')
    assert save_texture(texture, tmp_path, overwrite=False) == existing
    assert existing.read_bytes() == b'old'

    save_texture(texture, tmp_path, overwrite=True)
    assert existing.read_bytes() != b'old'


def test_missing_mipmap_index(tmp_path):
    texture = pixel_texture(b'\x01\x02\x03\x04', 1, 1, TexFormat.RGBA8888)
    with pytest.raises(IndexError):
        save_texture(texture, tmp_path, mipmap_index=3)
