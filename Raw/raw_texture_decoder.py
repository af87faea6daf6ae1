# Raw/raw_texture_decoder.py
import numpy as np
from PIL import Image
from tex_errors import DecompressionError
from tex_formats import MipmapFormat, bytes_per_pixel
from texture_decoder import TextureDecoder

class RawTextureDecoder(TextureDecoder):
    """Expands uncompressed RGBA8888, RG88 and R8 payloads into RGBA."""

    FORMATS = (MipmapFormat.RGBA8888, MipmapFormat.RG88, MipmapFormat.R8)

    def expected_size(self, width, height, texture_format):
        return width * height * bytes_per_pixel(texture_format)

    @staticmethod
    def expand_r8(pixels):
        # single channel -> grey, opaque
        image = np.empty(pixels.shape + (4,), dtype=np.uint8)
        image[..., 0] = pixels
        image[..., 1] = pixels
        image[..., 2] = pixels
        image[..., 3] = 255
        return image

    @staticmethod
    def expand_rg88(pixels):
        # first byte is coverage, second byte is luminance
        image = np.empty(pixels.shape[:2] + (4,), dtype=np.uint8)
        image[..., 0] = pixels[..., 1]
        image[..., 1] = pixels[..., 1]
        image[..., 2] = pixels[..., 1]
        image[..., 3] = pixels[..., 0]
        return image

    def decode_texture(self, texture_data, width, height, texture_format):
        if texture_format not in self.FORMATS:
            raise DecompressionError(f"{texture_format.name} is not an uncompressed pixel format")
        if width == 0 or height == 0:
            return Image.new("RGBA", (width, height))
        needed = self.expected_size(width, height, texture_format)
        if len(texture_data) < needed:
            raise DecompressionError(
                f"{texture_format.name} payload for {width}x{height} needs {needed} bytes, "
                f"got {len(texture_data)}")
        pixels = np.frombuffer(texture_data, dtype=np.uint8, count=needed)
        if texture_format == MipmapFormat.RGBA8888:
            image = pixels.reshape((height, width, 4))
        elif texture_format == MipmapFormat.RG88:
            image = self.expand_rg88(pixels.reshape((height, width, 2)))
        else:
            image = self.expand_r8(pixels.reshape((height, width)))
        return Image.fromarray(np.ascontiguousarray(image))
