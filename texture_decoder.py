# texture_decoder.py
from abc import ABC, abstractmethod
from tex_errors import DecompressionError

class TextureDecoder(ABC):
    @abstractmethod
    def decode_texture(self, texture_data, width, height, texture_format):
        """Decode mipmap bytes in texture_format and return an RGBA PIL Image."""
        pass

    @abstractmethod
    def expected_size(self, width, height, texture_format):
        """Return the number of payload bytes a width x height mipmap needs."""
        pass

    def decode_to_rgba(self, texture_data, width, height, texture_format):
        img = self.decode_texture(texture_data, width, height, texture_format)
        if img.mode != "RGBA":
            img = img.convert("RGBA")
        return img.tobytes()


def decoder_for(texture_format):
    """Return the decoder able to turn texture_format payloads into RGBA."""
    from DXT.dxt_texture_decoder import DXTTextureDecoder
    from Raw.raw_texture_decoder import RawTextureDecoder

    if texture_format.is_block_compressed:
        return DXTTextureDecoder()
    if texture_format in RawTextureDecoder.FORMATS:
        return RawTextureDecoder()
    raise DecompressionError(f"no pixel decoder for {texture_format.name}", "format")
