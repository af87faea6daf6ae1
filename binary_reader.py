# binary_reader.py
import struct

from tex_errors import TexEncodingError, TruncatedStreamError


class BinaryReader:
    """Little-endian cursor over a seekable binary stream (file or BytesIO)."""

    U8 = struct.Struct('<B')
    U16 = struct.Struct('<H')
    U32 = struct.Struct('<I')
    I32 = struct.Struct('<i')

    def __init__(self, stream):
        self.stream = stream

    def tell(self):
        return self.stream.tell()

    def seek(self, offset):
        self.stream.seek(offset)

    def read_bytes(self, count, field=None):
        position = self.stream.tell()
        data = self.stream.read(count)
        if len(data) < count:
            raise TruncatedStreamError(count, len(data), position, field)
        return data

    def _unpack(self, fmt, field):
        return fmt.unpack(self.read_bytes(fmt.size, field))[0]

    def read_u8(self, field=None):
        return self._unpack(self.U8, field)

    def read_u16(self, field=None):
        return self._unpack(self.U16, field)

    def read_u32(self, field=None):
        return self._unpack(self.U32, field)

    def read_i32(self, field=None):
        return self._unpack(self.I32, field)

    def read_fixed_string(self, length, field=None):
        data = self.read_bytes(length, field)
        try:
            return data.decode('utf-8')
        except UnicodeDecodeError as e:
            raise TexEncodingError(f"invalid UTF-8 in {data!r}: {e.reason}", field) from e

    def read_length_prefixed_bytes(self, field=None):
        count = self.read_u32(field)
        return self.read_bytes(count, field)

    def read_length_prefixed_string(self, field=None):
        count = self.read_u32(field)
        return self.read_fixed_string(count, field)
