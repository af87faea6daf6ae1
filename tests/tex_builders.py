"""Builders for synthetic PKG/TEX byte streams used across the tests"""

import struct

import lz4.block

RED_DXT1_BLOCK = struct.pack('<HHI', 0xF800, 0x001F, 0x00000000)
BLUE_DXT1_BLOCK = struct.pack('<HHI', 0xF800, 0x001F, 0x55555555)


def magic(text):
    return text.encode('ascii') + b'\x00'


def header(fmt=0, flags=0, texture_width=4, texture_height=4,
           image_width=4, image_height=4, unk_int0=0):
    return struct.pack('<Ii4Ii', fmt, flags, texture_width, texture_height,
                       image_width, image_height, unk_int0)


def mipmap_v1(width, height, data):
    return struct.pack('<III', width, height, len(data)) + data


def mipmap_v2(width, height, data, compressed=False, decompressed_count=None, flag=None):
    if flag is None:
        flag = 1 if compressed else 0
    if decompressed_count is None:
        decompressed_count = len(data)
    payload = lz4.block.compress(data, store_size=False) if compressed else data
    return struct.pack('<IIIII', width, height, flag, decompressed_count, len(payload)) + payload


def container(version, images, image_format=-1, magic_text=None):
    """images is a list of lists of already-encoded mipmap records"""
    out = magic(magic_text or f"TEXB000{version}")
    out += struct.pack('<I', len(images))
    if version == 3:
        out += struct.pack('<i', image_format)
    for mipmaps in images:
        out += struct.pack('<I', len(mipmaps))
        out += b''.join(mipmaps)
    return out


def texture(container_bytes, **header_fields):
    return magic("TEXV0005") + magic("TEXI0001") + header(**header_fields) + container_bytes


def simple_texture(data=b'\x01\x02\x03\x04', width=1, height=1, **header_fields):
    """Minimal valid TEXB0002 texture with one uncompressed mipmap"""
    header_fields.setdefault('texture_width', width)
    header_fields.setdefault('texture_height', height)
    header_fields.setdefault('image_width', width)
    header_fields.setdefault('image_height', height)
    return texture(container(2, [[mipmap_v2(width, height, data)]]), **header_fields)


def length_prefixed(text):
    data = text.encode('utf-8')
    return struct.pack('<I', len(data)) + data


def package(files, magic_text="PKGV0019"):
    """files is a list of (path, bytes); returns the complete .pkg image"""
    index = length_prefixed(magic_text) + struct.pack('<i', len(files))
    blob = b''
    for path, data in files:
        index += length_prefixed(path) + struct.pack('<II', len(blob), len(data))
        blob += data
    return index + blob
