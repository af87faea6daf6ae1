import io
import struct

import pytest

from binary_reader import BinaryReader
from pkg_reader import PackageEntry, read_package
from record_types import ENTRY_TYPE_BINARY, ENTRY_TYPE_TEX
from tex_errors import PackageError, TruncatedStreamError
import tex_builders as tb


def open_package(data):
    reader = BinaryReader(io.BytesIO(data))
    return reader, read_package(reader)


def test_index_and_origin():
    files = [("scene.json", b'{"camera": {}}'), ("materials/sky.tex", b'texture bytes')]
    data = tb.package(files)
    reader, package = open_package(data)

    assert package.magic == "PKGV0019"
    assert [e.full_path for e in package.entries] == ["scene.json", "materials/sky.tex"]
    assert package.origin == len(data) - sum(len(blob) for _, blob in files)
    assert reader.tell() == package.origin
    assert [e.name for e in package.textures] == ["sky"]


def test_entry_bytes_are_relative_to_origin():
    files = [("a.bin", b'AAAA'), ("b.bin", b'BBBBBB')]
    reader, package = open_package(tb.package(files))
    assert package.read_entry_bytes(reader, package.entries[1]) == b'BBBBBB'
    assert package.read_entry_bytes(reader, package.entries[0]) == b'AAAA'


def test_entry_kinds():
    assert PackageEntry("models/x.TEX", 0, 0).entry_type == ENTRY_TYPE_TEX
    assert PackageEntry("shaders/x.frag", 0, 0).entry_type == ENTRY_TYPE_BINARY
    assert PackageEntry("README", 0, 0).extension == ""


def test_empty_package():
    reader, package = open_package(tb.package([]))
    assert package.entries == []
    assert package.textures == []


def test_negative_entry_count():
    data = tb.length_prefixed("PKGV0001") + struct.pack('<i', -1)
    with pytest.raises(PackageError):
        open_package(data)


def test_oversized_magic_length():
    with pytest.raises(PackageError):
        open_package(struct.pack('<I', 4096) + b'PKGV')


def test_truncated_index_names_entry():
    data = tb.package([("a.bin", b'AAAA'), ("b.bin", b'BB')])
    index_end = len(data) - 6
    with pytest.raises(TruncatedStreamError) as excinfo:
        open_package(data[:index_end - 3])
    assert str(excinfo.value).startswith("entry 1: length:")


def test_entry_past_end_of_file():
    data = tb.package([("a.bin", b'AAAA')])
    reader, package = open_package(data[:-1])
    with pytest.raises(TruncatedStreamError) as excinfo:
        package.read_entry_bytes(reader, package.entries[0])
    assert "entry a.bin" in str(excinfo.value)
