# pkg_reader.py
"""
Index reader for Wallpaper Engine scene packages (.pkg).

    string   version magic (u32 length + UTF-8, e.g. "PKGV0019")
    u32      entry count
    entry[]  string path, u32 offset, u32 length

Entry offsets are relative to the first byte after the index (the origin).
"""

import logging
from dataclasses import dataclass, field
from pathlib import PurePosixPath
from typing import List

from record_types import ENTRY_TYPE_BINARY, ENTRY_TYPE_TEX, TEX_EXTENSION
from tex_errors import PackageError, TexError

logger = logging.getLogger(__name__)

MAX_PATH_LENGTH = 255
MAX_MAGIC_LENGTH = 32


@dataclass(frozen=True)
class PackageEntry:
    full_path: str
    offset: int
    length: int

    @property
    def name(self):
        return PurePosixPath(self.full_path).stem

    @property
    def extension(self):
        return PurePosixPath(self.full_path).suffix

    @property
    def entry_type(self):
        if self.extension.lower() == TEX_EXTENSION:
            return ENTRY_TYPE_TEX
        return ENTRY_TYPE_BINARY


@dataclass
class Package:
    magic: str
    origin: int
    entries: List[PackageEntry] = field(default_factory=list)

    @property
    def textures(self):
        return [entry for entry in self.entries if entry.entry_type == ENTRY_TYPE_TEX]

    def open_entry(self, reader, entry):
        """Position reader at the first byte of entry and return it."""
        reader.seek(self.origin + entry.offset)
        return reader

    def read_entry_bytes(self, reader, entry):
        self.open_entry(reader, entry)
        try:
            return reader.read_bytes(entry.length, "entry data")
        except TexError as e:
            raise e.located(f"entry {entry.full_path}")


def read_package(reader):
    """Read the package index; the reader is left at the data origin."""
    magic_length = reader.read_u32("magic")
    if magic_length > MAX_MAGIC_LENGTH:
        raise PackageError(f"package magic length {magic_length} is implausible", "magic")
    magic = reader.read_fixed_string(magic_length, "magic")

    entry_count = reader.read_i32("entry_count")
    if entry_count < 0:
        raise PackageError(f"negative entry count {entry_count}", "entry_count")

    entries = []
    for index in range(entry_count):
        try:
            path_length = reader.read_u32("path")
            if path_length > MAX_PATH_LENGTH:
                raise PackageError(f"path length {path_length} exceeds {MAX_PATH_LENGTH}", "path")
            full_path = reader.read_fixed_string(path_length, "path")
            offset = reader.read_u32("offset")
            length = reader.read_u32("length")
        except TexError as e:
            raise e.located(f"entry {index}")
        entries.append(PackageEntry(full_path, offset, length))

    origin = reader.tell()
    logger.debug("%s: %d entries, data origin 0x%X", magic, len(entries), origin)
    return Package(magic=magic, origin=origin, entries=entries)
