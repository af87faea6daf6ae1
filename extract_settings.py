"""Settings for batch extraction of PKG archives"""

import json
from dataclasses import dataclass, asdict, fields
from multiprocessing import cpu_count
from pathlib import Path


@dataclass
class ExtractSettings:
    """Configuration for extracting textures (and optionally raw files) from a PKG"""

    output_dir: str = "."

    # Decode DXT blocks to RGBA while reading; False keeps the compressed tag and bytes
    decode_blocks: bool = True

    # Which image/mipmap of each texture gets exported
    image_index: int = 0
    mipmap_index: int = 0

    # Also write non-texture entries verbatim
    extract_binary: bool = False
    overwrite: bool = False

    # Performance settings
    enable_parallel: bool = False
    max_workers: int = max(1, cpu_count() - 1)

    log_level: str = "INFO"

    def to_dict(self) -> dict:
        """Convert settings to dictionary for multiprocessing"""
        return asdict(self)

    @classmethod
    def from_dict(cls, settings_dict: dict) -> "ExtractSettings":
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(settings_dict) - known)
        if unknown:
            raise ValueError(f"Unknown settings: {', '.join(unknown)}")
        return cls(**settings_dict)


def load_settings(path) -> ExtractSettings:
    """Load settings from a JSON file; missing keys keep their defaults."""
    with open(Path(path), 'r', encoding='utf-8') as f:
        settings_dict = json.load(f)
    if not isinstance(settings_dict, dict):
        raise ValueError(f"Settings file {path} must contain a JSON object")
    return ExtractSettings.from_dict(settings_dict)
