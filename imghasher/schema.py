"""
Hash schemas - data models shared by the hashers and the CLI.

ChannelHashSet is what compute_channel_hashes() returns; HashRecord and
CompareResult are the JSON lines the CLI prints.
"""

from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

HASH_MAX = (1 << 64) - 1


class ChannelHashSet(BaseModel):
    """Independent 64-bit dHashes for the red, green and blue channels."""

    model_config = ConfigDict(frozen=True)

    r: int = Field(..., ge=0, le=HASH_MAX, description="dHash of the red channel")
    g: int = Field(..., ge=0, le=HASH_MAX, description="dHash of the green channel")
    b: int = Field(..., ge=0, le=HASH_MAX, description="dHash of the blue channel")

    def as_dict(self) -> Dict[str, int]:
        return {"r": self.r, "g": self.g, "b": self.b}

    def __getitem__(self, channel: str) -> int:
        if channel not in ("r", "g", "b"):
            raise KeyError(channel)
        return getattr(self, channel)


class HashRecord(BaseModel):
    """dHash of a single image file."""

    file_path: str = Field(..., description="Source path as given on the command line")
    width: int = Field(..., description="Source width in pixels")
    height: int = Field(..., description="Source height in pixels")
    dhash: int = Field(..., ge=0, le=HASH_MAX, description="Grayscale dHash")
    dhash_hex: str = Field(..., description="Grayscale dHash as 16 hex digits")
    rgb: Optional[ChannelHashSet] = Field(None, description="Per-channel dHashes")


class CompareResult(BaseModel):
    """Distance between two images or hashes."""

    left: str
    right: str
    distance: int = Field(..., ge=0, le=64, description="Hamming distance in bits")
    similarity: float = Field(..., ge=0.0, le=100.0, description="Percent of matching bits")
    is_duplicate: bool
    threshold: int
