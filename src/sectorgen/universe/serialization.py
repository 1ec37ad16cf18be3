"""
Safe serialization for UniverseGraph.

Pickle-free container format built on msgpack.

Container format (.universe file):
    Offset  Size  Description
    0       4     Magic: b'SGEN'
    4       2     Version: 0x0001 (big-endian)
    6       4     Metadata length N (big-endian)
    10      N     msgpack payload (UniverseGraph.to_dict())
"""

from __future__ import annotations

import struct
from pathlib import Path
from typing import TYPE_CHECKING

import msgpack

from ..core.logging import get_logger

if TYPE_CHECKING:
    from .graph import UniverseGraph

logger = get_logger(__name__)

# Container format constants
MAGIC = b"SGEN"
FORMAT_VERSION = 1  # Increment when format changes incompatibly
HEADER_SIZE = 10  # 4 (magic) + 2 (version) + 4 (payload length)


class SerializationError(Exception):
    """Error during serialization or deserialization."""

    pass


def dump_universe_bytes(universe: UniverseGraph) -> bytes:
    """Encode a universe as a complete container (header + payload)."""
    payload = msgpack.packb(universe.to_dict(), use_bin_type=True)
    return MAGIC + struct.pack(">H", FORMAT_VERSION) + struct.pack(">I", len(payload)) + payload


def load_universe_bytes(data: bytes) -> UniverseGraph:
    """
    Decode a container produced by dump_universe_bytes.

    Raises:
        SerializationError: If the header is invalid or the payload is truncated
    """
    from .graph import UniverseGraph

    if len(data) < HEADER_SIZE:
        raise SerializationError(f"Truncated header: {len(data)} bytes")

    magic = data[:4]
    if magic != MAGIC:
        raise SerializationError(f"Invalid file format: expected magic {MAGIC!r}, got {magic!r}")

    version = struct.unpack(">H", data[4:6])[0]
    if version > FORMAT_VERSION:
        raise SerializationError(
            f"Unsupported format version: {version} (max supported: {FORMAT_VERSION})"
        )

    length = struct.unpack(">I", data[6:10])[0]
    payload = data[HEADER_SIZE : HEADER_SIZE + length]
    if len(payload) != length:
        raise SerializationError(f"Truncated payload: expected {length} bytes, got {len(payload)}")

    try:
        metadata = msgpack.unpackb(payload, raw=False, strict_map_key=False)
        return UniverseGraph.from_dict(metadata)
    except (ValueError, KeyError, TypeError, IndexError, msgpack.UnpackException) as e:
        raise SerializationError(f"Corrupt universe payload: {e}") from e


def save_universe_graph(universe: UniverseGraph, path: Path) -> None:
    """
    Serialize UniverseGraph to container format.

    Args:
        universe: UniverseGraph instance to serialize
        path: Output file path (should use .universe extension)

    Raises:
        SerializationError: If serialization fails
    """
    try:
        data = dump_universe_bytes(universe)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "wb") as f:
            f.write(data)
    except (OSError, TypeError, ValueError) as e:
        raise SerializationError(f"Failed to save universe graph: {e}") from e

    logger.debug("Saved universe graph: %d bytes to %s", len(data), path)


def load_universe_graph(path: Path) -> UniverseGraph:
    """
    Deserialize UniverseGraph from container format.

    Raises:
        SerializationError: If the file is unreadable, invalid or unsupported
    """
    try:
        with open(path, "rb") as f:
            data = f.read()
    except OSError as e:
        raise SerializationError(f"Failed to load universe graph: {e}") from e

    return load_universe_bytes(data)


def detect_format(path: Path) -> str:
    """
    Detect file format by magic bytes.

    Returns:
        "universe" for the container format, "unknown" otherwise

    Raises:
        SerializationError: If the file is unreadable
    """
    try:
        with open(path, "rb") as f:
            magic = f.read(4)
    except OSError as e:
        raise SerializationError(f"Cannot detect format for {path}: {e}") from e
    return "universe" if magic == MAGIC else "unknown"
