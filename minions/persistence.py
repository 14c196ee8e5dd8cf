"""
World Snapshots

A snapshot is everything needed to resume a run bit-for-bit: the config,
the random generator's state, every organism, the lineage registry and
the physics collaborator's bodies.

FILE FORMAT:
    MAGIC_HEADER + gzip(JSON document)

The JSON document carries its format version and a SHA-256 checksum of
its payload; both are verified on load.
"""

import gzip
import hashlib
import json
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Union

import numpy as np
import structlog

from .errors import SnapshotError

logger = structlog.get_logger(__name__)


# =============================================================================
# SNAPSHOT FORMAT
# =============================================================================

SNAPSHOT_VERSION = "1.0.0"
MAGIC_HEADER = b"MINIONS_WORLD_V1"

REQUIRED_KEYS = ('config', 'world', 'physics')


def compute_checksum(payload: Dict) -> str:
    """Checksum of a payload, independent of key order."""
    json_str = json.dumps(payload, sort_keys=True, default=_json_serializer)
    return hashlib.sha256(json_str.encode('utf-8')).hexdigest()


def _json_serializer(obj):
    """JSON serializer for numpy scalars and arrays."""
    if isinstance(obj, np.ndarray):
        return obj.tolist()
    if isinstance(obj, np.integer):
        return int(obj)
    if isinstance(obj, np.floating):
        return float(obj)
    if isinstance(obj, np.bool_):
        return bool(obj)
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")


def encode_snapshot(payload: Dict[str, Any]) -> bytes:
    """Wrap a payload into the on-disk snapshot format."""
    missing = [k for k in REQUIRED_KEYS if k not in payload]
    if missing:
        raise SnapshotError(f"Snapshot payload is missing {', '.join(missing)}")

    document = {
        'version': SNAPSHOT_VERSION,
        'saved_at': datetime.now().isoformat(),
        'checksum': compute_checksum(payload),
        'payload': payload,
    }
    json_str = json.dumps(document, default=_json_serializer)
    return MAGIC_HEADER + gzip.compress(json_str.encode('utf-8'))


def decode_snapshot(data: bytes) -> Dict[str, Any]:
    """
    Unwrap and verify a snapshot.

    Raises:
        SnapshotError: bad header, undecodable body, incompatible version,
            checksum mismatch or missing sections
    """
    if not data.startswith(MAGIC_HEADER):
        raise SnapshotError("Not a minions world snapshot (bad magic header)")

    try:
        document = json.loads(gzip.decompress(data[len(MAGIC_HEADER):]).decode('utf-8'))
    except (OSError, EOFError, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise SnapshotError(f"Snapshot body is corrupt: {e}") from e

    version = document.get('version', '0.0.0')
    if not _check_version_compatible(version):
        raise SnapshotError(f"Incompatible snapshot version: {version}")

    payload = document.get('payload')
    if not isinstance(payload, dict):
        raise SnapshotError("Snapshot has no payload")
    if document.get('checksum') != compute_checksum(payload):
        raise SnapshotError("Snapshot checksum mismatch - data may be corrupted")

    missing = [k for k in REQUIRED_KEYS if k not in payload]
    if missing:
        raise SnapshotError(f"Snapshot is missing {', '.join(missing)}")
    return payload


def _check_version_compatible(version: str) -> bool:
    """Same major version only."""
    try:
        major = int(str(version).split('.')[0])
    except ValueError:
        return False
    return major == int(SNAPSHOT_VERSION.split('.')[0])


# =============================================================================
# FILE I/O HELPERS
# =============================================================================

def save_snapshot(payload: Dict[str, Any], filepath: Union[str, Path]) -> Path:
    """
    Write a snapshot to a file.

    Returns:
        Path to the saved file
    """
    filepath = Path(filepath)
    if filepath.parent and not filepath.parent.exists():
        filepath.parent.mkdir(parents=True, exist_ok=True)
    filepath.write_bytes(encode_snapshot(payload))
    logger.info("snapshot_saved", path=str(filepath),
                tick=payload.get('world', {}).get('tick'))
    return filepath


def load_snapshot(filepath: Union[str, Path]) -> Dict[str, Any]:
    """Read and verify a snapshot file. Returns its payload."""
    filepath = Path(filepath)
    try:
        data = filepath.read_bytes()
    except OSError as e:
        raise SnapshotError(f"Cannot read snapshot {filepath}: {e}") from e

    payload = decode_snapshot(data)
    logger.info("snapshot_loaded", path=str(filepath),
                tick=payload.get('world', {}).get('tick'))
    return payload


__all__ = [
    'SNAPSHOT_VERSION',
    'MAGIC_HEADER',
    'compute_checksum',
    'encode_snapshot',
    'decode_snapshot',
    'save_snapshot',
    'load_snapshot',
]
