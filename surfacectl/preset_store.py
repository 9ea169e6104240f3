"""Preset slots persisted as an append-only record log in a flash area."""

from __future__ import annotations

import copy
import logging
import struct
import zlib
from dataclasses import dataclass
from enum import IntEnum
from typing import Dict, Optional, Protocol, Tuple

from .errors import InvalidArgumentError, NotInitializedError, NotReadyError, StorageError
from .presets import SNAPSHOT_SIZE, PresetSnapshot, default_preset_snapshot

log = logging.getLogger(__name__)

PRESET_COUNT = 128
"""Number of preset slots."""

PRESET_MAGIC = 0x31525042
PRESET_FORMAT_VERSION = 5

_WRITE_SCRATCH_SIZE = 256
_HEADER = struct.Struct("<IHBB")
_CRC = struct.Struct("<I")

RECORD_SIZE = _HEADER.size + SNAPSHOT_SIZE + _CRC.size
"""Unpadded size of one log record in bytes."""


class RecordType(IntEnum):
    PRESET_SNAPSHOT = 0
    ACTIVE_PRESET = 1


class FlashArea(Protocol):
    """A flash region addressed from offset 0."""

    size: int
    alignment: int
    erased_value: int
    ready: bool

    def read(self, offset: int, length: int) -> bytes: ...

    def write(self, offset: int, data: bytes) -> None: ...

    def erase(self, offset: int, length: int) -> None: ...


class MemoryFlashArea:
    """A flash area held in memory, with write alignment and erase semantics."""

    def __init__(self, size: int = 8192, alignment: int = 8, erased_value: int = 0xFF) -> None:
        if size <= 0:
            raise InvalidArgumentError(f"invalid flash size {size}")
        if alignment <= 0:
            raise InvalidArgumentError(f"invalid write alignment {alignment}")
        if not 0 <= erased_value <= 0xFF:
            raise InvalidArgumentError(f"invalid erased value {erased_value}")
        self.size = size
        self.alignment = alignment
        self.erased_value = erased_value
        self.ready = True
        self._data = bytearray([erased_value]) * size

    def _check_range(self, offset: int, length: int) -> None:
        if offset < 0 or length < 0 or offset + length > self.size:
            raise InvalidArgumentError(
                f"range {offset}+{length} lies outside the {self.size}-byte area"
            )

    def read(self, offset: int, length: int) -> bytes:
        """Return ``length`` bytes starting at ``offset``."""
        self._check_range(offset, length)
        return bytes(self._data[offset:offset + length])

    def write(self, offset: int, data: bytes) -> None:
        """Program bytes at an aligned offset; the length must be aligned too."""
        self._check_range(offset, len(data))
        if offset % self.alignment or len(data) % self.alignment:
            raise InvalidArgumentError(
                f"write of {len(data)} bytes at {offset} is not {self.alignment}-byte aligned"
            )
        self._data[offset:offset + len(data)] = data

    def erase(self, offset: int, length: int) -> None:
        """Reset a range to the erased value."""
        self._check_range(offset, length)
        self._data[offset:offset + length] = bytes([self.erased_value]) * length


@dataclass(frozen=True)
class _Record:
    record_type: RecordType
    record_value: int
    snapshot: bytes = bytes(SNAPSHOT_SIZE)

    def encode(self) -> bytes:
        body = (
            _HEADER.pack(
                PRESET_MAGIC, PRESET_FORMAT_VERSION, int(self.record_type), self.record_value
            )
            + self.snapshot
        )
        return body + _CRC.pack(zlib.crc32(body))


def _decode_record(raw: bytes) -> Optional[_Record]:
    magic, version, record_type, value = _HEADER.unpack_from(raw)
    if magic != PRESET_MAGIC or version != PRESET_FORMAT_VERSION:
        return None
    if record_type not in (RecordType.PRESET_SNAPSHOT, RecordType.ACTIVE_PRESET):
        return None
    if value >= PRESET_COUNT:
        return None
    body_size = RECORD_SIZE - _CRC.size
    (crc,) = _CRC.unpack_from(raw, body_size)
    if zlib.crc32(raw[:body_size]) != crc:
        return None
    return _Record(RecordType(record_type), value, bytes(raw[_HEADER.size:body_size]))


class PresetStore:
    """Caches the preset log of a flash area and appends every change to it."""

    def __init__(self, flash: FlashArea) -> None:
        self._flash = flash
        self._initialized = False
        self._reset_cache()

    def _reset_cache(self) -> None:
        self._presets: Dict[int, PresetSnapshot] = {}
        self._active: Optional[int] = None
        self._next_offset = 0
        self._needs_compaction = False

    def _storage_size(self) -> int:
        alignment = self._flash.alignment
        if alignment <= 0:
            raise StorageError(f"unsupported flash alignment {alignment}")
        return -(-RECORD_SIZE // alignment) * alignment

    def init(self) -> None:
        """Load the preset log from flash into the cache."""
        self._initialized = False
        flash = self._flash

        if not flash.ready:
            log.error("Preset partition device is not ready")
            raise NotReadyError("preset partition device is not ready")

        storage_size = self._storage_size()
        if storage_size > flash.size:
            log.error("Preset record size is invalid for partition")
            raise StorageError("preset records do not fit in the partition")

        self._reset_cache()
        erased = bytes([flash.erased_value]) * RECORD_SIZE

        for offset in range(0, flash.size - storage_size + 1, storage_size):
            try:
                raw = flash.read(offset, RECORD_SIZE)
            except Exception as exc:
                log.error("Failed to read preset record at offset %u: %s", offset, exc)
                raise

            if raw == erased:
                self._next_offset = offset
                self._initialized = True
                log.info("Loaded preset log from flash")
                return

            record = _decode_record(raw)
            if record is None:
                self._needs_compaction = True
                self._next_offset = flash.size
                log.warning("Preset log contains invalid data, compacting on next save")
                self._initialized = True
                return

            if record.record_type is RecordType.PRESET_SNAPSHOT:
                self._presets[record.record_value] = PresetSnapshot.from_bytes(record.snapshot)
            else:
                self._active = record.record_value

        self._next_offset = flash.size
        self._needs_compaction = True
        log.info("Preset log is full, compaction will run on next save")
        self._initialized = True

    def _require_initialized(self) -> None:
        if not self._initialized:
            raise NotInitializedError("preset store not initialized")

    @staticmethod
    def _check_index(index: int) -> None:
        if not 0 <= index < PRESET_COUNT:
            raise InvalidArgumentError(f"invalid preset index {index}")

    def load_preset(self, index: int) -> Tuple[PresetSnapshot, bool]:
        """Return the snapshot of one slot and whether it was ever saved.

        Empty slots yield the default snapshot.
        """
        self._require_initialized()
        self._check_index(index)
        snapshot = self._presets.get(index)
        if snapshot is None:
            return default_preset_snapshot(), False
        return copy.deepcopy(snapshot), True

    def load_active_preset(self) -> Tuple[int, bool]:
        """Return the saved active preset index, or ``(0, False)`` if none was saved."""
        self._require_initialized()
        if self._active is None:
            return 0, False
        return self._active, True

    def _write_record(self, offset: int, record: _Record) -> None:
        alignment = self._flash.alignment
        storage_size = self._storage_size()
        if alignment > _WRITE_SCRATCH_SIZE or storage_size > _WRITE_SCRATCH_SIZE:
            raise StorageError(f"unsupported flash alignment {alignment}")
        data = record.encode()
        padding = bytes([self._flash.erased_value]) * (storage_size - len(data))
        self._flash.write(offset, data + padding)

    def _append(self, record: _Record) -> None:
        self._write_record(self._next_offset, record)
        self._next_offset += self._storage_size()

    def _compact(self) -> None:
        self._flash.erase(0, self._flash.size)
        self._next_offset = 0
        self._needs_compaction = False

        for index in sorted(self._presets):
            self._append(
                _Record(RecordType.PRESET_SNAPSHOT, index, self._presets[index].to_bytes())
            )

        if self._active is not None:
            self._append(_Record(RecordType.ACTIVE_PRESET, self._active))

    def _make_room(self) -> None:
        has_space = self._next_offset + self._storage_size() <= self._flash.size
        if self._needs_compaction or not has_space:
            try:
                self._compact()
            except Exception as exc:
                log.error("Failed to compact preset log: %s", exc)
                raise

    def save_preset(self, index: int, snapshot: PresetSnapshot) -> None:
        """Store a snapshot in one slot and append it to the log."""
        self._require_initialized()
        self._check_index(index)

        data = snapshot.to_bytes()
        self._presets[index] = PresetSnapshot.from_bytes(data)

        self._make_room()
        try:
            self._append(_Record(RecordType.PRESET_SNAPSHOT, index, data))
        except Exception as exc:
            log.error("Failed to append preset record: %s", exc)
            raise

    def save_active_preset(self, index: int) -> None:
        """Record which preset is active; nothing is written if it is unchanged."""
        self._require_initialized()
        self._check_index(index)

        if self._active == index:
            return
        self._active = index

        self._make_room()
        try:
            self._append(_Record(RecordType.ACTIVE_PRESET, index))
        except Exception as exc:
            log.error("Failed to append active preset record: %s", exc)
            raise