"""Sequential ZIP container reader.

A ``.docx`` file is a ZIP archive.  Instead of consulting the central
directory at the end of the archive, :class:`ContainerReader` walks the
local file headers from the start of the buffer, record by record, until
it meets the requested entry.  Only the two compression methods Office
ever writes are supported: STORE (0) and DEFLATE (8).

Local file header layout (little-endian, 30 bytes before the name)::

    signature  version  flags  method  time  date  crc32  csize  usize  name_len  extra_len
    4          2        2      2       2     2     4      4      4      2         2
"""

from __future__ import annotations

import logging
import struct
import zlib
from dataclasses import dataclass
from enum import IntEnum
from typing import Iterator, Union

from docx2html.errors import (
    ContainerEntryCorrupt,
    EntryNotFound,
    InvalidContainerFormat,
    UnsupportedCompressionMethod,
)

logger = logging.getLogger(__name__)

BytesLike = Union[bytes, bytearray, memoryview]

ZIP_MAGIC = b"PK"
LOCAL_HEADER_SIGNATURE = b"PK\x03\x04"
CENTRAL_HEADER_SIGNATURE = b"PK\x01\x02"
END_OF_CENTRAL_DIR_SIGNATURE = b"PK\x05\x06"
DATA_DESCRIPTOR_SIGNATURE = b"PK\x07\x08"

_LOCAL_HEADER = struct.Struct("<4sHHHHHIIIHH")
_DESCRIPTOR = struct.Struct("<III")

_FLAG_DATA_DESCRIPTOR = 0x0008
_FLAG_UTF8_NAME = 0x0800


class CompressionMethod(IntEnum):
    STORE = 0
    DEFLATE = 8


@dataclass(frozen=True)
class PackageEntry:
    """One file inside the container.

    ``offset`` is the position of the entry's payload in the original
    buffer, not of its header.  ``compression_method`` holds the raw method
    number so unsupported methods can still be reported.
    """

    name: str
    offset: int
    compressed_size: int
    uncompressed_size: int
    compression_method: int
    crc32: int = 0
    flags: int = 0

    @property
    def streamed(self) -> bool:
        """True when sizes and CRC came from a trailing data descriptor."""
        return bool(self.flags & _FLAG_DATA_DESCRIPTOR)


class ContainerReader:
    """Extract named entries from a ZIP byte buffer.

    Usage::

        reader = ContainerReader(data)
        xml = reader.read_text("word/document.xml")
    """

    def __init__(self, data: BytesLike) -> None:
        data = bytes(data)
        if len(data) < 4 or data[:2] != ZIP_MAGIC:
            raise InvalidContainerFormat(
                "Not a valid DOCX file (missing ZIP signature)"
            )
        self._data = data

    def __len__(self) -> int:
        return len(self._data)

    # -- public API ---------------------------------------------------------

    def iter_entries(self) -> Iterator[PackageEntry]:
        """Yield entries in archive order by walking local headers."""
        data = self._data
        pos = 0
        while pos < len(data):
            header = data.find(LOCAL_HEADER_SIGNATURE, pos)
            if header == -1:
                return
            # Anything after the first central-directory record is index data.
            for signature in (CENTRAL_HEADER_SIGNATURE, END_OF_CENTRAL_DIR_SIGNATURE):
                boundary = data.find(signature, pos, header)
                if boundary != -1:
                    return
            entry, pos = self._read_local_entry(header)
            yield entry

    def entries(self) -> list[PackageEntry]:
        return list(self.iter_entries())

    def find(self, name: str) -> PackageEntry:
        """Return the entry called *name* or raise :class:`EntryNotFound`."""
        seen: list[str] = []
        for entry in self.iter_entries():
            if entry.name == name:
                return entry
            seen.append(entry.name)
        raise EntryNotFound(name, tuple(seen))

    def read(self, name: str) -> bytes:
        """Return the uncompressed bytes of entry *name*."""
        return self.extract(self.find(name))

    def read_text(self, name: str, encoding: str = "utf-8") -> str:
        """Return entry *name* decoded as text; invalid bytes are replaced."""
        return self.read(name).decode(encoding, errors="replace")

    def extract(self, entry: PackageEntry) -> bytes:
        """Decompress *entry* and verify it against its declared size and CRC."""
        end = entry.offset + entry.compressed_size
        payload = self._data[entry.offset:end]

        if entry.compression_method == CompressionMethod.STORE:
            content = payload
        elif entry.compression_method == CompressionMethod.DEFLATE:
            try:
                content = zlib.decompress(payload, -zlib.MAX_WBITS)
            except zlib.error as exc:
                raise ContainerEntryCorrupt(
                    f"Failed to inflate entry {entry.name!r}: {exc}"
                ) from exc
        else:
            raise UnsupportedCompressionMethod(entry.name, entry.compression_method)

        if len(content) != entry.uncompressed_size:
            raise ContainerEntryCorrupt(
                f"Entry {entry.name!r} inflated to {len(content)} bytes, "
                f"expected {entry.uncompressed_size}"
            )
        if zlib.crc32(content) != entry.crc32:
            raise ContainerEntryCorrupt(f"CRC mismatch for entry {entry.name!r}")

        logger.debug(
            "Extracted %s (%d -> %d bytes)",
            entry.name, entry.compressed_size, len(content),
        )
        return content

    # -- record walking -----------------------------------------------------

    def _read_local_entry(self, header: int) -> tuple[PackageEntry, int]:
        """Parse the record at *header*; return it and the offset after it."""
        data = self._data
        if header + _LOCAL_HEADER.size > len(data):
            raise ContainerEntryCorrupt(f"Truncated local file header at offset {header}")

        (
            _signature, _version, flags, method, _time, _date,
            crc, compressed_size, uncompressed_size, name_len, extra_len,
        ) = _LOCAL_HEADER.unpack_from(data, header)

        name_start = header + _LOCAL_HEADER.size
        payload_start = name_start + name_len + extra_len
        if payload_start > len(data):
            raise ContainerEntryCorrupt(f"Truncated local file header at offset {header}")

        raw_name = data[name_start:name_start + name_len]
        try:
            name = raw_name.decode("utf-8" if flags & _FLAG_UTF8_NAME else "cp437")
        except UnicodeDecodeError as exc:
            raise ContainerEntryCorrupt(
                f"Entry name at offset {header} is not valid UTF-8"
            ) from exc

        if flags & _FLAG_DATA_DESCRIPTOR:
            compressed_size, crc, uncompressed_size, record_end = self._read_streamed(
                name, method, payload_start,
            )
        else:
            record_end = payload_start + compressed_size
            if record_end > len(data):
                raise ContainerEntryCorrupt(
                    f"Entry {name!r} runs past the end of the container"
                )

        entry = PackageEntry(
            name=name,
            offset=payload_start,
            compressed_size=compressed_size,
            uncompressed_size=uncompressed_size,
            compression_method=method,
            crc32=crc,
            flags=flags,
        )
        return entry, record_end

    def _read_streamed(
        self, name: str, method: int, payload_start: int
    ) -> tuple[int, int, int, int]:
        """Locate the payload end and data descriptor of a streamed entry.

        Returns ``(compressed_size, crc32, uncompressed_size, record_end)``.
        """
        data = self._data
        if method == CompressionMethod.DEFLATE:
            inflater = zlib.decompressobj(-zlib.MAX_WBITS)
            remaining = data[payload_start:]
            try:
                inflater.decompress(remaining)
            except zlib.error as exc:
                raise ContainerEntryCorrupt(
                    f"Failed to inflate entry {name!r}: {exc}"
                ) from exc
            if not inflater.eof:
                raise ContainerEntryCorrupt(f"Deflate stream of entry {name!r} is truncated")
            payload_end = payload_start + len(remaining) - len(inflater.unused_data)
            descriptor = payload_end
            if data.startswith(DATA_DESCRIPTOR_SIGNATURE, descriptor):
                descriptor += len(DATA_DESCRIPTOR_SIGNATURE)
        elif method == CompressionMethod.STORE:
            payload_end = data.find(DATA_DESCRIPTOR_SIGNATURE, payload_start)
            if payload_end == -1:
                raise ContainerEntryCorrupt(f"Missing data descriptor for entry {name!r}")
            descriptor = payload_end + len(DATA_DESCRIPTOR_SIGNATURE)
        else:
            # Without sizes in the header there is no way to step over it.
            raise UnsupportedCompressionMethod(name, method)

        if descriptor + _DESCRIPTOR.size > len(data):
            raise ContainerEntryCorrupt(f"Truncated data descriptor for entry {name!r}")
        crc, _declared_size, uncompressed_size = _DESCRIPTOR.unpack_from(data, descriptor)
        return (
            payload_end - payload_start,
            crc,
            uncompressed_size,
            descriptor + _DESCRIPTOR.size,
        )


__all__ = [
    "CompressionMethod",
    "ContainerReader",
    "PackageEntry",
    "LOCAL_HEADER_SIGNATURE",
]
