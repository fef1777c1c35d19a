"""Checksummed line records for loading card memory through a monitor.

Two formats are supported, both one record per text line:

Intel HEX::

    :LLAAAA00DD...DDCC      CC = -(LL + AAhi + AAlo + 00 + sum(DD)) & 0xFF
    :00000001FF             end of file

MOS Papertape (KIM-1 monitor)::

    ;LLAAAADD...DDCCCC      CCCC = (LL + AAhi + AAlo + sum(DD)) & 0xFFFF
    ;00NNNNCCCC             end of file, NNNN = record count,
                            CCCC = NNNNhi + NNNNlo
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, List, TextIO

from .errors import FileAccessError, InvalidBaseAddressError
from .layout import CARD_MEMORY_SIZE, MAX_COL_BYTES, PlaneBuffer

ADDRESS_LIMIT = 0x10000


def _address_sum(count: int, address: int) -> int:
    return count + ((address >> 8) & 0xFF) + (address & 0xFF)


class RecordFormat:
    """Line syntax and checksum of one record format."""

    name = ""
    start_code = ""
    bytes_per_line = 16
    record_type: str | None = None
    checksum_digits = 2

    def checksum(self, address: int, payload: bytes) -> int:
        raise NotImplementedError

    def terminator(self, lines: int) -> str:
        raise NotImplementedError

    def format_line(self, address: int, payload: bytes) -> str:
        count = len(payload)
        data = "".join(f"{byte:02X}" for byte in payload)
        record_type = self.record_type or ""
        checksum = self.checksum(address, payload)
        return (
            f"{self.start_code}{count:02X}{address:04X}{record_type}{data}"
            f"{checksum:0{self.checksum_digits}X}"
        )

    def parse_line(self, line: str) -> tuple[int, bytes, int]:
        """Split a record back into address, payload and stored checksum."""

        line = line.strip()
        if not line.startswith(self.start_code):
            raise ValueError(f"not a {self.name} record: {line!r}")
        body = line[len(self.start_code) :]
        count = int(body[0:2], 16)
        address = int(body[2:6], 16)
        data_start = 6 + len(self.record_type or "")
        data_end = data_start + count * 2
        if len(body) != data_end + self.checksum_digits:
            raise ValueError(f"record length does not match byte count: {line!r}")
        payload = bytes.fromhex(body[data_start:data_end])
        stored = int(body[data_end:], 16)
        return address, payload, stored

    def verify_line(self, line: str) -> bool:
        address, payload, stored = self.parse_line(line)
        return self.checksum(address, payload) == stored


class IntelHexFormat(RecordFormat):
    name = "ihex"
    start_code = ":"
    bytes_per_line = 32
    record_type = "00"
    checksum_digits = 2

    def checksum(self, address: int, payload: bytes) -> int:
        total = _address_sum(len(payload), address) + 0x00 + sum(payload)
        return (-total) & 0xFF

    def terminator(self, lines: int) -> str:
        return ":00000001FF"


class PapertapeFormat(RecordFormat):
    name = "pap"
    start_code = ";"
    bytes_per_line = 24
    record_type = None
    checksum_digits = 4

    def checksum(self, address: int, payload: bytes) -> int:
        return (_address_sum(len(payload), address) + sum(payload)) & 0xFFFF

    def terminator(self, lines: int) -> str:
        lines &= 0xFFFF
        return f";00{lines:04X}{((lines >> 8) & 0xFF) + (lines & 0xFF):04X}"


INTEL_HEX = IntelHexFormat()
PAPERTAPE = PapertapeFormat()


@dataclass(frozen=True)
class Block:
    address: int
    data: bytes


def iter_blocks(planes: PlaneBuffer, base_address: int) -> Iterator[Block]:
    """Yield the memory blocks to transfer, plane by plane.

    Rows that fit a display line are sent one per block at a 40 byte stride,
    so every row starts at the beginning of its display line. Wider images
    already fill every line and each plane is sent as a single block.
    """

    geometry = planes.geometry
    row_bytes = geometry.row_bytes
    for cbit in range(planes.color_bits):
        plane_address = base_address + cbit * CARD_MEMORY_SIZE
        if row_bytes > MAX_COL_BYTES - 1:
            yield Block(plane_address, planes.plane_data(cbit))
        else:
            for y in range(geometry.height):
                yield Block(plane_address + y * MAX_COL_BYTES, planes.row(cbit, y))


def check_address_range(planes: PlaneBuffer, base_address: int) -> None:
    for block in iter_blocks(planes, base_address):
        if block.address + len(block.data) > ADDRESS_LIMIT:
            raise InvalidBaseAddressError(
                f"Base address {base_address:04X}h with {planes.color_bits} card(s) "
                f"runs past FFFFh"
            )


class RecordWriter:
    """Write blocks of memory as records, counting emitted lines."""

    def __init__(self, stream: TextIO, record_format: RecordFormat) -> None:
        self.stream = stream
        self.format = record_format
        self.lines = 0

    def format_block(self, address: int, data: bytes) -> List[str]:
        step = self.format.bytes_per_line
        return [
            self.format.format_line(address + offset, data[offset : offset + step])
            for offset in range(0, len(data), step)
        ]

    def write_block(self, address: int, data: bytes) -> int:
        records = self.format_block(address, data)
        for record in records:
            self._write(record)
            self.lines += 1
        return len(records)

    def terminate(self) -> None:
        self._write(self.format.terminator(self.lines))

    def _write(self, line: str) -> None:
        try:
            self.stream.write(line + "\n")
        except OSError as exc:
            raise FileAccessError(f"Error writing {self.format.name} output: {exc}") from exc


def write_records(
    stream: TextIO, planes: PlaneBuffer, base_address: int, record_format: RecordFormat
) -> int:
    """Write every plane followed by the format terminator; return the record count."""

    check_address_range(planes, base_address)
    writer = RecordWriter(stream, record_format)
    for block in iter_blocks(planes, base_address):
        writer.write_block(block.address, block.data)
    writer.terminate()
    return writer.lines


def write_ihex(stream: TextIO, planes: PlaneBuffer, base_address: int) -> int:
    return write_records(stream, planes, base_address, INTEL_HEX)


def write_papertape(stream: TextIO, planes: PlaneBuffer, base_address: int) -> int:
    return write_records(stream, planes, base_address, PAPERTAPE)
