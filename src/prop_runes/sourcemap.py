"""Revision 3 source maps with base64 VLQ encoded mappings."""

from __future__ import annotations

import base64
import json
from bisect import bisect_right
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from prop_runes.edits import Mapping

_BASE64 = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789+/"
_BASE64_INDEX = {char: index for index, char in enumerate(_BASE64)}
_VLQ_SHIFT = 5
_VLQ_MASK = (1 << _VLQ_SHIFT) - 1
_VLQ_CONTINUATION = 1 << _VLQ_SHIFT


def encode_vlq(value: int) -> str:
	# Sign is stored in the least significant bit
	vlq = ((-value) << 1) | 1 if value < 0 else value << 1
	out: list[str] = []
	while True:
		digit = vlq & _VLQ_MASK
		vlq >>= _VLQ_SHIFT
		if vlq:
			digit |= _VLQ_CONTINUATION
		out.append(_BASE64[digit])
		if not vlq:
			return "".join(out)


def decode_vlq(segment: str) -> list[int]:
	values: list[int] = []
	value = 0
	shift = 0
	for char in segment:
		try:
			digit = _BASE64_INDEX[char]
		except KeyError:
			raise ValueError(f"Invalid base64 VLQ character {char!r}") from None
		value += (digit & _VLQ_MASK) << shift
		if digit & _VLQ_CONTINUATION:
			shift += _VLQ_SHIFT
			continue
		negative = value & 1
		value >>= 1
		values.append(-value if negative else value)
		value = 0
		shift = 0
	if shift:
		raise ValueError(f"Truncated base64 VLQ segment {segment!r}")
	return values


def encode_mappings(mappings: Iterable[Mapping]) -> str:
	"""Encode segments for a single source into a `mappings` string."""
	lines: list[str] = []
	segments: list[str] = []
	line = 0
	prev_column = 0
	prev_source = 0
	prev_orig_line = 0
	prev_orig_column = 0
	ordered = sorted(mappings, key=lambda m: (m.generated_line, m.generated_column))
	for m in ordered:
		while line < m.generated_line:
			lines.append(",".join(segments))
			segments = []
			line += 1
			prev_column = 0
		segments.append(
			encode_vlq(m.generated_column - prev_column)
			+ encode_vlq(0 - prev_source)
			+ encode_vlq(m.original_line - prev_orig_line)
			+ encode_vlq(m.original_column - prev_orig_column)
		)
		prev_column = m.generated_column
		prev_orig_line = m.original_line
		prev_orig_column = m.original_column
	lines.append(",".join(segments))
	return ";".join(lines)


def decode_mappings(mappings: str) -> list[Mapping]:
	result: list[Mapping] = []
	source = 0
	orig_line = 0
	orig_column = 0
	for line, group in enumerate(mappings.split(";")):
		column = 0
		for segment in group.split(","):
			if not segment:
				continue
			fields = decode_vlq(segment)
			column += fields[0]
			# Single-field segments carry no original position
			if len(fields) < 4:
				continue
			source += fields[1]
			orig_line += fields[2]
			orig_column += fields[3]
			result.append(Mapping(line, column, orig_line, orig_column))
	return result


@dataclass(slots=True)
class SourceMap:
	"""A source map covering one rewritten script.

	`to_dict()` produces the JSON shape bundlers consume; `to_url()` the
	inline `data:` URL form for `//# sourceMappingURL=` comments.
	"""

	mappings: str
	sources: list[str]
	sources_content: list[str | None] = field(default_factory=list)
	names: list[str] = field(default_factory=list)
	file: str | None = None
	version: int = 3

	@classmethod
	def from_mappings(
		cls,
		mappings: Iterable[Mapping],
		*,
		source: str | None = None,
		filename: str | None = None,
	) -> SourceMap:
		return cls(
			mappings=encode_mappings(mappings),
			sources=[filename or ""],
			sources_content=[source],
			file=filename,
		)

	def to_dict(self) -> dict[str, Any]:
		data: dict[str, Any] = {"version": self.version}
		if self.file is not None:
			data["file"] = self.file
		data["sources"] = list(self.sources)
		data["sourcesContent"] = list(self.sources_content)
		data["names"] = list(self.names)
		data["mappings"] = self.mappings
		return data

	def to_json(self) -> str:
		return json.dumps(self.to_dict())

	def to_url(self) -> str:
		encoded = base64.b64encode(self.to_json().encode("utf-8")).decode("ascii")
		return f"data:application/json;charset=utf-8;base64,{encoded}"

	@classmethod
	def from_dict(cls, data: dict[str, Any]) -> SourceMap:
		if data.get("version") != 3:
			raise ValueError(f"Unsupported source map version: {data.get('version')}")
		return cls(
			mappings=data["mappings"],
			sources=list(data.get("sources", [])),
			sources_content=list(data.get("sourcesContent", [])),
			names=list(data.get("names", [])),
			file=data.get("file"),
		)

	def decoded(self) -> list[Mapping]:
		return decode_mappings(self.mappings)

	def original_position_for(self, line: int, column: int) -> tuple[int, int] | None:
		"""Map a 0-based generated position back to the original source.

		Uses the closest segment at or before `column` on the same generated
		line. Returns None when the line has no segment at or before
		`column`, which is the case for lines made only of inserted text.
		"""
		segments = [m for m in self.decoded() if m.generated_line == line]
		if not segments:
			return None
		columns = [m.generated_column for m in segments]
		index = bisect_right(columns, column) - 1
		if index < 0:
			return None
		segment = segments[index]
		return (
			segment.original_line,
			segment.original_column + column - segment.generated_column,
		)
