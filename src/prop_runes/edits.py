"""
Deferred text edits against an original buffer.

Removals and the single insertion are recorded in original coordinates and
replayed in one forward pass, so the order in which they were queued never
shifts another edit's offsets.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from prop_runes.parser import SourceText, utf16_len


@dataclass(frozen=True, slots=True)
class Mapping:
	"""One source map segment.

	Lines and columns are 0-based. Columns count UTF-16 code units.
	"""

	generated_line: int
	generated_column: int
	original_line: int
	original_column: int


@dataclass(frozen=True, slots=True)
class Insertion:
	offset: int
	content: str


@dataclass(slots=True)
class EditResult:
	code: str
	mappings: list[Mapping] = field(default_factory=list)


class _Output:
	"""Output buffer that tracks the generated position while writing."""

	__slots__: tuple[str, ...] = ("source", "parts", "mappings", "line", "column")

	def __init__(self, source: SourceText) -> None:
		self.source = source
		self.parts: list[str] = []
		self.mappings: list[Mapping] = []
		self.line = 0
		self.column = 0

	def original(self, start: int, end: int) -> None:
		if start >= end:
			return
		text = self.source.text[start:end]
		orig_line, orig_column = self.source.utf16_position(start)
		pos = 0
		while True:
			self.mappings.append(
				Mapping(self.line, self.column, orig_line, orig_column)
			)
			newline = text.find("\n", pos)
			if newline == -1:
				self.column += utf16_len(text[pos:])
				break
			self.line += 1
			self.column = 0
			orig_line += 1
			orig_column = 0
			pos = newline + 1
			if pos == len(text):
				break
		self.parts.append(text)

	def inserted(self, text: str) -> None:
		self.parts.append(text)
		newlines = text.count("\n")
		if newlines:
			self.line += newlines
			self.column = utf16_len(text[text.rfind("\n") + 1 :])
		else:
			self.column += utf16_len(text)


class EditList:
	"""Removal ranges plus at most one insertion, applied in a single pass.

	Offsets are character offsets into `source.text`. Removals may overlap or
	nest. The insertion is emitted at its original position even when that
	position falls inside a removed range, after every retained character
	before it and before every retained character at or after it.
	"""

	source: SourceText
	_removals: list[tuple[int, int]]
	_insertion: Insertion | None

	def __init__(self, source: SourceText) -> None:
		self.source = source
		self._removals = []
		self._insertion = None

	@property
	def removals(self) -> list[tuple[int, int]]:
		return list(self._removals)

	@property
	def insertion(self) -> Insertion | None:
		return self._insertion

	def remove(self, start: int, end: int) -> None:
		if start < 0 or end > len(self.source) or start > end:
			raise ValueError(f"Invalid removal range [{start}, {end})")
		if start < end:
			self._removals.append((start, end))

	def insert(self, offset: int, content: str) -> None:
		if self._insertion is not None:
			raise ValueError("Only one insertion is supported per edit list")
		if offset < 0 or offset > len(self.source):
			raise ValueError(f"Invalid insertion offset {offset}")
		self._insertion = Insertion(offset, content)

	def kept_ranges(self) -> list[tuple[int, int]]:
		"""Ranges of the original text that survive every removal."""
		merged: list[list[int]] = []
		for start, end in sorted(self._removals):
			if merged and start <= merged[-1][1]:
				merged[-1][1] = max(merged[-1][1], end)
			else:
				merged.append([start, end])

		kept: list[tuple[int, int]] = []
		pos = 0
		for start, end in merged:
			if start > pos:
				kept.append((pos, start))
			pos = end
		if pos < len(self.source):
			kept.append((pos, len(self.source)))
		return kept

	def apply(self) -> EditResult:
		out = _Output(self.source)
		pending = self._insertion
		for start, end in self.kept_ranges():
			if pending is not None and pending.offset < end:
				split = max(start, pending.offset)
				out.original(start, split)
				out.inserted(pending.content)
				pending = None
				start = split
			out.original(start, end)
		if pending is not None:
			out.inserted(pending.content)
		return EditResult("".join(out.parts), out.mappings)
