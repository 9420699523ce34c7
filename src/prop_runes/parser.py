"""
TypeScript parsing on top of tree-sitter.

tree-sitter reports byte offsets into the UTF-8 encoded buffer, while every
edit and source map position downstream works on `str` offsets. `SourceText`
keeps both views of the script and converts between them.
"""

from __future__ import annotations

from bisect import bisect_right
from functools import cache

import tree_sitter_typescript as tstypescript
from tree_sitter import Language, Node, Parser, Tree

from prop_runes.errors import ParseError


@cache
def typescript_language() -> Language:
	return Language(tstypescript.language_typescript())


def utf16_len(text: str) -> int:
	"""Length of `text` in UTF-16 code units, the unit of source map columns."""
	return len(text.encode("utf-16-le")) // 2


class SourceText:
	"""Script text with byte -> character offset and line/column lookups."""

	__slots__: tuple[str, ...] = ("text", "data", "_char_offsets", "_line_starts")
	text: str
	data: bytes
	_char_offsets: list[int] | None
	_line_starts: list[int]

	def __init__(self, text: str) -> None:
		self.text = text
		self.data = text.encode("utf-8")
		# ASCII fast path: byte offsets are character offsets
		if len(self.data) == len(text):
			self._char_offsets = None
		else:
			offsets = [0] * (len(self.data) + 1)
			pos = 0
			for index, char in enumerate(text):
				size = len(char.encode("utf-8"))
				for k in range(size):
					offsets[pos + k] = index
				pos += size
			offsets[pos] = len(text)
			self._char_offsets = offsets
		self._line_starts = [0]
		self._line_starts.extend(i + 1 for i, ch in enumerate(text) if ch == "\n")

	def __len__(self) -> int:
		return len(self.text)

	def offset(self, byte: int) -> int:
		"""Character offset of a byte offset reported by tree-sitter."""
		if self._char_offsets is None:
			return byte
		return self._char_offsets[byte]

	def start(self, node: Node) -> int:
		return self.offset(node.start_byte)

	def end(self, node: Node) -> int:
		return self.offset(node.end_byte)

	def slice(self, node: Node) -> str:
		"""Exact source text covered by `node`."""
		return self.data[node.start_byte : node.end_byte].decode("utf-8")

	def position(self, offset: int) -> tuple[int, int]:
		"""0-based (line, column) of a character offset."""
		line = bisect_right(self._line_starts, offset) - 1
		return line, offset - self._line_starts[line]

	def utf16_position(self, offset: int) -> tuple[int, int]:
		"""0-based (line, column) with the column counted in UTF-16 code units."""
		line, column = self.position(offset)
		if self._char_offsets is None:
			return line, column
		return line, utf16_len(self.text[offset - column : offset])


def _first_error(root: Node) -> Node | None:
	stack = [root]
	while stack:
		node = stack.pop()
		if node.type == "ERROR" or node.is_missing:
			return node
		# Visit children left to right
		stack.extend(
			child
			for child in reversed(node.children)
			if child.has_error or child.is_missing
		)
	return None


def parse_script(source: SourceText, filename: str | None = None) -> Tree:
	"""Parse a TypeScript script block.

	tree-sitter recovers from syntax errors by inserting ERROR/MISSING nodes.
	Any such node makes the script unusable for rewriting, so it is raised as
	a `ParseError` pointing at the first one.
	"""
	parser = Parser(typescript_language())
	tree = parser.parse(source.data)
	if tree.root_node.has_error:
		node = _first_error(tree.root_node) or tree.root_node
		line, column = source.position(source.start(node))
		if node.is_missing:
			message = f"Expected `{node.type}`"
		else:
			snippet = source.slice(node).split("\n", 1)[0][:40]
			message = "Unexpected syntax"
			if snippet:
				message += f" `{snippet}`"
		raise ParseError(message, filename=filename, line=line + 1, column=column + 1)
	return tree
