"""
Component-file level preprocessor.

`Preprocessor.script` follows the script preprocessor hook of component
compilers: it receives the content of one `<script>` block with its
attributes and returns a `TransformResult` or None. `Preprocessor.markup`
applies the same rewrite to every script block of a whole component file.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import TypeAlias

from prop_runes.config import RunesConfig
from prop_runes.errors import PropRunesError
from prop_runes.transform import TransformResult, transform_props

logger = logging.getLogger(__name__)

SCRIPT_BLOCK = re.compile(
	r"<script(?P<attrs>(?:\s[^>]*)?)>(?P<content>.*?)</script\s*>",
	re.DOTALL | re.IGNORECASE,
)
ATTRIBUTE = re.compile(
	r"""(?P<name>[^\s"'>/=]+)"""
	r"""(?:\s*=\s*(?:"(?P<dq>[^"]*)"|'(?P<sq>[^']*)'|(?P<bare>[^\s"'=<>`]+)))?"""
)

Attributes: TypeAlias = Mapping[str, str | bool]


def parse_attributes(raw: str) -> dict[str, str | bool]:
	"""Parse tag attributes. Valueless attributes map to True."""
	attrs: dict[str, str | bool] = {}
	for match in ATTRIBUTE.finditer(raw):
		value: str | bool = True
		for group in ("dq", "sq", "bare"):
			if match.group(group) is not None:
				value = match.group(group)
				break
		attrs[match.group("name")] = value
	return attrs


def _relocate(exc: PropRunesError, source: str, offset: int) -> PropRunesError:
	"""Shift a script-relative error location to the enclosing file."""
	if exc.line is None:
		return exc
	base_line = source.count("\n", 0, offset)
	line_start = source.rfind("\n", 0, offset) + 1
	column = exc.column or 1
	if exc.line == 1:
		column += offset - line_start
	return type(exc)(
		exc.message,
		filename=exc.filename,
		line=exc.line + base_line,
		column=column,
	)


@dataclass(slots=True)
class ScriptBlock:
	start: int
	end: int
	attributes: dict[str, str | bool]
	result: TransformResult | None = None


@dataclass(slots=True)
class MarkupResult:
	code: str
	scripts: list[ScriptBlock] = field(default_factory=list)

	@property
	def changed(self) -> bool:
		return any(block.result is not None for block in self.scripts)


class Preprocessor:
	name: str = "prop-runes"
	config: RunesConfig

	def __init__(self, config: RunesConfig | None = None) -> None:
		self.config = config if config is not None else RunesConfig()

	def script(
		self,
		content: str,
		attributes: Attributes | None = None,
		filename: str | None = None,
	) -> TransformResult | None:
		attributes = attributes or {}
		if self.config.is_excluded(filename):
			logger.debug("Skipping excluded file %s", filename)
			return None
		if attributes.get("lang") != self.config.lang:
			return None
		return transform_props(content, filename, pattern=self.config.pattern)

	def markup(self, source: str, filename: str | None = None) -> MarkupResult:
		"""Rewrite every eligible `<script>` block of a component file."""
		parts: list[str] = []
		blocks: list[ScriptBlock] = []
		pos = 0
		for match in SCRIPT_BLOCK.finditer(source):
			start, end = match.span("content")
			block = ScriptBlock(start, end, parse_attributes(match.group("attrs")))
			try:
				block.result = self.script(
					match.group("content"), block.attributes, filename
				)
			except PropRunesError as exc:
				raise _relocate(exc, source, start) from None
			blocks.append(block)
			if block.result is None:
				continue
			parts.append(source[pos:start])
			parts.append(block.result.code)
			pos = end
		parts.append(source[pos:])
		return MarkupResult("".join(parts), blocks)


def preprocess(config: RunesConfig | None = None) -> Preprocessor:
	return Preprocessor(config)
