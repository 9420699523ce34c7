"""
Rewrite `$prop` declarations of a TypeScript script into a single `$props()`
destructuring.

	const label = $prop("hi");
	const count: number = $prop.bindable(0).as("n");

becomes

	const {
	label = "hi",
	"n": count = $bindable(0),
	}: {
	label: unknown
	count: number
	} = $props();
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from prop_runes.config import MACRO_PATTERN
from prop_runes.emitter import emit_declaration
from prop_runes.parser import SourceText, parse_script
from prop_runes.scanner import PropScanner, TransformState
from prop_runes.sourcemap import SourceMap

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class TransformResult:
	code: str
	map: SourceMap
	state: TransformState


def has_prop_macros(source: str, pattern: re.Pattern[str] = MACRO_PATTERN) -> bool:
	"""Textual pre-check for `$prop(` / `$prop.` before paying for a parse."""
	return pattern.search(source) is not None


def transform_props(
	source: str,
	filename: str | None = None,
	*,
	pattern: re.Pattern[str] = MACRO_PATTERN,
) -> TransformResult | None:
	"""Rewrite every `$prop` declaration of `source`.

	Returns None when the script has no macro usage, in which case the source
	is to be used unchanged. Raises `ParseError` for malformed scripts and
	`PropMacroError` for invalid macro usage; nothing is emitted in either
	case.
	"""
	if not has_prop_macros(source, pattern):
		return None

	text = SourceText(source)
	tree = parse_script(text, filename)
	scanner = PropScanner(text, filename)
	scanner.visit(tree.root_node)
	state = scanner.state
	if not state.props or state.insert_loc is None:
		return None

	declaration = emit_declaration(state)
	logger.debug("Generated props declaration for %s:\n%s", filename, declaration)

	scanner.edits.insert(state.insert_loc, declaration)
	result = scanner.edits.apply()
	return TransformResult(
		code=result.code,
		map=SourceMap.from_mappings(result.mappings, source=source, filename=filename),
		state=state,
	)
