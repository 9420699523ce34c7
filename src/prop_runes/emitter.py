"""
Emit the `$props()` destructuring that replaces the collected declarations.

	const {
	label,
	"n": count = $bindable(0),
	...rest
	}: {
	label: unknown
	count: number
	} & RestType = $props();

The type block is keyed by the bound name even for aliased props, so `"n"`
above is typed through `count`.
"""

from __future__ import annotations

from collections.abc import Sequence

from prop_runes.scanner import PropDescriptor, TransformState

UNKNOWN_TYPE = "unknown"


def value_line(prop: PropDescriptor) -> str:
	line = f"{prop.alias}: {prop.name}" if prop.alias else prop.name
	if prop.bindable:
		line += f" = $bindable({prop.default_value or ''})"
	elif prop.default_value is not None:
		line += f" = {prop.default_value}"
	return line


def type_line(prop: PropDescriptor) -> str:
	return f"{prop.name}: {prop.type or UNKNOWN_TYPE}"


def value_block(props: Sequence[PropDescriptor], rest: PropDescriptor | None) -> str:
	lines = [value_line(prop) + "," for prop in props if not prop.rest]
	if rest is not None:
		lines.append(f"...{rest.name}")
	return "\n".join(lines)


def type_block(props: Sequence[PropDescriptor]) -> str:
	return "\n".join(type_line(prop) for prop in props if not prop.rest)


def emit_declaration(state: TransformState) -> str:
	rest_type = ""
	if state.rest is not None and state.rest.type:
		rest_type = f" & {state.rest.type}"
	return (
		"const {\n"
		f"{value_block(state.props, state.rest)}\n"
		"}: {\n"
		f"{type_block(state.props)}\n"
		f"}}{rest_type} = $props();"
	)
