"""
Classification of `$prop` macro calls.

An initializer expression is turned into one of a closed set of variants:

	$prop(default?)            -> PlainProp
	$prop.bindable(default?)   -> BindableProp
	$prop.rest()               -> RestProp
	<plain|bindable>.as("x")   -> AliasWrapper

Anything that does not bottom out at the `$prop` identifier is not a macro
usage and classifies as None. Misuse of the macro, including any other call
or member chain rooted at `$prop`, raises `PropMacroError`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TypeAlias

from tree_sitter import Node

from prop_runes.errors import PropMacroError
from prop_runes.parser import SourceText

MACRO_NAME = "$prop"


@dataclass(frozen=True, slots=True)
class PlainProp:
	default_value: str | None = None


@dataclass(frozen=True, slots=True)
class BindableProp:
	default_value: str | None = None


@dataclass(frozen=True, slots=True)
class RestProp:
	pass


@dataclass(frozen=True, slots=True)
class AliasWrapper:
	base: PlainProp | BindableProp
	alias: str


MacroShape: TypeAlias = PlainProp | BindableProp | RestProp | AliasWrapper


class ShapeClassifier:
	"""Classify call expressions against the `$prop` macro shapes."""

	source: SourceText
	filename: str | None

	def __init__(self, source: SourceText, filename: str | None = None) -> None:
		self.source = source
		self.filename = filename

	def classify(self, node: Node) -> MacroShape | None:
		if node.type != "call_expression":
			return None
		args = self._arguments(node)
		if args is None:
			return None
		callee = node.child_by_field_name("function")
		if callee is None:
			return None
		inner = None
		if callee.type == "member_expression":
			inner = callee.child_by_field_name("object")
		shape: MacroShape | None
		if inner is not None and inner.type == "call_expression":
			shape = self._classify_wrapper(callee, inner, args)
		else:
			shape = self._classify_base(node, args)

		# A chain rooted at `$prop` that matches no shape
		if shape is None and self._macro_root(callee) is not None:
			if callee.type == "member_expression":
				target = callee.child_by_field_name("property") or callee
				raise self._error(f"{self._describe(callee)} is not supported", target)
			raise self._error(f"{self._describe(node)} is not supported", node)
		return shape

	# --- Wrappers -----------------------------------------------------------

	def _classify_wrapper(
		self, callee: Node, inner: Node, args: list[Node]
	) -> MacroShape | None:
		base = self.classify(inner)
		if base is None:
			return None

		prop = callee.child_by_field_name("property")
		name = self.source.slice(prop) if prop is not None else ""
		if name != "as":
			raise self._error(
				f"{MACRO_NAME}(...).{name} is not supported", prop or callee
			)
		if isinstance(base, AliasWrapper):
			raise self._error(
				f"{MACRO_NAME}(...).as(...) cannot be chained", prop or callee
			)
		if len(args) != 1:
			raise self._error(
				f"{MACRO_NAME}(...).as(...) requires exactly one argument", callee
			)
		if args[0].type != "string":
			raise self._error(
				f"{MACRO_NAME}(...).as(...) requires a string literal as argument",
				args[0],
			)
		if isinstance(base, RestProp):
			raise self._error(f"{MACRO_NAME}.rest() cannot be aliased", callee)
		return AliasWrapper(base, self.source.slice(args[0]))

	# --- Base forms ---------------------------------------------------------

	def _classify_base(
		self, call: Node, args: list[Node]
	) -> PlainProp | BindableProp | RestProp | None:
		callee = call.child_by_field_name("function")
		if callee is None:
			return None
		if callee.type == "identifier":
			if self.source.slice(callee) != MACRO_NAME:
				return None
			return PlainProp(self._default_value(args, MACRO_NAME))

		if callee.type != "member_expression":
			return None
		obj = callee.child_by_field_name("object")
		prop = callee.child_by_field_name("property")
		if obj is None or prop is None:
			return None
		if obj.type != "identifier" or self.source.slice(obj) != MACRO_NAME:
			return None

		name = self.source.slice(prop)
		if name == "bindable":
			return BindableProp(self._default_value(args, f"{MACRO_NAME}.bindable"))
		if name == "rest":
			if args:
				raise self._error(
					f"{MACRO_NAME}.rest does not accept arguments", args[0]
				)
			return RestProp()
		raise self._error(f"{MACRO_NAME}.{name} is not supported", prop)

	def _default_value(self, args: list[Node], name: str) -> str | None:
		if len(args) > 1:
			raise self._error(f"{name} only accepts one argument", args[1])
		if not args:
			return None
		if args[0].type == "spread_element":
			raise self._error(f"{name} does not accept spread elements", args[0])
		return self.source.slice(args[0])

	# --- Helpers ------------------------------------------------------------

	def _arguments(self, call: Node) -> list[Node] | None:
		args = call.child_by_field_name("arguments")
		# Tagged templates carry a template_string instead of an argument list
		if args is None or args.type != "arguments":
			return None
		return [child for child in args.named_children if child.type != "comment"]

	def _macro_root(self, node: Node) -> Node | None:
		"""The `$prop` identifier a call/member chain bottoms out at, if any."""
		while node.type in ("call_expression", "member_expression"):
			child_field = "function" if node.type == "call_expression" else "object"
			child = node.child_by_field_name(child_field)
			if child is None:
				return None
			node = child
		if node.type == "identifier" and self.source.slice(node) == MACRO_NAME:
			return node
		return None

	def _describe(self, node: Node) -> str:
		"""Render a chain with its arguments elided, e.g. `$prop.a(...).b`."""
		if node.type == "call_expression":
			callee = node.child_by_field_name("function")
			return f"{self._describe(callee) if callee else ''}(...)"
		if node.type == "member_expression":
			obj = node.child_by_field_name("object")
			prop = node.child_by_field_name("property")
			head = self._describe(obj) if obj else ""
			return f"{head}.{self.source.slice(prop) if prop else ''}"
		return self.source.slice(node)

	def _error(self, message: str, node: Node) -> PropMacroError:
		line, column = self.source.position(self.source.start(node))
		return PropMacroError(
			message, filename=self.filename, line=line + 1, column=column + 1
		)
