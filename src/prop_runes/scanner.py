"""
Collect `$prop` declarations from a parsed script.

The scanner is a tree visitor dispatched on node type. It threads an explicit
`TransformState` through the walk and records every consumed source range in
an `EditList`; nothing is rewritten until the whole script was scanned.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from tree_sitter import Node

from prop_runes.edits import EditList
from prop_runes.errors import PropMacroError
from prop_runes.parser import SourceText
from prop_runes.shapes import (
	AliasWrapper,
	BindableProp,
	MacroShape,
	RestProp,
	ShapeClassifier,
)


@dataclass(slots=True)
class PropDescriptor:
	name: str
	type: str | None = None
	alias: str | None = None
	default_value: str | None = None
	bindable: bool = False
	rest: bool = False

	@classmethod
	def from_shape(
		cls, name: str, shape: MacroShape, type: str | None = None
	) -> PropDescriptor:
		alias: str | None = None
		if isinstance(shape, AliasWrapper):
			alias = shape.alias
			shape = shape.base
		if isinstance(shape, RestProp):
			return cls(name, type=type, rest=True)
		return cls(
			name,
			type=type,
			alias=alias,
			default_value=shape.default_value,
			bindable=isinstance(shape, BindableProp),
		)


@dataclass(slots=True)
class TransformState:
	"""Accumulator for one transform run."""

	props: list[PropDescriptor] = field(default_factory=list)
	rest: PropDescriptor | None = None
	insert_loc: int | None = None

	def add(self, prop: PropDescriptor) -> None:
		if prop.rest:
			if self.rest is not None:
				raise PropMacroError("Only one $prop.rest() declaration is allowed")
			self.rest = prop
		self.props.append(prop)

	@property
	def regular(self) -> list[PropDescriptor]:
		"""Non-rest descriptors in encounter order."""
		return [prop for prop in self.props if not prop.rest]


class Visitor:
	"""Dispatch `visit_<node type>` methods over a tree-sitter tree.

	Node types without a handler are descended into through `generic_visit`.
	"""

	def visit(self, node: Node) -> None:
		method = getattr(self, f"visit_{node.type}", None)
		if method is None:
			self.generic_visit(node)
		else:
			method(node)

	def generic_visit(self, node: Node) -> None:
		for child in node.named_children:
			self.visit(child)


class PropScanner(Visitor):
	source: SourceText
	filename: str | None
	state: TransformState
	edits: EditList
	classifier: ShapeClassifier

	def __init__(
		self,
		source: SourceText,
		filename: str | None = None,
		state: TransformState | None = None,
	) -> None:
		self.source = source
		self.filename = filename
		self.state = state if state is not None else TransformState()
		self.edits = EditList(source)
		self.classifier = ShapeClassifier(source, filename)

	# --- Declarations -------------------------------------------------------

	def visit_lexical_declaration(self, node: Node) -> None:
		declarators = [
			child
			for child in node.named_children
			if child.type == "variable_declarator"
		]
		consumed: list[bool] = []
		for decl in declarators:
			prop = self.scan_declarator(decl)
			consumed.append(prop is not None)
			if prop is None:
				value = decl.child_by_field_name("value")
				if value is not None:
					self.visit(value)
				continue
			try:
				self.state.add(prop)
			except PropMacroError as exc:
				line, column = self.source.position(self.source.start(decl))
				raise PropMacroError(
					exc.message,
					filename=self.filename,
					line=line + 1,
					column=column + 1,
				) from None

		if not any(consumed):
			return

		first = declarators[consumed.index(True)]
		if all(consumed):
			# Nothing left in the statement, drop it along with its keyword and `;`
			self._anchor(self.source.start(first))
			self.edits.remove(self.source.start(node), self.source.end(node))
			return

		# Partially consumed: drop declarators with their separating commas and
		# anchor the replacement ahead of the statement and any `export` keyword.
		statement = node
		if node.parent is not None and node.parent.type == "export_statement":
			statement = node.parent
		self._anchor(self.source.start(statement))
		for index, decl in enumerate(declarators):
			if not consumed[index]:
				continue
			if any(not c for c in consumed[:index]):
				start = self.source.end(declarators[index - 1])
				end = self.source.end(decl)
			else:
				start = self.source.start(decl)
				end = self.source.start(declarators[index + 1])
			self.edits.remove(start, end)

	visit_variable_declaration = visit_lexical_declaration

	def scan_declarator(self, decl: Node) -> PropDescriptor | None:
		"""Descriptor for a `name[: type] = <macro>` declarator, else None."""
		name = decl.child_by_field_name("name")
		value = decl.child_by_field_name("value")
		if name is None or value is None or name.type != "identifier":
			return None
		shape = self.classifier.classify(value)
		if shape is None:
			return None
		return PropDescriptor.from_shape(
			self.source.slice(name), shape, type=self._type_text(decl)
		)

	def _type_text(self, decl: Node) -> str | None:
		annotation = decl.child_by_field_name("type")
		if annotation is None:
			return None
		for child in annotation.named_children:
			if child.type != "comment":
				return self.source.slice(child)
		return None

	def _anchor(self, offset: int) -> None:
		if self.state.insert_loc is None:
			self.state.insert_loc = offset
