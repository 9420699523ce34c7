from __future__ import annotations


class PropRunesError(Exception):
	"""Base class for errors raised while rewriting prop macros.

	Carries an optional location so hosts can point at the offending syntax.
	`line` and `column` are 1-based.
	"""

	message: str
	filename: str | None
	line: int | None
	column: int | None

	def __init__(
		self,
		message: str,
		*,
		filename: str | None = None,
		line: int | None = None,
		column: int | None = None,
	) -> None:
		self.message = message
		self.filename = filename
		self.line = line
		self.column = column
		super().__init__(self._format())

	def _format(self) -> str:
		location = self.filename or ""
		if self.line is not None:
			location += f":{self.line}:{self.column or 1}"
		if not location:
			return self.message
		return f"{location.lstrip(':')}: {self.message}"


class ParseError(PropRunesError):
	"""The script could not be parsed."""


class PropMacroError(PropRunesError):
	"""A `$prop` macro was used in a shape that cannot be rewritten."""
