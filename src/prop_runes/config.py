from __future__ import annotations

import os
import re
from collections.abc import Mapping
from dataclasses import dataclass, field

ENV_PROP_RUNES_LANG = "PROP_RUNES_LANG"
ENV_PROP_RUNES_EXCLUDE = "PROP_RUNES_EXCLUDE"

DEFAULT_EXCLUDE: tuple[str, ...] = ("node_modules", ".svelte-kit")
MACRO_PATTERN = re.compile(r"\$prop[.(]")


@dataclass
class RunesConfig:
	"""
	Configuration for the prop preprocessor.

	Attributes:
	    lang (str): Script `lang` attribute that enables the rewrite.
	    exclude (tuple[str, ...]): Path fragments of files that are never rewritten.
	    pattern (re.Pattern[str]): Cheap textual check run before parsing.
	"""

	lang: str = "ts"
	"""Script `lang` attribute that enables the rewrite."""

	exclude: tuple[str, ...] = DEFAULT_EXCLUDE
	"""Path fragments (dependency caches, build output) that are skipped."""

	pattern: re.Pattern[str] = field(default=MACRO_PATTERN, repr=False)
	"""Scripts not matching this pattern are returned untouched without parsing."""

	@classmethod
	def from_env(cls, environ: Mapping[str, str] | None = None) -> RunesConfig:
		"""Build a config with overrides from the environment.

		`PROP_RUNES_LANG` replaces the language tag and `PROP_RUNES_EXCLUDE`
		(comma separated) replaces the excluded path fragments.
		"""
		environ = os.environ if environ is None else environ
		config = cls()
		lang = environ.get(ENV_PROP_RUNES_LANG)
		if lang:
			config.lang = lang.strip()
		exclude = environ.get(ENV_PROP_RUNES_EXCLUDE)
		if exclude is not None:
			config.exclude = tuple(
				part.strip() for part in exclude.split(",") if part.strip()
			)
		return config

	def is_excluded(self, filename: str | None) -> bool:
		if not filename:
			return False
		normalized = filename.replace("\\", "/")
		return any(fragment in normalized for fragment in self.exclude)
