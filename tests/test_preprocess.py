"""
Tests for the component-file preprocessor (prop_runes.preprocess).
"""

import pytest
from prop_runes.config import RunesConfig
from prop_runes.errors import PropMacroError
from prop_runes.preprocess import Preprocessor, parse_attributes, preprocess

SCRIPT = "const a = $prop(1);\n"


class TestAttributes:
	def test_quoted_and_bare(self):
		assert parse_attributes(' lang="ts" context=module generics=\'T\' defer') == {
			"lang": "ts",
			"context": "module",
			"generics": "T",
			"defer": True,
		}

	def test_empty(self):
		assert parse_attributes("") == {}


class TestScript:
	def test_typed_script_is_rewritten(self):
		result = preprocess().script(SCRIPT, {"lang": "ts"}, "src/Comp.svelte")
		assert result is not None
		assert result.code.startswith("const {\na = 1,\n}")

	def test_untyped_script_is_skipped(self):
		assert Preprocessor().script(SCRIPT, {}, "src/Comp.svelte") is None
		assert Preprocessor().script(SCRIPT, {"lang": "js"}, "src/Comp.svelte") is None

	@pytest.mark.parametrize(
		"filename",
		[
			"node_modules/lib/Button.svelte",
			"/app/.svelte-kit/generated/root.svelte",
			"C:\\app\\node_modules\\lib\\Button.svelte",
		],
	)
	def test_excluded_paths(self, filename: str):
		assert Preprocessor().script(SCRIPT, {"lang": "ts"}, filename) is None

	def test_custom_config(self):
		pre = Preprocessor(RunesConfig(lang="typescript", exclude=("vendor",)))
		assert pre.script(SCRIPT, {"lang": "ts"}, "Comp.svelte") is None
		assert pre.script(SCRIPT, {"lang": "typescript"}, "vendor/C.svelte") is None
		assert pre.script(SCRIPT, {"lang": "typescript"}, "Comp.svelte") is not None

	def test_errors_propagate(self):
		with pytest.raises(PropMacroError):
			Preprocessor().script("const a = $prop.nope();", {"lang": "ts"})


class TestMarkup:
	def test_rewrites_typed_scripts_only(self):
		source = (
			'<script lang="ts" context="module">\n'
			"\tconst shared = 1;\n"
			"</script>\n"
			'<script lang="ts">\n'
			"const name: string = $prop();\n"
			"</script>\n"
			"<script>\n"
			"const other = $prop();\n"
			"</script>\n"
			"<h1>{name}</h1>\n"
		)
		result = Preprocessor().markup(source, "Comp.svelte")
		assert result.changed
		assert [block.result is not None for block in result.scripts] == [
			False,
			True,
			False,
		]
		assert result.code == source.replace(
			"const name: string = $prop();\n",
			"const {\nname,\n}: {\nname: string\n} = $props();\n",
		)

	def test_unchanged_file(self):
		source = "<script lang=\"ts\">\nlet x = 1;\n</script>\n<p>{x}</p>\n"
		result = Preprocessor().markup(source)
		assert not result.changed
		assert result.code == source

	def test_error_location_is_file_relative(self):
		source = '<div></div>\n<script lang="ts">\n\tconst a = $prop.foo();\n</script>\n'
		with pytest.raises(PropMacroError) as info:
			Preprocessor().markup(source, "Comp.svelte")
		assert info.value.line == 3
		assert info.value.column == 18
		assert str(info.value).startswith("Comp.svelte:3:18: ")
