import json
from pathlib import Path

from prop_runes.cli import cli
from typer.testing import CliRunner

runner = CliRunner()

COMPONENT = (
	'<script lang="ts">\n'
	"const label: string = $prop();\n"
	"</script>\n"
	"<p>{label}</p>\n"
)


def test_transform_component_to_stdout(tmp_path: Path):
	file = tmp_path / "Comp.svelte"
	file.write_text(COMPONENT)
	result = runner.invoke(cli, ["transform", str(file)])
	assert result.exit_code == 0, result.output
	assert "const {\nlabel,\n}: {\nlabel: string\n} = $props();" in result.stdout
	assert "<p>{label}</p>" in result.stdout


def test_transform_script_with_inline_map(tmp_path: Path):
	file = tmp_path / "props.ts"
	file.write_text("const a = $prop(1);\n")
	result = runner.invoke(cli, ["transform", str(file), "--script", "--map"])
	assert result.exit_code == 0, result.output
	assert result.stdout.startswith("const {\na = 1,\n}")
	assert "//# sourceMappingURL=data:application/json;charset=utf-8;base64," in (
		result.stdout
	)


def test_transform_script_writes_map_file(tmp_path: Path):
	file = tmp_path / "props.ts"
	file.write_text("const a = $prop(1);\nconsole.log(a);\n")
	out = tmp_path / "out" / "props.js"
	result = runner.invoke(
		cli, ["transform", str(file), "--script", "--map", "-o", str(out)]
	)
	assert result.exit_code == 0, result.output
	code = out.read_text()
	assert code.endswith("\n//# sourceMappingURL=props.js.map")
	data = json.loads((tmp_path / "out" / "props.js.map").read_text())
	assert data["version"] == 3
	assert data["file"] == "props.js"
	assert data["sources"] == [str(file)]


def test_map_requires_script(tmp_path: Path):
	file = tmp_path / "Comp.svelte"
	file.write_text(COMPONENT)
	result = runner.invoke(cli, ["transform", str(file), "--map"])
	assert result.exit_code == 1
	assert "--script" in result.output


def test_transform_reports_macro_errors(tmp_path: Path):
	file = tmp_path / "bad.ts"
	file.write_text("const a = $prop.rest(1);\n")
	result = runner.invoke(cli, ["transform", str(file), "--script"])
	assert result.exit_code == 1
	assert "❌" in result.output
	assert "does not accept arguments" in result.output


def test_check_passes_and_fails(tmp_path: Path):
	good = tmp_path / "Good.svelte"
	good.write_text(COMPONENT)
	plain = tmp_path / "Plain.svelte"
	plain.write_text("<p>hi</p>\n")
	bad = tmp_path / "Bad.svelte"
	bad.write_text(
		'<script lang="ts">\n'
		"const a = $prop.rest();\n"
		"const b = $prop.rest();\n"
		"</script>\n"
	)

	ok = runner.invoke(cli, ["check", str(good), str(plain)])
	assert ok.exit_code == 0, ok.output
	assert "1 props" in ok.output
	assert "no $prop declarations" in ok.output

	failed = runner.invoke(cli, ["check", str(good), str(bad)])
	assert failed.exit_code == 1
	assert "Only one" in failed.output
	assert "1 of 2 files failed" in failed.output


def test_check_respects_env_exclude(tmp_path: Path, monkeypatch):
	vendor = tmp_path / "vendor"
	vendor.mkdir()
	bad = vendor / "Bad.svelte"
	bad.write_text('<script lang="ts">\nconst a = $prop.foo();\n</script>\n')
	monkeypatch.setenv("PROP_RUNES_EXCLUDE", "vendor")
	result = runner.invoke(cli, ["check", str(bad)])
	assert result.exit_code == 0, result.output
