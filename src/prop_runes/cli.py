"""
Command-line interface for prop-runes.
Rewrites `$prop` declarations of component files or bare TypeScript scripts.
"""
# typer relies on function calls used as default values
# pyright: reportCallInDefaultInitializer=false

from __future__ import annotations

import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler

from prop_runes.config import RunesConfig
from prop_runes.errors import PropRunesError
from prop_runes.preprocess import Preprocessor
from prop_runes.sourcemap import SourceMap
from prop_runes.transform import transform_props

cli = typer.Typer(
	name="prop-runes",
	help="Rewrite $prop declarations into a single $props() destructuring",
	no_args_is_help=True,
)


def _setup_logging(verbose: bool) -> None:
	logger = logging.getLogger("prop_runes")
	if not any(isinstance(h, RichHandler) for h in logger.handlers):
		logger.addHandler(
			RichHandler(console=Console(stderr=True), show_path=False, markup=False)
		)
	logger.setLevel(logging.DEBUG if verbose else logging.WARNING)


def _rewrite(
	file: Path, config: RunesConfig, script: bool
) -> tuple[str, SourceMap | None, int]:
	"""Rewrite one file. Returns (code, map, number of collected props)."""
	source = file.read_text(encoding="utf-8")
	filename = str(file)
	if script:
		result = transform_props(source, filename, pattern=config.pattern)
		if result is None:
			return source, None, 0
		return result.code, result.map, len(result.state.props)

	markup = Preprocessor(config).markup(source, filename)
	count = sum(
		len(block.result.state.props)
		for block in markup.scripts
		if block.result is not None
	)
	return markup.code, None, count


@cli.command("transform")
def transform(
	file: Path = typer.Argument(
		...,
		exists=True,
		dir_okay=False,
		help="Component file (or script with --script)",
	),
	output: Path | None = typer.Option(
		None, "--output", "-o", help="Write the result here instead of stdout"
	),
	write_map: bool = typer.Option(
		False, "--map/--no-map", help="Emit a source map (requires --script)"
	),
	script: bool = typer.Option(
		False, "--script", help="Treat FILE as a bare TypeScript script"
	),
	verbose: bool = typer.Option(False, "--verbose", "-v"),
):
	"""Rewrite a file and print or write the result."""
	_setup_logging(verbose)
	if write_map and not script:
		typer.echo("❌ --map is only supported together with --script.", err=True)
		raise typer.Exit(1)

	config = RunesConfig.from_env()
	try:
		code, source_map, _ = _rewrite(file, config, script)
	except PropRunesError as exc:
		typer.echo(f"❌ {exc}", err=True)
		raise typer.Exit(1) from None

	if output is None:
		if write_map and source_map is not None:
			code += f"\n//# sourceMappingURL={source_map.to_url()}"
		typer.echo(code, nl=False)
		return

	output.parent.mkdir(parents=True, exist_ok=True)
	if write_map and source_map is not None:
		map_path = output.with_name(output.name + ".map")
		source_map.file = output.name
		map_path.write_text(source_map.to_json(), encoding="utf-8")
		code += f"\n//# sourceMappingURL={map_path.name}"
	output.write_text(code, encoding="utf-8")
	Console(stderr=True, highlight=False).print(
		f"✅ Wrote {output}", markup=False, soft_wrap=True
	)


@cli.command("check")
def check(
	files: list[Path] = typer.Argument(..., exists=True, dir_okay=False),
	script: bool = typer.Option(
		False, "--script", help="Treat FILES as bare TypeScript scripts"
	),
	verbose: bool = typer.Option(False, "--verbose", "-v"),
):
	"""Validate `$prop` usage without writing anything."""
	_setup_logging(verbose)
	config = RunesConfig.from_env()
	console = Console(highlight=False, soft_wrap=True)

	failed = 0
	for file in files:
		try:
			_, _, count = _rewrite(file, config, script)
		except PropRunesError as exc:
			failed += 1
			console.print(f"❌ {exc}", markup=False)
			continue
		if count:
			console.print(f"✅ {file}: {count} props", markup=False)
		else:
			console.print(f"➖ {file}: no $prop declarations", markup=False)

	if failed:
		console.print(f"{failed} of {len(files)} files failed", markup=False)
		raise typer.Exit(1)


def main() -> None:
	cli()
