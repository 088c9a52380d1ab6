"""CLI entry point: cargo-about-features.

Installed as ``cargo-about-features`` so cargo dispatches to it:

    cargo about-features                          # write Cargo.features
    cargo about-features -t wasm32-unknown-unknown -o wasm.features
    cargo-about-features summary --manifest-path path/to/Cargo.toml

``-v`` is accepted both before and after the command name.
"""

from __future__ import annotations

import sys
from pathlib import Path

import click

from cargo_about_features.classifier import classify
from cargo_about_features.config import Settings
from cargo_about_features.exceptions import FeatureAnalysisError
from cargo_about_features.log import setup_logging
from cargo_about_features.metadata import load_graph
from cargo_about_features.models.report import ClassifiedReport
from cargo_about_features.report import format_summary, serialize, write_report

_manifest_option = click.option(
    "--manifest-path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Path to Cargo.toml (default: discovered from the current directory)",
)
_target_option = click.option(
    "-t",
    "--target",
    default=None,
    help="Target triple to filter the graph for (e.g. wasm32-unknown-unknown)",
)
_verbose_option = click.option("-v", "--verbose", is_flag=True, help="Verbose logging")


def _analyze(
    settings: Settings, manifest_path: Path | None, target: str | None, verbose: bool
) -> ClassifiedReport:
    if verbose:
        setup_logging(settings, verbose=True)
    graph = load_graph(manifest_path, target, cargo=settings.cargo)
    return classify(graph)


@click.group()
@_verbose_option
@click.pass_context
def main(ctx: click.Context, verbose: bool) -> None:
    """Report enabled, unused and dangling cargo features."""
    settings = Settings.from_env()
    setup_logging(settings, verbose=verbose)
    ctx.obj = settings


@main.command("about-features")
@_manifest_option
@_target_option
@_verbose_option
@click.option(
    "-o",
    "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Output file path (default: Cargo.features)",
)
@click.option("--stdout", "to_stdout", is_flag=True, help="Print the report instead of writing it")
@click.pass_obj
def about_features(
    settings: Settings,
    manifest_path: Path | None,
    target: str | None,
    verbose: bool,
    output: Path | None,
    to_stdout: bool,
) -> None:
    """Analyze features and write the TOML report."""
    output = output or Path(settings.output)
    try:
        report = _analyze(settings, manifest_path, target, verbose)
        if to_stdout:
            click.echo(serialize(report), nl=False)
            return
        write_report(report, output)
    except FeatureAnalysisError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    click.echo(f"Feature report for {len(report)} packages written to {output}")


@main.command("summary")
@_manifest_option
@_target_option
@_verbose_option
@click.option("-n", "--limit", default=5, show_default=True, help="Packages to list")
@click.pass_obj
def summary(
    settings: Settings,
    manifest_path: Path | None,
    target: str | None,
    verbose: bool,
    limit: int,
) -> None:
    """Print feature totals without writing a report."""
    try:
        report = _analyze(settings, manifest_path, target, verbose)
    except FeatureAnalysisError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    click.echo(format_summary(report, limit=limit))


if __name__ == "__main__":
    main()
