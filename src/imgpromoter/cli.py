"""imgpromoter CLI - derive promotion edges and run safety checks."""

import json
import logging
from pathlib import Path

import typer
import yaml  # type: ignore[import-untyped]
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from imgpromoter import __version__
from imgpromoter.checks import (
    ImageRemovalCheck,
    ImageSizeCheck,
    run_checks,
    write_markdown_report,
)
from imgpromoter.config import load_config
from imgpromoter.files import (
    GenerateManifestOptions,
    PromoteFilesOptions,
    generate_file_manifest,
    read_file_manifest,
)
from imgpromoter.manifests import baseline_edges_at, load_manifests, repo_relative_path
from imgpromoter.registry import PromotionEdge, PromotionError, to_promotion_edges
from imgpromoter.sizes import collect_digest_sizes, crane_size_fetcher, load_size_file

# Exit codes: 0 checks passed, 1 invalid input or lookup failure, 2 policy violation.
EXIT_ERROR = 1
EXIT_VIOLATION = 2

cli = typer.Typer(
    name="imgpromoter",
    help="imgpromoter - container image promotion edges and safety checks",
    no_args_is_help=True,
)
console = Console()


def _version_option_callback(value: bool) -> None:
    """Handle eager --version option."""
    if value:
        typer.echo(__version__)
        raise typer.Exit()


@cli.callback()
def _cli_callback(
    version: bool = typer.Option(
        False,
        "--version",
        help="Show imgpromoter version and exit.",
        is_eager=True,
        callback=_version_option_callback,
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    """Configure logging for every invocation."""
    _ = version
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _print_error(error: object) -> None:
    console.print(f"[bold red]Error:[/bold red] {escape(str(error))}", soft_wrap=True)


def _edge_to_dict(edge: PromotionEdge) -> dict[str, str]:
    return {
        "image": edge.image_name,
        "digest": edge.digest,
        "tag": edge.tag,
        "src": edge.src_registry.name,
        "dst": edge.dst_registry.name,
    }


@cli.command()
def edges(
    manifests: Path = typer.Argument(..., help="Manifest file or directory of manifests"),
    as_json: bool = typer.Option(False, "--json", help="Print edges as JSON"),
) -> None:
    """Print the promotion edges derived from manifests."""
    try:
        derived = to_promotion_edges(load_manifests(manifests))
    except PromotionError as e:
        _print_error(e)
        raise typer.Exit(EXIT_ERROR) from e

    ordered = sorted(derived)
    if as_json:
        typer.echo(json.dumps([_edge_to_dict(e) for e in ordered], indent=2, sort_keys=True))
        return

    table = Table(title=f"{len(ordered)} promotion edge(s)")
    for column in ("image", "digest", "tag", "src", "dst"):
        table.add_column(column)
    for edge in ordered:
        row = _edge_to_dict(edge)
        table.add_row(*(row[c] for c in ("image", "digest", "tag", "src", "dst")))
    console.print(table)


@cli.command()
def check(
    manifests: Path | None = typer.Argument(
        None, help="Proposed manifest file or directory (default: <repo-root>/<manifest_dir>)"
    ),
    baseline: Path | None = typer.Option(
        None, "--baseline", help="Trusted manifest file or directory to compare against"
    ),
    baseline_rev: str | None = typer.Option(
        None, "--baseline-rev", help="Git revision holding the trusted manifests"
    ),
    sizes: Path | None = typer.Option(
        None, "--sizes", help="YAML/JSON file mapping digest to size in bytes"
    ),
    query_registry: bool = typer.Option(
        False, "--query-registry", help="Look up image sizes with `crane manifest`"
    ),
    max_image_size: int | None = typer.Option(
        None, "--max-image-size", min=1, help="Size ceiling in MB (overrides config)"
    ),
    repo_root: Path = typer.Option(
        Path("."), "--repo-root", help="Repository holding .imgpromoter/ config and git history"
    ),
    report: Path | None = typer.Option(None, "--report", help="Write a markdown report here"),
) -> None:
    """Run the image removal and image size checks."""
    if baseline is not None and baseline_rev is not None:
        _print_error("use only one of --baseline and --baseline-rev")
        raise typer.Exit(EXIT_ERROR)
    if sizes is not None and query_registry:
        _print_error("use only one of --sizes and --query-registry")
        raise typer.Exit(EXIT_ERROR)

    try:
        config = load_config(repo_root).with_overrides(max_image_size_mb=max_image_size)
        if manifests is None:
            manifests = repo_root / config.manifest_dir
        proposed = to_promotion_edges(load_manifests(manifests))

        baseline_edges = None
        if baseline is not None:
            baseline_edges = to_promotion_edges(load_manifests(baseline))
        elif baseline_rev is not None:
            baseline_edges = baseline_edges_at(
                repo_root, baseline_rev, repo_relative_path(manifests, repo_root)
            )

        standalone = []
        if sizes is not None or query_registry:
            if sizes is not None:
                digest_sizes = load_size_file(sizes)
            else:
                digest_sizes = collect_digest_sizes(
                    proposed, crane_size_fetcher, max_workers=config.size_lookup_workers
                )
            standalone.append(
                ImageSizeCheck(
                    max_image_size=config.max_image_size_mb,
                    digest_size_bytes=digest_sizes,
                    edges=proposed,
                )
            )
    except (PromotionError, RuntimeError) as e:
        _print_error(e)
        raise typer.Exit(EXIT_ERROR) from e

    result = run_checks(
        proposed,
        baseline=baseline_edges,
        comparisons=[ImageRemovalCheck()],
        standalone=standalone,
    )

    for item in result.results:
        style = {"pass": "green", "fail": "red", "skip": "yellow"}[item.status]
        console.print(f"[{style}]{item.status.upper()}[/{style}] {item.check_id}")
        if item.status == "fail":
            console.print(item.message, markup=False, highlight=False, soft_wrap=True)

    if report is not None:
        report.parent.mkdir(parents=True, exist_ok=True)
        with open(report, "w", encoding="utf-8") as f:
            write_markdown_report(f, result)

    if not result.passed:
        console.print("[red]✗ Promotion checks failed[/red]")
        raise typer.Exit(EXIT_VIOLATION)
    console.print("[green]✓ Promotion checks passed[/green]")


@cli.command(name="hash-files")
def hash_files(
    base_dir: Path = typer.Argument(..., help="Directory containing the files to hash"),
) -> None:
    """Print a file promotion manifest for every file under BASE_DIR."""
    try:
        manifest = generate_file_manifest(GenerateManifestOptions(base_dir=base_dir))
    except (ValueError, RuntimeError) as e:
        _print_error(e)
        raise typer.Exit(EXIT_ERROR) from e
    typer.echo(yaml.safe_dump(manifest.to_dict(), sort_keys=False), nl=False)


@cli.command(name="read-files")
def read_files(
    filestores: Path = typer.Argument(..., help="YAML file listing the filestores"),
    files: Path = typer.Argument(..., help="Files YAML, or a directory of them (hash-files output)"),
) -> None:
    """Validate and print the combined file promotion manifest."""
    try:
        manifest = read_file_manifest(
            PromoteFilesOptions(filestores_path=filestores, files_path=files)
        )
    except PromotionError as e:
        _print_error(e)
        raise typer.Exit(EXIT_ERROR) from e
    typer.echo(yaml.safe_dump(manifest.to_dict(), sort_keys=False), nl=False)


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
