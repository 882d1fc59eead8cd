"""Main CLI entry point for related-files."""

import logging
import sys
from pathlib import Path

import click
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler

from .config import Config, RelatednessLevel, TraversalPolicy
from .delivery import deliver
from .errors import RelatedFilesError
from .progress import StatusProgress
from .runner import run_in_background


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _build_policy(base: TraversalPolicy, config_file: str | None, overrides: dict) -> TraversalPolicy:
    policy = TraversalPolicy.from_yaml(Path(config_file), base=base) if config_file else base
    data = policy.model_dump()
    for key, value in overrides.items():
        if value is None:
            continue
        if key == "excluded_packages":
            data[key] = data[key] + list(value)
        else:
            data[key] = value
    return TraversalPolicy.model_validate(data)


@click.group()
def cli():
    """related-files - Collect a source file together with the files it depends on."""
    pass


@cli.command()
@click.argument("root_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--depth", "-d", type=click.IntRange(0, 10), help="Maximum expansion depth")
@click.option(
    "--level",
    "-l",
    type=click.Choice([level.value for level in RelatednessLevel]),
    help="Relatedness level: strict (direct references only), medium, broad",
)
@click.option("--segments", type=click.IntRange(min=1), help="Package segments that define the scope")
@click.option("--exclude", "-x", multiple=True, help="Extra package prefix to exclude (repeatable)")
@click.option(
    "--include-dependencies",
    is_flag=True,
    help="Follow references outside the root's package scope",
)
@click.option("--implementations/--no-implementations", default=None, help="Pull in interface implementers")
@click.option("--javadoc/--no-javadoc", default=None, help="Keep leading doc comments")
@click.option("--prune/--no-prune", default=None, help="Drop text outside declarations")
@click.option("--decompiled", is_flag=True, help="Include decompiled library classes")
@click.option("--max-decompiled", type=click.IntRange(min=0), help="Cap on decompiled classes")
@click.option(
    "--all-references",
    is_flag=True,
    default=False,
    help="Let dependents pull in names the root never references (medium level)",
)
@click.option("--config", "config_file", type=click.Path(exists=True, dir_okay=False), help="Policy YAML file")
@click.option("--repo", type=click.Path(exists=True, file_okay=False), help="Project root (detected otherwise)")
@click.option("--classpath", "-cp", multiple=True, help="Classpath entry for decompilation (repeatable)")
@click.option("--output", "-o", type=click.Path(dir_okay=False), help="Write output to a file")
@click.option("--clipboard", "-c", is_flag=True, help="Copy output to the clipboard")
@click.option("--verbose", "-v", is_flag=True, help="Log traversal decisions")
def copy(
    root_file: str,
    depth: int | None,
    level: str | None,
    segments: int | None,
    exclude: tuple[str, ...],
    include_dependencies: bool,
    implementations: bool | None,
    javadoc: bool | None,
    prune: bool | None,
    decompiled: bool,
    max_decompiled: int | None,
    all_references: bool,
    config_file: str | None,
    repo: str | None,
    classpath: tuple[str, ...],
    output: str | None,
    clipboard: bool,
    verbose: bool,
):
    """Collect ROOT_FILE and its related files into one text blob.

    Examples:
        # Print a Java class and everything it references
        related-files copy src/main/java/com/acme/app/Service.java

        # Only what the root references directly, to the clipboard
        related-files copy Service.java --level strict --clipboard

        # Follow references two hops, including library classes
        related-files copy Service.java -d 2 --decompiled -cp lib/acme-core.jar
    """
    _configure_logging(verbose)
    config = Config.from_env()
    if classpath:
        config.classpath = config.classpath + list(classpath)

    try:
        policy = _build_policy(
            config.policy,
            config_file,
            {
                "max_depth": depth,
                "relatedness_level": level,
                "package_segments": segments,
                "excluded_packages": exclude or None,
                "include_dependencies": include_dependencies or None,
                "include_implementations": implementations,
                "include_javadoc": javadoc,
                "smart_pruning": prune,
                "include_decompiled": decompiled or None,
                "max_decompiled_files": max_decompiled,
                "only_direct_references": False if all_references else None,
            },
        )
    except (ValueError, ValidationError) as e:
        click.echo(f"Error: invalid policy: {e}", err=True)
        sys.exit(1)

    console = Console(stderr=True)
    try:
        with console.status("[bold green]Collecting related files...", spinner="dots") as status:
            result = run_in_background(
                Path(root_file),
                policy,
                config=config,
                progress=StatusProgress(status),
                repo=Path(repo) if repo else None,
            )
        destination = deliver(
            result.render(),
            output=Path(output) if output else None,
            clipboard=clipboard,
        )
    except RelatedFilesError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    for error in result.errors:
        click.echo(f"Skipped {error.path}: {error.message}", err=True)
    if result.cancelled:
        click.echo("Cancelled: output is partial", err=True)
    summary = f"Copied {result.file_count} files"
    if result.decompiled_count:
        summary += f" and {result.decompiled_count} decompiled classes"
    click.echo(f"{summary} to {destination}", err=True)


@cli.command()
@click.option("--config", "config_file", type=click.Path(exists=True, dir_okay=False), help="Policy YAML file")
def config(config_file: str | None):
    """Print the effective traversal policy as YAML."""
    policy = Config.from_env().policy
    try:
        if config_file:
            policy = TraversalPolicy.from_yaml(Path(config_file), base=policy)
    except (ValueError, ValidationError) as e:
        click.echo(f"Error: invalid policy: {e}", err=True)
        sys.exit(1)
    click.echo(policy.to_yaml(), nl=False)


if __name__ == "__main__":
    cli()
