"""Thin CLI wrapper for swift_docker.

This module provides the command-line interface using Typer.
All business logic is delegated to core modules. Every library error is
mapped to its exit code here, and only here.
"""

import json
import logging
from pathlib import Path
from typing import Annotated, NoReturn

import typer
from rich.console import Console
from rich.logging import RichHandler

from swift_docker import __version__
from swift_docker.config import Settings, get_settings, print_settings_json
from swift_docker.errors import (
    ImageBuildError,
    ImageDeployError,
    SwiftDockerError,
)

app = typer.Typer(
    name="swift-docker",
    help="swift-docker - build Swift Docker images from a manifest and a Dockerfile template",
    no_args_is_help=True,
)
console = Console()
err_console = Console(stderr=True)

# Lines of docker output shown when a build or push fails
OUTPUT_TAIL_LINES = 20

STAGE_TITLES = {
    "rendering": "📝  Rendering",
    "writing": "💾  Writing",
    "building": "🛠  Building",
    "deploying": "📤  Deploying",
}

ManifestOption = Annotated[
    Path | None,
    typer.Option("--manifest", "-m", help="Path to the build manifest"),
]
UserOption = Annotated[
    str | None,
    typer.Option("--user", "-u", help="Registry username to tag the images with"),
]


def configure_logging(level: str) -> None:
    """Send log records to stderr through rich."""
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"swift-docker version {__version__}")
        raise typer.Exit()


def _settings(
    manifest: Path | None = None,
    user: str | None = None,
    template: Path | None = None,
    scripts_dir: Path | None = None,
) -> Settings:
    """Return settings with CLI flags applied over env vars and defaults."""
    overrides: dict[str, object] = {}
    if manifest is not None:
        overrides["manifest_path"] = manifest
    if user is not None:
        overrides["owner"] = user
    if template is not None:
        overrides["template_path"] = template
    if scripts_dir is not None:
        overrides["build_scripts_dir"] = scripts_dir
    return get_settings().model_copy(update=overrides)


def _fail(error: SwiftDockerError) -> NoReturn:
    """Report an error and exit with its exit code."""
    console.print(f"[red]✗ {error.message}[/red]")
    if isinstance(error, (ImageBuildError, ImageDeployError)) and error.output:
        tail = error.output.rstrip().splitlines()[-OUTPUT_TAIL_LINES:]
        console.print("[bold]docker output (last lines):[/bold]")
        for line in tail:
            console.print(f"  {line}", markup=False, highlight=False)
    raise typer.Exit(code=error.exit_code)


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
    log_level: Annotated[
        str | None,
        typer.Option("--log-level", help="Logging level (default from settings)"),
    ] = None,
) -> None:
    """swift-docker - build Swift Docker images from a manifest."""
    configure_logging((log_level or get_settings().log_level).upper())


@app.command()
def config(
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Output as JSON"),
    ] = False,
) -> None:
    """Show effective configuration."""
    settings = get_settings()
    if json_output:
        typer.echo(print_settings_json(settings))
        return

    console.print("[bold]Effective Configuration:[/bold]")
    console.print()
    console.print("[bold]Inputs:[/bold]")
    console.print(f"  Manifest:            {settings.manifest_path}")
    console.print(f"  Dockerfile template: {settings.template_path}")
    console.print(f"  Build scripts:       {settings.build_scripts_dir}")
    console.print()
    console.print("[bold]Outputs:[/bold]")
    console.print(f"  Build directory:     {settings.scratch_dir}")
    console.print(f"  Owner:               {settings.owner or '(none)'}")
    console.print()
    console.print("[bold]Docker:[/bold]")
    console.print(f"  Executable:          {settings.docker_binary}")
    console.print(f"  Build timeout:       {settings.build_timeout or '(none)'}")
    console.print(f"  Push timeout:        {settings.push_timeout or '(none)'}")
    console.print()
    console.print(f"Log level: {settings.log_level}")


@app.command()
def make(
    manifest: ManifestOption = None,
    user: UserOption = None,
    deploy: Annotated[
        bool,
        typer.Option("--deploy", help="Push the images once they are built"),
    ] = False,
    template: Annotated[
        Path | None,
        typer.Option("--template", "-t", help="Path to the Dockerfile template"),
    ] = None,
    scripts_dir: Annotated[
        Path | None,
        typer.Option("--scripts-dir", help="Directory holding the build scripts"),
    ] = None,
) -> None:
    """Build Docker images for every target and platform of the manifest."""
    from swift_docker.builds.recap import recap_tables
    from swift_docker.builds.service import make_images
    from swift_docker.builds.tasks import BuildTask
    from swift_docker.types import TaskStage

    settings = _settings(manifest, user, template, scripts_dir)

    with console.status("🔎  Processing context") as status:

        def on_stage(task: BuildTask, stage: TaskStage) -> None:
            if stage == TaskStage.DONE:
                console.print(f"[green]✓ {task.image_name}[/green]")
            elif stage == TaskStage.FAILED:
                console.print(f"[red]✗ {task.image_name}[/red]")
            else:
                status.update(f"{STAGE_TITLES[stage.value]} {task.image_name}")

        try:
            loaded, report = make_images(
                deploy=deploy, settings=settings, on_stage=on_stage
            )
        except SwiftDockerError as e:
            status.stop()
            _fail(e)

    action = "Built and deployed" if deploy else "Built"
    console.print(f"[bold]📦  {action} {report.succeeded} Docker image(s)[/bold]")
    console.print()
    console.print("\n".join(recap_tables(loaded, settings.owner)), markup=False)
    console.print("[green]✅  Done![/green]")
    console.print("🐳  Enjoy using your Docker images!")


@app.command()
def plan(
    manifest: ManifestOption = None,
    user: UserOption = None,
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Output as JSON"),
    ] = False,
) -> None:
    """List the build tasks the manifest expands to, without building."""
    from swift_docker.builds.tasks import expand_tasks
    from swift_docker.manifest.io import load_manifest
    from swift_docker.template import template_value

    settings = _settings(manifest, user)
    try:
        loaded = load_manifest(settings.manifest_path)
    except SwiftDockerError as e:
        _fail(e)

    tasks = expand_tasks(loaded, owner=settings.owner)

    if json_output:
        output = [
            {
                "name": t.name,
                "image_name": t.image_name,
                "platform": t.platform.name,
                "swift_version": t.target.swift_version,
                "context": {
                    token.value: template_value(value)
                    for token, value in t.context.items()
                },
            }
            for t in tasks
        ]
        typer.echo(json.dumps(output, indent=2))
        return

    console.print(f"[bold]{len(tasks)} build task(s):[/bold]")
    for t in tasks:
        console.print(f"  [green]{t.image_name}[/green]")
        console.print(f"    Swift: {t.target.swift_version}")
        console.print(f"    Platform: {t.platform.name} ({t.platform.source_image_tag})")


@app.command("render")
def render_cmd(
    manifest: ManifestOption = None,
    user: UserOption = None,
    template: Annotated[
        Path | None,
        typer.Option("--template", "-t", help="Path to the Dockerfile template"),
    ] = None,
    output_dir: Annotated[
        Path,
        typer.Option("--output-dir", "-o", help="Directory to write Dockerfiles into"),
    ] = Path("Dockerfiles"),
) -> None:
    """Render one Dockerfile per build task without building."""
    from swift_docker.builds.service import render_dockerfiles
    from swift_docker.builds.tasks import expand_tasks
    from swift_docker.manifest.io import load_manifest
    from swift_docker.template import load_template

    settings = _settings(manifest, user, template)
    try:
        loaded = load_manifest(settings.manifest_path)
        template_lines = load_template(settings.template_path)
        paths = render_dockerfiles(
            expand_tasks(loaded, owner=settings.owner), template_lines, output_dir
        )
    except SwiftDockerError as e:
        _fail(e)

    console.print(f"[green]✓ Wrote {len(paths)} Dockerfile(s) to {output_dir}[/green]")
    for path in paths:
        console.print(f"  {path}")


@app.command()
def validate(manifest: ManifestOption = None) -> None:
    """Validate a manifest without building."""
    from swift_docker.builds.tasks import expand_tasks
    from swift_docker.manifest.io import load_manifest

    settings = _settings(manifest)
    try:
        loaded = load_manifest(settings.manifest_path)
    except SwiftDockerError as e:
        _fail(e)

    console.print(f"[green]✓ Valid manifest: {settings.manifest_path}[/green]")
    console.print(f"  Platforms: {len(loaded.platforms)}")
    console.print(f"  Targets: {len(loaded.targets)}")
    console.print(f"  Build tasks: {len(expand_tasks(loaded))}")


@app.command()
def recap(
    manifest: ManifestOption = None,
    user: UserOption = None,
) -> None:
    """Print Markdown tables of the images the manifest produces."""
    from swift_docker.builds.recap import recap_tables
    from swift_docker.manifest.io import load_manifest

    settings = _settings(manifest, user)
    try:
        loaded = load_manifest(settings.manifest_path)
    except SwiftDockerError as e:
        _fail(e)

    console.print("\n".join(recap_tables(loaded, settings.owner)), markup=False)


if __name__ == "__main__":
    app()
