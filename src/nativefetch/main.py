"""CLI entry point for the native artifact installer."""

import sys
from pathlib import Path
from typing import Annotated

import typer
from py_app_dev.core.exceptions import UserNotificationException
from py_app_dev.core.logging import logger, setup_logger, time_it

from nativefetch import __version__
from nativefetch.exceptions import NativeFetchError
from nativefetch.fetcher import FetchSettings, NativeFetcher, load_manifest
from nativefetch.github import DEFAULT_API_URL

package_name = "nativefetch"
ERROR_CONTEXT = "Native Installer"

app = typer.Typer(
    name=package_name,
    help="Resolve and download the platform-specific native binaries of a package.",
    no_args_is_help=True,
    add_completion=False,
)

WorkDirOption = Annotated[Path, typer.Option("--cwd", help="Directory to extract artifacts into.")]
ManifestOption = Annotated[Path | None, typer.Option("--manifest", "-m", help="Manifest file (default: package.json in --cwd).")]
RunIdOption = Annotated[str | None, typer.Option("--run-id", envvar="GITHUB_RUN_ID", help="GitHub Actions run id for github_artifact:// hosts.")]
TokenOption = Annotated[str | None, typer.Option("--github-token", envvar="GH_TOKEN", help="GitHub token for github_artifact:// hosts.", show_default=False)]
ApiUrlOption = Annotated[str, typer.Option("--github-api-url", envvar="GITHUB_API_URL", help="GitHub REST API base URL.")]


@app.callback(invoke_without_command=True)
def version(
    version: bool = typer.Option(None, "--version", "-v", is_eager=True, help="Show version and exit."),
) -> None:
    if version:
        typer.echo(f"{package_name} {__version__}")
        raise typer.Exit()


def _report_error(exc: NativeFetchError) -> None:
    logger.error(f"{ERROR_CONTEXT}: {exc}")


@app.command(help="Download and extract the native artifacts matching this host.")
@time_it("install")
def install(
    work_dir: WorkDirOption = Path("."),
    manifest: ManifestOption = None,
    run_id: RunIdOption = None,
    github_token: TokenOption = None,
    github_api_url: ApiUrlOption = DEFAULT_API_URL,
    progress: Annotated[bool, typer.Option("--progress/--no-progress", help="Show download progress bars.")] = True,
) -> None:
    settings = FetchSettings(
        work_dir=work_dir.absolute(),
        manifest_path=manifest,
        run_id=run_id,
        github_token=github_token,
        github_api_url=github_api_url,
        show_progress=progress,
    )
    try:
        NativeFetcher(settings).install()
    except NativeFetchError as e:
        _report_error(e)
        raise typer.Exit(1) from e


@app.command(help="Show the download URL of every artifact without downloading.")
def resolve(
    work_dir: WorkDirOption = Path("."),
    manifest: ManifestOption = None,
    run_id: RunIdOption = None,
    github_token: TokenOption = None,
    github_api_url: ApiUrlOption = DEFAULT_API_URL,
) -> None:
    settings = FetchSettings(
        work_dir=work_dir.absolute(),
        manifest_path=manifest,
        run_id=run_id,
        github_token=github_token,
        github_api_url=github_api_url,
    )
    fetcher = NativeFetcher(settings)
    try:
        resolutions = fetcher.resolve(load_manifest(settings.manifest_file))
    except NativeFetchError as e:
        _report_error(e)
        raise typer.Exit(1) from e

    typer.echo(f"Host: {fetcher.facts.platform}-{fetcher.facts.arch} (libc: {fetcher.facts.libc})")
    for resolution in resolutions:
        status = "download" if resolution.selected else "skip"
        typer.echo(f"  [{status}] {resolution.artifact.name}")
        if resolution.artifact.url != resolution.artifact.name:
            typer.echo(f"           {resolution.artifact.url}")


def main() -> int:
    try:
        setup_logger()
        app()
        return 0
    except UserNotificationException as e:
        logger.error(f"{ERROR_CONTEXT}: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
