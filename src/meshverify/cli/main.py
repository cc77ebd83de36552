"""Main CLI entry point for meshverify."""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING

import click
from rich.console import Console

from meshverify import __version__

if TYPE_CHECKING:
    from meshverify.core.config import VerifierConfig

console = Console()


class VerifierContext:
    """Shared context for CLI commands with lazy initialization."""

    def __init__(self, config_path: str | None):
        """Initialize context with config path.

        Args:
            config_path: Path to configuration file (optional)
        """
        self.config_path = config_path
        self._config: VerifierConfig | None = None

    @property
    def config(self) -> VerifierConfig:
        """Get or create config lazily."""
        if self._config is None:
            from meshverify.core.config import VerifierConfig

            if self.config_path:
                self._config = VerifierConfig.from_file(self.config_path)
            else:
                self._config = VerifierConfig()
        return self._config


@click.group()
@click.version_option(version=__version__)
@click.option(
    "--config",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="Path to configuration file",
)
@click.pass_context
def cli(ctx: click.Context, config: str | None) -> None:
    """meshverify - Verify that an Istio installation is present and healthy."""
    ctx.obj = VerifierContext(config_path=config)


@cli.command(name="verify-install")
@click.option(
    "-f",
    "--filename",
    "filenames",
    multiple=True,
    type=click.Path(exists=True),
    help="Manifest file or directory whose resources must exist (repeatable)",
)
@click.option("-r", "--revision", default="", help="Control plane revision to verify")
@click.option(
    "-d",
    "--manifests",
    "manifests_path",
    default=None,
    help="Install package path override used when rendering IstioOperators",
)
@click.option("-i", "--istio-namespace", default=None, help="Istio control plane namespace")
@click.option("--kubeconfig", default=None, help="Path to kubeconfig file")
@click.option("--context", "kube_context", default=None, help="Kubernetes context to use")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"], case_sensitive=False),
    default=None,
    help="Log level",
)
@click.option(
    "--log-format",
    type=click.Choice(["json", "console"]),
    default=None,
    help="Log format",
)
@click.pass_context
def verify_install(
    ctx: click.Context,
    filenames: tuple[str, ...],
    revision: str,
    manifests_path: str | None,
    istio_namespace: str | None,
    kubeconfig: str | None,
    kube_context: str | None,
    log_level: str | None,
    log_format: str | None,
) -> None:
    """Verify an Istio installation against manifests or the in-cluster IstioOperator."""
    from meshverify.core.exceptions import InstallationFailedError, MeshVerifyError
    from meshverify.utils.logging import get_logger, log_error, setup_logging
    from meshverify.verifier import ManifestFilesSource, RevisionSource, StatusVerifier

    logger = get_logger(__name__)

    try:
        base = ctx.obj.config
        config = base.with_overrides(
            istio_namespace=istio_namespace,
            manifests_path=manifests_path,
            kubernetes=base.kubernetes.model_copy(
                update={
                    key: value
                    for key, value in {"kubeconfig": kubeconfig, "context": kube_context}.items()
                    if value is not None
                }
            ),
            logging=base.logging.model_copy(
                update={
                    key: value
                    for key, value in {"level": log_level, "format": log_format}.items()
                    if value is not None
                }
            ),
        )

        setup_logging(
            level=config.logging.level,
            format=config.logging.format,
            output=config.logging.output,
        )

        if filenames:
            source = ManifestFilesSource(filenames=filenames)
        else:
            source = RevisionSource(revision=revision)

        verifier = StatusVerifier.from_config(config, console=console)
        verifier.verify(source)

    except MeshVerifyError as e:
        cause = e.cause if isinstance(e, InstallationFailedError) else None
        log_error(logger, e, operation="verify_install", cause=str(cause) if cause else None)
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)


def main() -> None:
    """Console script entry point."""
    cli()


if __name__ == "__main__":
    main()
