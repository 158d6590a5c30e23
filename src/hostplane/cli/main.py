"""Main CLI entry point for hostplane."""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Any

import click
import yaml
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from hostplane import __version__

if TYPE_CHECKING:
    from hostplane.core.config import HostplaneConfig
    from hostplane.core.models import Cluster, Seed

console = Console()

SNAPSHOT_KINDS = ("Secret", "ConfigMap", "Service")


class HostplaneContext:
    """Shared context for CLI commands with lazy initialization."""

    def __init__(self, config_path: str):
        """Initialize context with config path.

        Args:
            config_path: Path to configuration file
        """
        self.config_path = config_path
        self._config: HostplaneConfig | None = None

    @property
    def config(self) -> HostplaneConfig:
        """Get or create config lazily.

        A missing configuration file means defaults.
        """
        if self._config is None:
            from hostplane.core.config import HostplaneConfig
            from hostplane.utils.logging import setup_logging

            config_path = Path(self.config_path).expanduser()
            if config_path.exists():
                self._config = HostplaneConfig.from_file(str(config_path))
            else:
                self._config = HostplaneConfig()

            logging_config = self._config.logging
            setup_logging(logging_config.level, logging_config.format, logging_config.output)
        return self._config


def _load_documents(path: str) -> list[dict[str, Any]]:
    """Load every object from a YAML file, expanding ``List`` documents."""
    with open(path) as f:
        documents = [doc for doc in yaml.safe_load_all(f) if doc]

    objects: list[dict[str, Any]] = []
    for doc in documents:
        if isinstance(doc, dict) and "items" in doc:
            objects.extend(doc["items"] or [])
        elif isinstance(doc, list):
            objects.extend(doc)
        else:
            objects.append(doc)
    return objects


def _load_seeds(path: str) -> list[Seed]:
    from hostplane.adapters.k8s_adapter import seed_from_object

    return [seed_from_object(obj) for obj in _load_documents(path)]


def _load_clusters(path: str) -> list[Cluster]:
    from hostplane.adapters.k8s_adapter import cluster_from_object

    return [cluster_from_object(obj) for obj in _load_documents(path)]


def _load_cluster(path: str) -> Cluster:
    clusters = _load_clusters(path)
    if len(clusters) != 1:
        raise click.BadParameter(f"expected exactly one cluster in {path}, got {len(clusters)}")
    return clusters[0]


def _fail(message: str) -> None:
    console.print(f"[red]Error: {escape(message)}[/red]")
    sys.exit(1)


@click.group()
@click.version_option(version=__version__)
@click.option(
    "--config",
    type=click.Path(),
    default="~/.hostplane/config.yaml",
    help="Path to configuration file",
)
@click.pass_context
def cli(ctx: click.Context, config: str) -> None:
    """hostplane - Compile hosted Kubernetes control planes and guard the seed topology."""
    ctx.obj = HostplaneContext(config_path=config)


@cli.command()
@click.pass_obj
def versions(hostplane_ctx: HostplaneContext) -> None:
    """List the supported master versions."""
    from hostplane.core.exceptions import ConfigurationError
    from hostplane.core.versions import VersionRegistry

    try:
        registry = VersionRegistry(hostplane_ctx.config.versions.master)
    except ConfigurationError as e:
        _fail(str(e))
        return

    table = Table(title="Master versions")
    table.add_column("Version", style="cyan")
    table.add_column("Default", style="green")

    for version in registry.list_versions():
        table.add_row(str(version.parsed), "yes" if version.default else "")

    console.print(table)


@cli.command()
@click.argument("cluster_file", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--seeds", "seeds_file", type=click.Path(exists=True, dir_okay=False), required=True,
    help="YAML file with the Seed objects",
)
@click.option(
    "--snapshot", "snapshot_file", type=click.Path(exists=True, dir_okay=False), required=True,
    help="YAML file with the namespace's secrets, config maps and services",
)
@click.option(
    "--output-dir", type=click.Path(file_okay=False), default=".",
    help="Directory the compiled objects are written to",
)
@click.option("--kubernetes-version", "version", default=None, help="Kubernetes version override")
@click.pass_obj
def render(
    hostplane_ctx: HostplaneContext,
    cluster_file: str,
    seeds_file: str,
    snapshot_file: str,
    output_dir: str,
    version: str | None,
) -> None:
    """Compile every control plane object of a cluster into YAML files."""
    from hostplane.adapters.memory import InMemoryObjectView
    from hostplane.api.datacenters import resolve_datacenter
    from hostplane.core.exceptions import HostplaneError
    from hostplane.core.versions import VersionRegistry
    from hostplane.resources import TemplateContext, compile_all
    from hostplane.resources.serialize import to_yaml
    from hostplane.utils.logging import get_logger

    logger = get_logger(__name__)

    try:
        config = hostplane_ctx.config
        cluster = _load_cluster(cluster_file)
        resolved = resolve_datacenter(_load_seeds(seeds_file), cluster.datacenter_name)

        wanted = version or cluster.spec.version
        if VersionRegistry(config.versions.master).get(wanted) is None:
            _fail(f"unsupported kubernetes version {wanted}")
            return

        snapshot: dict[str, list[dict[str, Any]]] = {kind: [] for kind in SNAPSHOT_KINDS}
        for obj in _load_documents(snapshot_file):
            if obj.get("kind") in snapshot:
                snapshot[obj["kind"]].append(obj)

        context = TemplateContext(
            cluster,
            resolved.datacenter,
            secrets=InMemoryObjectView(snapshot["Secret"]),
            config_maps=InMemoryObjectView(snapshot["ConfigMap"]),
            services=InMemoryObjectView(snapshot["Service"]),
            config=config,
            version=wanted,
        )
        result = compile_all(context)
    except (HostplaneError, ValueError, yaml.YAMLError, OSError) as e:
        _fail(str(e))
        return

    out = Path(output_dir)
    out.mkdir(parents=True, exist_ok=True)
    for name, obj in sorted(result.objects.items()):
        (out / f"{name}.yaml").write_text(to_yaml(obj))
        console.print(f"  [green]✓[/green] {name}")

    logger.info("render_completed", cluster=cluster.name, output_dir=str(out))

    if not result.ok:
        for key, error in sorted(result.errors.items()):
            console.print(f"  [red]✗ {key}: {escape(str(error))}[/red]")
        sys.exit(1)

    console.print(f"\n[bold green]Wrote {len(result.objects)} objects to {out}[/bold green]")


@cli.command()
@click.argument("cluster_file", type=click.Path(exists=True, dir_okay=False))
@click.argument("node_file", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--seeds", "seeds_file", type=click.Path(exists=True, dir_okay=False), required=True,
    help="YAML file with the Seed objects",
)
@click.option(
    "--ssh-keys", "ssh_keys_file", type=click.Path(exists=True, dir_okay=False), default=None,
    help="YAML file with the candidate SSH keys",
)
@click.pass_obj
def machine(
    hostplane_ctx: HostplaneContext,
    cluster_file: str,
    node_file: str,
    seeds_file: str,
    ssh_keys_file: str | None,
) -> None:
    """Print the Machine manifest of a worker node."""
    from hostplane.api.datacenters import resolve_datacenter
    from hostplane.core.exceptions import HostplaneError
    from hostplane.core.models import Node, SSHKey
    from hostplane.machine import compile_machine
    from hostplane.resources.serialize import to_yaml

    try:
        _ = hostplane_ctx.config
        cluster = _load_cluster(cluster_file)
        nodes = _load_documents(node_file)
        if len(nodes) != 1:
            raise click.BadParameter(f"expected exactly one node in {node_file}, got {len(nodes)}")
        node = Node.model_validate(nodes[0])

        keys = []
        if ssh_keys_file:
            keys = [SSHKey.model_validate(obj) for obj in _load_documents(ssh_keys_file)]

        resolved = resolve_datacenter(_load_seeds(seeds_file), cluster.datacenter_name)
        manifest = compile_machine(cluster, node, resolved.datacenter, keys)
    except (HostplaneError, ValueError, yaml.YAMLError, OSError) as e:
        _fail(str(e))
        return

    click.echo(to_yaml(manifest), nl=False)


@cli.command("validate-seed")
@click.argument("request_file", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--seeds", "seeds_file", type=click.Path(exists=True, dir_okay=False), required=True,
    help="YAML file with the currently stored Seed objects",
)
@click.option(
    "--clusters", "clusters_file", type=click.Path(exists=True, dir_okay=False), default=None,
    help="YAML file with the Cluster objects of the fleet",
)
@click.pass_obj
def validate_seed(
    hostplane_ctx: HostplaneContext,
    request_file: str,
    seeds_file: str,
    clusters_file: str | None,
) -> None:
    """Run seed admission for a request; exits 1 when the request is denied."""
    from hostplane.adapters.k8s_adapter import seed_from_object
    from hostplane.adapters.memory import InMemoryClusterStore, InMemorySeedStore
    from hostplane.core.exceptions import HostplaneError
    from hostplane.validation import AdmissionRequest, build_seed_admission

    async def _validate() -> bool:
        with open(request_file) as f:
            raw = yaml.safe_load(f) or {}

        previous = raw.get("previousObject")
        request = AdmissionRequest(
            operation=raw.get("operation", ""),
            proposed_object=seed_from_object(raw.get("proposedObject") or {}),
            previous_object=seed_from_object(previous) if previous else None,
        )

        clusters = _load_clusters(clusters_file) if clusters_file else []
        handler = build_seed_admission(
            hostplane_ctx.config,
            InMemoryClusterStore(clusters),
            InMemorySeedStore(_load_seeds(seeds_file)),
        )
        response = await handler.handle(request)

        if response.allowed:
            console.print(f"[green]✓ Seed {request.proposed_object.name} allowed[/green]")
        else:
            console.print(f"[red]✗ Denied: {escape(response.message or '')}[/red]")
        return response.allowed

    try:
        allowed = asyncio.run(_validate())
    except (HostplaneError, ValueError, yaml.YAMLError, OSError) as e:
        _fail(str(e))
        return

    if not allowed:
        sys.exit(1)


def main() -> None:
    """Console script entry point."""
    cli()


if __name__ == "__main__":
    main()
