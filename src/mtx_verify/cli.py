import json
from pathlib import Path
import click
from .logic import verify_container

@click.group()
def main():
    """Inspect MTX containers and report problems as canonical JSON."""

@main.command("container")
@click.argument("path", type=click.Path(dir_okay=False, path_type=Path))
@click.option("--no-metadata", is_flag=True, help="Expect the basic 12-byte header revision")
def container_cmd(path: Path, no_metadata: bool):
    """Verify one container. Exits 1 when the report is not PASS."""
    result = verify_container(path, metadata_present=not no_metadata)
    click.echo(json.dumps(result, sort_keys=True, separators=(",", ":"), ensure_ascii=False))
    if result["status"] != "PASS":
        raise SystemExit(1)

if __name__ == "__main__":
    main()
