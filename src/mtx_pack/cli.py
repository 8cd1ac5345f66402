"""MTX pack CLI - JPEG files to containers and back."""
from __future__ import annotations

from pathlib import Path

import click

from mtx_core.protocol import DEFAULT_QUALITY
from mtx_pack.pipeline import (
    convert_jpeg_to_mtx,
    convert_mtx_to_jpeg,
    pack_images,
    unpack_container,
)


def _optional(path: Path) -> Path | None:
    return None if str(path) == "-" else path


def _fail_closed(fn, *args, **kwargs):
    try:
        return fn(*args, **kwargs)
    except Exception as e:
        # Fail closed with a single-line reason, no stack trace.
        click.echo(f"FATAL: {e}")
        raise SystemExit(1)


def _describe(slot: str, payload: bytes, dims: tuple[int, int, int] | None) -> None:
    suffix = f" ({dims[0]}x{dims[1]}x{dims[2]})" if dims else ""
    click.echo(f"  {slot}: {len(payload)} bytes{suffix}")


@click.group()
def main() -> None:
    """Pack JPEG images into MTX containers and extract them again."""


@main.command("pack")
@click.argument("first", type=click.Path(exists=True, dir_okay=False, allow_dash=True, path_type=Path))
@click.argument("second", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("out", type=click.Path(dir_okay=False, path_type=Path))
@click.option("--quality", type=click.IntRange(1, 100), default=DEFAULT_QUALITY, show_default=True)
@click.option("--no-metadata", is_flag=True, help="Write the basic 12-byte header revision")
@click.option("--verbatim", is_flag=True, help="Store source JPEG bytes without recompressing")
def pack_cmd(first: Path, second: Path, out: Path, quality: int, no_metadata: bool, verbatim: bool) -> None:
    """Pack FIRST and SECOND into OUT. FIRST may be '-' for an empty first slot."""
    container = _fail_closed(
        pack_images,
        _optional(first),
        second,
        out,
        quality=quality,
        with_metadata=not no_metadata,
        recompress=not verbatim,
    )
    meta = container.metadata
    click.echo(f"PASS: MTX container written to {out}")
    _describe("First", container.first, meta.first if meta else None)
    _describe("Second", container.second, meta.second if meta else None)


@main.command("unpack")
@click.argument("mtx", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("first_out", type=click.Path(dir_okay=False, allow_dash=True, path_type=Path))
@click.argument("second_out", type=click.Path(dir_okay=False, path_type=Path))
@click.option("--no-metadata", is_flag=True, help="Read the basic 12-byte header revision")
def unpack_cmd(mtx: Path, first_out: Path, second_out: Path, no_metadata: bool) -> None:
    """Extract the payloads of MTX. FIRST_OUT may be '-' to skip the first slot."""
    container = _fail_closed(
        unpack_container,
        mtx,
        _optional(first_out),
        second_out,
        metadata_present=not no_metadata,
    )
    click.echo(f"PASS: Extracted payloads from {mtx}")
    _describe("First", container.first, None)
    _describe("Second", container.second, None)


@main.command("wrap")
@click.argument("jpeg", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("out", type=click.Path(dir_okay=False, path_type=Path))
def wrap_cmd(jpeg: Path, out: Path) -> None:
    """Wrap a single JPEG verbatim in a basic MTX container."""
    _fail_closed(convert_jpeg_to_mtx, jpeg, out)
    click.echo(f"PASS: MTX container written to {out}")


@main.command("extract")
@click.argument("mtx", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("out", type=click.Path(dir_okay=False, path_type=Path))
def extract_cmd(mtx: Path, out: Path) -> None:
    """Extract the JPEG held by a single-payload basic MTX container."""
    _fail_closed(convert_mtx_to_jpeg, mtx, out)
    click.echo(f"PASS: JPEG written to {out}")


if __name__ == "__main__":
    main()
