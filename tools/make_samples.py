"""Generate sample JPEG inputs for MTX packing.

Usage:
  python tools/make_samples.py OUT_DIR [--size WxH]
"""
from pathlib import Path

from PIL import Image


def gradient(width, height, mode):
    """Deterministic test card: horizontal ramp in R, vertical ramp in G."""
    img = Image.new("RGB", (width, height))
    img.putdata([
        ((x * 255) // max(width - 1, 1), (y * 255) // max(height - 1, 1), 128)
        for y in range(height)
        for x in range(width)
    ])
    return img if mode == "RGB" else img.convert(mode)


def generate_samples(out_dir, size=(64, 48)):
    out = Path(out_dir)
    out.mkdir(parents=True, exist_ok=True)

    w, h = size
    first = out / "1.jpg"
    second = out / "2.jpg"
    gradient(w, h, "RGB").save(first, "JPEG", quality=90)
    gradient(h, w, "L").save(second, "JPEG", quality=90)

    print(f"GENERATED: {first} ({w}x{h} RGB), {second} ({h}x{w} L)")
    return first, second


if __name__ == "__main__":
    import sys

    args = [a for a in sys.argv[1:] if a]

    size = (64, 48)
    if "--size" in args:
        i = args.index("--size")
        if i + 1 >= len(args):
            raise SystemExit("--size requires a value")
        w, h = args[i + 1].lower().split("x")
        size = (int(w), int(h))
        args = args[:i] + args[i + 2:]

    generate_samples(args[0] if args else "samples", size)
