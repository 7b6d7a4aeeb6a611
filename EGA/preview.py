import argparse, os, sys
import matplotlib
import matplotlib.pyplot as plt
from bmp import palette_rgb
from codec import decode_ega
from encode import parse_cli
from errors import EGAError, ExitCode, exit_code_for

def render(pixels, path, title=None, dpi=100):
    """Save a decoded image through the EGA palette, one screen pixel per pixel."""
    h, w = pixels.shape
    fig = plt.figure(figsize=(w / dpi, h / dpi), dpi=dpi)
    ax = fig.add_axes([0, 0, 1, 1])
    ax.imshow(palette_rgb(pixels), interpolation="nearest")
    ax.axis("off")
    if title:
        fig.suptitle(title, fontsize=6)
    try:
        fig.savefig(path, dpi=dpi)
    finally:
        plt.close(fig)
    return path

def main(argv=None) -> int:
    ap = argparse.ArgumentParser(prog="egaview", description="Render an EA-EGA image to PNG")
    ap.add_argument("infile", help="EA-EGA image")
    ap.add_argument("outfile", nargs="?", help="output .png (default: infile with '.png' extension)")
    ap.add_argument("--show", action="store_true", help="also open a matplotlib window")
    args = parse_cli(ap, argv)
    if args is None:
        return ExitCode.USAGE

    if not args.show:
        matplotlib.use("Agg")

    outfile = args.outfile or os.path.splitext(args.infile)[0] + ".png"
    try:
        with open(args.infile, "rb") as f:
            pixels = decode_ega(f.read())
    except (EGAError, OSError, MemoryError) as e:
        print(f"[egaview] error: {e}", file=sys.stderr)
        return exit_code_for(e)

    try:
        render(pixels, outfile, title=os.path.basename(args.infile))
    except OSError as e:
        print(f"[egaview] error: unable to write image: {e}", file=sys.stderr)
        return exit_code_for(e, writing=True)
    print(f"[egaview] wrote {outfile} shape={pixels.shape}")

    if args.show:
        plt.imshow(palette_rgb(pixels), interpolation="nearest")
        plt.axis("off")
        plt.show()
    return ExitCode.OK

if __name__ == "__main__":
    sys.exit(main())
