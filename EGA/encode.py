import argparse, os, sys
from bmp import load_bmp
from codec import decode_ega, encode_ega
from errors import EGAError, ExitCode, exit_code_for
from metrics import compression_ratio, mismatch_count

OUTEXT = ".EGA"

def default_output(infile: str, ext: str = OUTEXT) -> str:
    return os.path.splitext(infile)[0] + ext

def parse_cli(ap, argv):
    """parse_args, but usage errors become None instead of exit status 2."""
    try:
        return ap.parse_args(argv)
    except SystemExit as e:
        if e.code:
            return None
        raise

def main(argv=None) -> int:
    ap = argparse.ArgumentParser(prog="bmp2ega", description="BMP image to Electronic Arts EGA image format converter")
    ap.add_argument("infile", help="16 colour, uncompressed .bmp")
    ap.add_argument("outfile", nargs="?", help=f"output path (default: infile with '{OUTEXT}' extension)")
    ap.add_argument("--round-trip", action="store_true", help="decode the result again and compare with the source")
    args = parse_cli(ap, argv)
    if args is None:
        return ExitCode.USAGE

    outfile = args.outfile or default_output(args.infile)

    try:
        pixels, bottom_up = load_bmp(args.infile)
    except (EGAError, OSError, MemoryError) as e:
        print(f"[bmp2ega] error: unable to read BMP image: {e}", file=sys.stderr)
        return exit_code_for(e)

    height, width = pixels.shape
    try:
        data = encode_ega(pixels, bottom_up=bottom_up)
    except (EGAError, MemoryError) as e:
        print(f"[bmp2ega] error: {e}", file=sys.stderr)
        return exit_code_for(e)

    print(f"[bmp2ega] creating EGA file: '{outfile}'")
    try:
        with open(outfile, "wb") as f:
            f.write(data)
    except OSError as e:
        print(f"[bmp2ega] error: unable to write file: {e}", file=sys.stderr)
        return exit_code_for(e, writing=True)

    print(f"[bmp2ega] wrote {outfile} {width}x{height}, {len(data)}B, "
          f"ratio={compression_ratio(width, height, len(data)):.2f}")

    if args.round_trip:
        top_down = pixels if not bottom_up else pixels[::-1]
        back = decode_ega(data)
        bad = mismatch_count(top_down, back)
        print(f"[bmp2ega] round-trip: {bad} mismatched pixels")
        if bad:
            return ExitCode.CORRUPT

    print("[bmp2ega] done")
    return ExitCode.OK

if __name__ == "__main__":
    sys.exit(main())
