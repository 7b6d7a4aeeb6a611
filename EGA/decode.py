import argparse, sys
from bmp import save_bmp
from codec import decode_ega, dump_tokens
from encode import default_output, parse_cli
from errors import EGAError, ExitCode, exit_code_for

OUTEXT = ".BMP"

def main(argv=None) -> int:
    ap = argparse.ArgumentParser(prog="ega2bmp", description="Electronic Arts EGA image format to BMP image converter")
    ap.add_argument("infile", help="EA-EGA image")
    ap.add_argument("outfile", nargs="?", help=f"output path (default: infile with '{OUTEXT}' extension)")
    ap.add_argument("--top-down", action="store_true", help="write BMP rows top to bottom (negative height)")
    ap.add_argument("--dump-tokens", action="store_true", help="print every RLE token while decoding")
    args = parse_cli(ap, argv)
    if args is None:
        return ExitCode.USAGE

    outfile = args.outfile or default_output(args.infile, OUTEXT)

    print(f"[ega2bmp] opening EGA file: '{args.infile}'")
    try:
        with open(args.infile, "rb") as f:
            data = f.read()
    except OSError as e:
        print(f"[ega2bmp] error: unable to open input file: {e}", file=sys.stderr)
        return exit_code_for(e)
    print(f"[ega2bmp] file size: {len(data)}")

    try:
        if args.dump_tokens:
            for line in dump_tokens(data):
                print(line)
        pixels = decode_ega(data)
    except (EGAError, MemoryError) as e:
        print(f"[ega2bmp] error: {e}", file=sys.stderr)
        return exit_code_for(e)

    height, width = pixels.shape
    print(f"[ega2bmp] resolution: {width} x {height}")

    try:
        save_bmp(outfile, pixels, top_down=args.top_down)
    except OSError as e:
        print(f"[ega2bmp] error: unable to write BMP image: {e}", file=sys.stderr)
        return exit_code_for(e, writing=True)

    print(f"[ega2bmp] wrote {outfile}")
    return ExitCode.OK

if __name__ == "__main__":
    sys.exit(main())
