import struct

from errors import DimensionOverflow, UnexpectedEof

# Header (little-endian):
# width_minus_1(u16) height_minus_1(u16)
# followed directly by the RLE token stream, bottom row first
HEADER_FMT = "<HH"
HEADER_SIZE = struct.calcsize(HEADER_FMT)

MAX_DIM = 0x10000


def pack_header(*, width: int, height: int) -> bytes:
    for name, v in (("width", width), ("height", height)):
        if not (1 <= v <= MAX_DIM):
            raise DimensionOverflow(f"{name} {v} out of range 1..{MAX_DIM}")
    return struct.pack(HEADER_FMT, width - 1, height - 1)


def unpack_header(data):
    if len(data) < HEADER_SIZE:
        raise UnexpectedEof("Malformed stream: header too short")
    w1, h1 = struct.unpack_from(HEADER_FMT, data, 0)
    return {"width": w1 + 1, "height": h1 + 1}


def write_header(f, *, width, height):
    f.write(pack_header(width=width, height=height))


def read_header(f):
    return unpack_header(f.read(HEADER_SIZE))
