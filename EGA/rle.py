from typing import Iterable, Iterator, NamedTuple, Optional, Tuple

from errors import CorruptStream, SizeMismatch, UnexpectedEof

# Control byte: high bit clear -> literal of (code + 1) bytes,
#               high bit set   -> repeat next byte ((code & 0x7F) + 3) times
REPEAT_FLAG = 0x80
MIN_RUN = 3
MAX_LITERAL = 128
MAX_REPEAT = 130


class Token(NamedTuple):
    offset: int     # position of the control byte in the stream
    repeat: bool
    length: int     # decoded span in bytes
    data: bytes     # value byte (repeat) or the literal bytes

    def expand(self) -> bytes:
        return self.data * self.length if self.repeat else self.data


def find_run(buf, start: int = 0, end: Optional[int] = None) -> Tuple[int, int]:
    """
    Find the first run of >= MIN_RUN identical bytes in buf[start:end].
    Returns (run_length, run_start_offset), offset relative to start.
    No run: (0, end - start), i.e. everything is literal.
    The first qualifying run wins, even if a longer one follows.
    """
    if end is None:
        end = len(buf)
    n = end - start
    if n <= 0:
        return 0, 0

    last = buf[start]
    run_start = 0
    count = 1
    for pos in range(1, n):
        cur = buf[start + pos]
        if cur == last:
            count += 1
            continue
        if count >= MIN_RUN:
            return count, run_start
        run_start = pos
        count = 1
        last = cur

    if count >= MIN_RUN:
        return count, run_start
    return 0, n


def split_repeat(run_len: int) -> list:
    """
    Split a run into ceil(run_len / MAX_REPEAT) repeat lengths, all full
    except the last. A 1-2 byte tail borrows from the previous chunk so every
    length stays in [MIN_RUN, MAX_REPEAT].
    """
    if run_len < MIN_RUN:
        raise ValueError(f"run of {run_len} is below the minimum of {MIN_RUN}")
    chunks = []
    left = run_len
    while left > MAX_REPEAT:
        chunks.append(MAX_REPEAT)
        left -= MAX_REPEAT
    if left < MIN_RUN:
        chunks[-1] -= MIN_RUN - left
        left = MIN_RUN
    chunks.append(left)
    return chunks


def rle_encode_row(row, out: Optional[bytearray] = None) -> bytearray:
    """
    Greedy, leftmost-first encoding of one packed row.
    Literal spans split into MAX_LITERAL chunks, runs into MAX_REPEAT chunks.
    """
    if out is None:
        out = bytearray()
    row = bytes(row)
    width = len(row)
    x = 0
    while x < width:
        run_len, rpos = find_run(row, x, width)

        # literal bytes before the run (or the rest of the row)
        while rpos > 0:
            chunk = min(rpos, MAX_LITERAL)
            out.append(chunk - 1)
            out += row[x:x + chunk]
            x += chunk
            rpos -= chunk

        if run_len:
            value = row[x]
            for chunk in split_repeat(run_len):
                out.append((chunk - MIN_RUN) | REPEAT_FLAG)
                out.append(value)
            x += run_len
    return out


def rle_encode(packed_rows: Iterable) -> bytes:
    """Encode rows independently, in the order given (storage order)."""
    out = bytearray()
    for row in packed_rows:
        rle_encode_row(row, out)
    return bytes(out)


def iter_tokens(data, row_bytes: int, pos: int = 0) -> Iterator[Tuple[int, Token]]:
    """
    Walk the token stream from pos to the end of data.
    Yields (row_index, Token). A token may not run past the end of its row.
    """
    if row_bytes <= 0:
        raise ValueError("row_bytes must be positive")
    data = bytes(data)
    n = len(data)
    row = 0
    x = 0
    while pos < n:
        offset = pos
        code = data[pos]
        pos += 1
        repeat = bool(code & REPEAT_FLAG)
        length = (code & 0x7F) + MIN_RUN if repeat else code + 1

        if x + length > row_bytes:
            raise CorruptStream(
                f"token at offset {offset} spans {length} bytes, "
                f"only {row_bytes - x} left in row {row}")

        need = 1 if repeat else length
        if pos + need > n:
            raise UnexpectedEof(
                f"token at offset {offset} needs {need} bytes, {n - pos} remain")
        payload = data[pos:pos + need]
        pos += need

        yield row, Token(offset, repeat, length, payload)

        x += length
        if x == row_bytes:
            row += 1
            x = 0


def rle_decode(data, row_bytes: int, rows: int, pos: int = 0) -> bytearray:
    """
    Decode rows * row_bytes packed bytes from data[pos:].
    Output rows are in stream (storage) order.
    """
    total = row_bytes * rows
    out = bytearray()
    for row, tok in iter_tokens(data, row_bytes, pos):
        if row >= rows:
            raise SizeMismatch(
                f"stream continues past {rows} rows (extra token at offset {tok.offset})")
        out += tok.expand()
    if len(out) != total:
        raise SizeMismatch(f"decoded {len(out)} bytes, expected {total}")
    return out


def rle_decode_row(data, row_bytes: int, pos: int = 0) -> Tuple[bytes, int]:
    """Decode exactly one row starting at pos. Returns (row, next_pos)."""
    out = bytearray()
    for _, tok in iter_tokens(data, row_bytes, pos):
        out += tok.expand()
        if len(out) == row_bytes:
            return bytes(out), tok.offset + 1 + len(tok.data)
    raise UnexpectedEof(f"row ended after {len(out)} of {row_bytes} bytes")
