from typing import List, Sequence, Tuple


def split_lines(content: str) -> List[str]:
    # Only '\n' terminates a line; a trailing '\r' stays part of the line
    return content.split("\n")


def resolve_in_lines(lines: Sequence[str], offset: int) -> Tuple[int, int]:
    """Map a character offset to a (1-based line, 0-based column) pair.

    Each line accounts for len(line) + 1 characters, the +1 being the '\\n'
    removed by the split. Offsets past the end of the content resolve to the
    last line, column 0.
    """
    char_count = 0
    for index, line in enumerate(lines):
        line_length = len(line) + 1
        if char_count + line_length > offset:
            return index + 1, offset - char_count
        char_count += line_length
    return max(len(lines), 1), 0


def resolve_position(content: str, offset: int) -> Tuple[int, int]:
    if offset < 0:
        raise ValueError("offset must be non-negative")
    return resolve_in_lines(split_lines(content), offset)


def offset_of(content: str, line_number: int, column: int) -> int:
    """Inverse of resolve_position for positions inside the content."""
    lines = split_lines(content)
    if line_number < 1 or line_number > len(lines):
        raise ValueError(f"line {line_number} outside 1..{len(lines)}")
    return sum(len(line) + 1 for line in lines[: line_number - 1]) + column
