import logging
from typing import Iterable, List, Optional

from secstruct.common import StructureError, check_paired_sites
from secstruct.secondary import SecondaryStructureRecord
from secstruct.util import handle_input_file, input_extension


def try_parse_int(s: str) -> Optional[int]:
    try:
        return int(s)
    except ValueError:
        return None


def is_ct_site_line(fields: List[str]) -> bool:
    return len(fields) >= 6 and all(
        try_parse_int(fields[k]) is not None for k in (0, 2, 3, 4, 5)
    )


def ct_string(record: SecondaryStructureRecord) -> str:
    """Format a record in connect (CT) format.

    The header line is ``>name``, followed by one line per site with columns:
    index, base, previous index, next index, partner, index.

    Raises:
        ValueError: Sequence and paired sites differ in length.
    """
    if len(record.sequence) != len(record.paired):
        raise ValueError(
            f"Sequence and paired sites lengths differ, {len(record.sequence)} vs {len(record.paired)}"
        )
    lines = [f">{record.name}"]
    for i, (c, j) in enumerate(zip(record.sequence, record.paired)):
        lines.append(f"{i + 1}\t{c}\t{i}\t{i + 2}\t{j}\t{i + 1}")
    return "\n".join(lines) + "\n"


def parse_ct_string(ct_str: str, strict: bool = False) -> List[SecondaryStructureRecord]:
    """Parse one or more records in connect (CT) format.

    Records start either with a ``>name`` line or with a classic
    ``length title`` header. Blank lines and other non-site lines are ignored.

    Args:
        ct_str: Text in CT format.
        strict: If True, raise on records with inconsistent pairs instead of skipping them.

    Returns:
        List of parsed records.
    """
    records = []
    name, sequence, paired = "", [], []

    def flush():
        if not paired:
            return
        record = SecondaryStructureRecord(name, "".join(sequence), list(paired))
        try:
            check_paired_sites(record)
        except StructureError as e:
            if strict:
                raise
            logging.warning(f"Skipping CT record '{name}': {e}")
            return
        records.append(record)

    for line in ct_str.splitlines():
        fields = line.split()
        if not fields:
            continue
        if fields[0].startswith(">") or not is_ct_site_line(fields):
            if fields[0].startswith(">"):
                header = line.strip()[1:]
            elif try_parse_int(fields[0]) is not None:
                header = line.strip()[len(fields[0]) :].strip()
            else:
                logging.debug(f"Ignoring CT line: {line}")
                continue
            flush()
            name, sequence, paired = header, [], []
        else:
            sequence.append(fields[1])
            paired.append(int(fields[4]))

    flush()
    return records


def read_ct_file(path: str, strict: bool = False) -> List[SecondaryStructureRecord]:
    with handle_input_file(path) as f:
        return parse_ct_string(f.read(), strict)


def write_ct_file(path: str, records: Iterable[SecondaryStructureRecord]):
    with open(path, "w") as f:
        for record in records:
            f.write(ct_string(record))


def dbn_string(record: SecondaryStructureRecord) -> str:
    """Format a record as ``>name``, sequence and dot-bracket lines."""
    return str(record)


def make_dbn_record(name: str, lines: List[str]) -> SecondaryStructureRecord:
    """Build a record from a sequence line and a structure line (or a structure line only).

    Trailing annotations after the structure, such as free energy printed by
    RNAfold, are ignored.

    Raises:
        ValueError: More than two lines, or sequence and structure lengths differ.
        DecodeError: The structure is not a valid dot-bracket string.
    """
    if len(lines) > 2:
        raise ValueError(f"Expected sequence and structure lines, got {len(lines)} lines")
    structure = lines[-1].split()[0]
    record = SecondaryStructureRecord.from_dot_bracket(structure, name)
    if len(lines) > 1:
        sequence = lines[0]
        if len(sequence) != len(structure):
            raise ValueError(
                f"Sequence and structure lengths differ, {len(sequence)} vs {len(structure)}"
            )
        record.set_sequence(sequence)
    return record


def parse_dbn_string(dbn_str: str, strict: bool = False) -> List[SecondaryStructureRecord]:
    """Parse records in dot-bracket notation.

    Each record is an optional ``>name`` line followed by a sequence line and a
    structure line. A record ends after its structure line, so further lines
    without a header are taken in sequence/structure pairs.

    Args:
        dbn_str: Text in DBN format.
        strict: If True, raise the first error instead of skipping the broken record.

    Returns:
        List of parsed records.
    """
    blocks = []
    name, lines = "", []

    for line in dbn_str.splitlines():
        line = line.strip()
        if not line:
            continue
        if line.startswith(">"):
            if lines:
                blocks.append((name, lines))
            name, lines = line[1:], []
        else:
            lines.append(line)
            if len(lines) == 2:
                blocks.append((name, lines))
                name, lines = "", []

    if lines:
        blocks.append((name, lines))

    records = []
    for name, lines in blocks:
        try:
            records.append(make_dbn_record(name, lines))
        except ValueError as e:
            if strict:
                raise
            logging.warning(f"Skipping DBN record '{name}': {e}")
    return records


def read_dbn_file(path: str, strict: bool = False) -> List[SecondaryStructureRecord]:
    with handle_input_file(path) as f:
        return parse_dbn_string(f.read(), strict)


def write_dbn_file(path: str, records: Iterable[SecondaryStructureRecord]):
    with open(path, "w") as f:
        for record in records:
            f.write(dbn_string(record))
            f.write("\n")


def read_structures(path: str, strict: bool = False) -> List[SecondaryStructureRecord]:
    """Read CT or DBN records, choosing the format by file extension."""
    if input_extension(path) == ".ct":
        return read_ct_file(path, strict)
    return read_dbn_file(path, strict)
