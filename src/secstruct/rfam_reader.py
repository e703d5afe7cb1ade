#! /usr/bin/env python
import argparse
import logging
import sys
from typing import Dict, Iterable, List

from secstruct.common import StructureError
from secstruct.secondary import SecondaryStructureRecord
from secstruct.util import handle_input_file

START_RECORD_TAG = "# STOCKHOLM"
ACCESSION_TAG = "#=GF AC"
STRUCTURE_TAG = "#=GC SS_cons"
CONSENSUS_TAG = "#=GC RF"
END_RECORD_TAG = "//"

# WUSS symbols for unpaired columns
WUSS_UNPAIRED = ":,_-~"


def wuss_to_dot_bracket(structure: str) -> str:
    """Replace WUSS unpaired annotations (hairpins, bulges, gaps...) with dots."""
    return structure.translate(str.maketrans(WUSS_UNPAIRED, "." * len(WUSS_UNPAIRED)))


def make_rfam_record(fields: Dict[str, str]) -> SecondaryStructureRecord:
    structure = wuss_to_dot_bracket(fields[STRUCTURE_TAG])
    record = SecondaryStructureRecord.from_dot_bracket(structure, fields[ACCESSION_TAG])
    record.set_sequence(fields[CONSENSUS_TAG])
    return record


def parse_rfam_stockholm(
    lines: Iterable[str], strict: bool = False
) -> List[SecondaryStructureRecord]:
    """Read records from Rfam Stockholm alignments.

    Only the accession (AC), the consensus structure (SS_cons) and the
    reference sequence (RF) are used. Interleaved alignment blocks are joined.

    Args:
        lines: Lines of a Stockholm file.
        strict: If True, raise on the first record with an invalid structure.

    Returns:
        List of records, one per complete alignment.
    """
    records = []
    fields: Dict[str, str] = {}

    for line in lines:
        line = line.rstrip("\n")
        if line.startswith(START_RECORD_TAG):
            fields = {}
        elif line.startswith(END_RECORD_TAG):
            if all(tag in fields for tag in (ACCESSION_TAG, STRUCTURE_TAG, CONSENSUS_TAG)):
                try:
                    records.append(make_rfam_record(fields))
                except StructureError as e:
                    if strict:
                        raise
                    logging.warning(
                        f"Skipping Rfam record {fields[ACCESSION_TAG]}: {e}"
                    )
            else:
                logging.debug(f"Incomplete Stockholm record: {sorted(fields)}")
            fields = {}
        else:
            for tag in (ACCESSION_TAG, STRUCTURE_TAG, CONSENSUS_TAG):
                if line.startswith(tag + " "):
                    value = line[len(tag) :].strip()
                    if tag == ACCESSION_TAG:
                        fields[tag] = value
                    else:
                        fields[tag] = fields.get(tag, "") + value
                    break

    return records


def read_rfam_stockholm(path: str, strict: bool = False) -> List[SecondaryStructureRecord]:
    """Read a plain or gzipped Stockholm file, e.g. ``Rfam.seed.gz``."""
    with handle_input_file(path) as f:
        return parse_rfam_stockholm(f, strict)


def main():
    parser = argparse.ArgumentParser(
        description="Read consensus secondary structures from an Rfam Stockholm file (plain or gzipped)."
    )
    parser.add_argument("path", help="path to Stockholm file, e.g. Rfam.seed.gz")
    parser.add_argument(
        "--strict",
        action="store_true",
        help="(optional) stop on the first invalid structure instead of skipping it",
    )
    args = parser.parse_args()

    try:
        records = read_rfam_stockholm(args.path, args.strict)
    except (OSError, StructureError) as e:
        print(f"Error reading {args.path}: {e}", file=sys.stderr)
        sys.exit(1)

    for record in records:
        print(record)
        print(f"length: {len(record)}")
        print(f"is pseudoknotted: {record.is_pseudoknotted()}")
        print()


if __name__ == "__main__":
    main()
