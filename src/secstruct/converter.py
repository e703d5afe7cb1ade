#! /usr/bin/env python
import argparse
import sys
from typing import Dict, List

import orjson

from secstruct.common import StructureError
from secstruct.parser import read_structures, write_ct_file, write_dbn_file
from secstruct.secondary import SecondaryStructureRecord


def summarize(record: SecondaryStructureRecord) -> Dict:
    """Collect a JSON-friendly description of a record."""
    return {
        "name": record.name,
        "sequence": record.sequence,
        "dotBracket": record.dot_bracket(),
        "paired": record.paired,
        "isPseudoknotted": record.is_pseudoknotted(),
        "pseudoknotOrder": record.pseudoknot_order(),
    }


def write_json(path: str, records: List[SecondaryStructureRecord]):
    with open(path, "wb") as f:
        f.write(orjson.dumps([summarize(record) for record in records]))


def main():
    parser = argparse.ArgumentParser(
        description="Convert RNA secondary structures between connect (CT) and dot-bracket (DBN) formats."
    )
    parser.add_argument(
        "input", help="path to CT or DBN file (format chosen by extension, may be gzipped)"
    )
    parser.add_argument("--ct", help="(optional) path to output CT file")
    parser.add_argument("--dbn", help="(optional) path to output DBN file")
    parser.add_argument(
        "-j", "--json", help="(optional) path to output JSON file with a summary per record"
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="(optional) stop on the first invalid record instead of skipping it",
    )
    args = parser.parse_args()

    try:
        records = read_structures(args.input, args.strict)
    except (OSError, ValueError) as e:
        print(f"Error reading {args.input}: {e}", file=sys.stderr)
        sys.exit(1)

    try:
        for record in records:
            print(record)

        if args.ct:
            write_ct_file(args.ct, records)
        if args.dbn:
            write_dbn_file(args.dbn, records)
        if args.json:
            write_json(args.json, records)
    except StructureError as e:
        print(f"Error converting {args.input}: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
