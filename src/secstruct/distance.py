#! /usr/bin/env python
import argparse
import sys
from functools import partial
from typing import List

import numpy
import orjson
import pandas as pd

from secstruct import metrics
from secstruct.parser import read_structures
from secstruct.secondary import SecondaryStructureRecord


def distance_matrix(
    records: List[SecondaryStructureRecord],
    p: float = 1.0,
    weighted: bool = False,
    normalised: bool = False,
) -> pd.DataFrame:
    """Compute all-pairs mountain distances between records.

    Args:
        records: Records of equal length.
        p: Exponent of the (unweighted) mountain distance.
        weighted: Use the weighted mountain distance, ``p`` is ignored.
        normalised: Divide by the mountain diameter.

    Returns:
        Square data frame indexed by record names.

    Raises:
        UnequalLength: Records differ in length.
    """
    if weighted:
        if normalised:
            distance = metrics.normalised_weighted_mountain_distance
        else:
            distance = metrics.weighted_mountain_distance
    elif normalised:
        distance = partial(metrics.normalised_mountain_distance, p=p)
    else:
        distance = partial(metrics.mountain_distance, p=p)

    names = [record.name or str(i + 1) for i, record in enumerate(records)]
    values = [[0.0 for _ in records] for _ in records]
    for i in range(len(records)):
        for j in range(i + 1, len(records)):
            values[i][j] = values[j][i] = distance(records[i], records[j])
    return pd.DataFrame(values, index=names, columns=names)


def main():
    parser = argparse.ArgumentParser(
        description="Compute mountain distances between all secondary structures in a CT or DBN file."
    )
    parser.add_argument("input", help="path to CT or DBN file (may be gzipped)")
    parser.add_argument(
        "-p",
        type=float,
        default=1.0,
        help="(optional) exponent of the mountain distance, default is 1.0",
    )
    parser.add_argument(
        "-w",
        "--weighted",
        action="store_true",
        help="(optional) use the weighted mountain distance (ignores -p)",
    )
    parser.add_argument(
        "-n",
        "--normalised",
        action="store_true",
        help="(optional) divide distances by the mountain diameter",
    )
    parser.add_argument("-c", "--csv", help="(optional) path to output CSV file")
    parser.add_argument("-j", "--json", help="(optional) path to output JSON file")
    args = parser.parse_args()

    try:
        records = read_structures(args.input)
        df = distance_matrix(records, args.p, args.weighted, args.normalised)
    except (OSError, ValueError) as e:
        print(f"Error processing {args.input}: {e}", file=sys.stderr)
        sys.exit(1)

    print(df.to_string())

    if args.csv:
        df.to_csv(args.csv)

    if args.json:
        with open(args.json, "wb") as f:
            f.write(
                orjson.dumps(
                    {
                        "names": list(df.index),
                        "distances": numpy.ascontiguousarray(df.to_numpy()),
                    },
                    option=orjson.OPT_SERIALIZE_NUMPY,
                )
            )


if __name__ == "__main__":
    main()
