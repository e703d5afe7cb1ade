#! /usr/bin/env python
import argparse
from functools import cache


@cache
def _count_structures(n: int, mingap: int) -> int:
    count = 1
    if n > mingap:
        # site n unpaired
        count = _count_structures(n - 1, mingap)
        # site n paired with site k
        for k in range(1, n - mingap):
            count += _count_structures(k - 1, mingap) * _count_structures(
                n - k - 1, mingap
            )
    return count


def count_structures(n: int, mingap: int = 3) -> int:
    """Count non-pseudoknotted secondary structures of length n.

    Args:
        n: Sequence length.
        mingap: Minimal number of unpaired sites enclosed by every base pair, default is 3.

    Returns:
        Number of distinct structures (including the fully unpaired one).

    Examples:
        >>> [count_structures(n, 1) for n in range(1, 8)]
        [1, 1, 2, 4, 8, 17, 37]
    """
    if n < 0 or mingap < 0:
        raise ValueError(f"Length and gap must be non-negative, got {n} and {mingap}")
    # fill the cache bottom-up to keep the recursion shallow
    for i in range(1, n + 1):
        _count_structures(i, mingap)
    return _count_structures(n, mingap)


def main():
    parser = argparse.ArgumentParser(
        description="Count non-pseudoknotted RNA secondary structures of a given length."
    )
    parser.add_argument("length", type=int, help="sequence length")
    parser.add_argument(
        "--mingap",
        type=int,
        default=3,
        help="(optional) minimal number of unpaired nucleotides in a hairpin loop, default is 3",
    )
    args = parser.parse_args()
    print(count_structures(args.length, args.mingap))


if __name__ == "__main__":
    main()
