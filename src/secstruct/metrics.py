"""Mountain metrics on RNA secondary structures.

Implements the mountain distance as defined in: Moulton, V., Zuker, M.,
Steel, M., Pointon, R., Penny, D. "Metrics on RNA secondary structures."
Journal of Computational Biology 7.1-2 (2000): 277-292.
"""

from typing import List

import numpy
import numpy.typing

from secstruct.common import InvalidPairedSites, paired_sites


class MetricError(ValueError):
    """Base class for errors raised by mountain metrics."""


class UnequalLength(MetricError):
    def __init__(self, length1: int, length2: int):
        self.length1 = length1
        self.length2 = length2
        super().__init__(
            f"Secondary structures must be the same length, {length1} vs {length2}"
        )


class DegenerateDiameter(MetricError):
    def __init__(self, length: int, distance: float):
        self.length = length
        self.distance = distance
        super().__init__(
            f"Mountain diameter is zero for length {length}, cannot normalise distance {distance}"
        )


class InvalidMountainVector(MetricError):
    def __init__(self, position: int, reason: str):
        self.position = position
        super().__init__(f"Invalid mountain vector at position {position}: {reason}")


def mountain_vector(structure) -> numpy.typing.NDArray[numpy.float64]:
    """Return the mountain vector of a structure.

    Examples:
        >>> from secstruct.common import decode
        >>> mountain_vector(decode("(((...)))")).tolist()
        [1.0, 2.0, 3.0, 3.0, 3.0, 3.0, 2.0, 1.0, 0.0]
    """
    paired = paired_sites(structure)
    steps = numpy.zeros(len(paired), dtype=numpy.float64)
    for i, j in enumerate(paired):
        if j != 0:
            steps[i] = 1.0 if j > i else -1.0
    return numpy.cumsum(steps)


def weighted_mountain_vector(structure) -> numpy.typing.NDArray[numpy.float64]:
    """Return the mountain vector where each step is divided by the span of its pair.

    Raises:
        InvalidPairedSites: A site is paired with itself.
    """
    paired = paired_sites(structure)
    steps = numpy.zeros(len(paired), dtype=numpy.float64)
    for i, j in enumerate(paired):
        if j == 0:
            continue
        span = abs(j - 1 - i)
        if span == 0:
            raise InvalidPairedSites(i + 1, j, "site paired with itself")
        steps[i] = (1.0 if j > i else -1.0) / span
    return numpy.cumsum(steps)


def _check_lengths(paired1: List[int], paired2: List[int]):
    if len(paired1) != len(paired2):
        raise UnequalLength(len(paired1), len(paired2))


def mountain_distance(structure1, structure2, p: float = 1.0) -> float:
    """Compute the mountain distance between two structures of equal length.

    Args:
        structure1: Paired-sites list or record.
        structure2: Paired-sites list or record.
        p: Exponent applied to each absolute height difference.

    Returns:
        Sum of ``|h1 - h2| ** p`` over all positions.

    Raises:
        UnequalLength: The structures differ in length.
    """
    paired1, paired2 = paired_sites(structure1), paired_sites(structure2)
    _check_lengths(paired1, paired2)
    m1 = mountain_vector(paired1)
    m2 = mountain_vector(paired2)
    return float(numpy.sum(numpy.abs(m1 - m2) ** p))


def weighted_mountain_distance(structure1, structure2) -> float:
    """Compute the weighted mountain distance (plain sum of absolute differences)."""
    paired1, paired2 = paired_sites(structure1), paired_sites(structure2)
    _check_lengths(paired1, paired2)
    m1 = weighted_mountain_vector(paired1)
    m2 = weighted_mountain_vector(paired2)
    return float(numpy.sum(numpy.abs(m1 - m2)))


def structure_star(length: int) -> List[int]:
    """Return the nested structure of given length with maximal number of base pairs.

    Examples:
        >>> from secstruct.common import encode
        >>> encode(structure_star(10))
        '((((..))))'
    """
    paired = [0 for _ in range(length)]
    upper = length // 2 - ((length + 1) % 2)
    for i in range(upper):
        j = length - i - 1
        paired[i] = j + 1
        paired[j] = i + 1
    return paired


def structure_zero(length: int) -> List[int]:
    """Return the structure of given length with all sites unpaired."""
    return [0 for _ in range(length)]


def mountain_diameter(length: int, p: float = 1.0) -> float:
    """Return the maximal mountain distance between structures of given length.

    This is the distance between :func:`structure_star` and :func:`structure_zero`.
    It is zero for lengths up to 2.
    """
    return mountain_distance(structure_star(length), structure_zero(length), p)


def weighted_mountain_diameter(length: int) -> float:
    """Weighted counterpart of :func:`mountain_diameter`."""
    return weighted_mountain_distance(structure_star(length), structure_zero(length))


def _normalise(distance: float, diameter: float, length: int) -> float:
    if diameter > 0:
        return distance / diameter
    # zero diameter only for length <= 2
    if distance == 0:
        return 0.0
    raise DegenerateDiameter(length, distance)


def normalised_mountain_distance(structure1, structure2, p: float = 1.0) -> float:
    """Compute the mountain distance divided by the mountain diameter.

    For lengths where the diameter is zero, identical mountains give 0.0
    and any other pair raises :class:`DegenerateDiameter`.

    Examples:
        >>> normalised_mountain_distance(structure_star(100), structure_zero(100), 2.0)
        1.0
    """
    paired1 = paired_sites(structure1)
    distance = mountain_distance(paired1, structure2, p)
    return _normalise(distance, mountain_diameter(len(paired1), p), len(paired1))


def normalised_weighted_mountain_distance(structure1, structure2) -> float:
    """Weighted counterpart of :func:`normalised_mountain_distance`."""
    paired1 = paired_sites(structure1)
    distance = weighted_mountain_distance(paired1, structure2)
    return _normalise(distance, weighted_mountain_diameter(len(paired1)), len(paired1))


def from_mountain_vector(mountain) -> List[int]:
    """Recover the nested paired-sites list from an unweighted mountain vector.

    Args:
        mountain: Sequence of heights, as returned by :func:`mountain_vector`.

    Returns:
        Paired-sites list; pseudoknotted structures come back as their nested
        counterpart since the mountain vector does not record crossings.

    Raises:
        InvalidMountainVector: Steps other than -1, 0, +1, negative heights,
            or a mountain not returning to zero.
    """
    paired = [0 for _ in range(len(mountain))]
    stack: List[int] = []
    previous = 0.0

    for i, height in enumerate(mountain):
        step = height - previous
        previous = height
        if step == 1:
            stack.append(i)
        elif step == -1:
            if not stack:
                raise InvalidMountainVector(i + 1, "height below zero")
            j = stack.pop()
            paired[i] = j + 1
            paired[j] = i + 1
        elif step != 0:
            raise InvalidMountainVector(i + 1, f"step {step} is not one of -1, 0, 1")

    if stack:
        raise InvalidMountainVector(len(mountain), f"final height {previous} is not zero")
    return paired
