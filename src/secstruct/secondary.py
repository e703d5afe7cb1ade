from dataclasses import dataclass
from typing import List

import numpy
import numpy.typing

from secstruct import metrics
from secstruct.common import (
    DEFAULT_ALPHABET,
    BracketAlphabet,
    decode,
    encode,
    is_pseudoknotted,
    pseudoknot_order,
)


@dataclass
class SecondaryStructureRecord:
    """Name, nucleotide sequence and paired sites of a secondary structure."""

    name: str
    sequence: str
    paired: List[int]

    @staticmethod
    def from_paired(paired: List[int], name: str = ""):
        """Create a record with a placeholder sequence of N's.

        Args:
            paired: Paired-sites list (1-based partners, 0 for unpaired).
            name: Optional label.

        Returns:
            New record.
        """
        paired = list(paired)
        return SecondaryStructureRecord(name, "N" * len(paired), paired)

    @staticmethod
    def from_dot_bracket(
        structure: str, name: str = "", alphabet: BracketAlphabet = DEFAULT_ALPHABET
    ):
        """Create a record from a dot-bracket string with a placeholder sequence of N's.

        Examples:
            >>> SecondaryStructureRecord.from_dot_bracket("(((..))..)..").paired
            [10, 7, 6, 0, 0, 3, 2, 0, 0, 1, 0, 0]
        """
        return SecondaryStructureRecord.from_paired(decode(structure, alphabet), name)

    def set_name(self, name: str):
        self.name = name

    def set_sequence(self, sequence: str):
        self.sequence = sequence

    def set_paired(self, paired: List[int]):
        self.paired = list(paired)

    def __len__(self) -> int:
        return len(self.paired)

    def __str__(self):
        """Format as three lines: header, sequence and dot-bracket structure."""
        return f">{self.name}\n{self.sequence}\n{self.dot_bracket()}"

    def dot_bracket(self, alphabet: BracketAlphabet = DEFAULT_ALPHABET) -> str:
        return encode(self.paired, alphabet)

    def is_pseudoknotted(self) -> bool:
        return is_pseudoknotted(self.paired)

    def pseudoknot_order(self) -> int:
        return pseudoknot_order(self.paired)

    def mountain_vector(self) -> numpy.typing.NDArray[numpy.float64]:
        return metrics.mountain_vector(self.paired)

    def weighted_mountain_vector(self) -> numpy.typing.NDArray[numpy.float64]:
        return metrics.weighted_mountain_vector(self.paired)

    def mountain_distance(self, other, p: float = 1.0) -> float:
        """Mountain distance to another record or paired-sites list."""
        return metrics.mountain_distance(self, other, p)

    def normalised_mountain_distance(self, other, p: float = 1.0) -> float:
        return metrics.normalised_mountain_distance(self, other, p)

    def weighted_mountain_distance(self, other) -> float:
        return metrics.weighted_mountain_distance(self, other)

    def normalised_weighted_mountain_distance(self, other) -> float:
        return metrics.normalised_weighted_mountain_distance(self, other)
