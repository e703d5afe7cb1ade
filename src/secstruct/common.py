import logging
import os
import string
from dataclasses import dataclass
from functools import cached_property
from typing import Dict, List, Optional, Tuple

LOGLEVEL = os.environ.get("LOGLEVEL", "INFO").upper()
logging.basicConfig(level=LOGLEVEL)


class StructureError(ValueError):
    """Base class for all errors concerning secondary structure representations."""


class DecodeError(StructureError):
    """Raised when a dot-bracket string cannot be converted to paired sites."""


class EncodeError(StructureError):
    """Raised when paired sites cannot be converted to a dot-bracket string."""


class ClassifierError(StructureError):
    """Raised when the pseudoknot classifier finds an inconsistent input."""


class UnmatchedClosingBracket(DecodeError):
    def __init__(self, bracket_class: int, symbol: str, left: str, position: int):
        self.bracket_class = bracket_class
        self.symbol = symbol
        self.position = position
        super().__init__(
            f"Missing left bracket '{left}' for '{symbol}' at position {position}"
        )


class UnmatchedOpeningBracket(DecodeError):
    def __init__(self, bracket_class: int, symbol: str, right: str, position: int):
        self.bracket_class = bracket_class
        self.symbol = symbol
        self.position = position
        super().__init__(
            f"Missing right bracket '{right}' for '{symbol}' at position {position}"
        )


class UnrecognizedSymbol(DecodeError):
    def __init__(self, symbol: str, position: Optional[int] = None):
        self.symbol = symbol
        self.position = position
        where = f" at position {position}" if position is not None else ""
        super().__init__(f"Bracket type not recognised: '{symbol}'{where}")


class InsufficientBracketClasses(EncodeError):
    def __init__(self, available: int, position: int):
        self.available = available
        self.position = position
        super().__init__(
            f"Insufficient bracket types ({available}) for encoding the structure "
            f"unambiguously, failed at position {position}"
        )


class PrematureClosure(ClassifierError):
    def __init__(self, position: int):
        self.position = position
        super().__init__(
            f"All paired sites to the left of position {position} have already been consumed"
        )


class UnconsumedOpenings(ClassifierError):
    def __init__(self, remaining: int):
        self.remaining = remaining
        super().__init__(f"{remaining} paired site(s) to the left have not been consumed")


class InvalidPairedSites(StructureError):
    def __init__(self, position: int, partner: int, reason: str):
        self.position = position
        self.partner = partner
        super().__init__(f"Invalid partner {partner} at position {position}: {reason}")


@dataclass(frozen=True)
class BracketAlphabet:
    """Ordered bracket classes used to write pseudoknotted structures as text.

    The class of a bracket is its index in ``left`` (and, correspondingly,
    in ``right``). Lower classes are preferred when encoding.
    """

    left: str
    right: str
    unpaired: str = "."

    def __post_init__(self):
        """Check that the alphabet is unambiguous."""
        if len(self.left) != len(self.right):
            raise ValueError(
                f"Left and right brackets differ in length, {len(self.left)} vs {len(self.right)}"
            )
        symbols = self.left + self.right
        if len(set(symbols)) != len(symbols):
            raise ValueError(f"Bracket symbols are not distinct: {symbols}")
        if len(self.unpaired) != 1 or self.unpaired in symbols:
            raise ValueError(f"Invalid unpaired symbol: '{self.unpaired}'")

    def __len__(self) -> int:
        """Return the number of bracket classes."""
        return len(self.left)

    @cached_property
    def _classes(self) -> Dict[str, Tuple[bool, int]]:
        classes = {c: (True, i) for i, c in enumerate(self.left)}
        classes.update({c: (False, i) for i, c in enumerate(self.right)})
        return classes

    def classify(self, symbol: str) -> Optional[Tuple[bool, int]]:
        """Classify a single character.

        Args:
            symbol: Character from a dot-bracket string.

        Returns:
            Tuple ``(is_left, bracket_class)`` or ``None`` for non-bracket characters.
        """
        return self._classes.get(symbol, None)

    def matching(self, symbol: str) -> str:
        """Return the bracket matching the given one, e.g. ``<`` for ``>``."""
        found = self.classify(symbol)
        if found is None:
            raise UnrecognizedSymbol(symbol)
        is_left, bracket_class = found
        return self.right[bracket_class] if is_left else self.left[bracket_class]


DEFAULT_ALPHABET = BracketAlphabet(
    "(<{[" + string.ascii_uppercase, ")>}]" + string.ascii_lowercase
)


def paired_sites(structure) -> List[int]:
    """Return the paired-sites list of a record or of a plain sequence of ints."""
    paired = getattr(structure, "paired", structure)
    return paired if isinstance(paired, list) else list(paired)


def check_paired_sites(structure) -> List[int]:
    """Validate that pairs are mutual and within range.

    Args:
        structure: Paired-sites list or an object with ``paired`` attribute.

    Returns:
        The validated paired-sites list.

    Raises:
        InvalidPairedSites: On the first offending site (1-based position).
    """
    paired = paired_sites(structure)
    n = len(paired)
    for i, j in enumerate(paired):
        if j == 0:
            continue
        if j < 0 or j > n:
            raise InvalidPairedSites(i + 1, j, f"partner out of range 1..{n}")
        if j == i + 1:
            raise InvalidPairedSites(i + 1, j, "site paired with itself")
        if paired[j - 1] != i + 1:
            raise InvalidPairedSites(
                i + 1, j, f"partner site {j} is paired with {paired[j - 1]}"
            )
    return paired


def decode(structure: str, alphabet: BracketAlphabet = DEFAULT_ALPHABET) -> List[int]:
    """Convert an (extended) dot-bracket string into a paired-sites list.

    Every bracket class has its own stack, so crossing pairs written with
    different classes are matched independently.

    Args:
        structure: Dot-bracket string, e.g. ``"((..[[..))..]]"``.
        alphabet: Bracket classes and unpaired symbol.

    Returns:
        List where position i holds the 1-based partner of site i or 0.

    Raises:
        UnmatchedClosingBracket: A right bracket without a pending left one.
        UnmatchedOpeningBracket: Left brackets left open at the end.
        UnrecognizedSymbol: A character outside of the alphabet.
    """
    paired = [0 for _ in range(len(structure))]
    stacks: List[List[int]] = [[] for _ in range(len(alphabet))]

    for i, c in enumerate(structure):
        if c == alphabet.unpaired:
            continue
        found = alphabet.classify(c)
        if found is None:
            raise UnrecognizedSymbol(c, i + 1)
        is_left, bracket_class = found
        if is_left:
            stacks[bracket_class].append(i)
        elif stacks[bracket_class]:
            j = stacks[bracket_class].pop()
            paired[i] = j + 1
            paired[j] = i + 1
        else:
            raise UnmatchedClosingBracket(
                bracket_class, c, alphabet.left[bracket_class], i + 1
            )

    unclosed = [(stack[-1], k) for k, stack in enumerate(stacks) if stack]
    if unclosed:
        j, bracket_class = min(unclosed)
        raise UnmatchedOpeningBracket(
            bracket_class, structure[j], alphabet.right[bracket_class], j + 1
        )
    return paired


def encode(structure, alphabet: BracketAlphabet = DEFAULT_ALPHABET) -> str:
    """Convert paired sites into an extended dot-bracket string.

    Each new pair goes to the lowest bracket class in which it nests inside
    (or is disjoint from) every pair still open in that class.

    Args:
        structure: Paired-sites list or an object with ``paired`` attribute.
        alphabet: Bracket classes and unpaired symbol.

    Returns:
        Dot-bracket string of the same length as the input.

    Raises:
        InvalidPairedSites: Pairs are not mutual.
        InsufficientBracketClasses: The alphabet has too few classes.
    """
    paired = check_paired_sites(structure)
    stacks: List[List[int]] = [[] for _ in range(len(alphabet))]
    opened_in: List[int] = [-1 for _ in range(len(paired))]
    dbn = []

    for i, j in enumerate(paired):
        if j == 0:
            dbn.append(alphabet.unpaired)
        elif j > i:
            for bracket_class, stack in enumerate(stacks):
                if not stack or j < stack[-1]:
                    stack.append(j)
                    opened_in[i] = bracket_class
                    dbn.append(alphabet.left[bracket_class])
                    if bracket_class > 0 and len(stack) == 1:
                        logging.debug(
                            f"Bracket class {bracket_class} used for pair {i + 1}-{j}"
                        )
                    break
            else:
                raise InsufficientBracketClasses(len(alphabet), i + 1)
        else:
            bracket_class = opened_in[j - 1]
            stacks[bracket_class].pop()
            dbn.append(alphabet.right[bracket_class])

    return "".join(dbn)


def is_pseudoknotted(structure) -> bool:
    """Check whether any two base pairs cross.

    Examples:
        >>> is_pseudoknotted(decode("<<<..((.>>>....))"))
        True
        >>> is_pseudoknotted(decode("((..))"))
        False

    Raises:
        PrematureClosure: A closing site without an open pair to its left.
        UnconsumedOpenings: Opening sites never closed.
    """
    stack: List[int] = []

    for i, j in enumerate(paired_sites(structure)):
        if j == 0:
            continue
        if j > i:
            if stack and j >= stack[-1]:
                return True
            stack.append(j)
        elif stack:
            stack.pop()
        else:
            raise PrematureClosure(i + 1)

    if stack:
        raise UnconsumedOpenings(len(stack))
    return False


def pseudoknot_order(
    structure, alphabet: BracketAlphabet = DEFAULT_ALPHABET
) -> int:
    """Return the number of bracket classes needed to write the structure."""
    dbn = encode(structure, alphabet)
    used = [alphabet.classify(c) for c in dbn if c != alphabet.unpaired]
    return max((bracket_class for _, bracket_class in used), default=-1) + 1


def pairs(structure) -> List[Tuple[int, int]]:
    """List base pairs as 1-based ``(i, j)`` tuples with ``i < j``."""
    return [(i + 1, j) for i, j in enumerate(paired_sites(structure)) if j > i + 1]
