"""
Genotype - Fixed-format bit encoding of a minion

The genotype is the unit of heredity: an immutable, fixed-length bit
vector partitioned into named segments, each made of typed fields.

LAYERS:
1. GeneField - `count` unsigned integers of `bits` bits each (MSB first)
2. Segment   - Named group of fields; the unit of per-segment crossover
3. Layout    - Ordered segments; constant across a population

Variation never edits a genotype in place. New genotypes come only from
`mutate` (copy + distinct bit flips) or `crossover` (two parents).

USAGE:
    from minions.genotype import Genotype, mutate, crossover

    g = Genotype.random(layout, rng)
    child = mutate(g, 3, rng)
    hybrid = crossover(g, other, rng, policy="segment")
"""

import hashlib
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

import numpy as np
import structlog

from .config import GenomeConfig
from .errors import MalformedGenotype

logger = structlog.get_logger(__name__)


# =============================================================================
# LAYOUT
# =============================================================================

@dataclass(frozen=True)
class GeneField:
    """`count` values of `bits` bits each, stored contiguously."""
    name: str
    count: int = 1
    bits: int = 8

    @property
    def width(self) -> int:
        return self.count * self.bits

    @property
    def max_value(self) -> int:
        """Largest unsigned value one entry can hold."""
        return (1 << self.bits) - 1


@dataclass(frozen=True)
class Segment:
    """A named run of fields. Crossover swaps whole segments."""
    name: str
    fields: Tuple[GeneField, ...]

    @property
    def width(self) -> int:
        return sum(f.width for f in self.fields)


class GenomeLayout:
    """
    Positional map from segment and field names to bit ranges.

    Field names must be unique across the whole layout so fields can be
    looked up without naming their segment.
    """

    def __init__(self, segments: Sequence[Segment]):
        if not segments:
            raise ValueError("A genome layout needs at least one segment")

        self.segments: Tuple[Segment, ...] = tuple(segments)
        self._segment_slices: Dict[str, slice] = {}
        self._fields: Dict[str, Tuple[GeneField, slice]] = {}

        offset = 0
        for segment in self.segments:
            if segment.name in self._segment_slices:
                raise ValueError(f"Duplicate segment name {segment.name!r}")
            start = offset
            for gene_field in segment.fields:
                if gene_field.name in self._fields:
                    raise ValueError(f"Duplicate field name {gene_field.name!r}")
                if gene_field.count < 1 or gene_field.bits < 1:
                    raise ValueError(f"Field {gene_field.name!r} must have positive count and bits")
                self._fields[gene_field.name] = (gene_field, slice(offset, offset + gene_field.width))
                offset += gene_field.width
            self._segment_slices[segment.name] = slice(start, offset)

        self.length = offset

    @property
    def segment_names(self) -> List[str]:
        return [s.name for s in self.segments]

    def segment_slice(self, name: str) -> slice:
        return self._segment_slices[name]

    def field(self, name: str) -> GeneField:
        return self._fields[name][0]

    def field_slice(self, name: str) -> slice:
        return self._fields[name][1]

    @property
    def fingerprint(self) -> str:
        """Stable identifier of the layout, stored alongside exported genotypes."""
        desc = "|".join(
            f"{s.name}:" + ",".join(f"{f.name}/{f.count}x{f.bits}" for f in s.fields)
            for s in self.segments
        )
        return hashlib.md5(desc.encode()).hexdigest()[:12]

    def __eq__(self, other) -> bool:
        return isinstance(other, GenomeLayout) and self.segments == other.segments

    def __hash__(self) -> int:
        return hash(self.segments)

    def __len__(self) -> int:
        return self.length

    def __repr__(self) -> str:
        parts = ", ".join(f"{s.name}={s.width}" for s in self.segments)
        return f"GenomeLayout({self.length} bits: {parts})"


def uniform_layout(length: int, segments: int) -> GenomeLayout:
    """
    Layout of `segments` equal single-field segments covering `length` bits.

    Used for generic bit-level experiments where only positions matter.
    """
    if segments < 1 or length % segments:
        raise ValueError(f"Cannot split {length} bits into {segments} equal segments")
    width = length // segments
    return GenomeLayout([
        Segment(f"s{i}", (GeneField(f"s{i}_bits", count=width, bits=1),))
        for i in range(segments)
    ])


# =============================================================================
# GENOTYPE
# =============================================================================

class Genotype:
    """
    Immutable bit vector bound to a layout.

    Bits are held in a read-only numpy uint8 array of 0/1 values.
    """

    __slots__ = ('_bits', '_layout', '_id')

    def __init__(self, bits: Iterable[int], layout: GenomeLayout):
        arr = np.asarray(bits)
        if arr.ndim != 1:
            raise MalformedGenotype(f"Genotype bits must be one-dimensional, got shape {arr.shape}")
        if arr.shape[0] != layout.length:
            raise MalformedGenotype(
                f"Genotype has {arr.shape[0]} bits, layout requires {layout.length}",
                expected_length=layout.length, actual_length=int(arr.shape[0]),
            )
        if arr.size and not np.isin(arr, (0, 1)).all():
            raise MalformedGenotype("Genotype bits must be 0 or 1")

        self._bits = arr.astype(np.uint8, copy=True)
        self._bits.setflags(write=False)
        self._layout = layout
        self._id = hashlib.sha1(np.packbits(self._bits).tobytes()
                                + layout.length.to_bytes(4, 'little')).hexdigest()[:16]

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def random(cls, layout: GenomeLayout, rng: np.random.Generator) -> 'Genotype':
        """Uniformly random genotype for a founder."""
        return cls(rng.integers(0, 2, size=layout.length, dtype=np.uint8), layout)

    @classmethod
    def from_bitstring(cls, text: str, layout: GenomeLayout) -> 'Genotype':
        """Parse a '0101...' string. Fails fast rather than truncating or padding."""
        text = text.strip()
        if any(c not in "01" for c in text):
            raise MalformedGenotype("Genotype string may only contain '0' and '1'")
        return cls(np.frombuffer(text.encode('ascii'), dtype=np.uint8) - ord('0'), layout)

    def to_bitstring(self) -> str:
        return (self._bits + ord('0')).tobytes().decode('ascii')

    # ------------------------------------------------------------------
    # Access
    # ------------------------------------------------------------------

    @property
    def bits(self) -> np.ndarray:
        """Read-only view of the bits."""
        return self._bits

    @property
    def layout(self) -> GenomeLayout:
        return self._layout

    @property
    def id(self) -> str:
        """Content hash; equal genotypes share an id."""
        return self._id

    def segment_bits(self, name: str) -> np.ndarray:
        return self._bits[self._layout.segment_slice(name)]

    def field_values(self, name: str) -> np.ndarray:
        """All entries of a field as unsigned integers (int64)."""
        gene_field = self._layout.field(name)
        raw = self._bits[self._layout.field_slice(name)].astype(np.int64)
        place = np.left_shift(1, np.arange(gene_field.bits - 1, -1, -1, dtype=np.int64))
        return raw.reshape(gene_field.count, gene_field.bits) @ place

    def field_value(self, name: str) -> int:
        """First entry of a field as an unsigned integer."""
        return int(self.field_values(name)[0])

    def hamming(self, other: 'Genotype') -> int:
        """Number of differing bit positions."""
        if len(self) != len(other):
            raise MalformedGenotype("Cannot compare genotypes of different lengths",
                                    expected_length=len(self), actual_length=len(other))
        return int(np.count_nonzero(self._bits != other._bits))

    def __len__(self) -> int:
        return int(self._bits.shape[0])

    def __eq__(self, other) -> bool:
        if not isinstance(other, Genotype):
            return NotImplemented
        return self._layout == other._layout and np.array_equal(self._bits, other._bits)

    def __hash__(self) -> int:
        return hash(self._id)

    def __repr__(self) -> str:
        return f"Genotype(id={self._id}, bits={len(self)})"


# =============================================================================
# VARIATION OPERATORS
# =============================================================================

def sample_mutation_count(rng: np.random.Generator, config: GenomeConfig) -> int:
    """
    Draw how many bits a spore's genotype will have flipped.

    Poisson(mutation_mean) clipped to [mutation_min, mutation_max], or a
    uniform integer in the same bounds.
    """
    if config.mutation_distribution == "uniform":
        return int(rng.integers(config.mutation_min, config.mutation_max + 1))
    count = int(rng.poisson(config.mutation_mean))
    return int(np.clip(count, config.mutation_min, config.mutation_max))


def flip_bits(genotype: Genotype, positions: Iterable[int]) -> Genotype:
    """
    Return a copy with the given positions flipped.

    Out-of-range indices wrap modulo the genotype length; repeated
    positions are flipped once.
    """
    length = len(genotype)
    idx = np.asarray(list(positions), dtype=np.int64)
    if idx.size == 0:
        return genotype

    wrapped = np.mod(idx, length)
    if np.any(wrapped != idx):
        logger.debug("mutation_index_clamped", requested=idx.tolist(), length=length)
    wrapped = np.unique(wrapped)

    bits = genotype.bits.copy()
    bits[wrapped] ^= 1
    return Genotype(bits, genotype.layout)


def mutate(genotype: Genotype, mutation_count: int,
           rng: np.random.Generator) -> Genotype:
    """
    Flip exactly `mutation_count` distinct, uniformly chosen bits.

    Counts outside [0, len(genotype)] are clamped. A count of 0 returns
    an equal genotype.
    """
    length = len(genotype)
    count = int(mutation_count)
    if count < 0 or count > length:
        logger.debug("mutation_count_clamped", requested=count, length=length)
        count = min(max(count, 0), length)
    if count == 0:
        return genotype

    positions = rng.choice(length, size=count, replace=False)
    return flip_bits(genotype, positions)


def crossover(parent_a: Genotype, parent_b: Genotype,
              rng: Optional[np.random.Generator] = None,
              policy: str = "segment",
              picks: Optional[Sequence[int]] = None) -> Genotype:
    """
    Combine two parents into one child of the same layout.

    Args:
        parent_a: First parent (pick 0)
        parent_b: Second parent (pick 1)
        rng: Source of the 50/50 choices when `picks` is not given
        policy: "segment" draws each segment whole from one parent,
                "bit" draws each bit independently
        picks: Explicit parent choice (0 or 1) per segment or per bit

    Returns:
        Child genotype
    """
    if parent_a.layout != parent_b.layout or len(parent_a) != len(parent_b):
        raise MalformedGenotype("Crossover parents must share one layout",
                                expected_length=len(parent_a), actual_length=len(parent_b))

    layout = parent_a.layout
    if policy == "segment":
        n = len(layout.segments)
    elif policy == "bit":
        n = layout.length
    else:
        raise ValueError(f"Unknown crossover policy {policy!r}")

    if picks is None:
        if rng is None:
            raise ValueError("crossover needs either rng or explicit picks")
        choice = rng.integers(0, 2, size=n).astype(bool)
    else:
        choice = np.asarray(picks).astype(bool)
        if choice.shape != (n,):
            raise ValueError(f"Expected {n} picks for policy {policy!r}, got {choice.shape}")

    if policy == "segment":
        mask = np.zeros(layout.length, dtype=bool)
        for segment, from_b in zip(layout.segments, choice):
            if from_b:
                mask[layout.segment_slice(segment.name)] = True
    else:
        mask = choice

    return Genotype(np.where(mask, parent_b.bits, parent_a.bits), layout)
