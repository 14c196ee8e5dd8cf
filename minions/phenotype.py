"""
Phenotype Expression - Genotype to body, looks, gender and brain

This is the bridge between genotype and phenotype:
- Defines the concrete minion genome layout
- Decodes every field with clamping/wrapping, so decoding is total
- Produces an immutable Phenotype computed once at birth

SEGMENTS (crossover units):
    body        segment/limb counts, limb length, joint limit, mass, taper
    appearance  hue, saturation, brightness, pattern
    gender      one small field reduced modulo 4
    brain       input->hidden, hidden bias, hidden->output, output bias
    thresholds  one personality threshold per actuator
"""

import colorsys
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from typing import Tuple

import numpy as np

from .actuators import Actuator, ACTUATOR_COUNT
from .config import BodyBounds, BrainConfig, EcosystemConfig
from .errors import MalformedGenotype
from .genotype import GeneField, Genotype, GenomeLayout, Segment
from .sensor import SENSOR_WIDTH


# =============================================================================
# GENDER
# =============================================================================

class Gender(Enum):
    """Four mating types. A spore can only be fertilized by a different one."""
    ALPHA = 0
    BETA = 1
    GAMMA = 2
    DELTA = 3

    @property
    def symbol(self) -> str:
        """Get display symbol for gender."""
        return "αβγδ"[self.value]


PATTERNS = ("solid", "stripes", "spots", "gradient")


# =============================================================================
# PHENOTYPE PARTS
# =============================================================================

@dataclass(frozen=True)
class BodyPlan:
    """Parameters handed opaquely to the physics collaborator."""
    segment_count: int
    limb_count: int
    limb_length: float
    joint_limit: float
    segment_masses: Tuple[float, ...]

    @property
    def total_mass(self) -> float:
        return float(sum(self.segment_masses))

    @property
    def extent(self) -> float:
        """Half-length of the body including limbs, in world units."""
        return 0.5 * self.segment_count + self.limb_length


@dataclass(frozen=True)
class VisualTraits:
    """Appearance, consumed read-only by renderers."""
    hue: float
    saturation: float
    brightness: float
    pattern: str

    def get_rgb(self) -> Tuple[int, int, int]:
        """Convert HSV to RGB for rendering."""
        r, g, b = colorsys.hsv_to_rgb(self.hue, self.saturation, self.brightness)
        return (int(r * 255), int(g * 255), int(b * 255))


@dataclass(frozen=True, eq=False)
class BrainParams:
    """
    Weights and biases of the fixed 3-layer network.

    Arrays are read-only; a brain is never trained after birth.
    """
    input_hidden: np.ndarray            # (hidden, inputs)
    hidden_bias: np.ndarray             # (hidden,)
    hidden_output: np.ndarray           # (outputs, hidden)
    output_bias: np.ndarray             # (outputs,)

    def __post_init__(self):
        for arr in (self.input_hidden, self.hidden_bias, self.hidden_output, self.output_bias):
            arr.setflags(write=False)

    @property
    def input_width(self) -> int:
        return self.input_hidden.shape[1]

    @property
    def hidden_width(self) -> int:
        return self.input_hidden.shape[0]

    @property
    def output_width(self) -> int:
        return self.hidden_output.shape[0]


@dataclass(frozen=True, eq=False)
class Phenotype:
    """Everything expressed from one genotype, computed once at birth."""
    genotype_id: str
    body: BodyPlan
    visual: VisualTraits
    gender: Gender
    brain: BrainParams
    thresholds: np.ndarray              # One per Actuator, read-only

    def threshold(self, actuator: Actuator) -> float:
        return float(self.thresholds[actuator.value])


# =============================================================================
# LAYOUT
# =============================================================================

def minion_layout(config: EcosystemConfig) -> GenomeLayout:
    """Genome layout for the configured brain topology and bit widths."""
    return _layout(config.genome.weight_bits, config.genome.threshold_bits, config.brain.hidden_width)


@lru_cache(maxsize=16)
def _layout(weight_bits: int, threshold_bits: int, hidden: int) -> GenomeLayout:
    return GenomeLayout([
        Segment("body", (
            GeneField("segment_count", bits=3),
            GeneField("limb_count", bits=3),
            GeneField("limb_length", bits=6),
            GeneField("joint_limit", bits=6),
            GeneField("segment_mass", bits=6),
            GeneField("mass_taper", bits=6),
        )),
        Segment("appearance", (
            GeneField("hue", bits=8),
            GeneField("saturation", bits=8),
            GeneField("brightness", bits=8),
            GeneField("pattern", bits=2),
        )),
        Segment("gender", (
            GeneField("gender", bits=4),
        )),
        Segment("brain", (
            GeneField("input_hidden", count=hidden * SENSOR_WIDTH, bits=weight_bits),
            GeneField("hidden_bias", count=hidden, bits=weight_bits),
            GeneField("hidden_output", count=ACTUATOR_COUNT * hidden, bits=weight_bits),
            GeneField("output_bias", count=ACTUATOR_COUNT, bits=weight_bits),
        )),
        Segment("thresholds", (
            GeneField("thresholds", count=ACTUATOR_COUNT, bits=threshold_bits),
        )),
    ])


# =============================================================================
# DECODING
# =============================================================================

def scale(values, max_value: int, lo: float, hi: float):
    """Map unsigned field values linearly into [lo, hi], clamped."""
    raw = lo + (hi - lo) * (np.asarray(values, dtype=np.float64) / max_value)
    return np.clip(raw, min(lo, hi), max(lo, hi))


def wrap(value: int, lo: int, hi: int) -> int:
    """Reduce an unsigned field value into the integer range [lo, hi]."""
    return lo + int(value) % (hi - lo + 1)


def _real(genotype: Genotype, name: str, bounds: Tuple[float, float]) -> float:
    f = genotype.layout.field(name)
    return float(scale(genotype.field_value(name), f.max_value, *bounds))


def decode_body(genotype: Genotype, bounds: BodyBounds) -> BodyPlan:
    segment_count = wrap(genotype.field_value("segment_count"), *bounds.segment_count)
    base_mass = _real(genotype, "segment_mass", bounds.segment_mass)
    taper = _real(genotype, "mass_taper", bounds.mass_taper)

    lo, hi = bounds.segment_mass
    masses = tuple(float(np.clip(base_mass * taper ** i, lo, hi)) for i in range(segment_count))

    return BodyPlan(
        segment_count=segment_count,
        limb_count=wrap(genotype.field_value("limb_count"), *bounds.limb_count),
        limb_length=_real(genotype, "limb_length", bounds.limb_length),
        joint_limit=_real(genotype, "joint_limit", bounds.joint_limit),
        segment_masses=masses,
    )


def decode_visual(genotype: Genotype) -> VisualTraits:
    return VisualTraits(
        hue=_real(genotype, "hue", (0.0, 1.0)),
        saturation=_real(genotype, "saturation", (0.3, 1.0)),
        brightness=_real(genotype, "brightness", (0.4, 1.0)),
        pattern=PATTERNS[genotype.field_value("pattern") % len(PATTERNS)],
    )


def decode_gender(genotype: Genotype) -> Gender:
    return Gender(genotype.field_value("gender") % len(Gender))


def decode_brain(genotype: Genotype, brain: BrainConfig) -> BrainParams:
    hidden = brain.hidden_width
    r = brain.weight_range

    def weights(name: str) -> np.ndarray:
        f = genotype.layout.field(name)
        return scale(genotype.field_values(name), f.max_value, -r, r)

    return BrainParams(
        input_hidden=weights("input_hidden").reshape(hidden, SENSOR_WIDTH),
        hidden_bias=weights("hidden_bias"),
        hidden_output=weights("hidden_output").reshape(ACTUATOR_COUNT, hidden),
        output_bias=weights("output_bias"),
    )


def decode_thresholds(genotype: Genotype, brain: BrainConfig) -> np.ndarray:
    f = genotype.layout.field("thresholds")
    thresholds = scale(genotype.field_values("thresholds"), f.max_value,
                       brain.threshold_min, brain.threshold_max)
    thresholds.setflags(write=False)
    return thresholds


def decode(genotype: Genotype, config: EcosystemConfig) -> Phenotype:
    """
    Express a genotype. Pure and total for any genotype of the minion layout.

    Raises:
        MalformedGenotype: if the genotype was built for a different layout
    """
    expected = minion_layout(config)
    if genotype.layout != expected:
        raise MalformedGenotype(
            "Genotype layout does not match the configured minion layout",
            expected_length=expected.length, actual_length=len(genotype),
        )

    return Phenotype(
        genotype_id=genotype.id,
        body=decode_body(genotype, config.body),
        visual=decode_visual(genotype),
        gender=decode_gender(genotype),
        brain=decode_brain(genotype, config.brain),
        thresholds=decode_thresholds(genotype, config.brain),
    )
