"""
Palette Targets

A target is a named perceptual bucket ("vibrant", "dark muted", ...) described
by acceptable saturation and lightness ranges, the ideal values inside those
ranges, and weights for how much saturation, lightness and population matter
when scoring a swatch against it.

Targets compare by identity, not by field values: the six presets have fixed
identities and every other target receives a fresh one on creation.
"""

import dataclasses
from dataclasses import dataclass, field
from itertools import count
from typing import Optional, Tuple

WEIGHT_SATURATION = 0.24
WEIGHT_LUMA = 0.52
WEIGHT_POPULATION = 0.24

MIN_VIBRANT_SATURATION = 0.35
TARGET_VIBRANT_SATURATION = 1.0

TARGET_MUTED_SATURATION = 0.3
MAX_MUTED_SATURATION = 0.4

MIN_LIGHT_LUMA = 0.55
TARGET_LIGHT_LUMA = 0.74

TARGET_DARK_LUMA = 0.26
MAX_DARK_LUMA = 0.45

MIN_NORMAL_LUMA = 0.3
TARGET_NORMAL_LUMA = 0.5
MAX_NORMAL_LUMA = 0.7

# Preset identities occupy 0..5
_target_ids = count(6)


def _next_target_id() -> int:
    return next(_target_ids)


def _with_identity(target: "Target", identity: int) -> "Target":
    object.__setattr__(target, "id", identity)
    return target


@dataclass(frozen=True, eq=False)
class Target:
    """
    Immutable scoring target.

    Ranges are ``(minimum, target, maximum)`` triples in ``[0, 1]``; weights are
    ``(saturation, lightness, population)``. Every range must be ordered,
    ``0 <= minimum <= target <= maximum <= 1``, so a target value always lies
    inside its own eligibility window.

    The identity is assigned on creation and cannot be passed in; only the six
    presets own identities 0-5.
    """
    saturation: Tuple[float, float, float] = (0.0, 0.5, 1.0)
    lightness: Tuple[float, float, float] = (0.0, 0.5, 1.0)
    weights: Tuple[float, float, float] = (WEIGHT_SATURATION, WEIGHT_LUMA, WEIGHT_POPULATION)
    exclusive: bool = True
    name: Optional[str] = None
    id: int = field(init=False, default_factory=_next_target_id)

    def __post_init__(self):
        for label, values in (("saturation", self.saturation), ("lightness", self.lightness)):
            if len(values) != 3:
                raise ValueError(f"{label} must be a (min, target, max) triple, got {values!r}")
            minimum, target, maximum = values
            if not 0.0 <= minimum <= target <= maximum <= 1.0:
                raise ValueError(
                    f"{label} must satisfy 0 <= min <= target <= max <= 1, got {values!r}"
                )
        if len(self.weights) != 3:
            raise ValueError("weights must be a (saturation, lightness, population) triple")

        object.__setattr__(self, "saturation", tuple(float(v) for v in self.saturation))
        object.__setattr__(self, "lightness", tuple(float(v) for v in self.lightness))
        object.__setattr__(self, "weights", tuple(float(v) for v in self.weights))

    def __eq__(self, other) -> bool:
        if not isinstance(other, Target):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    @classmethod
    def derived_from(cls, base: "Target", **changes) -> "Target":
        """Copy ``base`` with ``changes`` applied, under a new identity."""
        changes.setdefault("name", None)
        return dataclasses.replace(base, **changes)

    def normalize_weights(self) -> "Target":
        """
        Return this target with weights clamped to non-negative and scaled to sum
        to 1.0. A zero sum leaves every weight at 0. Identity is preserved.
        """
        clamped = tuple(max(0.0, w) for w in self.weights)
        total = sum(clamped)
        if total == 0.0:
            return _with_identity(dataclasses.replace(self, weights=clamped), self.id)
        return _with_identity(
            dataclasses.replace(self, weights=tuple(w / total for w in clamped)), self.id
        )

    @property
    def label(self) -> str:
        return self.name or f"target-{self.id}"

    @property
    def minimum_saturation(self) -> float:
        return self.saturation[0]

    @property
    def target_saturation(self) -> float:
        return self.saturation[1]

    @property
    def maximum_saturation(self) -> float:
        return self.saturation[2]

    @property
    def minimum_lightness(self) -> float:
        return self.lightness[0]

    @property
    def target_lightness(self) -> float:
        return self.lightness[1]

    @property
    def maximum_lightness(self) -> float:
        return self.lightness[2]

    @property
    def saturation_weight(self) -> float:
        return self.weights[0]

    @property
    def lightness_weight(self) -> float:
        return self.weights[1]

    @property
    def population_weight(self) -> float:
        return self.weights[2]

    @property
    def is_exclusive(self) -> bool:
        return self.exclusive

    def __repr__(self) -> str:
        return (f"Target({self.label}, saturation={self.saturation}, "
                f"lightness={self.lightness}, weights={self.weights})")


LIGHT_VIBRANT = _with_identity(Target(
    saturation=(MIN_VIBRANT_SATURATION, TARGET_VIBRANT_SATURATION, 1.0),
    lightness=(MIN_LIGHT_LUMA, TARGET_LIGHT_LUMA, 1.0),
    name="light_vibrant",
), 0)

VIBRANT = _with_identity(Target(
    saturation=(MIN_VIBRANT_SATURATION, TARGET_VIBRANT_SATURATION, 1.0),
    lightness=(MIN_NORMAL_LUMA, TARGET_NORMAL_LUMA, MAX_NORMAL_LUMA),
    name="vibrant",
), 1)

DARK_VIBRANT = _with_identity(Target(
    saturation=(MIN_VIBRANT_SATURATION, TARGET_VIBRANT_SATURATION, 1.0),
    lightness=(0.0, TARGET_DARK_LUMA, MAX_DARK_LUMA),
    name="dark_vibrant",
), 2)

LIGHT_MUTED = _with_identity(Target(
    saturation=(0.0, TARGET_MUTED_SATURATION, MAX_MUTED_SATURATION),
    lightness=(MIN_LIGHT_LUMA, TARGET_LIGHT_LUMA, 1.0),
    name="light_muted",
), 3)

MUTED = _with_identity(Target(
    saturation=(0.0, TARGET_MUTED_SATURATION, MAX_MUTED_SATURATION),
    lightness=(MIN_NORMAL_LUMA, TARGET_NORMAL_LUMA, MAX_NORMAL_LUMA),
    name="muted",
), 4)

DARK_MUTED = _with_identity(Target(
    saturation=(0.0, TARGET_MUTED_SATURATION, MAX_MUTED_SATURATION),
    lightness=(0.0, TARGET_DARK_LUMA, MAX_DARK_LUMA),
    name="dark_muted",
), 5)

# Processing order matters: earlier targets claim contested colors first
DEFAULT_TARGETS = (LIGHT_VIBRANT, VIBRANT, DARK_VIBRANT, LIGHT_MUTED, MUTED, DARK_MUTED)
