"""
Target Scoring Module

Matches swatches to palette targets. Targets are processed in list order and
share one set of already claimed colors, so an exclusive target can never take
a color an earlier target already selected.
"""

from typing import Dict, Iterable, Optional, Sequence, Set, Tuple

from loguru import logger

from .swatch import Swatch
from .target import Target

UsedColors = Set[Tuple[int, int, int]]


def dominant_population(swatches: Sequence[Swatch]) -> float:
    """Population of the most populous swatch, or 1.0 when there is none or it is zero."""
    if not swatches:
        return 1.0
    return float(max(swatch.population for swatch in swatches)) or 1.0


def should_be_scored_for_target(swatch: Swatch, target: Target, used_colors: UsedColors) -> bool:
    """A swatch is eligible when its S and L fall inside the target ranges and its color is unclaimed."""
    _, saturation, lightness = swatch.hsl

    return (target.minimum_saturation <= saturation <= target.maximum_saturation
            and target.minimum_lightness <= lightness <= target.maximum_lightness
            and swatch.rgb not in used_colors)


def generate_score(swatch: Swatch, target: Target, max_population: float) -> float:
    """
    Weighted closeness of a swatch to a target.

    Saturation and lightness score by distance from the target values; population
    scores as a fraction of the dominant swatch population.
    """
    _, saturation, lightness = swatch.hsl

    saturation_score = target.saturation_weight * (1.0 - abs(saturation - target.target_saturation))
    lightness_score = target.lightness_weight * (1.0 - abs(lightness - target.target_lightness))
    population_score = target.population_weight * (swatch.population / max_population)

    return saturation_score + lightness_score + population_score


def get_max_scored_swatch_for_target(swatches: Sequence[Swatch], target: Target,
                                     used_colors: UsedColors,
                                     max_population: Optional[float] = None) -> Optional[Swatch]:
    """Highest scoring eligible swatch; the first one seen wins ties."""
    if max_population is None:
        max_population = dominant_population(swatches)

    best_swatch = None
    best_score = None
    for swatch in swatches:
        if not should_be_scored_for_target(swatch, target, used_colors):
            continue
        score = generate_score(swatch, target, max_population)
        if best_score is None or score > best_score:
            best_swatch, best_score = swatch, score

    return best_swatch


def generate_scored_target(swatches: Sequence[Swatch], target: Target, used_colors: UsedColors,
                           max_population: Optional[float] = None) -> Optional[Swatch]:
    """
    Select the swatch for one target and claim its color.

    Non-exclusive targets produce no selection.
    """
    if not target.is_exclusive:
        return None

    swatch = get_max_scored_swatch_for_target(swatches, target, used_colors, max_population)
    if swatch is not None:
        used_colors.add(swatch.rgb)
    return swatch


def select_swatches(swatches: Sequence[Swatch],
                    targets: Iterable[Target]) -> Dict[int, Optional[Swatch]]:
    """
    Assign swatches to targets in order.

    Args:
        swatches: Candidate swatches
        targets: Targets in processing order

    Returns:
        Mapping of target id to the selected swatch, or None when nothing qualified
    """
    used_colors: UsedColors = set()
    max_population = dominant_population(swatches)
    selected = {}

    for target in targets:
        target = target.normalize_weights()
        swatch = generate_scored_target(swatches, target, used_colors, max_population)
        selected[target.id] = swatch
        logger.debug(f"Target {target.label}: {swatch if swatch is not None else 'no swatch'}")

    return selected
