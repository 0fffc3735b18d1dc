"""
Swatch value object: a representative color and the pixel population behind it.
"""

from dataclasses import dataclass
from typing import Any, Dict, Tuple

from .color_space import HSL, rgb_to_hex, rgb_to_hsl


@dataclass(frozen=True)
class Swatch:
    """An averaged RGB color plus the number of pixels it summarizes."""
    rgb: Tuple[int, int, int]
    population: int

    def __post_init__(self):
        if len(self.rgb) != 3 or any(not 0 <= int(c) <= 255 for c in self.rgb):
            raise ValueError(f"Swatch color must be three 8-bit channels, got {self.rgb!r}")
        if self.population < 0:
            raise ValueError(f"Swatch population must be non-negative, got {self.population}")
        object.__setattr__(self, "rgb", tuple(int(c) for c in self.rgb))
        object.__setattr__(self, "population", int(self.population))

    @property
    def red(self) -> int:
        return self.rgb[0]

    @property
    def green(self) -> int:
        return self.rgb[1]

    @property
    def blue(self) -> int:
        return self.rgb[2]

    @property
    def hsl(self) -> HSL:
        """(H in degrees, S, L) of the swatch color."""
        return rgb_to_hsl(self.rgb)

    @property
    def hex(self) -> str:
        return rgb_to_hex(self.rgb)

    def to_dict(self) -> Dict[str, Any]:
        h, s, l = self.hsl
        return {
            "hex": self.hex,
            "rgb": list(self.rgb),
            "hsl": [round(h, 4), round(s, 4), round(l, 4)],
            "population": self.population,
        }

    def __str__(self) -> str:
        return f"{self.hex} ({self.population})"
