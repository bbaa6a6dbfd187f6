from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, Iterable, Iterator, List, Tuple

from ..config import ProfileConfig

HSV = Tuple[int, int, int]
RGB = Tuple[int, int, int]

# Диапазоны в шкале OpenCV: H 0..179, S и V 0..255
_HSV_MAX = (179, 255, 255)


class UnknownProfileError(KeyError):
    pass


@dataclass(frozen=True)
class ColorProfile:
    """Именованный диапазон HSV для поиска объекта и цвет чернил (RGB)."""
    name: str
    lower: HSV
    upper: HSV
    draw_color: RGB

    def __post_init__(self):
        for bound in (self.lower, self.upper, self.draw_color):
            if len(bound) != 3:
                raise ValueError(f"Profile '{self.name}': expected three components, got {bound}")
        for lo, hi, top in zip(self.lower, self.upper, _HSV_MAX):
            if not (0 <= lo <= top and 0 <= hi <= top):
                raise ValueError(f"Profile '{self.name}': HSV bounds out of range {self.lower}..{self.upper}")
            if lo > hi:
                raise ValueError(f"Profile '{self.name}': lower bound exceeds upper bound")
        if any(not 0 <= c <= 255 for c in self.draw_color):
            raise ValueError(f"Profile '{self.name}': draw color out of range {self.draw_color}")

    @property
    def key(self) -> str:
        return self.name.lower()

    @property
    def hex_color(self) -> str:
        r, g, b = self.draw_color
        return f"#{r:02X}{g:02X}{b:02X}"


class ColorProfileRegistry:
    """Неизменяемая таблица профилей. Поиск по имени без учета регистра."""

    def __init__(self, profiles: Iterable[ColorProfile]):
        table: Dict[str, ColorProfile] = {}
        for profile in profiles:
            if profile.key in table:
                raise ValueError(f"Duplicate color profile '{profile.name}'")
            table[profile.key] = profile
        self._profiles = MappingProxyType(table)

    def lookup(self, name: str) -> ColorProfile:
        try:
            return self._profiles[name.lower()]
        except KeyError:
            raise UnknownProfileError(name) from None

    def names(self) -> List[str]:
        return [p.name for p in self._profiles.values()]

    def extended(self, *profiles: ColorProfile) -> "ColorProfileRegistry":
        return ColorProfileRegistry(list(self._profiles.values()) + list(profiles))

    def __contains__(self, name) -> bool:
        return isinstance(name, str) and name.lower() in self._profiles

    def __iter__(self) -> Iterator[ColorProfile]:
        return iter(self._profiles.values())

    def __len__(self) -> int:
        return len(self._profiles)


def profile_from_config(name: str, cfg: ProfileConfig) -> ColorProfile:
    return ColorProfile(
        name=name,
        lower=tuple(int(v) for v in cfg.lower),
        upper=tuple(int(v) for v in cfg.upper),
        draw_color=tuple(int(v) for v in cfg.draw_color),
    )


DEFAULT_PROFILES = ColorProfileRegistry([
    ColorProfile("Red", lower=(0, 120, 70), upper=(10, 255, 255), draw_color=(255, 0, 0)),
    ColorProfile("Green", lower=(40, 50, 50), upper=(80, 255, 255), draw_color=(0, 255, 0)),
    ColorProfile("Blue", lower=(100, 100, 100), upper=(130, 255, 255), draw_color=(0, 0, 255)),
    ColorProfile("Yellow", lower=(20, 100, 100), upper=(30, 255, 255), draw_color=(255, 255, 0)),
])


def lookup(name: str) -> ColorProfile:
    return DEFAULT_PROFILES.lookup(name)
