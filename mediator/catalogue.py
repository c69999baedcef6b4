"""Channel categories and top-level playlist parsing."""
from __future__ import annotations

import re
from dataclasses import asdict, dataclass

PLAYLIST_ROOT = "https://iptv-org.github.io/iptv"
DEFAULT_GROUP = "Manually Added"
EXTINF = "#EXTINF:"
ATTRIBUTE = re.compile(r'([\w-]+)="([^"]*)"')


@dataclass(frozen=True)
class Category:
    name: str
    url: str

    def to_dict(self) -> dict[str, str]:
        return asdict(self)


@dataclass(frozen=True)
class Channel:
    name: str
    group: str
    logo: str | None
    url: str

    def to_dict(self) -> dict[str, str | None]:
        return asdict(self)


def _category(name: str, slug: str | None = None, section: str = "categories") -> Category:
    return Category(name, f"{PLAYLIST_ROOT}/{section}/{slug or name.lower()}.m3u")


CATEGORIES: tuple[Category, ...] = (
    _category("Animation"),
    _category("Auto"),
    _category("Business"),
    _category("Classic"),
    _category("Comedy"),
    _category("Cooking"),
    _category("Culture"),
    _category("Documentary"),
    _category("Education"),
    _category("Entertainment"),
    _category("Family"),
    _category("General"),
    _category("Interactive"),
    _category("Kids"),
    _category("Legislative"),
    _category("Lifestyle"),
    _category("Movies"),
    _category("Music"),
    _category("News"),
    _category("Outdoor"),
    _category("Public"),
    _category("Relax"),
    _category("Religious"),
    _category("Science"),
    _category("Swahili", "swa", section="languages"),
    _category("Series"),
    _category("Shop"),
    _category("Sports"),
    _category("Travel"),
    _category("Weather"),
    _category("Undefined"),
)


def parse_channels(text: str) -> list[Channel]:
    """Parse an IPTV ``#EXTM3U`` playlist into channel records, in playlist order.

    Each ``#EXTINF`` line supplies the name and the ``tvg-logo`` / ``group-title``
    attributes for the next URL line. URL lines without one are skipped.
    """

    channels = []
    current = None
    for line in text.splitlines():
        line = line.strip()

        if line.startswith(EXTINF):
            attributes = dict(ATTRIBUTE.findall(line))
            # Attribute values may contain commas; the name follows the first bare one.
            _, _, name = ATTRIBUTE.sub("", line).partition(",")
            current = (name.strip(), attributes)

        elif line and not line.startswith("#"):
            if current is not None:
                name, attributes = current
                channels.append(
                    Channel(
                        name=name,
                        group=attributes.get("group-title") or DEFAULT_GROUP,
                        logo=attributes.get("tvg-logo") or None,
                        url=line,
                    )
                )
            current = None

    return channels
