"""Connect server and analysis version numbers.

Both conventional ``major.minor.patch[.hotfix]`` numbers and the date-style
``YYYY.MM`` releases are understood and compare against each other.
"""

from dataclasses import dataclass
from re import compile as re_compile

# <major.minor.patch[.hotfix]> or <YYYY.MM>
VERSION_PATTERN = re_compile(r"(\d+)\.(\d+)\.(\d+)(?:\.(\d+))?|(\d{4})\.(\d{2})")


@dataclass(frozen=True, order=True)
class ConnectVersion:
    """A Connect version number, ordered field by field.

    Args:
        major: Major version, or the year of a YYYY.MM release
        minor: Minor version, or the month of a YYYY.MM release
        patch: Patch level
        hotfix: Hotfix level, omitted from str() when 0
    """

    major: int
    minor: int
    patch: int = 0
    hotfix: int = 0

    @classmethod
    def parse(cls, text: str) -> "ConnectVersion | None":
        """Parse the first version number found in text, or return None."""
        m = VERSION_PATTERN.search(text)
        if not m:
            return None
        if m.group(5) is not None:
            return cls(int(m.group(5)), int(m.group(6)))
        return cls(*(int(g) if g is not None else 0 for g in m.group(1, 2, 3, 4)))

    def compare_to_analysis(self, analysis: "ConnectVersion") -> bool:
        """True if this version's major.minor is at least the analysis version's.

        Patch and hotfix levels are ignored.
        """
        return (self.major, self.minor) >= (analysis.major, analysis.minor)

    def __str__(self) -> str:
        text = f"{self.major}.{self.minor}.{self.patch}"
        return f"{text}.{self.hotfix}" if self.hotfix > 0 else text


VERSION_INDIO = ConnectVersion(7, 7, 0, 0)
VERSION_JASPER = ConnectVersion(8, 0, 0, 0)
MINIMUM_SUPPORTED_VERSION = VERSION_INDIO


def is_supported(version: ConnectVersion) -> bool:
    """Return True if version is at least MINIMUM_SUPPORTED_VERSION."""
    return version >= MINIMUM_SUPPORTED_VERSION
