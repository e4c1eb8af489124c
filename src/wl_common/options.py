"""Market option value types.

Options and outcomes keep their original text for display and compare
case-insensitively (trimmed, casefolded) everywhere else.
"""

from collections.abc import Iterable, Iterator

from src.wl_common.errors import InvalidOptionsError


class Option:
    __slots__ = ("text",)

    def __init__(self, text: str) -> None:
        self.text = text.strip()

    @property
    def key(self) -> str:
        return self.text.casefold()

    def matches(self, other: "str | Option") -> bool:
        other_key = other.key if isinstance(other, Option) else other.strip().casefold()
        return self.key == other_key

    def __eq__(self, other: object) -> bool:
        if isinstance(other, (Option, str)):
            return self.matches(other)
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.key)

    def __repr__(self) -> str:
        return f"Option({self.text!r})"

    def __str__(self) -> str:
        return self.text


class OptionSet:
    """Ordered, case-insensitively distinct options of one market."""

    MIN_OPTIONS = 2

    def __init__(self, options: Iterable[Option]) -> None:
        self._options: tuple[Option, ...] = tuple(options)

    @classmethod
    def parse(cls, raw: Iterable[str]) -> "OptionSet":
        """Validate user-supplied options: blanks dropped, >= 2 left, no duplicates."""
        options = [Option(text) for text in raw if text and text.strip()]
        seen: set[str] = set()
        for option in options:
            if option.key in seen:
                raise InvalidOptionsError(f"duplicate option {option.text!r}")
            seen.add(option.key)
        if len(options) < cls.MIN_OPTIONS:
            raise InvalidOptionsError(
                f"at least {cls.MIN_OPTIONS} distinct non-empty options required"
            )
        return cls(options)

    @classmethod
    def from_stored(cls, texts: Iterable[str]) -> "OptionSet":
        # Stored rows were validated on insert
        return cls(Option(text) for text in texts)

    def match(self, choice: str) -> Option | None:
        for option in self._options:
            if option.matches(choice):
                return option
        return None

    @property
    def texts(self) -> list[str]:
        return [option.text for option in self._options]

    def __iter__(self) -> Iterator[Option]:
        return iter(self._options)

    def __len__(self) -> int:
        return len(self._options)
