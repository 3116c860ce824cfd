"""Parsing of the qualifier argument of ``\\insert{qualifier}{path}``."""

from __future__ import annotations

from dataclasses import dataclass


PLOT_PREFIX = "plot"


@dataclass(frozen=True, slots=True)
class Language:
    """Embed the referenced file as source code in the named language."""

    name: str


@dataclass(frozen=True, slots=True)
class Plot:
    """Embed an image generated by the referenced script.

    ``id`` disambiguates between several images sharing the script's name,
    e.g. ``plot:4`` selects ``ex24.png`` for the script ``ex2``.
    """

    id: str = ""


Qualifier = Language | Plot


def parse_qualifier(text: str) -> Qualifier:
    """Turn a raw qualifier into a :class:`Language` or a :class:`Plot`."""
    qualifier = text.strip().lower()
    if qualifier.startswith(PLOT_PREFIX):
        segments = qualifier.split(":")
        return Plot(id=segments[1] if len(segments) > 1 else "")
    return Language(name=qualifier)


__all__ = ["PLOT_PREFIX", "Language", "Plot", "Qualifier", "parse_qualifier"]
