"""Prompt template rendering."""

from __future__ import annotations

from loguru import logger
from prompt_toolkit.formatted_text import FormattedText

RAINBOW = (
    "ansired",
    "ansigreen",
    "ansiyellow",
    "ansiblue",
    "ansimagenta",
    "ansicyan",
    "ansiwhite",
)
USER_STYLE = "ansired"
HOST_STYLE = "ansigreen"


def path_fragments(path: str, levels: int = 0, *, rainbow: bool = False) -> list[tuple[str, str]]:
    """Show the last ``levels`` components of ``path`` (all of them when 0)."""

    fragments: list[tuple[str, str]] = []
    if path.startswith("/"):
        fragments.append(("", "/"))
    components = [component for component in path.split("/") if component]
    if levels:
        components = components[-levels:]
    for index, component in enumerate(components):
        style = RAINBOW[index % len(RAINBOW)] if rainbow else ""
        fragments.append((style, component))
        fragments.append(("", "/"))
    return fragments


def render_prompt(template: str, *, cwd: str, user: str | None, host: str) -> FormattedText:
    """Expand ``%n`` (user), ``%h`` (host) and ``%p[N][r]`` (directory) in ``template``."""

    fragments: list[tuple[str, str]] = []
    literal: list[str] = []
    index = 0

    def flush() -> None:
        if literal:
            fragments.append(("", "".join(literal)))
            literal.clear()

    while index < len(template):
        char = template[index]
        if char != "%":
            literal.append(char)
            index += 1
            continue

        flush()
        spec = template[index + 1 : index + 2]
        index += 2
        if spec == "n":
            if user is None:
                logger.warning("I couldn't find your username. :(")
            else:
                fragments.append((USER_STYLE, user))
        elif spec == "h":
            fragments.append((HOST_STYLE, host))
        elif spec == "p":
            digits_end = index
            while digits_end < len(template) and template[digits_end].isdigit():
                digits_end += 1
            levels = int(template[index:digits_end] or 0)
            index = digits_end
            rainbow = template.startswith("r", index)
            if rainbow:
                index += 1
            fragments.extend(path_fragments(cwd, levels, rainbow=rainbow))

    flush()
    return FormattedText(fragments)
