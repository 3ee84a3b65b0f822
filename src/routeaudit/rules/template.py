from __future__ import annotations

import re

_PLACEHOLDER = re.compile(r":[a-z]+")


def normalize_template(template: str) -> str:
    """
    Rewrite named placeholders into positional ones:

        "repos/:owner/:repo/events" -> "repos/{0}/{1}/events"

    All matches are collected first and then spliced in reverse order. Working
    from the last match back keeps the offsets of the earlier matches valid,
    and splicing by offset (not by value) means repeated names such as
    ":owner/:owner" still come out as "{0}/{1}".

    Only lowercase names are placeholders; ":Owner" or ":id2" stay partly or
    fully verbatim. A template without placeholders is returned unchanged.
    """
    matches = list(_PLACEHOLDER.finditer(template))

    out = template
    for index in range(len(matches) - 1, -1, -1):
        m = matches[index]
        out = out[: m.start()] + "{" + str(index) + "}" + out[m.end():]
    return out
