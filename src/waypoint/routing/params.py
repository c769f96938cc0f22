"""Template variable converters.

Built-in converters for template variables like ``{id:int}``. A converter
only constrains what the variable matches; captured values stay strings.
"""

import re

from waypoint.errors import ConfigurationError

# converter name -> regex for the captured text
CONVERTERS: dict[str, str] = {
    "str": r"[^/]+",
    "int": r"\d+",
    "float": r"\d+(?:\.\d+)?",
    "path": r".+",
}

# {name} or {name:converter}; any other brace text is literal
VARIABLE_RE = re.compile(r"\{([A-Za-z_]\w*)(?::(\w+))?\}")


def compile_template(template: str) -> tuple[re.Pattern[str], tuple[str, ...]]:
    """Compile a URI template into an anchored regex and its variable names.

    Examples::

        "/cats/{id}"          -> ^/cats/(?P<id>[^/]+)$, ("id",)
        "/cats/{id:int}/toys" -> ^/cats/(?P<id>\\d+)/toys$, ("id",)
        "/files/{rest:path}"  -> ^/files/(?P<rest>.+)$, ("rest",)
        "/{x}/to/{x}"         -> ^/(?P<x>[^/]+)/to/(?P=x)$, ("x",)
        "/a/{}/{1}"           -> ^/a/\\{\\}/\\{1\\}$, ()

    A repeated variable must capture the same text each time.

    Raises ``ConfigurationError`` only for an unknown converter name.
    """
    parts: list[str] = []
    names: list[str] = []
    last = 0

    for m in VARIABLE_RE.finditer(template):
        name = m.group(1)
        converter = m.group(2) or "str"
        if converter not in CONVERTERS:
            known = ", ".join(sorted(CONVERTERS))
            msg = f"Unknown converter {converter!r} in route template {template!r} (known: {known})"
            raise ConfigurationError(msg)

        parts.append(re.escape(template[last : m.start()]))
        if name in names:
            parts.append(f"(?P={name})")
        else:
            parts.append(f"(?P<{name}>{CONVERTERS[converter]})")
            names.append(name)
        last = m.end()

    parts.append(re.escape(template[last:]))
    return re.compile("^" + "".join(parts) + "$"), tuple(names)
