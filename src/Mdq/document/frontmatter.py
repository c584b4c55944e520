"""Front-matter block detection and YAML loading."""

from __future__ import annotations

import re
from typing import Any

import yaml

from Mdq.core.errors import MalformedFrontMatter, NoFrontMatter

_FRONT_MATTER_RE = re.compile(
    r"\A\ufeff?---[ \t]*\r?\n(?P<yaml>.*?)^(?:---|\.\.\.)[ \t]*(?:\r?\n|\Z)",
    re.DOTALL | re.MULTILINE,
)

_TIMESTAMP_TAG = "tag:yaml.org,2002:timestamp"


class FrontMatterLoader(yaml.SafeLoader):
    """SafeLoader that leaves timestamps as plain strings.

    Date normalization owns the accepted formats; YAML's implicit timestamp
    resolver would otherwise turn some of them into datetime objects.
    """


FrontMatterLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag != _TIMESTAMP_TAG]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}


def split_front_matter(text: str) -> tuple[str, str]:
    """Split a document into its front-matter text and body.

    The block must start on the first line with ``---`` and end with a line
    holding ``---`` or ``...``.

    Args:
        text: Full file contents.

    Returns:
        Tuple of (raw YAML text, body).

    Raises:
        NoFrontMatter: If the text does not begin with a complete block.
    """
    match = _FRONT_MATTER_RE.match(text)
    if not match:
        raise NoFrontMatter()
    return match.group("yaml"), text[match.end():]


def load_front_matter(raw_yaml: str) -> dict[str, Any]:
    """Deserialize front-matter YAML into a mapping.

    Raises:
        MalformedFrontMatter: On YAML syntax errors or a non-mapping root.
    """
    try:
        data = yaml.load(raw_yaml, Loader=FrontMatterLoader)  # noqa: S506 - SafeLoader subclass
    except yaml.YAMLError as e:
        raise MalformedFrontMatter(f"Invalid YAML in front matter: {e}", raw_yaml) from e
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise MalformedFrontMatter("Front matter root must be a mapping", raw_yaml)
    return data
