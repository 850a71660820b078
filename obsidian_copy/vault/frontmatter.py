"""Front-matter decoding for Markdown notes."""

from typing import Any, Protocol

import frontmatter
import yaml
from frontmatter.default_handlers import YAMLHandler

from ..errors import FrontMatterDecodeError


class FrontMatterDecoder(Protocol):
    """Splits a document into its decoded front matter and remaining body."""

    def __call__(self, text: str) -> tuple[dict[str, Any], str]: ...


def decode_front_matter(text: str) -> tuple[dict[str, Any], str]:
    """Decode YAML front matter from a Markdown document.

    Only `---` delimited YAML blocks are recognized; TOML and JSON headers
    are left in the body.

    Returns the metadata mapping (empty when absent or not a mapping) and the
    body that follows it.

    Raises:
        FrontMatterDecodeError: if the front matter block is not valid YAML
    """
    try:
        metadata, body = frontmatter.parse(text, handler=YAMLHandler())
    except yaml.YAMLError as e:
        problem = getattr(e, "problem", None) or "invalid YAML"
        raise FrontMatterDecodeError(problem) from e
    return dict(metadata), body
