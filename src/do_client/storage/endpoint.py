"""Per-region Spaces endpoint templates."""

import re

from do_client.core.exceptions import InvalidTemplateError

PLACEHOLDER = "Region"

# Accepts both "{{.Region}}" and "{{Region}}", with optional inner whitespace
_PLACEHOLDER_RE = re.compile(r"\{\{\s*\.?([A-Za-z_][A-Za-z0-9_]*)\s*\}\}")


class EndpointTemplate:
    """A Spaces endpoint with a single named substitution point for the region.

    Example:
        >>> template = EndpointTemplate.parse("https://{{.Region}}.digitaloceanspaces.com")
        >>> template.render("NYC3")
        'https://nyc3.digitaloceanspaces.com'
    """

    def __init__(self, source: str, parts: tuple):
        self.source = source
        self._parts = parts

    @classmethod
    def parse(cls, source: str) -> "EndpointTemplate":
        """Compile a template string.

        Args:
            source: Endpoint with ``{{.Region}}`` placeholders

        Returns:
            Compiled template

        Raises:
            InvalidTemplateError: If the template has unbalanced braces or a
                placeholder other than Region
        """
        parts = []
        position = 0
        for match in _PLACEHOLDER_RE.finditer(source):
            literal = source[position : match.start()]
            cls._check_literal(source, literal)
            if match.group(1) != PLACEHOLDER:
                raise InvalidTemplateError(
                    f"unable to parse spaces endpoint '{source}' as template: "
                    f"unknown placeholder '{match.group(1)}'"
                )
            parts.append(literal)
            parts.append(None)
            position = match.end()

        tail = source[position:]
        cls._check_literal(source, tail)
        parts.append(tail)
        return cls(source, tuple(parts))

    @staticmethod
    def _check_literal(source: str, literal: str) -> None:
        if "{{" in literal or "}}" in literal:
            raise InvalidTemplateError(
                f"unable to parse spaces endpoint '{source}' as template: "
                "unbalanced or malformed placeholder"
            )

    def render(self, region: str) -> str:
        """Render the endpoint for a region; region case is ignored.

        Raises:
            ValueError: If the region is empty
        """
        region = region.strip().lower()
        if not region:
            raise ValueError("region must not be empty")
        return "".join(region if part is None else part for part in self._parts)

    def __repr__(self) -> str:
        return f"EndpointTemplate({self.source!r})"
