"""Condense raw documentation markup into display text."""

from __future__ import annotations

import logging

from scripts.docroutes.errors import ResolutionError
from scripts.docroutes.resolver import LinkResolver
from scripts.docroutes.utils.text_utils import Cursor


DOCS_BASE = "https://typst.app/docs/"
NOT_FOUND_URL = DOCS_BASE + "404.html"

logger = logging.getLogger(__name__)


class DocScanner:
    """Rewrites the intra-doc links of documentation strings.

    Args:
        resolver: Resolver for ``[label]($link)`` targets.
        base: Absolute docs base the targets are resolved against.
        not_found_url: Substituted for targets that do not resolve.
    """

    def __init__(
        self,
        resolver: LinkResolver,
        base: str = DOCS_BASE,
        not_found_url: str = NOT_FOUND_URL,
    ):
        self.resolver = resolver
        self.base = base
        self.not_found_url = not_found_url

    def _resolve(self, target: str) -> str:
        logger.debug("intra link: %s", target)
        try:
            return self.resolver.resolve(target, self.base)
        except ResolutionError as e:
            logger.warning("Failed to resolve link %s: %s", target, e)
            return self.not_found_url

    def plain_docs_sentence(self, docs: str) -> str:
        """Extract plain display text of a piece of documentation.

        Inline code loses one layer of ``{}``/``[]`` wrapping, inline links
        are resolved to absolute URLs, reference-style links are kept as
        they are. The whole text is processed; nothing is truncated.
        """
        docs = docs.replace("```example", "```typ")
        cursor = Cursor(docs)
        output: list[str] = []
        link = False

        while not cursor.done():
            ch = cursor.eat()
            if ch == "`":
                raw = cursor.eat_until("`")
                if (raw.startswith("{") and raw.endswith("}")) or (
                    raw.startswith("[") and raw.endswith("]")
                ):
                    raw = raw[1:-1]
                cursor.eat()
                output.append(f"`{raw}`")
            elif ch == "[":
                link = True
                output.append("[")
            elif ch == "]" and link:
                output.append("]")
                start = cursor.pos
                if cursor.eat_if("("):
                    target = cursor.eat_until(")")
                    cursor.eat()
                    output.append(f"({self._resolve(target)})")
                elif cursor.eat_if("["):
                    cursor.eat_until("]")
                    cursor.eat()
                    output.append(cursor.since(start))
                link = False
            else:
                output.append(ch)

        return "".join(output)
