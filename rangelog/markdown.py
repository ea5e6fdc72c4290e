"""
Markdown section parsing for release bodies.

Only block structure matters here: headings split a body into sections and
everything else is kept as opaque blocks that remember their source text.

Supported blocks:
    - ATX headings ("## Title", optional closing hashes)
    - setext headings (a single line underlined with === or ---)
    - fenced code blocks (``` or ~~~), never scanned for headings
    - runs of non-blank lines (paragraphs, lists, quotes, tables, html)

Heading text is split into inline nodes (text, inlineCode, strong, emphasis,
link) so the title lookup can tell plain text from decorated text.
"""

import re
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from .domain.changelog import SectionNode

UNKNOWN_TITLE = "unknown"

ATX_HEADING = re.compile(r'^ {0,3}(#{1,6})(?:[ \t]+(.*?))?(?:[ \t]+#+)?[ \t]*$')
SETEXT_UNDERLINE = re.compile(r'^ {0,3}(=+|-+)[ \t]*$')
THEMATIC_BREAK = re.compile(r'^ {0,3}([-*_])(?:[ \t]*\1){2,}[ \t]*$')
FENCE_OPEN = re.compile(r'^( {0,3})(`{3,}|~{3,})(.*)$')
LIST_ITEM = re.compile(r'^ {0,3}(?:[-+*]|\d{1,9}[.)])(?:[ \t]|$)')

INLINE = re.compile(
    r'\*\*(?P<strong>.+?)\*\*'
    r'|(?<!\w)__(?P<strong_u>.+?)__(?!\w)'
    r'|\*(?P<emphasis>[^*\s][^*]*?)\*'
    r'|(?<!\w)_(?P<emphasis_u>[^_\s][^_]*?)_(?!\w)'
    r'|`(?P<code>[^`]+)`'
    r'|\[(?P<link_text>[^\]]*)\]\((?P<link_url>[^)\s]*)(?:\s+"[^"]*")?\)'
)


@dataclass(frozen=True)
class MarkdownNode:
    """
    Minimal markdown syntax tree node.

    Leaf inline nodes (text, inlineCode) carry ``value``; containers carry
    ``children``. Block nodes keep their original source in ``raw``.
    """
    type: str
    value: Optional[str] = None
    children: Tuple['MarkdownNode', ...] = ()
    depth: int = 0
    url: Optional[str] = None
    raw: str = ""

    @property
    def text(self) -> str:
        """Plain text of this node and its descendants."""
        if self.value is not None:
            return self.value
        return ''.join(child.text for child in self.children)


def parse_inline(text: str) -> Tuple[MarkdownNode, ...]:
    """Split heading text into inline nodes."""
    nodes: List[MarkdownNode] = []
    position = 0

    for match in INLINE.finditer(text):
        if match.start() > position:
            nodes.append(MarkdownNode('text', value=text[position:match.start()]))

        if match.group('strong') is not None or match.group('strong_u') is not None:
            inner = match.group('strong') or match.group('strong_u')
            nodes.append(MarkdownNode('strong', children=parse_inline(inner)))
        elif match.group('emphasis') is not None or match.group('emphasis_u') is not None:
            inner = match.group('emphasis') or match.group('emphasis_u')
            nodes.append(MarkdownNode('emphasis', children=parse_inline(inner)))
        elif match.group('code') is not None:
            nodes.append(MarkdownNode('inlineCode', value=match.group('code')))
        else:
            nodes.append(MarkdownNode(
                'link',
                children=parse_inline(match.group('link_text')),
                url=match.group('link_url'),
            ))
        position = match.end()

    if position < len(text):
        nodes.append(MarkdownNode('text', value=text[position:]))

    return tuple(nodes)


def _heading(text: str, depth: int, raw: str) -> MarkdownNode:
    return MarkdownNode('heading', children=parse_inline(text.strip()), depth=depth, raw=raw)


def _block_type(lines: Sequence[str]) -> str:
    first = lines[0].lstrip()
    if LIST_ITEM.match(lines[0]):
        return 'list'
    if first.startswith('>'):
        return 'blockquote'
    if first.startswith('|'):
        return 'table'
    if first.startswith('<'):
        return 'html'
    return 'paragraph'


def parse_markdown(text: Optional[str]) -> MarkdownNode:
    """
    Parse markdown into a root node whose children are blocks.

    Args:
        text: Raw markdown (None and "" give an empty root)
    """
    blocks: List[MarkdownNode] = []
    pending: List[str] = []

    def flush():
        if pending:
            blocks.append(MarkdownNode(_block_type(pending), raw='\n'.join(pending)))
            pending.clear()

    lines = (text or '').replace('\r\n', '\n').replace('\r', '\n').split('\n')
    i = 0
    while i < len(lines):
        line = lines[i]

        fence = FENCE_OPEN.match(line)
        if fence and not (fence.group(2)[0] == '`' and '`' in fence.group(3)):
            flush()
            marker = fence.group(2)
            closing = re.compile(r'^ {0,3}' + re.escape(marker[0]) + '{' + str(len(marker)) + r',}[ \t]*$')
            body = [line]
            i += 1
            while i < len(lines):
                body.append(lines[i])
                if closing.match(lines[i]):
                    i += 1
                    break
                i += 1
            code = '\n'.join(body[1:-1]) if len(body) > 1 and closing.match(body[-1]) else '\n'.join(body[1:])
            blocks.append(MarkdownNode('code', value=code, raw='\n'.join(body)))
            continue

        atx = ATX_HEADING.match(line)
        if atx:
            flush()
            blocks.append(_heading(atx.group(2) or '', len(atx.group(1)), line))
            i += 1
            continue

        underline = SETEXT_UNDERLINE.match(line)
        if underline and len(pending) == 1 and _block_type(pending) == 'paragraph':
            title = pending[0]
            pending.clear()
            depth = 1 if underline.group(1).startswith('=') else 2
            blocks.append(_heading(title, depth, f"{title}\n{line}"))
            i += 1
            continue

        if THEMATIC_BREAK.match(line) and not pending:
            blocks.append(MarkdownNode('thematicBreak', raw=line))
            i += 1
            continue

        if not line.strip():
            flush()
        else:
            pending.append(line)
        i += 1

    flush()
    return MarkdownNode('root', children=tuple(blocks))


def get_section_title(node: MarkdownNode) -> str:
    """
    Title of a heading node: the value of its first immediate child.

    Returns "unknown" when the node has no children or the first child is a
    container (link, strong, ...) without a value of its own.
    """
    if not node.children:
        return UNKNOWN_TITLE
    value = node.children[0].value
    if value is None:
        return UNKNOWN_TITLE
    return value


def parse_sections(text: Optional[str]) -> List[SectionNode]:
    """
    Split a release body into sections, leaving ``group`` unset.

    A heading owns the blocks that follow it until the next heading of the
    same or a shallower depth; deeper headings are part of its content.
    A heading with nothing under it before the next heading is a wrapper
    (a version title, "What's Changed") and the next heading opens its own
    section.

    Content before the first heading is dropped, so a body without headings
    yields no sections. Headings with no content are dropped too.
    """
    sections: List[SectionNode] = []
    heading: Optional[MarkdownNode] = None
    content: List[MarkdownNode] = []

    def close():
        if heading is not None and content:
            sections.append(SectionNode(
                title=get_section_title(heading),
                content=tuple(content),
            ))

    for block in parse_markdown(text).children:
        if block.type == 'heading':
            opens = (
                heading is None
                or block.depth <= heading.depth
                or not content
            )
            if opens:
                close()
                heading = block
                content = []
                continue

        if heading is not None:
            content.append(block)

    close()
    return sections


def blocks_to_markdown(blocks: Sequence[MarkdownNode]) -> str:
    """Re-emit blocks as markdown."""
    return '\n\n'.join(block.raw for block in blocks)
