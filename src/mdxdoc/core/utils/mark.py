"""`==highlight==` inline rule on markdown-it's delimiter-pair machinery"""

from markdown_it import MarkdownIt
from markdown_it.rules_inline import StateInline
from markdown_it.rules_inline.state_inline import Delimiter


MARKER = 0x3D      # =


def mark_rule(md: MarkdownIt) -> None:
    """Register `==text==` as mark_open/mark_close tokens (rendered as <mark>)."""
    md.inline.ruler.before('emphasis', 'mark', _tokenize)
    md.inline.ruler2.before('emphasis', 'mark', _post_process)


def _tokenize(state: StateInline, silent: bool) -> bool:
    """Push each `==` pair as a text token and record it as a delimiter."""
    start = state.pos
    if silent or state.src[start] != '=':
        return False

    scanned = state.scanDelims(start, True)
    length = scanned.length
    if length < 2:
        return False

    if length % 2:
        token = state.push('text', '', 0)
        token.content = '='
        length -= 1

    for _ in range(0, length, 2):
        token = state.push('text', '', 0)
        token.content = '=='
        state.delimiters.append(Delimiter(
            marker=MARKER,
            length=0,
            token=len(state.tokens) - 1,
            end=-1,
            open=scanned.can_open,
            close=scanned.can_close,
        ))

    state.pos += scanned.length
    return True


def _balance(state: StateInline, delimiters: list[Delimiter]) -> None:
    lone_markers = []
    for delim in delimiters:
        if delim.marker != MARKER or delim.end == -1:
            continue
        closer = delimiters[delim.end]
        for index, kind, nesting in ((delim.token, 'mark_open', 1), (closer.token, 'mark_close', -1)):
            token = state.tokens[index]
            token.type = kind
            token.tag = 'mark'
            token.nesting = nesting
            token.markup = '=='
            token.content = ''
        before = state.tokens[closer.token - 1]
        if before.type == 'text' and before.content == '=':
            lone_markers.append(closer.token - 1)

    # An odd run `=====` splits as `=` + `==` + `==`; the lone `=` moves after the closers
    while lone_markers:
        i = lone_markers.pop()
        j = i + 1
        while j < len(state.tokens) and state.tokens[j].type == 'mark_close':
            j += 1
        j -= 1
        if i != j:
            state.tokens[i], state.tokens[j] = state.tokens[j], state.tokens[i]


def _post_process(state: StateInline) -> None:
    _balance(state, state.delimiters)
    for meta in state.tokens_meta:
        if meta and 'delimiters' in meta:
            _balance(state, meta['delimiters'])
