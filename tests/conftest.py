"""Root test configuration: a representative MDX document covering every node kind"""

import pytest

from mdxdoc.core.models import (
    Blockquote,
    BulletList,
    CodeBlock,
    DescriptionDetails,
    DescriptionList,
    DescriptionTerm,
    Details,
    Document,
    Figure,
    FootnoteDef,
    FootnoteRef,
    HardBreak,
    Heading,
    HorizontalRule,
    Image,
    LinkMark,
    ListItem,
    MermaidDiagram,
    OrderedList,
    Paragraph,
    PassthroughBlock,
    SimpleMark,
    Table,
    TableCell,
    TableHeader,
    TableRow,
    TaskItem,
    TaskList,
    Text,
    TwitterCard,
    YoutubeEmbed,
)


FULL_MDX = """\
---
title: "Everything"
tags: [a, b]
---
import Chart from "../charts/Chart.astro";
import Figure from "../../../components/Figure.astro";

# Heading one

A paragraph with **bold**, *italic*, ~~strike~~, `code`, [a link](https://example.com), <u>under</u> and ==marked== text.[^1]

## Lists

- first
- second
  - nested

    ```sh
    import os
    ```

3. three
4. four

- [x] done
- [ ] todo

> Quoted text.

```python
print("hi")
```

```mermaid
graph TD; A-->B
```

---

![Alt text](/img/a.png)

<Figure src="/img/b.png" alt="B" width={640} caption="A figure" />

<LiteYouTube videoId="abc123" title="Video" />

<TwitterCard id="42" />

<Table label="tbl:1" caption="Numbers">
| a | b |
| --- | --- |
| 1 | 2 |
</Table>

<details>
<summary>More</summary>

Hidden text.

</details>

<dl>
  <dt>Term</dt>
  <dd>Definition</dd>
</dl>

<Chart kind="bar" />

<!-- editor note -->

[^1]: The footnote.
"""


def _text(text: str, *marks) -> Text:
    return Text(text=text, marks=list(marks))


def _para(*inline) -> Paragraph:
    return Paragraph(content=list(inline))


@pytest.fixture(name="full_mdx")
def full_mdx_fixture():
    return FULL_MDX


@pytest.fixture(name="full_doc")
def full_doc_fixture():
    """A hand-built Document using every top-level block kind and every mark."""
    bold, italic = SimpleMark(type="bold"), SimpleMark(type="italic")
    return Document(children=[
        Heading(level=1, content=[_text("Title")]),
        _para(
            _text("Plain "),
            _text("bold", bold),
            _text(" "),
            _text("both", italic, bold),
            _text(" "),
            _text("struck", SimpleMark(type="strike")),
            _text(" "),
            _text("x = 1", SimpleMark(type="code")),
            _text(" "),
            _text("link", LinkMark(href="https://example.com")),
            _text(" "),
            _text("under", SimpleMark(type="underline")),
            _text(" "),
            _text("lit", SimpleMark(type="highlight")),
            HardBreak(),
            _text("after break "),
            Image(src="/i.png", alt="inline"),
            FootnoteRef(identifier="note"),
        ),
        Blockquote(children=[_para(_text("quoted"))]),
        BulletList(children=[
            ListItem(children=[_para(_text("one"))]),
            ListItem(children=[
                _para(_text("two")),
                OrderedList(children=[ListItem(children=[_para(_text("inner"))])]),
            ]),
        ]),
        OrderedList(start=5, children=[ListItem(children=[_para(_text("five"))])]),
        TaskList(children=[
            TaskItem(checked=True, children=[_para(_text("done"))]),
            TaskItem(checked=False, children=[_para(_text("open"))]),
        ]),
        CodeBlock(language="js", text="const a = `b`;"),
        MermaidDiagram(text="graph LR; A-->B"),
        HorizontalRule(),
        Image(src="/block.png", alt="block"),
        Figure(src="/f.png", alt="F", caption="Cap", label="fig:1", width="640", height="auto"),
        YoutubeEmbed(video_id="vid", title="A video"),
        TwitterCard(id="123"),
        Details(summary="Open me", children=[_para(_text("inside"))]),
        FootnoteDef(identifier="note", content=[_text("Footnote text.")]),
        PassthroughBlock(content='<Widget foo="1" />'),
        Table(label="t1", caption="A table", children=[
            TableRow(children=[
                TableHeader(children=[_para(_text("h1"))]),
                TableHeader(children=[_para(_text("h2"))]),
            ]),
            TableRow(children=[
                TableCell(children=[_para(_text("a|b"))]),
                TableCell(children=[_para(_text("c", bold))]),
            ]),
        ]),
        DescriptionList(children=[
            DescriptionTerm(content=[_text("Term")]),
            DescriptionDetails(children=[_para(_text("Meaning"))]),
        ]),
    ])
