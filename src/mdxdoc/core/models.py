"""Document tree models: one pydantic model per block and inline node kind"""

from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator


class Node(BaseModel):
    """Base for all document-tree nodes; `kind` is the discriminator."""
    model_config = ConfigDict(populate_by_name=True)


# --- marks ---

class SimpleMark(BaseModel):
    """A mark without attributes. `inlineJsx` means: emit the text raw."""
    type: Literal["bold", "italic", "strike", "code", "underline", "highlight", "inlineJsx"]


class LinkMark(BaseModel):
    type:   Literal["link"] = "link"
    href:   str = ""
    target: Optional[str] = "_blank"


Mark = Annotated[Union[SimpleMark, LinkMark], Field(discriminator="type")]


# --- inline nodes ---

class Text(Node):
    kind:  Literal["text"] = "text"
    text:  str
    marks: list[Mark] = []

    def has_mark(self, mark_type: str) -> bool:
        return any(m.type == mark_type for m in self.marks)


class Image(Node):
    """Image; valid both inline and as a block."""
    kind:  Literal["image"] = "image"
    src:   str = ""
    alt:   str = ""
    title: Optional[str] = None
    href:  Optional[str] = None     # target of an enclosing link


class FootnoteRef(Node):
    kind:       Literal["footnoteRef"] = "footnoteRef"
    identifier: str = ""


class HardBreak(Node):
    kind: Literal["hardBreak"] = "hardBreak"


INLINE_TYPES = (Text, Image, FootnoteRef, HardBreak)

Inline = Annotated[Union[INLINE_TYPES], Field(discriminator="kind")]


# --- block nodes ---

class Paragraph(Node):
    kind:    Literal["paragraph"] = "paragraph"
    content: list[Inline] = []


class Heading(Node):
    kind:    Literal["heading"] = "heading"
    level:   int = Field(default=2, ge=1, le=6)
    content: list[Inline] = []


class Blockquote(Node):
    kind:     Literal["blockquote"] = "blockquote"
    children: list["Block"] = []


class ListItem(Node):
    kind:     Literal["listItem"] = "listItem"
    children: list["Block"] = []


class TaskItem(Node):
    """Checklist item; always holds at least one paragraph."""
    kind:     Literal["taskItem"] = "taskItem"
    checked:  bool = False
    children: list["Block"] = []

    @model_validator(mode="after")
    def _ensure_paragraph(self):
        if not self.children:
            self.children = [Paragraph()]
        return self


class BulletList(Node):
    kind:     Literal["bulletList"] = "bulletList"
    children: list[ListItem] = []


class OrderedList(Node):
    kind:     Literal["orderedList"] = "orderedList"
    start:    int = 1
    children: list[ListItem] = []


class TaskList(Node):
    kind:     Literal["taskList"] = "taskList"
    children: list[TaskItem] = []


class CodeBlock(Node):
    kind:     Literal["codeBlock"] = "codeBlock"
    language: Optional[str] = None
    text:     str = ""


class MermaidDiagram(Node):
    kind: Literal["mermaidDiagram"] = "mermaidDiagram"
    text: str = ""


class HorizontalRule(Node):
    kind: Literal["horizontalRule"] = "horizontalRule"


class Figure(Node):
    """<Figure> component; empty strings mean 'attribute absent'."""
    kind:    Literal["figure"] = "figure"
    src:     str = ""
    alt:     str = ""
    caption: str = ""
    label:   str = ""
    width:   str = ""
    height:  str = ""


class YoutubeEmbed(Node):
    kind:     Literal["youtubeEmbed"] = "youtubeEmbed"
    video_id: str = Field(default="", alias="videoId")
    title:    str = ""


class TwitterCard(Node):
    kind: Literal["twitterCard"] = "twitterCard"
    id:   str = ""


class Details(Node):
    kind:     Literal["details"] = "details"
    summary:  str = "Details"
    children: list["Block"] = []


class FootnoteDef(Node):
    """Footnote definition; paragraphs are flattened into one inline run."""
    kind:       Literal["footnoteDef"] = "footnoteDef"
    identifier: str = ""
    content:    list[Inline] = []


class PassthroughBlock(Node):
    """Verbatim MDX/HTML fragment the model does not interpret."""
    kind:    Literal["passthroughBlock"] = "passthroughBlock"
    content: str = ""


class TableHeader(Node):
    kind:     Literal["tableHeader"] = "tableHeader"
    children: list[Paragraph] = Field(default_factory=lambda: [Paragraph()], max_length=1)


class TableCell(Node):
    kind:     Literal["tableCell"] = "tableCell"
    children: list[Paragraph] = Field(default_factory=lambda: [Paragraph()], max_length=1)


TableCellLike = Annotated[Union[TableHeader, TableCell], Field(discriminator="kind")]


class TableRow(Node):
    kind:     Literal["tableRow"] = "tableRow"
    children: list[TableCellLike] = []


class Table(Node):
    """Pipe table: the first row is the header row."""
    kind:     Literal["table"] = "table"
    label:    Optional[str] = None
    caption:  Optional[str] = None
    children: list[TableRow] = Field(min_length=1)


class DescriptionTerm(Node):
    kind:    Literal["descriptionTerm"] = "descriptionTerm"
    content: list[Inline] = []


class DescriptionDetails(Node):
    kind:     Literal["descriptionDetails"] = "descriptionDetails"
    children: list["Block"] = Field(default_factory=lambda: [Paragraph()])


DescriptionPart = Annotated[Union[DescriptionTerm, DescriptionDetails], Field(discriminator="kind")]


class DescriptionList(Node):
    kind:     Literal["descriptionList"] = "descriptionList"
    children: list[DescriptionPart] = []


BLOCK_TYPES = (
    Paragraph, Heading, Blockquote, BulletList, OrderedList, TaskList, TaskItem, ListItem,
    CodeBlock, MermaidDiagram, HorizontalRule, Image, Figure, YoutubeEmbed, TwitterCard,
    Details, FootnoteDef, PassthroughBlock, Table, TableRow, TableHeader, TableCell,
    DescriptionList, DescriptionTerm, DescriptionDetails,
)

Block = Annotated[Union[BLOCK_TYPES], Field(discriminator="kind")]


class Document(BaseModel):
    """Ordered sequence of top-level blocks; the editor's source of truth."""
    kind:     Literal["doc"] = "doc"
    children: list[Block] = []


for _model in (*BLOCK_TYPES, Document):
    _model.model_rebuild()
