"""Response optimizer configuration.

One variant per response kind, discriminated on ``kind``. Comma-separated
strings are accepted wherever a list of selectors or field paths is expected.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Discriminator, Field, NonNegativeInt, Tag, field_validator, model_validator

ResponseKind = Literal["json", "text", "html"]
FieldsToInclude = Literal["all", "selected", "except"]


def _split_csv(v: Any) -> Any:
    """'a, b,,c' -> ('a', 'b', 'c'); sequences pass through trimmed."""
    if v is None:
        return ()
    if isinstance(v, str):
        v = v.split(",")
    if isinstance(v, (list, tuple)):
        return tuple(s.strip() for s in v if isinstance(s, str) and s.strip())
    return v


class HtmlOptimizerConfig(BaseModel):
    """Extract the inner HTML (or text) of every element matching ``css_selector``.

    Attributes:
        css_selector: Elements to extract, in document order
        only_content: Flatten each element to plain text
        elements_to_omit: Selectors skipped while flattening (only with only_content)
    """

    model_config = ConfigDict(frozen=True, extra="forbid", str_strip_whitespace=True)

    kind: Literal["html"] = "html"
    css_selector: Annotated[str, Field(min_length=1)]
    only_content: bool = False
    elements_to_omit: tuple[str, ...] = ()

    @model_validator(mode="before")
    @classmethod
    def _omit_needs_content(cls, data: Any) -> Any:
        if isinstance(data, dict) and not data.get("only_content"):
            return {**data, "elements_to_omit": ()}
        return data

    @field_validator("elements_to_omit", mode="before")
    @classmethod
    def _split_omit(cls, v: Any) -> Any:
        return _split_csv(v)


class TextOptimizerConfig(BaseModel):
    """Truncate text responses to ``max_length`` characters (0 = unbounded)."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    kind: Literal["text"] = "text"
    max_length: NonNegativeInt = 0


class JsonOptimizerConfig(BaseModel):
    """Unwrap ``data_field`` and project each item onto ``fields``.

    Attributes:
        data_field: Dotted path to the array/object holding the items
        fields_to_include: Keep all fields, only ``fields``, or all except ``fields``
        fields: Dotted field paths
    """

    model_config = ConfigDict(frozen=True, extra="forbid", str_strip_whitespace=True)

    kind: Literal["json"] = "json"
    data_field: str | None = None
    fields_to_include: FieldsToInclude = "all"
    fields: tuple[str, ...] = ()

    @field_validator("fields", mode="before")
    @classmethod
    def _split_fields(cls, v: Any) -> Any:
        return _split_csv(v)

    @field_validator("data_field", mode="after")
    @classmethod
    def _blank_is_none(cls, v: str | None) -> str | None:
        return v or None


def _optimizer_discriminator(v: dict[str, object] | BaseModel) -> str:
    if isinstance(v, dict):
        return str(v.get("kind", "json"))
    return getattr(v, "kind", "json")


OptimizerConfig = Annotated[
    Annotated[HtmlOptimizerConfig, Tag("html")]
    | Annotated[TextOptimizerConfig, Tag("text")]
    | Annotated[JsonOptimizerConfig, Tag("json")],
    Discriminator(_optimizer_discriminator),
]


class OptimizerParameters(BaseModel):
    """Flat per-call optimizer options as a tool surface collects them.

    ``to_config()`` turns them into the matching OptimizerConfig variant,
    or None when optimization is off.

    Example:
        >>> OptimizerParameters(optimize_response=True, response_type="text", max_length=500).to_config()
        TextOptimizerConfig(kind='text', max_length=500)
    """

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    optimize_response: bool = Field(default=False, alias="optimizeResponse")
    response_type: ResponseKind = Field(default="json", alias="responseType")
    css_selector: str = Field(default="", alias="cssSelector")
    only_content: bool = Field(default=False, alias="onlyContent")
    elements_to_omit: str | list[str] = Field(default="", alias="elementsToOmit")
    data_field: str = Field(default="", alias="dataField")
    fields_to_include: FieldsToInclude = Field(default="all", alias="fieldsToInclude")
    fields: str | list[str] = Field(default_factory=list)
    max_length: NonNegativeInt = Field(default=0, alias="maxLength")

    def to_config(self) -> HtmlOptimizerConfig | TextOptimizerConfig | JsonOptimizerConfig | None:
        if not self.optimize_response:
            return None
        match self.response_type:
            case "html":
                return HtmlOptimizerConfig(
                    css_selector=self.css_selector,
                    only_content=self.only_content,
                    elements_to_omit=self.elements_to_omit,
                )
            case "text":
                return TextOptimizerConfig(max_length=self.max_length)
            case "json":
                return JsonOptimizerConfig(
                    data_field=self.data_field,
                    fields_to_include=self.fields_to_include,
                    fields=self.fields if self.fields_to_include != "all" else (),
                )
