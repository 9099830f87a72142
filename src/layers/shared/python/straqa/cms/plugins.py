"""CMS plugin configuration.

Declares the plugins the CMS server loads: the form builder (with uploads on,
payments off and a richer editor for the confirmation message) and the cloud
hosting plugin. Everything here is resolved at configuration time.
"""

from typing import Any, Callable, Literal, Sequence

from pydantic import BaseModel, ConfigDict, Field

HEADING_SIZES = ("h1", "h2", "h3", "h4", "h5", "h6")

CONFIRMATION_MESSAGE_FIELD = "confirmationMessage"


class EditorFeature(BaseModel):
    """A rich-text editor feature with its options."""

    model_config = ConfigDict(frozen=True)

    key: str
    options: dict[str, Any] = Field(default_factory=dict)


def fixed_toolbar_feature() -> EditorFeature:
    """Toolbar pinned above the editor."""
    return EditorFeature(key="fixedToolbar")


def heading_feature(enabled_heading_sizes: Sequence[str] = HEADING_SIZES) -> EditorFeature:
    """Headings, limited to the given sizes."""
    unknown = [size for size in enabled_heading_sizes if size not in HEADING_SIZES]
    if unknown:
        raise ValueError(f"Unknown heading sizes: {', '.join(unknown)}")
    return EditorFeature(
        key="heading",
        options={"enabledHeadingSizes": list(enabled_heading_sizes)},
    )


class RichTextEditor(BaseModel):
    """Lexical editor configuration.

    The editor's own root features are only known when the CMS builds the
    field, so the configuration keeps the features to append to them.
    """

    model_config = ConfigDict(frozen=True)

    kind: Literal["lexical"] = "lexical"
    extra_features: tuple[EditorFeature, ...] = ()

    def resolve_features(self, root_features: Sequence[EditorFeature]) -> list[EditorFeature]:
        """Root features followed by the extra ones."""
        return [*root_features, *self.extra_features]


class CMSField(BaseModel):
    """A field of a CMS collection. Unmodelled attributes pass through."""

    model_config = ConfigDict(extra="allow")

    name: str | None = None
    type: str
    editor: RichTextEditor | None = None


class FormBuilderFields(BaseModel):
    """Which field blocks form editors may use."""

    text: bool = True
    textarea: bool = True
    select: bool = True
    email: bool = True
    state: bool = True
    country: bool = True
    checkbox: bool = True
    number: bool = True
    message: bool = True
    payment: bool = False
    upload: bool = False

    def enabled(self) -> list[str]:
        """Names of the enabled field blocks."""
        return [name for name, on in self.model_dump().items() if on]


FieldsOverride = Callable[[list[CMSField]], list[CMSField]]


class FormBuilderPlugin(BaseModel):
    """Form builder plugin configuration."""

    name: Literal["form-builder"] = "form-builder"
    fields: FormBuilderFields = Field(default_factory=FormBuilderFields)
    form_fields_override: FieldsOverride | None = None

    def build_form_fields(self, default_fields: Sequence[CMSField]) -> list[CMSField]:
        """Fields of the forms collection after the override is applied."""
        fields = list(default_fields)
        if self.form_fields_override is None:
            return fields
        return self.form_fields_override(fields)


class CloudPlugin(BaseModel):
    """Cloud hosting plugin. Takes no options."""

    name: Literal["payload-cloud"] = "payload-cloud"


Plugin = FormBuilderPlugin | CloudPlugin


# Fields the form builder puts on its forms collection
DEFAULT_FORM_FIELDS: tuple[CMSField, ...] = (
    CMSField(name="title", type="text", required=True),
    CMSField(name="fields", type="blocks"),
    CMSField(name="submitButtonLabel", type="text", localized=True),
    CMSField(name="confirmationType", type="radio", defaultValue="message"),
    CMSField(
        name=CONFIRMATION_MESSAGE_FIELD,
        type="richText",
        localized=True,
        editor=RichTextEditor(),
    ),
    CMSField(name="redirect", type="group"),
    CMSField(name="emails", type="array"),
)


CONFIRMATION_MESSAGE_EDITOR = RichTextEditor(
    extra_features=(
        fixed_toolbar_feature(),
        heading_feature(("h1", "h2", "h3", "h4")),
    ),
)


def override_confirmation_message_editor(default_fields: Sequence[CMSField]) -> list[CMSField]:
    """Swap the confirmation message's editor; leave every other field as is."""
    return [
        field.model_copy(update={"editor": CONFIRMATION_MESSAGE_EDITOR})
        if field.name == CONFIRMATION_MESSAGE_FIELD
        else field
        for field in default_fields
    ]


PLUGINS: list[Plugin] = [
    FormBuilderPlugin(
        fields=FormBuilderFields(payment=False, upload=True),
        form_fields_override=override_confirmation_message_editor,
    ),
    CloudPlugin(),
]


def get_plugin(name: str) -> Plugin | None:
    """Look up a configured plugin by name."""
    for plugin in PLUGINS:
        if plugin.name == name:
            return plugin
    return None
