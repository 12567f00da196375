"""
Template selection and rendering for link previews.

Pipeline position: final stage (record → variant + fields → HTML).

A TemplateSource answers "do you have a template for this variant?" with a
RenderableTemplate or None. TemplateRenderer asks its sources in order and
renders with the first answer:

  1. FileTemplateSource: user Liquid templates in an includes directory
     (linkpreview.html / linkpreview_nog.html), if the file exists.
  2. DefaultTemplateSource: built-in HTML fragments, always available.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional, Union

from liquid import Environment, FileSystemLoader

from .schemas import PreviewVariant
from .logger import get_module_logger

logger = get_module_logger("templates")

# Custom template file names inside the includes directory
TEMPLATE_FILENAMES = {
    PreviewVariant.WITH_IMAGE: "linkpreview.html",
    PreviewVariant.WITHOUT_IMAGE: "linkpreview_nog.html",
}

# Built-in fragments. Fields are interpolated as-is (no HTML escaping):
# previewed pages are trusted as much as the document embedding them.
DEFAULT_TEMPLATE_WITH_IMAGE = """\
<div class="linkpreview-wrapper">
  <p><a href="{url}" target="_blank">{url}</a></p>
  <div class="linkpreview-wrapper-inner">
    <div class="linkpreview-content">
      <div class="linkpreview-image">
        <a href="{url}" target="_blank">
          <img src="{image}" />
        </a>
      </div>
      <div class="linkpreview-body">
        <h2 class="linkpreview-title">
          <a href="{url}" target="_blank">{title}</a>
        </h2>
        <div class="linkpreview-description">{description}</div>
      </div>
    </div>
    <div class="linkpreview-footer">
      <a href="{domain}" target="_blank">{domain}</a>
    </div>
  </div>
</div>
"""

DEFAULT_TEMPLATE_WITHOUT_IMAGE = """\
<div class="linkpreview-wrapper">
  <p><a href="{url}" target="_blank">{url}</a></p>
  <div class="linkpreview-wrapper-inner">
    <div class="linkpreview-content">
      <div class="linkpreview-body">
        <h2 class="linkpreview-title">
          <a href="{url}" target="_blank">{title}</a>
        </h2>
        <div class="linkpreview-description">{description}</div>
      </div>
    </div>
    <div class="linkpreview-footer">
      <a href="{domain}" target="_blank">{domain}</a>
    </div>
  </div>
</div>
"""

DEFAULT_TEMPLATES = {
    PreviewVariant.WITH_IMAGE: DEFAULT_TEMPLATE_WITH_IMAGE,
    PreviewVariant.WITHOUT_IMAGE: DEFAULT_TEMPLATE_WITHOUT_IMAGE,
}


def template_fields(variant: PreviewVariant, url, title, image, description, domain) -> dict:
    """Fields bound into a template. `image` is only present for the image variant."""
    fields = {"url": url, "title": title, "description": description, "domain": domain}
    if variant is PreviewVariant.WITH_IMAGE:
        fields["image"] = image
    return fields


# --- Renderable templates ---

class RenderableTemplate(ABC):
    """A template ready to turn preview fields into HTML."""

    @abstractmethod
    def render(self, fields: dict, payload: Optional[dict] = None) -> str:
        """
        Render the template.

        Args:
            fields: Preview fields (url, title, description, domain, and
                    image for the image variant)
            payload: Ambient values from the caller (site data etc.)

        Returns:
            HTML string
        """
        pass


class DefaultTemplate(RenderableTemplate):
    """Built-in fragment rendered by plain string interpolation."""

    def __init__(self, source: str):
        self.source = source

    def render(self, fields: dict, payload: Optional[dict] = None) -> str:
        # The payload is a Liquid concept; built-in fragments only see the fields
        values = {key: "" if value is None else value for key, value in fields.items()}
        return self.source.format(**values)


class LiquidTemplate(RenderableTemplate):
    """User-supplied Liquid template."""

    def __init__(self, path: Path, env: Environment):
        self.path = path
        self.template = env.from_string(path.read_text(encoding="utf-8"))

    def render(self, fields: dict, payload: Optional[dict] = None) -> str:
        context = dict(payload or {})
        # Preview fields go in under link_* and win over same-named payload keys
        context.update({f"link_{key}": value for key, value in fields.items()})
        return self.template.render(**context)


# --- Template sources ---

class TemplateSource(ABC):
    """Something that may provide a template for a variant."""

    @abstractmethod
    def resolve(self, variant: PreviewVariant) -> Optional[RenderableTemplate]:
        pass


class DefaultTemplateSource(TemplateSource):
    """Built-in fragments; resolves every variant."""

    def resolve(self, variant: PreviewVariant) -> Optional[RenderableTemplate]:
        return DefaultTemplate(DEFAULT_TEMPLATES[variant])


class FileTemplateSource(TemplateSource):
    """
    Liquid templates looked up by fixed file name in an includes directory.

    The Liquid environment's loader is rooted at the same directory, so a
    custom template can {% include %} its siblings.
    """

    def __init__(self, includes_dir: Union[str, Path]):
        self.includes_dir = Path(includes_dir)
        self.env = Environment(loader=FileSystemLoader(str(self.includes_dir)))

    def path_for(self, variant: PreviewVariant) -> Path:
        return self.includes_dir / TEMPLATE_FILENAMES[variant]

    def resolve(self, variant: PreviewVariant) -> Optional[RenderableTemplate]:
        path = self.path_for(variant)
        if not path.is_file():
            return None
        logger.debug(f"Using custom template: {path}")
        return LiquidTemplate(path, self.env)


class TemplateRenderer:
    """Renders preview fields with the first template a source provides."""

    def __init__(self, sources: Optional[list[TemplateSource]] = None):
        # The built-in source always resolves, so rendering never runs out of templates
        self.sources = list(sources or []) + [DefaultTemplateSource()]

    @classmethod
    def from_includes_dir(cls, includes_dir: Optional[Union[str, Path]]) -> "TemplateRenderer":
        """Renderer that prefers custom templates from includes_dir, if given."""
        if includes_dir is None:
            return cls()
        return cls([FileTemplateSource(includes_dir)])

    def select(self, variant: PreviewVariant) -> RenderableTemplate:
        for source in self.sources:
            template = source.resolve(variant)
            if template is not None:
                return template
        # Unreachable while DefaultTemplateSource is last
        raise LookupError(f"No template for {variant}")

    def render(self, variant: PreviewVariant, fields: dict, payload: Optional[dict] = None) -> str:
        """
        Render a preview.

        Args:
            variant: WITH_IMAGE or WITHOUT_IMAGE
            fields: Output of template_fields()
            payload: Ambient values merged into Liquid templates

        Returns:
            HTML string
        """
        return self.select(variant).render(fields, payload)
