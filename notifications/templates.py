"""
Template rendering for notification bodies.

Channel services depend only on the TemplateEngine protocol. The bundled
implementation renders Jinja2 templates.

Design decisions:
- Templates are addressed by id ("welcome-email.html"); the file suffix
  (".j2") is appended when the id does not already carry it
- Lookup order: templates passed in memory, then the templates bundled in
  this package, then an optional directory on disk
- Sandboxed environment with StrictUndefined, so a missing variable is a
  render failure rather than an empty string in a customer's inbox
- HTML and XML templates are autoescaped
- Rendering runs in a worker thread so disk loads never block the event loop
"""

import asyncio
import logging
from pathlib import Path
from typing import Any, Mapping, Optional, Protocol

from jinja2 import (
    BaseLoader,
    ChoiceLoader,
    DictLoader,
    FileSystemLoader,
    PackageLoader,
    StrictUndefined,
    TemplateNotFound,
    TemplateSyntaxError,
    UndefinedError,
    select_autoescape,
)
from jinja2.sandbox import SandboxedEnvironment

from notifications.config import NotificationSettings
from notifications.errors import TemplateRenderError

logger = logging.getLogger("templates")


class TemplateEngine(Protocol):
    """Renders a template by id with the given variables."""

    async def render(
        self,
        template_id: str,
        variables: Optional[Mapping[str, Any]] = None,
    ) -> str:
        """
        Render a template.

        Raises:
            TemplateRenderError: If the template is missing or fails to render
        """
        ...


class Jinja2TemplateEngine:
    """
    Jinja2-backed TemplateEngine.

    Example:
        engine = Jinja2TemplateEngine(templates={"greeting": "Hi {{ name }}"})
        await engine.render("greeting", {"name": "Bob"})   # "Hi Bob"
    """

    def __init__(
        self,
        templates: Optional[Mapping[str, str]] = None,
        template_dir: Optional[Path] = None,
        package: Optional[str] = "notifications",
        package_path: str = "bundled_templates",
        suffix: str = ".j2",
    ):
        """
        Args:
            templates: In-memory templates keyed by template id
            template_dir: Directory searched after the bundled templates
            package: Package whose `package_path` holds bundled templates
                     (None disables them)
            package_path: Directory inside `package`
            suffix: File suffix appended to template ids
        """
        self.suffix = suffix

        loaders: list[BaseLoader] = []
        if templates:
            loaders.append(DictLoader({
                self.template_name(template_id): source
                for template_id, source in templates.items()
            }))
        if package:
            loaders.append(PackageLoader(package, package_path))
        if template_dir is not None:
            if Path(template_dir).is_dir():
                loaders.append(FileSystemLoader(str(template_dir)))
            else:
                logger.warning(
                    f"Template directory '{template_dir}' does not exist, skipping"
                )

        self._env = SandboxedEnvironment(
            loader=ChoiceLoader(loaders),
            autoescape=select_autoescape(
                enabled_extensions=("html", "xml", "html" + suffix, "xml" + suffix),
                default_for_string=True,
            ),
            undefined=StrictUndefined,
            trim_blocks=True,
            lstrip_blocks=True,
        )
        logger.info(
            f"Jinja2TemplateEngine initialized (package: {package}, directory: {template_dir})"
        )

    @classmethod
    def from_settings(cls, settings: NotificationSettings, **kwargs) -> "Jinja2TemplateEngine":
        return cls(template_dir=settings.template_dir, suffix=settings.template_suffix, **kwargs)

    def template_name(self, template_id: str) -> str:
        """Loader name for a template id."""
        if template_id.endswith(self.suffix):
            return template_id
        return template_id + self.suffix

    async def render(
        self,
        template_id: str,
        variables: Optional[Mapping[str, Any]] = None,
    ) -> str:
        return await asyncio.to_thread(self.render_sync, template_id, variables)

    def render_sync(
        self,
        template_id: str,
        variables: Optional[Mapping[str, Any]] = None,
    ) -> str:
        """Blocking variant of render()."""
        try:
            template = self._env.get_template(self.template_name(template_id))
            return template.render(dict(variables or {}))
        except TemplateNotFound as e:
            raise TemplateRenderError(f"Template not found: {template_id}", template_id) from e
        except UndefinedError as e:
            msg = f"Missing variable in template {template_id}: {e}"
            raise TemplateRenderError(msg, template_id) from e
        except TemplateSyntaxError as e:
            msg = f"Syntax error in template {template_id}: {e}"
            raise TemplateRenderError(msg, template_id) from e
        except Exception as e:
            msg = f"Failed to render template {template_id}: {e}"
            raise TemplateRenderError(msg, template_id) from e
