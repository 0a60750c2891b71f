"""Jinja Renderer — fills a named template with text bindings.

Invariants:
    - Template set is fixed at construction; the Environment is never mutated afterwards,
      so one renderer is shared by all concurrent requests without locking
    - Missing binding is an error (StrictUndefined), never an empty string
    - Every jinja2 failure surfaces as TemplateError

Design Decisions:
    - DictLoader over files: two tiny templates, no filesystem dependency
    - autoescape off: responses are text/plain, not HTML
"""

import logging
from collections.abc import Mapping
from types import MappingProxyType

import jinja2

from minipost.core.errors import TemplateError

logger = logging.getLogger(__name__)

DEFAULT_TEMPLATES: Mapping[str, str] = MappingProxyType({
    "hello": "Hello, {{ name }}!\n",
    "post": "{{ title }}\n\n{{ content }}\n\n-- post {{ id }}\n",
})


class JinjaRenderer:
    """Renderer backed by an immutable jinja2 Environment."""

    def __init__(self, templates: Mapping[str, str] = DEFAULT_TEMPLATES):
        self._env = jinja2.Environment(
            loader=jinja2.DictLoader(dict(templates)),
            undefined=jinja2.StrictUndefined,
            autoescape=False,
            keep_trailing_newline=True,
        )

    @property
    def template_names(self) -> list[str]:
        return self._env.list_templates()

    def render(self, template_name: str, bindings: Mapping[str, str]) -> str:
        try:
            template = self._env.get_template(template_name)
            return template.render(**bindings)
        except jinja2.TemplateNotFound as e:
            raise TemplateError(
                f"Unknown template '{template_name}'", template_name,
            ) from e
        except jinja2.TemplateError as e:
            logger.error(f"Rendering '{template_name}' failed: {e}")
            raise TemplateError(
                f"Template '{template_name}' could not be rendered: {e.message}",
                template_name,
            ) from e
