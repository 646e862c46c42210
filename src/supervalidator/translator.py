"""Message template source.

A template maps rule names to messages. The process-wide default template
path lives on the Translator class; it is seeded from ValidatorConfig and can
be swapped once at configuration time:

    Translator.set_template_path("/etc/myapp/messages.yaml")

Validators capture the default path when they are constructed, so changing
it later does not affect existing instances.
"""

import logging
from collections.abc import Mapping
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Any

import yaml

from supervalidator.config import ValidatorConfig
from supervalidator.documents import TEMPLATE_SCHEMA, load_document, validate_document
from supervalidator.types import TemplateError

logger = logging.getLogger(__name__)

Template = Mapping[str, Any]


def _freeze(doc: dict[str, Any]) -> Template:
    """Read-only view of a template; cached copies are shared between callers."""
    return MappingProxyType(
        {key: _freeze(entry) if isinstance(entry, dict) else entry for key, entry in doc.items()}
    )


@lru_cache(maxsize=32)
def load_template(path: Path) -> Template:
    """Load and check a template file. Results are cached per path.

    Raises:
        TemplateError: If the file is missing, unparsable, or not a valid template
    """
    try:
        doc = load_document(path)
    except FileNotFoundError as exc:
        raise TemplateError(f"Template file not found: {path}") from exc
    except yaml.YAMLError as exc:
        raise TemplateError(f"Template file {path} could not be parsed: {exc}") from exc

    issues = validate_document(doc, TEMPLATE_SCHEMA, source=str(path))
    if issues:
        raise TemplateError(
            f"Template file {path} is invalid: " + "; ".join(str(i) for i in issues),
            issues=issues,
        )
    return _freeze(doc)


class Translator:
    """Resolves the message template for a validator.

    Attributes:
        template_path: Template file this translator reads
    """

    default_template_path: Path = ValidatorConfig.from_env().template_path

    def __init__(self, template_path: str | Path | None = None):
        self.template_path = Path(template_path or type(self).default_template_path)

    @classmethod
    def set_template_path(cls, template_path: str | Path) -> None:
        """Swap the process-wide default template."""
        logger.debug("Default template path set to %s", template_path)
        cls.default_template_path = Path(template_path)

    @classmethod
    def reset_template_path(cls) -> None:
        """Restore the configured default. Primarily for testing."""
        cls.default_template_path = ValidatorConfig.from_env().template_path

    def get_template(self) -> Template:
        return load_template(self.template_path)
