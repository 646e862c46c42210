"""Configuration for supervalidator."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

PACKAGE_DIR = Path(__file__).parent
BUNDLED_TEMPLATE_PATH = PACKAGE_DIR / "templates" / "validation.yaml"
SCHEMAS_DIR = PACKAGE_DIR / "schemas"


@dataclass
class ValidatorConfig:
    """Process-wide configuration.

    Attributes:
        template_path: Default message template used when a Validator is
            given neither a template_path nor a translator
    """

    template_path: Path

    @classmethod
    def from_env(cls) -> ValidatorConfig:
        """Create config from environment variables.

        Resolution order:
        1. SUPERVALIDATOR_TEMPLATE_PATH env var
        2. Default: the bundled templates/validation.yaml
        """
        template_path = os.environ.get("SUPERVALIDATOR_TEMPLATE_PATH")
        if template_path:
            return cls(template_path=Path(template_path))

        return cls(template_path=BUNDLED_TEMPLATE_PATH)
