"""Load and validate rule templates from YAML."""

import logging
from pathlib import Path
from typing import Optional

from hexworld import config
from hexworld.errors import TemplateError
from hexworld.schemas import Template
from hexworld.template_engine import TemplateEngine, parse_template

logger = logging.getLogger(__name__)


class TemplateLoader:
    """Load rule templates from YAML files."""

    def __init__(self, templates_dir: Optional[Path] = None):
        self.templates_dir = Path(templates_dir) if templates_dir else config.TEMPLATES_DIR

    def load_template(self, template_path: str) -> Template:
        """Load a single template by path (e.g., 'town' or 'settlements/town')."""
        yaml_path = self.templates_dir / f"{template_path}.yaml"
        if not yaml_path.exists():
            raise FileNotFoundError(f"Template not found: {yaml_path}")

        return parse_template(yaml_path.read_text(), source=str(yaml_path))

    def load_all(self) -> dict[str, Template]:
        """Load all templates under the templates directory, keyed by name.

        Files that fail to parse are logged and skipped.
        """
        templates = {}

        for yaml_file in sorted(self.templates_dir.rglob("*.yaml")):
            try:
                template = parse_template(yaml_file.read_text(), source=str(yaml_file))
            except (TemplateError, OSError, UnicodeDecodeError) as e:
                logger.warning("Failed to load %s: %s", yaml_file, e)
                continue
            templates[template.name] = template

        return templates

    def load_into(self, engine: TemplateEngine) -> list[str]:
        """Register every loadable template with ``engine``; returns their names."""
        names = []
        for name, template in self.load_all().items():
            engine.register(template)
            names.append(name)
        return names
