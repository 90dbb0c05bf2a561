"""Rule engine: parse rule documents and apply them to a single grid cell."""

import logging
from typing import Any, Mapping, Optional, Union

import yaml
from pydantic import ValidationError
from yaml.composer import ComposerError

from hexworld.errors import TemplateError
from hexworld.grid import HexGrid
from hexworld.hex_coords import HexPosition
from hexworld.schemas.template import (
    Action,
    Condition,
    ElevationRangeCondition,
    Rule,
    SetElevationAction,
    SetTerrainAction,
    Template,
    TerrainTypeCondition,
)

logger = logging.getLogger(__name__)


class RuleDocumentLoader(yaml.SafeLoader):
    """SafeLoader that rejects aliases; parsed size stays linear in document size."""

    def compose_node(self, parent, index):
        if self.check_event(yaml.AliasEvent):
            event = self.peek_event()
            raise ComposerError(
                None, None,
                f"found alias *{event.anchor}; aliases are not allowed in rule documents",
                event.start_mark,
            )
        return super().compose_node(parent, index)


def parse_template(
    document: Union[str, bytes, Mapping[str, Any]],
    source: str = "<document>",
) -> Template:
    """Parse one Template from YAML text or an already-loaded mapping.

    Raises:
        TemplateError: if the document is not valid YAML, uses aliases, or
            does not match the rule document schema.
    """
    if isinstance(document, (str, bytes)):
        try:
            data = yaml.load(document, Loader=RuleDocumentLoader)
        except yaml.YAMLError as e:
            raise TemplateError(f"invalid YAML: {e}", source) from e
        except RecursionError as e:
            raise TemplateError("document is nested too deeply", source) from e
    else:
        data = document

    if not isinstance(data, Mapping):
        raise TemplateError(
            f"expected a mapping at the top level, got {type(data).__name__}",
            source,
        )

    try:
        return Template.model_validate(dict(data))
    except ValidationError as e:
        raise TemplateError(f"invalid template: {e}", source) from e
    except RecursionError as e:
        raise TemplateError("document is nested too deeply", source) from e


class TemplateEngine:
    """Registry of rule templates that mutate a grid cell by cell.

    Only TerrainType and ElevationRange conditions are evaluated; every
    other condition kind is unmet. Only SetTerrain and SetElevation actions
    change the grid; the remaining action kinds parse but do nothing.
    """

    def __init__(self):
        self.templates: dict[str, Template] = {}

    def __len__(self) -> int:
        return len(self.templates)

    def load_template(
        self,
        document: Union[str, bytes, Mapping[str, Any]],
        source: str = "<document>",
    ) -> Template:
        """Parse and register a template, replacing any with the same name."""
        template = parse_template(document, source)
        self.register(template)
        return template

    def register(self, template: Template) -> None:
        """Store an already-parsed template under its name."""
        if template.name in self.templates:
            logger.debug("Replacing template %r", template.name)
        self.templates[template.name] = template
        logger.debug("Registered template %r with %d rules", template.name, len(template.rules))

    def get_template(self, name: str) -> Optional[Template]:
        return self.templates.get(name)

    def template_names(self) -> list[str]:
        return list(self.templates)

    def apply_template(
        self, name: str, grid: HexGrid, position: HexPosition
    ) -> bool:
        """Apply the first matching rule of template ``name`` at ``position``.

        Rules are tried by descending priority (ties keep document order).
        Returns False if the template is unknown or no rule matches.
        """
        rule = self.matching_rule(name, grid, position)
        if rule is None:
            return False

        logger.debug("Rule %r of %r matched at %s", rule.name, name, position)
        self.apply_actions(rule.actions, grid, position)
        return True

    def matching_rule(
        self, name: str, grid: HexGrid, position: HexPosition
    ) -> Optional[Rule]:
        """The rule apply_template would run, without running it.

        Rules are tried by descending priority; ties keep document order.
        """
        template = self.templates.get(name)
        if template is None:
            return None
        for rule in sorted(template.rules, key=lambda rule: -rule.priority):
            if self.evaluate_conditions(rule.conditions, grid, position):
                return rule
        return None

    def evaluate_conditions(
        self, conditions: list[Condition], grid: HexGrid, position: HexPosition
    ) -> bool:
        return all(
            self.evaluate_condition(condition, grid, position)
            for condition in conditions
        )

    def evaluate_condition(
        self, condition: Condition, grid: HexGrid, position: HexPosition
    ) -> bool:
        if isinstance(condition, TerrainTypeCondition):
            cell = grid.get_cell(position)
            return cell is not None and cell.terrain == condition.terrain

        if isinstance(condition, ElevationRangeCondition):
            cell = grid.get_cell(position)
            return cell is not None and condition.min <= cell.elevation <= condition.max

        logger.debug("%s conditions are not evaluated; treating as unmet", condition.type)
        return False

    def apply_actions(
        self, actions: list[Action], grid: HexGrid, position: HexPosition
    ) -> None:
        for action in actions:
            self.apply_action(action, grid, position)

    def apply_action(
        self, action: Action, grid: HexGrid, position: HexPosition
    ) -> None:
        if isinstance(action, SetTerrainAction):
            cell = grid.get_cell(position)
            if cell is not None:
                grid.add_cell(position, action.params.terrain, cell.elevation)
            return

        if isinstance(action, SetElevationAction):
            cell = grid.get_cell(position)
            if cell is not None:
                grid.add_cell(position, cell.terrain, action.params.elevation)
            return

        logger.debug("%s actions have no effect; skipped", action.type)
