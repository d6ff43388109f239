import logging
from pathlib import Path

import yaml
from pydantic import ValidationError

from src.rules.models import DesignerRules

logger = logging.getLogger(__name__)

DEFAULT_RULES_PATH = Path(__file__).parent / "designer_rules.yaml"


def load_rules(path: Path) -> DesignerRules:
    """
    Load and validate the designer rules file.
    Raises FileNotFoundError if file missing.
    Raises ValueError if YAML or schema invalid.
    """
    if not path.exists():
        raise FileNotFoundError(f"Rules file not found at: {path}")

    with open(path) as f:
        content = f.read()

    # Accept a markdown document wrapping a ```yaml block
    lines = content.splitlines()
    yaml_lines = []
    in_block = False
    found_block = False

    for line in lines:
        s_line = line.strip()
        if s_line.startswith("```yaml"):
            in_block = True
            found_block = True
            continue
        if in_block and s_line.startswith("```"):
            in_block = False
            break

        if in_block:
            yaml_lines.append(line)

    clean_content = "\n".join(yaml_lines) if found_block else content

    try:
        data = yaml.safe_load(clean_content)
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML syntax in rules file: {e}") from e

    try:
        rules = DesignerRules.model_validate(data)
    except ValidationError as e:
        raise ValueError(f"Rules validation failed:\n{e}") from e

    logger.debug("Loaded designer rules %s from %s", rules.version, path)
    return rules


def load_default_rules() -> DesignerRules:
    """Load the rules file shipped with the package."""
    return load_rules(DEFAULT_RULES_PATH)
