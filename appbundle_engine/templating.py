"""Config template rendering against shared-scope values."""

from pathlib import Path
from string import Template
from typing import Mapping

from .errors import BundleIOError, InputError

TEMPLATE_SUFFIXES = (".template", ".tmpl")


def rendered_name(template_path: Path) -> str:
    """Output file name: the template name without a trailing template suffix."""
    name = template_path.name
    for suffix in TEMPLATE_SUFFIXES:
        if name.endswith(suffix) and len(name) > len(suffix):
            return name[: -len(suffix)]
    return name


def render_template(template_path: Path, values: Mapping[str, str], target_dir: Path) -> Path:
    """Substitute ``${key}`` placeholders and write the result into ``target_dir``."""
    if not template_path.is_file():
        raise InputError(f"Component configuration file does not exist: {template_path}")

    text = template_path.read_text(encoding="utf-8")
    try:
        rendered = Template(text).substitute(values)
    except KeyError as e:
        raise InputError(f"Unknown config value {e} in {template_path}") from e
    except ValueError as e:
        raise InputError(f"Malformed placeholder in {template_path}: {e}") from e

    target = target_dir / rendered_name(template_path)
    try:
        target_dir.mkdir(parents=True, exist_ok=True)
        target.write_text(rendered, encoding="utf-8")
    except OSError as e:
        raise BundleIOError(target, f"Cannot write rendered config ({e.strerror})") from e
    return target
