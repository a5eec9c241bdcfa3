"""Validate layer import boundaries for adventure_emulator."""

from __future__ import annotations

import ast
from pathlib import Path

PACKAGE = "adventure_emulator"
PROJECT_ROOT = Path(__file__).resolve().parents[1]
DEFAULT_SOURCE_ROOT = PROJECT_ROOT / "src" / PACKAGE
KNOWN_LAYERS = {"adapters", "api", "application", "cli", "core", "domain"}
RULES: dict[str, set[str]] = {
    "domain": {"adapters", "api", "application", "cli", "core"},
    "core": {"adapters", "api", "application", "cli"},
}


def _module_parts(path: Path, source_root: Path) -> list[str] | None:
    try:
        relative = path.relative_to(source_root)
    except ValueError:
        return None
    parts = [PACKAGE, *relative.with_suffix("").parts]
    if parts[-1] == "__init__":
        parts[-1] = ""
    return parts


def _layer_of(module_name: str) -> str | None:
    parts = module_name.split(".")
    if len(parts) < 2 or parts[0] != PACKAGE:
        return None
    return parts[1] if parts[1] in KNOWN_LAYERS else None


def _imported_modules(node: ast.Import | ast.ImportFrom, module_parts: list[str]) -> list[str]:
    if isinstance(node, ast.Import):
        return [alias.name for alias in node.names]
    if node.level == 0:
        base = node.module or ""
    else:
        package_parts = module_parts[:-1]
        if node.level - 1 > len(package_parts):
            return []
        anchor = package_parts[: len(package_parts) - (node.level - 1)]
        base = ".".join([*anchor, *([node.module] if node.module else [])])
    # `from adventure_emulator import core` names the layer in the alias.
    return [base, *(f"{base}.{alias.name}" for alias in node.names)]


def check_file(path: Path, source_root: Path = DEFAULT_SOURCE_ROOT) -> list[str]:
    module_parts = _module_parts(path, source_root)
    if module_parts is None or len(module_parts) < 3:
        return []
    layer = module_parts[1]
    banned = RULES.get(layer, set())
    if not banned:
        return []

    tree = ast.parse(path.read_text(encoding="utf-8"), filename=str(path))
    violations: list[str] = []
    for node in ast.walk(tree):
        if not isinstance(node, (ast.Import, ast.ImportFrom)):
            continue
        layers = {_layer_of(name) for name in _imported_modules(node, module_parts)}
        for imported in sorted(item for item in layers if item in banned):
            violations.append(f"{path}: {layer} must not import {PACKAGE}.{imported}")
    return violations


def check_import_boundaries(source_root: Path = DEFAULT_SOURCE_ROOT) -> list[str]:
    violations: list[str] = []
    for path in sorted(source_root.rglob("*.py")):
        violations.extend(check_file(path, source_root))
    return violations


def main() -> None:
    violations = check_import_boundaries()
    if violations:
        raise SystemExit("\n".join(violations))
    print("import boundary checks passed")


if __name__ == "__main__":
    main()
