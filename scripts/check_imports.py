#!/usr/bin/env python3
"""Enforce the lodge_admin layer rules on import statements.

    domain          imports no other lodge_admin layer
    application     imports domain
    infrastructure  imports domain and application
    bootstrap       imports every layer

Modules outside these four directories (config/, the package root) are
shared and never reported.

Usage:
    python scripts/check_imports.py [path/to/lodge_admin]

Exit status is 1 when a violation is found, 0 otherwise.
"""
import ast
import sys
from collections.abc import Iterator
from pathlib import Path
from typing import NamedTuple

PACKAGE = "lodge_admin"

# Inner layers have lower numbers
LAYER_HIERARCHY: dict[str, int] = {
    "domain": 0,
    "application": 1,
    "infrastructure": 2,
    "bootstrap": 3,
}

ALLOWED_IMPORTS: dict[str, set[str]] = {
    layer: {other for other, rank in LAYER_HIERARCHY.items() if rank < level}
    for layer, level in LAYER_HIERARCHY.items()
}


class Violation(NamedTuple):
    path: str
    line: int
    message: str


def get_import_module(node: ast.Import | ast.ImportFrom) -> str | None:
    """Module named by an import statement (first alias for plain imports)."""
    if isinstance(node, ast.ImportFrom):
        return node.module
    return node.names[0].name if node.names else None


def _layer_of(py_file: Path, package_dir: Path) -> str | None:
    try:
        top = py_file.relative_to(package_dir).parts[0]
    except (ValueError, IndexError):
        return None
    return top if top in LAYER_HIERARCHY else None


def _imports(tree: ast.Module) -> Iterator[tuple[int, str]]:
    for node in ast.walk(tree):
        if isinstance(node, (ast.Import, ast.ImportFrom)):
            module = get_import_module(node)
            if module:
                yield node.lineno, module


def _target_layer(module: str) -> str | None:
    parts = module.split(".")
    if len(parts) < 2 or parts[0] != PACKAGE:
        return None
    return parts[1] if parts[1] in LAYER_HIERARCHY else None


def check_file_imports(py_file: Path, package_dir: Path) -> list[Violation]:
    """Violations in one file; files outside a layer yield none."""
    layer = _layer_of(py_file, package_dir)
    if layer is None:
        return []

    try:
        tree = ast.parse(py_file.read_text(encoding="utf-8"), filename=str(py_file))
    except (SyntaxError, UnicodeDecodeError) as e:
        print(f"Warning: skipping {py_file}: {e}", file=sys.stderr)
        return []

    violations: list[Violation] = []
    for line, module in _imports(tree):
        target = _target_layer(module)
        if target is None or target == layer or target in ALLOWED_IMPORTS[layer]:
            continue
        violations.append(
            Violation(str(py_file), line, f"{layer} layer cannot import from {target}")
        )
    return violations


def check_import_boundaries(package_dir: Path) -> list[Violation]:
    if not package_dir.exists():
        print(f"Error: '{package_dir}' does not exist", file=sys.stderr)
        return []
    return [
        violation
        for py_file in sorted(package_dir.rglob("*.py"))
        for violation in check_file_imports(py_file, package_dir)
    ]


def format_violations(violations: list[Violation]) -> str:
    if not violations:
        return ""
    lines = ["Import boundary violations found:", ""]
    lines.extend(f"  {path}:{line}: {message}" for path, line, message in sorted(violations))
    lines.extend(["", f"Total: {len(violations)} violation(s)"])
    return "\n".join(lines)


def main(argv: list[str] | None = None) -> int:
    args = sys.argv[1:] if argv is None else argv
    package_dir = Path(args[0]) if args else Path(__file__).parent.parent / PACKAGE

    violations = check_import_boundaries(package_dir)
    if violations:
        print(format_violations(violations))
        return 1
    print("No import boundary violations found.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
