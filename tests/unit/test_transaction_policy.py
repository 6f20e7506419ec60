"""Policy tests to keep request code aligned with transaction conventions."""

from __future__ import annotations

import ast
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[2]
REQUEST_ROOTS = (REPO_ROOT / "app" / "routes", REPO_ROOT / "app" / "services")


def _python_files():
    for root in REQUEST_ROOTS:
        yield from sorted(root.rglob("*.py"))


def test_request_bounded_code_has_no_explicit_commit_or_rollback() -> None:
    """Transactions end when ``async with db.begin()`` exits, never by hand."""
    violations: list[str] = []
    for path in _python_files():
        tree = ast.parse(path.read_text(encoding="utf-8"), filename=str(path))
        for node in ast.walk(tree):
            if not isinstance(node, ast.Call):
                continue
            func = node.func
            if isinstance(func, ast.Attribute) and func.attr in {"commit", "rollback"}:
                violations.append(f"{path.relative_to(REPO_ROOT)}:{node.lineno}")

    assert not violations, (
        "Explicit commit()/rollback() calls found in request-bounded code:\n"
        + "\n".join(sorted(violations))
    )


def test_session_queries_run_inside_a_transaction_block() -> None:
    """Every ``db.execute``/``db.get``/``db.flush`` sits under ``async with db.begin()``."""
    violations: list[str] = []
    for path in _python_files():
        tree = ast.parse(path.read_text(encoding="utf-8"), filename=str(path))
        inside: set[int] = set()
        for node in ast.walk(tree):
            if not isinstance(node, ast.AsyncWith):
                continue
            opens_transaction = any(
                isinstance(item.context_expr, ast.Call)
                and isinstance(item.context_expr.func, ast.Attribute)
                and item.context_expr.func.attr == "begin"
                for item in node.items
            )
            if opens_transaction:
                inside.update(id(child) for child in ast.walk(node))

        for node in ast.walk(tree):
            if (
                isinstance(node, ast.Call)
                and isinstance(node.func, ast.Attribute)
                and node.func.attr in {"execute", "get", "flush"}
                and isinstance(node.func.value, ast.Name)
                and node.func.value.id == "db"
                and id(node) not in inside
            ):
                violations.append(f"{path.relative_to(REPO_ROOT)}:{node.lineno}")

    assert not violations, (
        "Session calls outside `async with db.begin()`:\n" + "\n".join(sorted(violations))
    )
