from __future__ import annotations

import json
import sys
from subprocess import run as subprocess_run  # noqa: S404
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import Path


def _run_cli(*args: str, cwd: Path) -> tuple[int, str]:
    result = subprocess_run(  # noqa: S603
        [sys.executable, "-m", "schemaform.cli", *args],
        capture_output=True,
        text=True,
        check=False,
        cwd=cwd,
    )
    return result.returncode, result.stdout


def test_flatten_then_validate(tmp_path: Path) -> None:
    schema = tmp_path / "order.json"
    schema.write_text(
        json.dumps(
            {
                "type": "object",
                "properties": {"item": {"type": "object", "properties": {"qty": {"type": "integer", "minimum": 1}}}},
                "required": ["item"],
            },
        ),
        encoding="utf-8",
    )

    code, out = _run_cli("flatten", "--number", "item[qty]=2", "--checkbox", "gift", cwd=tmp_path)
    assert code == 0
    assert json.loads(out) == {"gift": True, "item": {"qty": 2}}

    code, out = _run_cli("validate", "--schema", str(schema), "--number", "item.qty=2", cwd=tmp_path)
    assert code == 0
    assert json.loads(out)["errors"] == []

    code, out = _run_cli("validate", "--schema", str(schema), "--number", "item.qty=0", cwd=tmp_path)
    assert code == 2
    assert json.loads(out)["errors"][0]["path"] == "item.qty"
