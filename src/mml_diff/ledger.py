"""Flat parquet ledger of a ChangeTree, for querying diffs across many runs."""
from __future__ import annotations

import hashlib
from pathlib import Path

import pandas as pd
import pyarrow as pa
import pyarrow.parquet as pq

from .tree import ChangeTree, format_value

CHANGES_SCHEMA = pa.schema(
    [
        ("path", pa.string()),
        ("ordinal", pa.int32()),
        ("attribute", pa.string()),
        ("value", pa.string()),
        ("base_sha256", pa.string()),
        ("modified_sha256", pa.string()),
    ]
)

DIAGNOSTICS_SCHEMA = pa.schema(
    [
        ("code", pa.string()),
        ("message", pa.string()),
        ("tag", pa.string()),
        ("base_sha256", pa.string()),
        ("modified_sha256", pa.string()),
    ]
)


def file_sha256(path: Path) -> str:
    return hashlib.sha256(Path(path).read_bytes()).hexdigest()


def flatten(tree: ChangeTree) -> list[dict]:
    """One row per emitted attribute or text value.

    ``ordinal`` numbers nodes in emission order so rows of the same node
    stay together.
    """
    rows: list[dict] = []
    for ordinal, (path, node) in enumerate(tree.root.walk()):
        for name, value in node.attributes.items():
            rows.append({"path": path, "ordinal": ordinal, "attribute": name, "value": format_value(value)})
        if node.text is not None:
            rows.append({"path": path, "ordinal": ordinal, "attribute": "#text", "value": node.text})
    return rows


def write_ledger(tree: ChangeTree, out_dir: Path, base_sha256: str, modified_sha256: str) -> None:
    out_dir = Path(out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)

    changes = [dict(r, base_sha256=base_sha256, modified_sha256=modified_sha256) for r in flatten(tree)]
    df = pd.DataFrame(changes, columns=CHANGES_SCHEMA.names)
    pq.write_table(
        pa.Table.from_pandas(df, schema=CHANGES_SCHEMA, preserve_index=False),
        out_dir / "changes.parquet",
    )

    diagnostics = [
        {
            "code": d.code,
            "message": d.message,
            "tag": d.tag.decode("latin-1") if d.tag is not None else None,
            "base_sha256": base_sha256,
            "modified_sha256": modified_sha256,
        }
        for d in tree.diagnostics
    ]
    df = pd.DataFrame(diagnostics, columns=DIAGNOSTICS_SCHEMA.names)
    pq.write_table(
        pa.Table.from_pandas(df, schema=DIAGNOSTICS_SCHEMA, preserve_index=False),
        out_dir / "diagnostics.parquet",
    )
