"""Query a change ledger - list emitted attributes under a path prefix."""
from __future__ import annotations

import sys
from pathlib import Path

import duckdb


def main() -> None:
    if len(sys.argv) < 2:
        print("Usage: python query_ledger.py <ledger_dir> [path_prefix]")
        print("Example: python query_ledger.py ledger/ marathon/interface")
        sys.exit(1)

    ledger = Path(sys.argv[1])
    prefix = sys.argv[2] if len(sys.argv) > 2 else "marathon"

    con = duckdb.connect(":memory:")

    con.execute(f"CREATE VIEW changes AS SELECT * FROM '{ledger}/changes.parquet'")
    con.execute(f"CREATE VIEW diagnostics AS SELECT * FROM '{ledger}/diagnostics.parquet'")

    sql = """
    SELECT path, ordinal, attribute, value
    FROM changes
    WHERE path LIKE ? || '%'
    ORDER BY ordinal, attribute
    """

    print(f"--- Changes under {prefix} ---\n")

    df = con.execute(sql, [prefix]).fetchdf()
    if df.empty:
        print("No changes found.")
    else:
        for ordinal, group in df.groupby("ordinal", sort=True):
            attrs = " ".join(f"{r['attribute']}={r['value']}" for _, r in group.iterrows())
            print(f"{group.iloc[0]['path']}: {attrs}")

    diags = con.execute("SELECT code, message FROM diagnostics ORDER BY code").fetchdf()
    if not diags.empty:
        print("\n--- Diagnostics ---\n")
        for _, row in diags.iterrows():
            print(f"{row['code']}: {row['message']}")


if __name__ == "__main__":
    main()
