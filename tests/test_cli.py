import json
import os
import subprocess
import sys
import xml.etree.ElementTree as ET

from conftest import REPO, make_macbinary


def run(args, cwd=REPO):
    env = dict(os.environ)
    env["PYTHONPATH"] = os.pathsep.join([str(REPO / "src"), str(REPO / "tools"), env.get("PYTHONPATH", "")])
    return subprocess.run(
        [sys.executable, *args], cwd=cwd, env=env, check=False, capture_output=True, text=True
    )


def test_fux_diff_end_to_end(tmp_path):
    fixtures = tmp_path / "fux"
    r = run(["tools/make_fixtures.py", str(fixtures), "--seed", "3"])
    assert r.returncode == 0, r.stderr + r.stdout

    ledger = tmp_path / "ledger"
    r = run(["-m", "mml_diff.cli", "fux", str(fixtures / "base.fux"), str(fixtures / "modified.fux"),
             "--ledger", str(ledger)])
    assert r.returncode == 0, r.stderr + r.stdout

    root = ET.fromstring(r.stdout.encode("utf-8"))
    assert root.tag == "marathon"
    assert len(root.findall("sounds/random")) == 1
    assert "Physics models differ" in r.stderr
    assert (ledger / "changes.parquet").stat().st_size > 0
    assert (ledger / "diagnostics.parquet").exists()


def test_identical_files_emit_empty_root(tmp_path):
    fixtures = tmp_path / "fux"
    r = run(["tools/make_fixtures.py", str(fixtures)])
    assert r.returncode == 0, r.stderr + r.stdout

    base = str(fixtures / "base.fux")
    r = run(["-m", "mml_diff.cli", "fux", base, base])
    assert r.returncode == 0, r.stderr + r.stdout
    assert len(ET.fromstring(r.stdout.encode("utf-8"))) == 0
    assert r.stderr == ""


def test_res_and_str_diff(tmp_path):
    fixtures = tmp_path / "res"
    r = run(["tools/make_fixtures.py", str(fixtures), "--rsrc"])
    assert r.returncode == 0, r.stderr + r.stdout
    base, mod = str(fixtures / "base.bin"), str(fixtures / "modified.bin")

    r = run(["-m", "mml_diff.cli", "res", base, mod])
    assert r.returncode == 0, r.stderr + r.stdout
    root = ET.fromstring(r.stdout.encode("utf-8"))
    (string,) = root.findall("stringset/string")
    assert string.text == "Continuer la partie"
    assert len(root.findall("interface/color")) == 1

    r = run(["-m", "mml_diff.cli", "str", base, mod])
    assert r.returncode == 0, r.stderr + r.stdout
    assert "Generated by strdiff" in r.stdout
    assert ET.fromstring(r.stdout.encode("utf-8")).find("interface") is None


def test_corrupted_header_fails_closed(tmp_path):
    fixtures = tmp_path / "res"
    r = run(["tools/make_fixtures.py", str(fixtures), "--rsrc"])
    assert r.returncode == 0, r.stderr + r.stdout

    r = run(["scripts/corrupt_one_byte.py", str(fixtures / "modified.bin")])
    assert r.returncode == 0, r.stderr + r.stdout

    r = run(["-m", "mml_diff.cli", "res", str(fixtures / "base.bin"), str(fixtures / "modified.bin")])
    assert r.returncode != 0
    assert r.stdout == ""
    assert r.stderr.startswith("FATAL [E_FORMAT]")
    assert "CRC" in r.stderr


def test_inspect_prints_canonical_json(tmp_path):
    path = tmp_path / "engine.bin"
    path.write_bytes(make_macbinary(strings={128: ["a", "b", "c"]}))

    r = run(["-m", "mml_diff.cli", "inspect", str(path), "--kind", "res"])
    assert r.returncode == 0, r.stderr + r.stdout
    summary = json.loads(r.stdout)
    assert summary["kind"] == "res"
    assert summary["string_sets"] == {"128": 3}
    assert summary["interface_colors"] == 25
    assert r.stdout.strip() == json.dumps(summary, sort_keys=True, separators=(",", ":"), ensure_ascii=False)
