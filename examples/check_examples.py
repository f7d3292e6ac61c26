#!/usr/bin/env python3

from __future__ import annotations

import os
import subprocess
import sys


ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))


def _norm(s: str) -> str:
    return s.replace('\r\n', '\n')


def _run_example(path: str, *, args: list, input_data: str | None, timeout_s: float = 30.0) -> dict:
    cmd = [sys.executable, "-m", "bfvm", *args, path]
    env = dict(os.environ)
    env["PYTHONPATH"] = os.path.join(ROOT, "src") + os.pathsep + env.get("PYTHONPATH", "")
    try:
        p = subprocess.run(
            cmd,
            input=input_data,
            text=True,
            capture_output=True,
            cwd=ROOT,
            env=env,
            timeout=timeout_s,
        )
        return {
            "ok": p.returncode == 0,
            "returncode": p.returncode,
            "stdout": p.stdout,
            "stderr": p.stderr,
            "timeout": False,
        }
    except subprocess.TimeoutExpired as e:
        return {
            "ok": False,
            "returncode": None,
            "stdout": e.stdout or "",
            "stderr": (e.stderr or "") + "\n[TIMEOUT]",
            "timeout": True,
        }


def main() -> int:
    examples = [
        {
            "file": "examples/00_hello_world.bf",
            "args": [],
            "input": None,
            "expect": "Hello World!\n",
        },
        {
            "file": "examples/01_cat.bf",
            "args": ["--eof", "zero"],
            "input": "meow\n",
            "expect": "meow\n",
        },
        {
            "file": "examples/02_alphabet.bf",
            "args": ["--no-jit"],
            "input": None,
            "expect": "ABCDEFGHIJKLMNOPQRSTUVWXYZ\n",
        },
    ]

    print("=== bfvm Examples Verification ===")

    any_fail = False
    for ex in examples:
        r = _run_example(ex["file"], args=ex["args"], input_data=ex["input"])
        out = _norm(r["stdout"])

        passed = r["ok"] and out == ex["expect"]
        status = "PASS" if passed else "FAIL"
        print(f"\n[{status}] {ex['file']}")

        if passed:
            continue

        any_fail = True
        print(f"Expected: {ex['expect']!r}")
        print(f"Return code: {r['returncode']}  Timeout: {r['timeout']}")
        print("--- program output ---")
        print(out)
        print("--- stderr ---")
        print(r["stderr"])

    if any_fail:
        print("\nSome examples FAILED.")
        return 1

    print("\nAll examples passed (output checks).")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
