#!/usr/bin/env python3
"""
Test the bfvm command line driver.
"""

import io
import logging
import sys
import os
sys.path.append(os.path.join(os.path.dirname(__file__), '..', 'src'))

import pytest

from bfvm.cli import main

PRINT_A = "++++++++[>++++++++<-]>+."


@pytest.fixture(autouse=True)
def reset_logging():
    yield
    logger = logging.getLogger("bfvm")
    for h in list(logger.handlers):
        logger.removeHandler(h)
    logger.setLevel(logging.NOTSET)


def test_inline_program(capsys):
    assert main(["-e", PRINT_A]) == 0
    out, err = capsys.readouterr()
    assert out == "A"
    assert err == ""


def test_program_file(tmp_path, capsys):
    path = tmp_path / "a.bf"
    path.write_text("print A: " + PRINT_A + "\n", encoding="utf-8")
    assert main([str(path)]) == 0
    assert capsys.readouterr().out == "A"


def test_pure_python_engine(capsys):
    assert main(["--no-jit", "-e", PRINT_A]) == 0
    assert capsys.readouterr().out == "A"


def test_missing_file(tmp_path, capsys):
    assert main([str(tmp_path / "nope.bf")]) == 1
    assert "cannot read" in capsys.readouterr().err


def test_compile_error(capsys):
    assert main(["-e", "+[-"]) == 1
    err = capsys.readouterr().err
    assert "UnclosedLoop" in err


def test_runtime_error(capsys):
    assert main(["-e", "+<"]) == 1
    assert "NegativeIndex" in capsys.readouterr().err


def test_step_limit(capsys):
    assert main(["--max-steps", "50", "-e", "+[]"]) == 1
    assert "StepLimitExceeded" in capsys.readouterr().err


def test_dump_listing(capsys):
    assert main(["--dump", "-e", "+[-]"]) == 0
    err = capsys.readouterr().err
    assert err.splitlines() == [
        "0  Add(1)",
        "1  JumpIfZero(3)",
        "2  Subtract(1)",
        "3  JumpIfNotZero(1)",
    ]


def test_timing_and_memory(capsys):
    assert main(["--time", "--memory", "3", "-e", "++>+++"]) == 0
    err = capsys.readouterr().err
    assert "Compilation took" in err
    assert "Execution took" in err
    assert err.splitlines()[-1] == "2 3 0"


def test_reads_stdin(monkeypatch, capsys):
    monkeypatch.setattr(sys, "stdin", io.StringIO("Z"))
    assert main(["-e", ",."]) == 0
    assert capsys.readouterr().out == "Z"


def test_eof_policy(monkeypatch, capsys):
    monkeypatch.setattr(sys, "stdin", io.StringIO(""))
    assert main(["--eof", "zero", "-e", "+,."]) == 0
    assert capsys.readouterr().out == "\x00"

    monkeypatch.setattr(sys, "stdin", io.StringIO(""))
    assert main(["-e", ","]) == 1
    assert "MissingInput" in capsys.readouterr().err


def test_debug_logging(capsys):
    assert main(["--debug", "-e", "+"]) == 0
    err = capsys.readouterr().err
    assert "compiled 1 characters into 1 instructions" in err
    assert "halted after 1 steps" in err


@pytest.mark.parametrize("argv", [
    [],
    ["file.bf", "-e", "+"],
    ["--tape-size", "0", "-e", "+"],
])
def test_usage_errors(argv, capsys):
    with pytest.raises(SystemExit) as excinfo:
        main(argv)
    assert excinfo.value.code == 2
