#!/usr/bin/env python3
"""
Tests for source -> instruction compilation.
"""

import sys
import os
sys.path.append(os.path.join(os.path.dirname(__file__), '..', 'src'))

import pytest

from bfvm import compile, format_program
from bfvm.errors import CompileError, UnclosedLoop, UnopenedLoop
from bfvm.instructions import (
    Add,
    Input,
    JumpIfNotZero,
    JumpIfZero,
    MoveLeft,
    MoveRight,
    Output,
    Subtract,
    UnresolvedLoopStart,
)


def _assert_loops_paired(program):
    for i, ins in enumerate(program):
        assert not isinstance(ins, UnresolvedLoopStart)
        if isinstance(ins, JumpIfZero):
            j = ins.target
            assert j > i
            assert program[j] == JumpIfNotZero(i)
        elif isinstance(ins, JumpIfNotZero):
            assert program[ins.target] == JumpIfZero(i)


def test_runs_are_collapsed():
    program = compile("+++>>--<.,")
    assert program == (
        Add(3), MoveRight(2), Subtract(2), MoveLeft(1), Output(), Input(),
    )


def test_comment_characters_are_ignored():
    assert compile("hello + world +\n+ !") == (Add(3),)
    assert compile("no operators here") == ()
    assert compile("") == ()


def test_different_operators_break_runs():
    assert compile("+-+") == (Add(1), Subtract(1), Add(1))
    assert compile("><") == (MoveRight(1), MoveLeft(1))


def test_io_operators_are_not_run_length_encoded():
    assert compile("..,,") == (Output(), Output(), Input(), Input())


def test_add_count_wraps_modulo_256():
    assert compile("+" * 256) == (Add(0),)
    assert compile("+" * 300) == (Add(44),)
    assert compile("-" * 257) == (Subtract(1),)


def test_move_count_is_not_reduced():
    assert compile(">" * 300) == (MoveRight(300),)


def test_simple_loop():
    assert compile("+[-]") == (Add(1), JumpIfZero(3), Subtract(1), JumpIfNotZero(1))


def test_brackets_flush_pending_run():
    assert compile("++[++]++") == (
        Add(2), JumpIfZero(3), Add(2), JumpIfNotZero(1), Add(2),
    )


@pytest.mark.parametrize("source", [
    "[]",
    "[[]]",
    "[][]",
    "+[>+[-<]>[.]]",
    "++++[>+++++<-]>[<+++++>-]+<+[>[>+>+<<-]++>>[<<+>>-]>>>[-]++>[-]+>>>+[[-]++++++>>>]<<<"
    "[[<++++++++<++>>-]+<.<[>----<-]<]<<[>>>>>[>>>[-]+++++++++<[>-<-]+++++++++>[-[<->-]+[<<<]]"
    "<[>+<-]>]<<-]<<-]",
])
def test_balanced_loops_are_paired(source):
    _assert_loops_paired(compile(source))


def test_unopened_loop():
    with pytest.raises(UnopenedLoop) as excinfo:
        compile("+]")
    err = excinfo.value
    assert isinstance(err, CompileError)
    assert err.offset == 1
    assert (err.line, err.column) == (1, 2)
    assert "UnopenedLoop" in str(err)


def test_unclosed_loop():
    with pytest.raises(UnclosedLoop) as excinfo:
        compile("+\n[-")
    err = excinfo.value
    assert err.offset == 2
    assert (err.line, err.column) == (2, 1)
    assert "> " in err.context


def test_unclosed_loop_reports_outer_bracket():
    with pytest.raises(UnclosedLoop) as excinfo:
        compile("[[]")
    assert excinfo.value.offset == 0


def test_extra_close_after_balanced_loop():
    with pytest.raises(UnopenedLoop) as excinfo:
        compile("[-]]")
    assert excinfo.value.offset == 3


def test_format_program():
    listing = format_program(compile("++[>.<-]"))
    assert listing.splitlines() == [
        "0  Add(2)",
        "1  JumpIfZero(6)",
        "2  MoveRight(1)",
        "3  Output",
        "4  MoveLeft(1)",
        "5  Subtract(1)",
        "6  JumpIfNotZero(1)",
    ]


def test_format_program_pads_indexes():
    lines = format_program(compile(".+" * 6)).splitlines()
    assert lines[0] == " 0  Output"
    assert lines[11] == "11  Add(1)"
