#!/usr/bin/env python3
"""
Brainfuck Step-by-Step Debugger

Shows the step-by-step execution of a Brainfuck program, displaying the
state of the memory tape, the instruction pointer and the output at each
step. The trace is written to a text stream (stderr by default) so it never
mixes with the program's own output.
"""

import sys
from typing import Optional, TextIO

from brainfuck.execution import ExecutionError, Executor
from brainfuck.interpreter import BrainfuckInterpreter
from brainfuck.syntax import Opcode


class BrainfuckDebugger(BrainfuckInterpreter):
    """Extended Brainfuck interpreter with step-by-step tracing."""

    def __init__(self, *args, show_memory_range: int = 10, stream: Optional[TextIO] = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.show_memory_range = show_memory_range
        self.stream = stream if stream is not None else sys.stderr
        self._trace_output = bytearray()

    def _print(self, text=""):
        print(text, file=self.stream)

    def debug_run(self, keep_tape: bool = False) -> bytes:
        """Execute the fed program one step at a time, printing each step."""
        executor = self.prepare(keep_tape)
        self.output.begin_run()
        self._trace_output.clear()

        self._print("BRAINFUCK DEBUGGER")
        self._print(f"Program: {executor.program}")
        self._print("=" * 80)
        self._show_state(executor, "INITIAL")

        while not executor.finished:
            ip = executor.ip
            if ip >= len(executor.program):
                # empty program
                executor.step()
                break
            before = executor.tape.value
            cursor = executor.tape.cursor
            writes = self.output.writes
            try:
                executor.step()
            except ExecutionError as e:
                self._print(f"\nStep {executor.steps + 1}: Execute '{executor.program[ip]}' at position {ip}")
                self._print(f"  FAULT: {e}")
                raise
            if self.output.writes > writes:
                self._trace_output.append(before)
            self._print(f"\nStep {executor.steps}: Execute '{executor.program[ip]}' at position {ip}")
            self._print("  " + self._describe(executor, ip, before, cursor))
            self._show_state(executor, f"AFTER STEP {executor.steps}")

        self._print(f"\nFINAL RESULT: {executor.state.value} after {executor.steps} steps")
        self._print(f"Output: {self._render_output()}")
        return self.output.captured()

    def _describe(self, executor: Executor, ip: int, before: int, cursor: int) -> str:
        instr = executor.program[ip]
        tape = executor.tape
        op = instr.opcode
        if op is Opcode.MOVE_RIGHT:
            return f"Move pointer right → position {tape.cursor}"
        if op is Opcode.MOVE_LEFT:
            return f"Move pointer left → position {tape.cursor}"
        if op is Opcode.INCREMENT:
            return f"Increment cell[{cursor}] → {tape.value}"
        if op is Opcode.DECREMENT:
            return f"Decrement cell[{cursor}] → {tape.value}"
        if op is Opcode.OUTPUT:
            return f"Output cell[{cursor}] = {before} → {_printable(before)}"
        if op is Opcode.INPUT:
            if self.input.exhausted:
                return f"Read input: EOF, cell[{cursor}] = 0"
            return f"Read input = {tape.value} → cell[{cursor}]"
        if op is Opcode.JUMP_IF_ZERO:
            if before == 0:
                return f"Loop start: cell[{cursor}] = 0, jump to position {executor.ip}"
            return f"Loop start: cell[{cursor}] ≠ 0, enter loop"
        if before != 0:
            return f"Loop end: cell[{cursor}] ≠ 0, jump back to position {executor.ip}"
        return f"Loop end: cell[{cursor}] = 0, exit loop"

    def _show_state(self, executor: Executor, label: str):
        """Show current state of memory, pointer, and program."""
        self._print(f"\n{label}:")

        # Show program with instruction pointer
        program_display = ""
        for i, instr in enumerate(executor.program):
            if i == executor.ip:
                program_display += f"[{instr}]"
            else:
                program_display += str(instr)
        if executor.ip >= len(executor.program):
            program_display += "[END]"
        self._print(f"Program:  {program_display}")

        # Show memory tape (focused around pointer)
        start, cells = executor.tape.window(self.show_memory_range)
        memory_vals = [f"{v:3d}" for v in cells]
        memory_ptrs = [" ^ " if start + i == executor.tape.cursor else "   " for i in range(len(cells))]
        memory_addrs = [f"{start + i:3d}" for i in range(len(cells))]
        self._print("Memory:   [" + "|".join(memory_vals) + "]")
        self._print("Pointer:   " + " ".join(memory_ptrs))
        self._print("Address:   " + " ".join(memory_addrs))

        self._print(f"Output:   {self._render_output()}")

    def _render_output(self) -> str:
        if not self._trace_output:
            return "(empty)"
        return f"{bytes(self._trace_output)!r} → {list(self._trace_output)}"


def _printable(value: int) -> str:
    char = chr(value)
    if char.isprintable() and value < 128:
        return f"'{char}' (ASCII {value})"
    return f"byte {value}"
