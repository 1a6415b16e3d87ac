"""
Brainfuck execution

Runs a parsed Program against a Tape:

    Memory model:
    - Tape of byte cells, all 0 at start, growing to the right on demand
    - Cursor starts at cell 0; moving left of cell 0 is a fault
    - Each cell holds 0-255 and wraps around in both directions

    Input at end of input stores 0 in the current cell.

One Executor is one run: READY -> RUNNING -> HALTED or FAULTED.
"""

import io
import logging
from enum import Enum
from typing import List, Optional, Tuple

from brainfuck.streams import InputSource, OutputSink
from brainfuck.syntax import Opcode, Program

logger = logging.getLogger(__name__)

DEFAULT_TAPE_SIZE = 30000

# Value stored by ',' once the input source is exhausted.
EOF_VALUE = 0


class ExecutionError(RuntimeError):
    pass


class TapeUnderflowError(ExecutionError):
    """The cursor tried to move left of cell 0."""

    def __init__(self, instruction: int):
        self.instruction = instruction
        super().__init__(f"tape underflow: '<' at cell 0 (instruction {instruction})")


class ExecutionState(Enum):
    READY = "ready"
    RUNNING = "running"
    HALTED = "halted"
    FAULTED = "faulted"


class Tape:
    def __init__(self, size: int = DEFAULT_TAPE_SIZE):
        if size < 1:
            raise ValueError(f"tape size must be at least 1, got {size}")
        self.cells = bytearray(size)
        self.cursor = 0

    def __len__(self):
        return len(self.cells)

    @property
    def value(self) -> int:
        return self.cells[self.cursor]

    @value.setter
    def value(self, byte: int):
        self.cells[self.cursor] = byte

    def move_right(self):
        self.cursor += 1
        if self.cursor >= len(self.cells):
            self.cells.extend(bytes(self.cursor - len(self.cells) + 1))

    def move_left(self) -> bool:
        """Move one cell left. Returns False (cursor unchanged) at cell 0."""
        if self.cursor == 0:
            return False
        self.cursor -= 1
        return True

    def increment(self):
        self.cells[self.cursor] = (self.cells[self.cursor] + 1) % 256

    def decrement(self):
        self.cells[self.cursor] = (self.cells[self.cursor] - 1) % 256

    def window(self, size: int = 10) -> Tuple[int, List[int]]:
        """Cells around the cursor, as (first address, values)."""
        start = max(0, self.cursor - size // 2)
        end = min(len(self.cells), start + size)
        # Adjust start if we're near the end
        if end - start < size:
            start = max(0, end - size)
        return start, list(self.cells[start:end])


class Executor:
    """Fetch-decode-execute loop over one Program."""

    def __init__(self, program: Program, tape: Optional[Tape] = None,
                 output: Optional[OutputSink] = None, input: Optional[InputSource] = None):
        self.program = program
        self.tape = tape if tape is not None else Tape()
        self.output = output if output is not None else OutputSink(io.BytesIO())
        self.input = input if input is not None else InputSource()
        self.ip = 0
        self.steps = 0
        self.state = ExecutionState.READY

    @property
    def finished(self) -> bool:
        return self.state in (ExecutionState.HALTED, ExecutionState.FAULTED)

    def reset(self, tape: Optional[Tape] = None):
        """Rewind for another run. A new tape replaces the old one when given."""
        if tape is not None:
            self.tape = tape
        self.tape.cursor = 0
        self.ip = 0
        self.steps = 0
        self.state = ExecutionState.READY

    def _check_runnable(self):
        if self.finished:
            raise ExecutionError(f"cannot run a {self.state.value} executor; reset it first")

    def step(self) -> bool:
        """Execute one instruction. Returns False once the program has halted."""
        if self.state is ExecutionState.HALTED:
            return False
        self._check_runnable()
        if self.state is ExecutionState.READY:
            logger.debug("running %d instructions", len(self.program))
            self.state = ExecutionState.RUNNING
        if self.ip >= len(self.program):
            self.state = ExecutionState.HALTED
            return False

        instr = self.program[self.ip]
        op = instr.opcode
        tape = self.tape
        next_ip = self.ip + 1

        if op is Opcode.MOVE_RIGHT:
            tape.move_right()
        elif op is Opcode.MOVE_LEFT:
            if not tape.move_left():
                self.state = ExecutionState.FAULTED
                logger.debug("tape underflow at instruction %d", self.ip)
                raise TapeUnderflowError(self.ip)
        elif op is Opcode.INCREMENT:
            tape.increment()
        elif op is Opcode.DECREMENT:
            tape.decrement()
        elif op is Opcode.OUTPUT:
            self.output.write_byte(tape.value)
        elif op is Opcode.INPUT:
            byte = self.input.read_byte()
            tape.value = EOF_VALUE if byte is None else byte
        elif op is Opcode.JUMP_IF_ZERO:
            if tape.value == 0:
                next_ip = instr.target
        elif op is Opcode.JUMP_IF_NONZERO:
            if tape.value != 0:
                next_ip = instr.target

        self.ip = next_ip
        self.steps += 1
        if self.ip >= len(self.program):
            self.state = ExecutionState.HALTED
            logger.debug("halted after %d steps", self.steps)
        return True

    def run(self) -> ExecutionState:
        """Run until the end of the program. Faults propagate to the caller."""
        self._check_runnable()
        while self.step():
            pass
        return self.state
