"""
Brainfuck syntax

Turns source text into a validated Program. Only the eight command
characters mean anything:

    >  <  +  -  .  ,  [  ]

All other characters are treated as comments and ignored.

Brackets are matched with a stack in a single pass, and each bracket gets
the index it jumps to baked in, so the executor never scans for a matching
bracket at run time.
"""

import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Iterator, List, Optional, Tuple, Union

logger = logging.getLogger(__name__)

Source = Union[str, bytes]


class Opcode(Enum):
    MOVE_RIGHT = ">"
    MOVE_LEFT = "<"
    INCREMENT = "+"
    DECREMENT = "-"
    OUTPUT = "."
    INPUT = ","
    JUMP_IF_ZERO = "["
    JUMP_IF_NONZERO = "]"

    @classmethod
    def from_token(cls, char: str) -> Optional["Opcode"]:
        """Return the opcode for a command character, or None for a comment."""
        return _TOKENS.get(char)

    @property
    def is_jump(self) -> bool:
        return self in (Opcode.JUMP_IF_ZERO, Opcode.JUMP_IF_NONZERO)

    def __str__(self):
        return self.value


_TOKENS = {op.value: op for op in Opcode}


@dataclass(frozen=True, repr=False)
class Instruction:
    """One executable unit. Jumps carry their resolved target index."""
    opcode: Opcode
    target: Optional[int] = None

    def resolved(self, target: int) -> "Instruction":
        return replace(self, target=target)

    def __repr__(self):
        if self.target is not None:
            return f"{self.opcode.value} (target: {self.target})"
        return self.opcode.value

    def __str__(self):
        return self.opcode.value


class ErrorKind(Enum):
    UNMATCHED_OPEN = "unmatched_open"
    UNMATCHED_CLOSE = "unmatched_close"


_MESSAGES = {
    ErrorKind.UNMATCHED_OPEN: "'[' was never closed",
    ErrorKind.UNMATCHED_CLOSE: "unmatched ']' symbol",
}


class BadExpressionError(SyntaxError):
    """Malformed loop structure.

    ``position`` is the 0-based character offset of the offending bracket in
    everything fed so far; ``line`` and ``column`` are 1-based.
    """

    def __init__(self, kind: ErrorKind, position: int, line: int = 1, column: int = 1):
        self.kind = kind
        self.position = position
        self.line = line
        self.column = column
        super().__init__(f"{_MESSAGES[kind]} at line {line}, column {column}")


class Program:
    """Immutable, validated sequence of instructions."""

    __slots__ = ("_instructions",)

    def __init__(self, instructions=()):
        self._instructions: Tuple[Instruction, ...] = tuple(instructions)

    def __len__(self):
        return len(self._instructions)

    def __getitem__(self, index):
        return self._instructions[index]

    def __iter__(self) -> Iterator[Instruction]:
        return iter(self._instructions)

    def __eq__(self, other):
        if not isinstance(other, Program):
            return NotImplemented
        return self._instructions == other._instructions

    def __hash__(self):
        return hash(self._instructions)

    def __repr__(self):
        return f"Program({str(self)!r})"

    def __str__(self):
        return "".join(str(instr) for instr in self._instructions)

    def loops(self) -> List[Tuple[int, int]]:
        """(open, close) index pairs, ordered by the open index."""
        return [
            (i, instr.target - 1)
            for i, instr in enumerate(self._instructions)
            if instr.opcode is Opcode.JUMP_IF_ZERO
        ]


class Parser:
    """Incremental parser.

    Open brackets stay on the stack between feeds, so a loop may open in one
    call to ``feed`` and close in a later one. ``finish`` produces the same
    Program that ``parse`` would for the concatenated text.
    """

    def __init__(self):
        self.reset()

    def reset(self):
        self._instructions: List[Instruction] = []
        # (instruction index, source offset, line, column) of pending opens
        self._stack: List[Tuple[int, int, int, int]] = []
        self._offset = 0
        self._line = 1
        self._column = 1

    @property
    def pending(self) -> int:
        return len(self._stack)

    def __len__(self):
        return len(self._instructions)

    def feed(self, source: Source) -> "Parser":
        """Parse more source. Atomic: on failure the parser is unchanged."""
        if isinstance(source, (bytes, bytearray)):
            source = source.decode("latin-1")

        instructions = self._instructions
        stack = self._stack
        start = len(instructions)
        saved_stack = list(stack)
        offset, line, column = self._offset, self._line, self._column

        try:
            for char in source:
                op = _TOKENS.get(char)
                if op is Opcode.JUMP_IF_ZERO:
                    stack.append((len(instructions), offset, line, column))
                    instructions.append(Instruction(op))
                elif op is Opcode.JUMP_IF_NONZERO:
                    if not stack:
                        raise BadExpressionError(ErrorKind.UNMATCHED_CLOSE, offset, line, column)
                    opened = stack.pop()[0]
                    end = len(instructions)
                    instructions.append(Instruction(op, opened))
                    instructions[opened] = instructions[opened].resolved(end + 1)
                elif op is not None:
                    instructions.append(Instruction(op))

                offset += 1
                if char == "\n":
                    line += 1
                    column = 1
                else:
                    column += 1
        except BadExpressionError:
            # roll back: drop this feed's instructions, reopen earlier loops it closed
            del instructions[start:]
            for index, _, _, _ in saved_stack:
                if instructions[index].target is not None:
                    instructions[index] = Instruction(Opcode.JUMP_IF_ZERO)
            self._stack = saved_stack
            raise

        self._offset, self._line, self._column = offset, line, column
        logger.debug("fed %d chars, %d instructions, %d loops pending",
                     len(source), len(instructions), len(stack))
        return self

    def finish(self) -> Program:
        if self._stack:
            _, offset, line, column = self._stack[-1]
            raise BadExpressionError(ErrorKind.UNMATCHED_OPEN, offset, line, column)
        return Program(self._instructions)


def parse(source: Source) -> Program:
    """Parse a complete source text into a Program."""
    return Parser().feed(source).finish()
