#!/usr/bin/env python3
"""
Brainfuck Interpreter

Brainfuck is an esoteric programming language with only 8 commands:
    >   Move the pointer to the right
    <   Move the pointer to the left
    +   Increment the memory cell at the pointer
    -   Decrement the memory cell at the pointer
    .   Output the byte in the cell at the pointer
    ,   Input a byte and store it in the cell at the pointer (0 at end of input)
    [   Jump past the matching ] if the cell at the pointer is 0
    ]   Jump back to the matching [ if the cell at the pointer is nonzero

All other characters are treated as comments and ignored.

    >>> bf = BrainfuckInterpreter()
    >>> bf.feed("++++++++[>++++++++<-]>+.").execute()
    b'A'
"""

import io
import logging
from typing import BinaryIO, Optional, Union

from brainfuck.config import default_tape_size
from brainfuck.execution import ExecutionState, Executor, Tape
from brainfuck.streams import InputSource, OutputSink
from brainfuck.syntax import Parser, Program, Source

logger = logging.getLogger(__name__)

InputLike = Union[None, bytes, bytearray, str, BinaryIO, InputSource]


def _input_source(input: InputLike) -> InputSource:
    if isinstance(input, InputSource):
        return input
    if input is None or isinstance(input, (bytes, bytearray, str)):
        return InputSource.from_bytes(input or b"")
    return InputSource(input)


class BrainfuckInterpreter:
    """One interpreter session: fed code, a tape and the injected I/O.

    Code can be fed in pieces; a loop may open in one piece and close in a
    later one. ``execute`` refuses to run while loops are still open.
    """

    def __init__(self, output: Optional[BinaryIO] = None, input: InputLike = None,
                 tape_size: Optional[int] = None, flush_output: bool = False,
                 capture_output: bool = True):
        self.tape_size = tape_size if tape_size is not None else default_tape_size()
        self._buffer = None
        if output is None:
            self._buffer = io.BytesIO()
            output = self._buffer
        self.output = OutputSink(output, flush=flush_output, capture=capture_output)
        self.input = _input_source(input)
        self.parser = Parser()
        self.tape = Tape(self.tape_size)
        self.executor: Optional[Executor] = None

    def feed(self, code: Source) -> "BrainfuckInterpreter":
        """Parse and append code. Raises BadExpressionError on a stray ']'."""
        self.parser.feed(code)
        return self

    def feed_file(self, path, encoding: str = "utf-8") -> "BrainfuckInterpreter":
        with open(path, "r", encoding=encoding) as f:
            code = f.read()
        logger.info("loaded %d chars from %s", len(code), path)
        return self.feed(code)

    @property
    def program(self) -> Program:
        return self.parser.finish()

    @property
    def pending_loops(self) -> int:
        return self.parser.pending

    def clear(self):
        """Forget all fed code."""
        self.parser.reset()
        self.executor = None

    @property
    def state(self) -> ExecutionState:
        if self.executor is None:
            return ExecutionState.READY
        return self.executor.state

    @property
    def output_writes(self) -> int:
        return self.output.writes

    @property
    def input_reads(self) -> int:
        return self.input.reads

    def getvalue(self) -> bytes:
        """Everything written to the internal buffer (no output stream given)."""
        if self._buffer is None:
            raise ValueError("output goes to an injected stream, not the internal buffer")
        return self._buffer.getvalue()

    def prepare(self, keep_tape: bool = False) -> Executor:
        """Build a READY executor for the fed program.

        The tape is replaced by a fresh one unless ``keep_tape`` is set, in
        which case only the cursor is rewound.
        """
        program = self.program
        if keep_tape:
            self.tape.cursor = 0
        else:
            self.tape = Tape(self.tape_size)
        self.executor = Executor(program, self.tape, self.output, self.input)
        return self.executor

    def execute(self, keep_tape: bool = False) -> bytes:
        """Run the fed program to completion.

        Returns the bytes written during this run (empty when output capture
        is disabled). TapeUnderflowError propagates; output already written
        stays written.
        """
        executor = self.prepare(keep_tape)
        self.output.begin_run()
        executor.run()
        logger.debug("run finished: %d steps, %d bytes out, %d bytes in",
                     executor.steps, self.output.writes, self.input.reads)
        return self.output.captured()


def evaluate(code: Source, input: InputLike = b"", output: Optional[BinaryIO] = None) -> bytes:
    """Run some Brainfuck code in a fresh interpreter."""
    return BrainfuckInterpreter(output=output, input=input).feed(code).execute()


def run_once(code: Source, x: int) -> Optional[int]:
    """Execute code with a single input byte, return the first output byte.

    Returns None when the program writes nothing.
    """
    out = evaluate(code, input=bytes((x % 256,)))
    return out[0] if out else None
