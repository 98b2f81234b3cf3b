# Copyright 2012 Matt Chaput. All rights reserved.
#
# Redistribution and use in source and binary forms, with or without
# modification, are permitted provided that the following conditions are met:
#
#    1. Redistributions of source code must retain the above copyright notice,
#       this list of conditions and the following disclaimer.
#
#    2. Redistributions in binary form must reproduce the above copyright
#       notice, this list of conditions and the following disclaimer in the
#       documentation and/or other materials provided with the distribution.
#
# THIS SOFTWARE IS PROVIDED BY MATT CHAPUT ``AS IS'' AND ANY EXPRESS OR
# IMPLIED WARRANTIES, INCLUDING, BUT NOT LIMITED TO, THE IMPLIED WARRANTIES OF
# MERCHANTABILITY AND FITNESS FOR A PARTICULAR PURPOSE ARE DISCLAIMED. IN NO
# EVENT SHALL MATT CHAPUT OR CONTRIBUTORS BE LIABLE FOR ANY DIRECT, INDIRECT,
# INCIDENTAL, SPECIAL, EXEMPLARY, OR CONSEQUENTIAL DAMAGES (INCLUDING, BUT NOT
# LIMITED TO, PROCUREMENT OF SUBSTITUTE GOODS OR SERVICES; LOSS OF USE, DATA,
# OR PROFITS; OR BUSINESS INTERRUPTION) HOWEVER CAUSED AND ON ANY THEORY OF
# LIABILITY, WHETHER IN CONTRACT, STRICT LIABILITY, OR TORT (INCLUDING
# NEGLIGENCE OR OTHERWISE) ARISING IN ANY WAY OUT OF THE USE OF THIS SOFTWARE,
# EVEN IF ADVISED OF THE POSSIBILITY OF SUCH DAMAGE.
#
# The views and conclusions contained in the software and documentation are
# those of the authors and should not be interpreted as representing official
# policies, either expressed or implied, of Matt Chaput.

"""
A postfix stack machine that drives the automaton construction operators.

Input is read as whitespace-separated words. Single letters push one-symbol
automata, operators pop their operands and push the result, and the
remaining words query or transform the automaton on top of the stack::

    a b | * DFA "abba" GENSTR2 DONE
"""

import re
import string
import sys

from loguru import logger

from fakit.automata.fsa import EPSILON, NFA, Builder
from fakit.automata.stats import FSAStats

# Word used for the empty-string symbol
EPSILON_WORD = "E"

SYMBOLS = frozenset(string.ascii_lowercase)
OPERATORS = frozenset("*|.")

_GENSTR = re.compile(r"GENSTR([0-9]+)")
_STRING = re.compile(r'"([a-z]*)"')


class InterpreterError(Exception):
    """
    Base class for errors in interpreter input.
    """


class StackUnderflowError(InterpreterError):
    pass


class OperandError(InterpreterError):
    """
    Raised when an operator is applied to an automaton it can't change, such
    as a DFA produced by an earlier DFA or COMPLEMENT word.
    """


class Interpreter:
    """
    Executes interpreter words against a stack of automata.

    Args:
        out (file, optional): Where results are printed. Defaults to
            sys.stdout.
        builder (Builder, optional): The session new automata are created in.
            A new one is made if omitted.
    """

    def __init__(self, out=sys.stdout, builder=None):
        self.out = out
        self.builder = builder if builder is not None else Builder()
        self.stack = []

    def _print(self, *args):
        print(*args, file=self.out)

    def _top(self, word):
        if not self.stack:
            raise StackUnderflowError(f"{word} needs an automaton on the stack")
        return self.stack[-1]

    def _operands(self, word, count):
        if len(self.stack) < count:
            raise StackUnderflowError(
                f"{word} needs {count} automata on the stack, found {len(self.stack)}"
            )
        operands = self.stack[-count:]
        for fa in operands:
            if not isinstance(fa, NFA):
                raise OperandError(f"{word} can't be applied to a {type(fa).__name__}")
        del self.stack[-count:]
        return operands

    def execute(self, word):
        """
        Executes a single word.

        Returns:
            bool: False if the word was DONE, True otherwise.

        Raises:
            InterpreterError: If the word can't be applied to the current
                stack. The stack is left unchanged.
        """
        logger.debug("Executing {!r} with {} automata on the stack", word, len(self.stack))
        if word == "DONE":
            return False
        elif word == "SIZE":
            self._print(self._top(word).num_states())
        elif word == "PRINT":
            self._top(word).dump(self.out)
        elif word == "STAT":
            FSAStats(self._top(word)).dump(self.out)
        elif word == "DFA":
            self.stack[-1] = self._top(word).to_dfa()
        elif word == "COMPLEMENT":
            self.stack[-1] = self._top(word).to_dfa().complement()
        elif m := _GENSTR.fullmatch(word):
            maxlen = int(m.group(1))
            dfa = self._top(word).to_dfa()
            self._print("".join(f'"{s}" ' for s in dfa.strings(maxlen)))
        elif m := _STRING.fullmatch(word):
            text = m.group(1)
            if self._top(word).to_dfa().accept(text):
                self._print(f"Accept {text}")
            else:
                self._print(f"Reject {text}")
        elif word in SYMBOLS:
            self.stack.append(self.builder.symbol(word))
        elif word == EPSILON_WORD:
            self.stack.append(self.builder.symbol(EPSILON))
        elif word == "*":
            (fa,) = self._operands(word, 1)
            self.stack.append(fa.closure())
        elif word == "|":
            first, second = self._operands(word, 2)
            self.stack.append(first.union(second))
        elif word == ".":
            first, second = self._operands(word, 2)
            self.stack.append(first.concat(second))
        elif SYMBOLS.intersection(word) or OPERATORS.intersection(word):
            self._print(f"Illegal syntax for: {word}")
        else:
            self._print(f"Ignoring {word}")
        return True

    def run(self, lines):
        """
        Executes every word of every line until the input ends or a DONE word
        is reached.

        Errors in a word are printed as Error: <message> and execution
        continues with the next word.

        Args:
            lines (iterable): Lines of input, such as an open file.
        """
        for line in lines:
            for word in line.split():
                try:
                    if not self.execute(word):
                        return
                except InterpreterError as e:
                    logger.debug("Rejected {!r}: {}", word, e)
                    self._print(f"Error: {e}")
