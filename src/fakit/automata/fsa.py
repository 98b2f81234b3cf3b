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

import itertools
import sys
import threading
from collections import deque

from loguru import logger

# Marker constants


class Marker:
    """
    Represents a marker object.

    Markers label transitions that are not ordinary input symbols. The only
    marker used here is :data:`EPSILON`, the empty-string label.

    Example:
        >>> EPSILON
        <EPSILON>
    """

    def __init__(self, name):
        self.name = name

    def __repr__(self):
        return f"<{self.name}>"


EPSILON = Marker("EPSILON")


class AutomatonConsumedError(ValueError):
    """
    Raised when an automaton is used after its states were absorbed into
    another automaton by :meth:`NFA.concat` or :meth:`NFA.union`.
    """


def state_key(states):
    """
    Returns the canonical, order-independent key for a collection of states.

    Args:
        states (iterable): State identifiers, possibly with duplicates.

    Returns:
        tuple: The sorted, deduplicated states.

    Example:
        >>> state_key([3, 1, 3, 2])
        (1, 2, 3)
    """
    return tuple(sorted(set(states)))


def _label_order(label):
    # EPSILON sorts ahead of every real symbol
    if label is EPSILON:
        return (0, "")
    return (1, label)


class StateAllocator:
    """
    Issues state identifiers that are never reused.

    Automata that may be merged together must share one allocator, since a
    merge splices the absorbed automaton's states into the receiver as-is.

    Args:
        base (int, optional): The first identifier to hand out. Defaults to 0.

    Example:
        >>> ids = StateAllocator()
        >>> ids.next_state(), ids.next_state()
        (0, 1)
    """

    def __init__(self, base=0):
        self._counter = itertools.count(base)
        self._lock = threading.Lock()

    def next_state(self):
        """
        Returns a fresh state identifier.

        Returns:
            int: An identifier no previous call has returned.
        """
        with self._lock:
            return next(self._counter)


# Base class


class FSA:
    """
    Finite State Automaton (FSA) base class.

    Holds the parts of an automaton that do not depend on whether the
    transition relation is deterministic: the states, the start state, the
    final states and the alphabet. Subclasses decide what a transition row
    holds.

    Attributes:
        ids (StateAllocator): The allocator new states come from.
        initial (int): The start state, or None before one is set.
        states (set): Every state of the automaton.
        final_states (set): The accepting states, a subset of ``states``.
        transitions (dict): Maps each state to a dictionary of labels and
            destinations. Every state has a row, possibly empty.
        alphabet (list): The input symbols, in insertion order, without
            duplicates and never containing :data:`EPSILON`.
        consumed (bool): True once another automaton has absorbed this one.
    """

    def __init__(self, ids=None):
        """
        Creates an empty automaton.

        Args:
            ids (StateAllocator, optional): The allocator to draw states from.
                A private allocator is created when omitted, which means the
                automaton can't be merged with any other.
        """
        self.ids = ids if ids is not None else StateAllocator()
        self.consumed = False
        self._reset()

    def _reset(self):
        self.initial = None
        self.states = set()
        self.final_states = set()
        self.transitions = {}
        self.alphabet = []

    def __len__(self):
        return len(self.states)

    def __repr__(self):
        return "<%s %d states, %d final>" % (
            type(self).__name__,
            len(self.states),
            len(self.final_states),
        )

    def _check_live(self):
        if self.consumed:
            raise AutomatonConsumedError(
                f"{self!r} was absorbed by another automaton and can't be reused"
            )

    def num_states(self):
        """
        Returns the number of states in the automaton.
        """
        return len(self.states)

    def new_state(self):
        """
        Allocates a fresh state and adds it to the automaton with an empty
        transition row.

        Identifiers already in the automaton, such as ones added by hand with
        :meth:`add_state` or :meth:`add_transition`, are skipped.

        Returns:
            int: The new state.
        """
        self._check_live()
        state = self.ids.next_state()
        while state in self.states:
            state = self.ids.next_state()
        self.states.add(state)
        self.transitions[state] = {}
        return state

    def add_state(self, state):
        """
        Adds a state if it is not already present. Adding an existing state
        does nothing.
        """
        self._check_live()
        if state not in self.states:
            self.states.add(state)
            self.transitions[state] = {}

    def has_state(self, state):
        return state in self.states

    def start(self):
        """
        Returns the start state of the automaton, or None if none was set.
        """
        return self.initial

    def set_start(self, state):
        """
        Sets (or resets) the start state, adding it to the automaton if
        needed.
        """
        self.add_state(state)
        self.initial = state

    def set_final(self, state, final=True):
        """
        Sets or clears the accepting status of a state.

        The state is added to the automaton if needed. Clearing the status
        only removes the state from ``final_states``, the state itself stays.

        Args:
            state (int): The state to change.
            final (bool, optional): The new status. Defaults to True.
        """
        self.add_state(state)
        if final:
            self.final_states.add(state)
        else:
            self.final_states.discard(state)

    def is_final(self, state):
        return state in self.final_states

    def add_symbol(self, label):
        """
        Adds an input symbol to the alphabet. EPSILON and symbols already
        present are ignored.
        """
        if label is not EPSILON and label not in self.alphabet:
            self.alphabet.append(label)

    def add_transition(self, src, label, dest):
        raise NotImplementedError

    def get_transition(self, src, label):
        raise NotImplementedError

    def triples(self):
        """
        Generates every transition as a ``(source, label, destination)``
        triple.
        """
        raise NotImplementedError

    def out_degree(self, src):
        """
        Returns the number of transitions leaving the given state.
        """
        raise NotImplementedError

    def to_dfa(self):
        raise NotImplementedError

    def _format_dest(self, dest):
        return str(dest)

    def dump(self, stream=sys.stdout):
        """
        Prints a textual listing of the automaton to the specified stream.

        States, final states and the alphabet are printed in sorted order.
        Transitions are sorted by source state then label, with EPSILON
        printed as an empty label.

        Args:
            stream (file, optional): The stream to print to. Defaults to
                sys.stdout.

        Example:
            >>> NFA().symbol("a").dump()
            % Start 0
            % Final { 1 }
            % States { 0 1 }
            % Alphabet { a }
            % Transitions {
            %  (0 a [1])
            % }
        """
        start = "" if self.initial is None else self.initial
        print(f"% Start {start}", file=stream)
        finals = "".join(f" {s}" for s in sorted(self.final_states))
        print(f"% Final {{{finals} }}", file=stream)
        states = "".join(f" {s}" for s in sorted(self.states))
        print(f"% States {{{states} }}", file=stream)
        labels = "".join(f" {x}" for x in sorted(self.alphabet))
        print(f"% Alphabet {{{labels} }}", file=stream)
        print("% Transitions {", file=stream)
        for src in sorted(self.transitions):
            xs = self.transitions[src]
            for label in sorted(xs, key=_label_order):
                name = "" if label is EPSILON else label
                dest = self._format_dest(xs[label])
                print(f"%  ({src} {name} {dest})", file=stream)
        print("% }", file=stream)


# Implementations


class NFA(FSA):
    """
    NFA (Non-Deterministic Finite Automaton) class.

    A transition row maps each label, including :data:`EPSILON`, to a set of
    destination states. NFAs are built with the Thompson-style operators
    :meth:`symbol`, :meth:`concat`, :meth:`union` and :meth:`closure`, which
    change the receiver in place and return it, so they can be chained.

    NFAs have no ``accept`` method: call :meth:`to_dfa` and test
    membership on the result.

    Example:
        >>> b = Builder()
        >>> nfa = b.symbol("a").concat(b.symbol("b"))
        >>> nfa.to_dfa().accept("ab")
        True
    """

    def add_transition(self, src, label, dest):
        """
        Adds ``dest`` to the destinations of ``src`` on ``label``.

        Both states are added to the automaton if needed. Repeated calls with
        different destinations accumulate, which is how nondeterminism is
        introduced.

        Args:
            src (int): The source state.
            label (object): An input symbol or EPSILON.
            dest (int): The destination state.
        """
        self.add_state(src)
        self.add_state(dest)
        self.transitions[src].setdefault(label, set()).add(dest)

    def get_transition(self, src, label):
        """
        Returns the destinations of ``src`` on ``label``.

        Returns:
            frozenset: The destination states, or None if the state is unknown
            or has no transition on the label.
        """
        dests = self.transitions.get(src, {}).get(label)
        if not dests:
            return None
        return frozenset(dests)

    def triples(self):
        for src, trans in self.transitions.items():
            for label, dests in trans.items():
                for dest in dests:
                    yield src, label, dest

    def out_degree(self, src):
        return sum(len(dests) for dests in self.transitions.get(src, {}).values())

    def _format_dest(self, dests):
        return "[%s]" % ", ".join(str(d) for d in sorted(dests))

    def _check_started(self):
        self._check_live()
        if self.initial is None:
            raise ValueError(f"{self!r} has no start state")

    def _absorb(self, other):
        """
        Moves the states, transitions and alphabet of ``other`` into this
        automaton and marks ``other`` as consumed.

        Returns:
            tuple: The start state and the final states ``other`` had.
        """
        if other is self:
            raise ValueError("An automaton can't absorb itself")
        if not isinstance(other, NFA):
            raise TypeError(f"Can only absorb an NFA, not {other!r}")
        other._check_started()
        if other.ids is not self.ids:
            raise ValueError("Can't merge automata from different state allocators")

        self.states.update(other.states)
        for src, othertrans in other.transitions.items():
            trans = self.transitions.setdefault(src, {})
            for label, otherdests in othertrans.items():
                trans.setdefault(label, set()).update(otherdests)
        for label in other.alphabet:
            self.add_symbol(label)

        result = other.initial, set(other.final_states)
        other._reset()
        other.consumed = True
        return result

    def symbol(self, label):
        """
        Resets this automaton to one accepting exactly the one-symbol string
        ``label``.

        Passing EPSILON gives an automaton for the empty string; EPSILON is
        never added to the alphabet.

        Args:
            label (object): An input symbol or EPSILON.

        Returns:
            NFA: This automaton.
        """
        self._check_live()
        self._reset()
        s = self.new_state()
        e = self.new_state()
        self.set_start(s)
        self.set_final(e)
        self.add_transition(s, label, e)
        self.add_symbol(label)
        return self

    def concat(self, other):
        """
        Changes this automaton to accept a string accepted by itself followed
        by a string accepted by ``other``.

        Every current final state gets an EPSILON transition to the start of
        ``other`` and stops being final; the final states of ``other`` become
        the final states of this automaton. ``other`` is consumed.

        Returns:
            NFA: This automaton.
        """
        self._check_started()
        other_start, other_finals = self._absorb(other)
        for finalstate in self.final_states:
            self.add_transition(finalstate, EPSILON, other_start)
        self.final_states = other_finals
        return self

    def union(self, other):
        r"""
        Changes this automaton to accept strings accepted by either itself or
        ``other``. ``other`` is consumed.

        Two new states are added::

               -> self  -
              /          \
          ustart          uend
              \          /
               -> other -

        Returns:
            NFA: This automaton.
        """
        self._check_started()
        other_start, other_finals = self._absorb(other)
        ustart = self.new_state()
        uend = self.new_state()

        self.add_transition(ustart, EPSILON, self.initial)
        self.add_transition(ustart, EPSILON, other_start)
        self.set_start(ustart)

        for finalstate in self.final_states | other_finals:
            self.add_transition(finalstate, EPSILON, uend)
        self.final_states = {uend}
        return self

    def closure(self):
        r"""
        Changes this automaton to accept any sequence of zero or more strings
        it accepted before (Kleene star).

        ::

               -----<-----
              /           \
          cstart --------> cend
              \           /
               -> self ->

        The direct ``cstart -> cend`` transition accepts the empty string and
        ``cend -> cstart`` allows repetition.

        Returns:
            NFA: This automaton.
        """
        self._check_started()
        cstart = self.new_state()
        cend = self.new_state()

        self.add_transition(cstart, EPSILON, cend)
        self.add_transition(cend, EPSILON, cstart)
        self.add_transition(cstart, EPSILON, self.initial)
        for finalstate in self.final_states:
            self.add_transition(finalstate, EPSILON, cend)

        self.set_start(cstart)
        self.final_states = {cend}
        return self

    def epsilon_closure(self, state):
        """
        Returns the set of states reachable from ``state`` using only EPSILON
        transitions, including ``state`` itself.

        Args:
            state (int): The state to start from.

        Returns:
            frozenset: The epsilon-closure of the state.

        Example:
            >>> nfa = NFA()
            >>> nfa.add_transition(0, EPSILON, 1)
            >>> nfa.add_transition(1, EPSILON, 2)
            >>> sorted(nfa.epsilon_closure(0))
            [0, 1, 2]
        """
        transitions = self.transitions
        # state -> True once its epsilon transitions have been followed
        seen = {state: False}
        frontier = [state]
        while frontier:
            current = frontier.pop()
            seen[current] = True
            for dest in transitions.get(current, {}).get(EPSILON, ()):
                if dest not in seen:
                    seen[dest] = False
                    frontier.append(dest)
        return frozenset(seen)

    def expand(self, states):
        """
        Returns the union of the epsilon-closures of the given states.
        """
        expanded = set()
        for state in states:
            if state not in expanded:
                expanded.update(self.epsilon_closure(state))
        return frozenset(expanded)

    def move(self, states, label):
        """
        Returns the states reachable from any of ``states`` by a single
        transition on ``label``. EPSILON transitions are not followed.
        """
        transitions = self.transitions
        dest_states = set()
        for state in states:
            xs = transitions.get(state)
            if xs and label in xs:
                dest_states.update(xs[label])
        return dest_states

    def to_dfa(self):
        """
        Converts the NFA to an equivalent DFA using the subset construction.

        Each DFA state stands for the epsilon-closed set of NFA states the NFA
        could be in. Sets are discovered breadth first from the closure of the
        start state. A symbol whose closed move is empty gets no transition,
        so the result is not necessarily complete; :meth:`DFA.complement`
        completes it.

        The DFA draws its states from the same allocator as this NFA and
        copies its alphabet. This NFA is left unchanged.

        Returns:
            DFA: The converted DFA.
        """
        self._check_started()
        dfa = DFA(self.ids)
        startkey = state_key(self.epsilon_closure(self.initial))
        dstates = {startkey: dfa.new_state()}
        dfa.set_start(dstates[startkey])

        frontier = deque([startkey])
        while frontier:
            current = frontier.popleft()
            for label in self.alphabet:
                target = state_key(self.expand(self.move(current, label)))
                if not target:
                    continue
                if target not in dstates:
                    dstates[target] = dfa.new_state()
                    frontier.append(target)
                dfa.add_transition(dstates[current], label, dstates[target])

        for key, dstate in dstates.items():
            if self.final_states.intersection(key):
                dfa.set_final(dstate)
        for label in self.alphabet:
            dfa.add_symbol(label)

        logger.debug(
            "Subset construction turned {} NFA states into {} DFA states",
            len(self.states),
            len(dfa.states),
        )
        return dfa


class DFA(FSA):
    """
    Deterministic Finite Automaton (DFA) class.

    A transition row maps each input symbol to a single destination state,
    and there are no EPSILON transitions. DFAs are normally produced by
    :meth:`NFA.to_dfa` or :meth:`complement` rather than built by hand.
    """

    def add_transition(self, src, label, dest):
        """
        Sets the destination of ``src`` on ``label``, replacing any previous
        destination. Both states are added to the automaton if needed.

        Raises:
            ValueError: If ``label`` is EPSILON.
        """
        if label is EPSILON:
            raise ValueError("A DFA can't have EPSILON transitions")
        self.add_state(src)
        self.add_state(dest)
        self.transitions[src][label] = dest

    def get_transition(self, src, label):
        """
        Returns the destination of ``src`` on ``label``, or None if the state
        is unknown or has no transition on the label.
        """
        return self.transitions.get(src, {}).get(label)

    def triples(self):
        for src, trans in self.transitions.items():
            for label, dest in trans.items():
                yield src, label, dest

    def out_degree(self, src):
        return len(self.transitions.get(src, ()))

    def accept(self, string):
        """
        Checks if a given string is accepted by the automaton.

        Starting at the start state, each character moves the automaton along
        its transition. A missing transition rejects the string immediately.

        Args:
            string (str): The string to check.

        Returns:
            bool: True if the whole string was consumed and the automaton
            ended in a final state.
        """
        state = self.initial
        for label in string:
            state = self.get_transition(state, label)
            if state is None:
                return False
        return self.is_final(state)

    def complement(self):
        """
        Returns a DFA accepting exactly the strings over the same alphabet
        that this DFA rejects.

        The copy is first completed: one new sink state is added, and every
        state (the sink included) that lacks a transition on some symbol gets
        one to the sink. Then every state that was not final becomes final and
        every final state becomes non-final. The sink was not final here, so
        strings that used to fall off a missing transition are accepted.

        This DFA is left unchanged.

        Returns:
            DFA: The complement DFA.
        """
        self._check_live()
        dfa = DFA(self.ids)
        dfa.states = set(self.states)
        dfa.transitions = {src: dict(trans) for src, trans in self.transitions.items()}
        dfa.initial = self.initial
        dfa.alphabet = list(self.alphabet)

        sink = dfa.new_state()
        for state in sorted(dfa.states):
            trans = dfa.transitions[state]
            for label in dfa.alphabet:
                if label not in trans:
                    dfa.add_transition(state, label, sink)

        dfa.final_states = dfa.states - self.final_states
        logger.debug("Complemented {} using sink state {}", self, sink)
        return dfa

    def strings(self, maxlen):
        """
        Generates every string of at most ``maxlen`` symbols that the DFA
        accepts.

        This is a brute-force search over the sorted alphabet: strings come out
        shortest first, and in alphabetical order within one length.

        Args:
            maxlen (int): The maximum string length.

        Yields:
            str: The accepted strings.

        Example:
            >>> b = Builder()
            >>> list(b.symbol("a").closure().to_dfa().strings(2))
            ['', 'a', 'aa']
        """
        labels = sorted(self.alphabet)
        for length in range(maxlen + 1):
            for combo in itertools.product(labels, repeat=length):
                string = "".join(combo)
                if self.accept(string):
                    yield string

    def to_dfa(self):
        """
        Returns this automaton, which is already deterministic.
        """
        return self


# Construction


class Builder:
    """
    A session for building automata that can be merged with each other.

    Every automaton created by one builder draws its states from the
    builder's allocator.

    Usage:
    b = Builder()
    nfa = b.union(b.symbol("a"), b.closure(b.symbol("b")))
    """

    def __init__(self, base=0):
        self.ids = StateAllocator(base)

    def nfa(self):
        """
        Returns an empty NFA sharing this builder's allocator.
        """
        return NFA(self.ids)

    def symbol(self, label):
        return self.nfa().symbol(label)

    def epsilon(self):
        return self.symbol(EPSILON)

    def string(self, string):
        """
        Returns an NFA accepting exactly ``string``. The empty string gives
        the same result as :meth:`epsilon`.
        """
        if not string:
            return self.epsilon()
        nfa = self.symbol(string[0])
        for label in string[1:]:
            nfa.concat(self.symbol(label))
        return nfa

    def concat(self, n1, n2):
        return n1.concat(n2)

    def union(self, n1, n2):
        return n1.union(n2)

    def closure(self, n):
        return n.closure()

    def optional(self, n):
        """
        Returns ``n`` changed to also accept the empty string.
        """
        return n.union(self.epsilon())
