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

import sys

from cached_property import cached_property


class FSAStats:
    """
    Statistics about the shape of an automaton.

    Each figure is computed once, the first time it is read, so an FSAStats
    object describes the automaton as it was at that moment. Create a new
    one after changing the automaton.

    Example:
        >>> stats = FSAStats(NFA().symbol("a"))
        >>> stats.num_states, stats.num_transitions
        (2, 1)
    """

    def __init__(self, fsa):
        self.fsa = fsa

    @cached_property
    def num_states(self):
        return len(self.fsa.states)

    @cached_property
    def num_final(self):
        return len(self.fsa.final_states)

    @cached_property
    def histogram(self):
        """
        Maps a number of outgoing transitions to how many states have exactly
        that many. In an NFA every destination counts as a transition.
        """
        counts = {}
        for state in self.fsa.states:
            n = self.fsa.out_degree(state)
            counts[n] = counts.get(n, 0) + 1
        return counts

    @cached_property
    def num_transitions(self):
        return sum(n * count for n, count in self.histogram.items())

    def dump(self, stream=sys.stdout):
        """
        Prints the statistics report to the specified stream.
        """
        print("FiniteAutomaton", file=stream)
        print(f"  {self.num_states} states", file=stream)
        print(f"  {self.num_final} final states", file=stream)
        print(f"  {self.num_transitions} transitions", file=stream)
        for n in sorted(self.histogram):
            print(f"    {self.histogram[n]} states with {n} transitions", file=stream)
