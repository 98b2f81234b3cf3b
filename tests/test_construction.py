from itertools import product

from fakit.automata.fsa import EPSILON, Builder


def all_strings(alphabet, maxlen):
    for length in range(maxlen + 1):
        for combo in product(sorted(alphabet), repeat=length):
            yield "".join(combo)


def nfa_accepts(nfa, string):
    # Direct set simulation, independent of the subset construction
    current = nfa.expand([nfa.start()])
    for label in string:
        current = nfa.expand(nfa.move(current, label))
    return bool(nfa.final_states & current)


def language(nfa, maxlen=4, alphabet="ab"):
    return {s for s in all_strings(alphabet, maxlen) if nfa_accepts(nfa, s)}


def test_symbol():
    b = Builder()
    assert language(b.symbol("a")) == {"a"}
    assert language(b.symbol("b")) == {"b"}


def test_epsilon_symbol():
    b = Builder()
    assert language(b.symbol(EPSILON)) == {""}
    assert language(b.epsilon()) == {""}


def test_concat():
    b = Builder()
    nfa = b.concat(b.symbol("a"), b.symbol("b"))
    assert language(nfa) == {"ab"}


def test_concat_splits():
    b = Builder()
    left = b.union(b.symbol("a"), b.string("ab"))
    right = b.union(b.symbol("b"), b.epsilon())
    nfa = b.concat(left, right)
    assert language(nfa) == {"a", "ab", "abb"}


def test_union():
    b = Builder()
    nfa = b.union(b.string("ab"), b.string("ba"))
    assert language(nfa) == {"ab", "ba"}


def test_union_with_epsilon():
    b = Builder()
    nfa = b.union(b.epsilon(), b.symbol("a"))
    assert language(nfa) == {"", "a"}


def test_closure():
    b = Builder()
    nfa = b.closure(b.symbol("a"))
    assert language(nfa) == {"", "a", "aa", "aaa", "aaaa"}


def test_closure_of_concat():
    b = Builder()
    nfa = b.closure(b.string("ab"))
    assert language(nfa, maxlen=6) == {"", "ab", "abab", "ababab"}


def test_closure_of_union():
    b = Builder()
    nfa = b.closure(b.union(b.symbol("a"), b.string("bb")))
    expected = set()
    for s in all_strings("ab", 4):
        # Every run of b's must have even length
        if all(len(run) % 2 == 0 for run in s.split("a")):
            expected.add(s)
    assert language(nfa) == expected


def test_nested_closure():
    b = Builder()
    nfa = b.closure(b.closure(b.symbol("a")))
    assert language(nfa, alphabet="a") == {"", "a", "aa", "aaa", "aaaa"}


def test_closure_of_epsilon():
    b = Builder()
    assert language(b.closure(b.epsilon())) == {""}


def test_operators_return_receiver():
    b = Builder()
    nfa = b.symbol("a")
    assert nfa.concat(b.symbol("b")) is nfa
    assert nfa.union(b.symbol("b")) is nfa
    assert nfa.closure() is nfa


def test_string():
    b = Builder()
    assert language(b.string("aba")) == {"aba"}
    assert language(b.string("")) == {""}


def test_optional():
    b = Builder()
    assert language(b.optional(b.symbol("b"))) == {"", "b"}
