from itertools import product

from fakit.automata.fsa import DFA, EPSILON, NFA, Builder


def all_strings(alphabet, maxlen):
    for length in range(maxlen + 1):
        for combo in product(sorted(alphabet), repeat=length):
            yield "".join(combo)


def nfa_accepts(nfa, string):
    current = nfa.expand([nfa.start()])
    for label in string:
        current = nfa.expand(nfa.move(current, label))
    return bool(nfa.final_states & current)


def assert_deterministic(dfa):
    assert isinstance(dfa, DFA)
    for src, trans in dfa.transitions.items():
        assert EPSILON not in trans
        for dest in trans.values():
            assert isinstance(dest, int)
            assert dest in dfa.states


def sample_nfas():
    b = Builder()
    yield b.symbol("a")
    yield b.epsilon()
    yield b.union(b.symbol("a"), b.symbol("b"))
    yield b.closure(b.union(b.string("ab"), b.symbol("b")))
    yield b.concat(b.closure(b.symbol("a")), b.string("ba"))
    yield b.union(b.closure(b.symbol("a")), b.closure(b.symbol("b")))


def test_to_dfa_preserves_language():
    for nfa in sample_nfas():
        dfa = nfa.to_dfa()
        assert_deterministic(dfa)
        for s in all_strings("ab", 5):
            assert dfa.accept(s) == nfa_accepts(nfa, s), s


def test_to_dfa_of_handmade_nfa():
    # Strings over {a, b} whose second to last symbol is "a"
    nfa = NFA()
    nfa.set_start(0)
    for label in "ab":
        nfa.add_symbol(label)
        nfa.add_transition(0, label, 0)
        nfa.add_transition(1, label, 2)
    nfa.add_transition(0, "a", 1)
    nfa.set_final(2)

    dfa = nfa.to_dfa()
    assert_deterministic(dfa)
    assert dfa.num_states() == 4
    for s in all_strings("ab", 5):
        assert dfa.accept(s) == (len(s) >= 2 and s[-2] == "a")


def test_to_dfa_leaves_nfa_alone():
    b = Builder()
    nfa = b.closure(b.symbol("a"))
    before = {src: dict(trans) for src, trans in nfa.transitions.items()}
    dfa = nfa.to_dfa()
    assert nfa.transitions == before
    assert not dfa.states & nfa.states


def test_to_dfa_alphabet():
    b = Builder()
    nfa = b.union(b.symbol("b"), b.symbol("a"))
    dfa = nfa.to_dfa()
    assert dfa.alphabet == ["b", "a"]


def test_to_dfa_empty_alphabet():
    dfa = Builder().epsilon().to_dfa()
    assert dfa.num_states() == 1
    assert dfa.accept("")
    assert not dfa.accept("a")


def test_to_dfa_skips_empty_targets():
    dfa = Builder().string("ab").to_dfa()
    start = dfa.start()
    assert dfa.get_transition(start, "b") is None
    assert dfa.num_states() == 3


def test_dfa_to_dfa_is_itself():
    dfa = Builder().symbol("a").to_dfa()
    assert dfa.to_dfa() is dfa


def test_closure_scenario():
    b = Builder()
    dfa = b.closure(b.symbol("a")).to_dfa()
    for s in ["", "a", "aa", "aaa"]:
        assert dfa.accept(s)
    for s in ["b", "ab"]:
        assert not dfa.accept(s)


def test_union_scenario():
    b = Builder()
    dfa = b.union(b.symbol("a"), b.symbol("b")).to_dfa()
    assert dfa.accept("a")
    assert dfa.accept("b")
    for s in ["", "ab", "aa"]:
        assert not dfa.accept(s)


def test_concat_scenario():
    b = Builder()
    dfa = b.concat(b.symbol("a"), b.symbol("b")).to_dfa()
    assert [s for s in all_strings("ab", 4) if dfa.accept(s)] == ["ab"]


def test_accept_missing_start():
    assert not DFA().accept("")
    assert not DFA().accept("a")


def test_accept_state_zero():
    dfa = DFA()
    dfa.set_start(0)
    dfa.add_transition(0, "a", 0)
    dfa.set_final(0)
    assert dfa.accept("aaa")


def test_complement_scenario():
    b = Builder()
    dfa = b.symbol("a").to_dfa()
    dfa.add_symbol("b")
    comp = dfa.complement()
    for s in ["", "b", "aa", "ab"]:
        assert comp.accept(s)
    assert not comp.accept("a")


def test_complement_is_complete():
    b = Builder()
    comp = b.string("ab").to_dfa().complement()
    assert_deterministic(comp)
    for state in comp.states:
        for label in comp.alphabet:
            assert comp.get_transition(state, label) is not None


def test_complement_sink_absorbs():
    dfa = Builder().symbol("a").to_dfa()
    comp = dfa.complement()
    (sink,) = comp.states - dfa.states
    assert comp.get_transition(sink, "a") == sink


def test_complement_flips_language():
    for nfa in sample_nfas():
        dfa = nfa.to_dfa()
        comp = dfa.complement()
        for s in all_strings(dfa.alphabet, 5):
            assert comp.accept(s) != dfa.accept(s), s


def test_complement_twice():
    for nfa in sample_nfas():
        dfa = nfa.to_dfa()
        twice = dfa.complement().complement()
        for s in all_strings(dfa.alphabet, 5):
            assert twice.accept(s) == dfa.accept(s), s


def test_complement_leaves_input_alone():
    dfa = Builder().symbol("a").to_dfa()
    states = set(dfa.states)
    finals = set(dfa.final_states)
    dfa.complement()
    assert dfa.states == states
    assert dfa.final_states == finals


def test_complement_empty_alphabet():
    dfa = Builder().epsilon().to_dfa()
    comp = dfa.complement()
    assert not comp.accept("")
    assert list(comp.strings(3)) == []


def test_strings():
    b = Builder()
    dfa = b.closure(b.union(b.symbol("b"), b.symbol("a"))).to_dfa()
    assert list(dfa.strings(2)) == ["", "a", "b", "aa", "ab", "ba", "bb"]

    dfa = b.string("ab").to_dfa()
    assert list(dfa.strings(1)) == []
    assert list(dfa.strings(2)) == ["ab"]
    assert list(dfa.strings(-1)) == []
