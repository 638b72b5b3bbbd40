import unittest

import numpy as np

from petrikit.PN.core import Place
from petrikit.PN.exceptions import InvariantViolation, StructuralError
from petrikit.PN.marking import Marking
from petrikit.PN.net import PetriNet


def build_mutex_net() -> PetriNet:
    """p1 -> t1 -> p2 -> t2 -> p1 with one token on p1."""
    return PetriNet.from_parts(
        places=[("p1", 1), ("p2", 0)],
        transitions=["t1", "t2"],
        arcs=[
            ("a1", "p1", "t1"),
            ("a2", "t1", "p2"),
            ("a3", "p2", "t2"),
            ("a4", "t2", "p1"),
        ],
    )


class TestConstruction(unittest.TestCase):
    def test_places_sorted_and_initial_place_first_inserted(self) -> None:
        net = PetriNet()
        net.add_place("b", 2)
        net.add_place("a", 1)
        self.assertEqual(net.place_ids, ["a", "b"])
        self.assertEqual(net.initial_place, "b")
        self.assertEqual(net.marking(), Marking.of(1, 2))

    def test_id_collision(self) -> None:
        net = PetriNet()
        net.add_place("x")
        with self.assertRaises(StructuralError):
            net.add_transition("x")
        with self.assertRaises(StructuralError):
            net.add_place("x")

    def test_negative_tokens_rejected(self) -> None:
        with self.assertRaises(StructuralError):
            PetriNet().add_place("p", -1)

    def test_non_integer_tokens_rejected(self) -> None:
        for tokens in ("x", None, 1.5):
            with self.subTest(tokens=tokens):
                with self.assertRaises(StructuralError):
                    PetriNet().add_place("p", tokens)
        net = PetriNet()
        net.add_place("p", 1)
        with self.assertRaises(StructuralError):
            net.set_tokens("p", None)
        self.assertEqual(net.marking(), Marking.of(1))

    def test_bad_arcs(self) -> None:
        net = PetriNet()
        net.add_place("p1")
        net.add_place("p2")
        net.add_transition("t1")
        net.add_transition("t2")
        net.add_arc("a1", "p1", "t1")
        with self.assertRaises(StructuralError):
            net.add_arc("a1", "t1", "p2")  # arc id taken
        with self.assertRaises(StructuralError):
            net.add_arc("a2", "p1", "p2")
        with self.assertRaises(StructuralError):
            net.add_arc("a3", "t1", "t2")
        with self.assertRaises(StructuralError):
            net.add_arc("a4", "ghost", "t1")
        self.assertEqual(net.arc_count, 1)

    def test_duplicate_arc_rejected_by_default(self) -> None:
        with self.assertRaises(StructuralError):
            PetriNet.from_parts(
                places=[("p1", 2)],
                transitions=["t1"],
                arcs=[("a1", "p1", "t1"), ("a2", "p1", "t1")],
            )

    def test_duplicate_arc_as_multiplicity(self) -> None:
        net = PetriNet.from_parts(
            places=[("p1", 1)],
            transitions=["t1"],
            arcs=[("a1", "p1", "t1"), ("a2", "p1", "t1")],
            allow_duplicate_arcs=True,
        )
        self.assertFalse(net.is_enabled("t1"))
        net.set_tokens("p1", 3)
        self.assertTrue(net.is_enabled("t1"))
        self.assertEqual(net.fire("t1"), Marking.of(1))

    def test_set_name_and_position(self) -> None:
        net = build_mutex_net()
        net.set_name("p1", "idle")
        net.set_name("t1", "enter")
        net.set_position("p1", (3, 4))
        self.assertEqual(net.place("p1").name, "idle")
        self.assertEqual(net.transition("t1").name, "enter")
        self.assertEqual(net.place("p1").position, (3, 4))
        with self.assertRaises(StructuralError):
            net.set_name("nope", "x")


class TestLookup(unittest.TestCase):
    def setUp(self) -> None:
        self.net = build_mutex_net()

    def test_unknown_ids_raise_key_error(self) -> None:
        with self.assertRaises(KeyError):
            self.net.place("p9")
        with self.assertRaises(KeyError):
            self.net.transition("t9")

    def test_id_of(self) -> None:
        self.assertEqual(self.net.id_of(self.net.place("p2")), "p2")
        self.assertEqual(self.net.id_of(self.net.transition("t2")), "t2")
        with self.assertRaises(KeyError):
            self.net.id_of(Place())


class TestFiring(unittest.TestCase):
    def setUp(self) -> None:
        self.net = build_mutex_net()

    def test_enabled_transitions(self) -> None:
        self.assertTrue(self.net.is_enabled("t1"))
        self.assertFalse(self.net.is_enabled("t2"))
        self.assertEqual(self.net.enabled_transitions(), ["t1"])

    def test_empty_preset_always_enabled(self) -> None:
        net = PetriNet.from_parts([("p1", 0)], ["t1"], [("a1", "t1", "p1")])
        self.assertTrue(net.is_enabled("t1"))
        self.assertEqual(net.fire("t1"), Marking.of(1))
        self.assertEqual(net.fire("t1"), Marking.of(2))

    def test_fire_moves_token(self) -> None:
        after = self.net.fire("t1")
        self.assertEqual(after, Marking.of(0, 1))
        self.assertEqual(self.net.marking(), after)

    def test_fire_disabled_leaves_net_unchanged(self) -> None:
        with self.assertRaises(InvariantViolation):
            self.net.fire("t2")
        self.assertEqual(self.net.marking(), Marking.of(1, 0))

    def test_unaffected_places_conserved(self) -> None:
        net = PetriNet.from_parts(
            places=[("p1", 1), ("p2", 0), ("p3", 5)],
            transitions=["t1"],
            arcs=[("a1", "p1", "t1"), ("a2", "t1", "p2")],
        )
        net.fire("t1")
        self.assertEqual(net.place("p3").tokens, 5)

    def test_successor_does_not_mutate(self) -> None:
        self.assertEqual(self.net.successor("t1"), Marking.of(0, 1))
        self.assertEqual(self.net.marking(), Marking.of(1, 0))


class TestMarkingAccess(unittest.TestCase):
    def setUp(self) -> None:
        self.net = build_mutex_net()

    def test_set_marking(self) -> None:
        self.net.set_marking([0, 1])
        self.assertEqual(self.net.marking(), Marking.of(0, 1))
        self.assertTrue(self.net.is_enabled("t2"))

    def test_length_mismatch(self) -> None:
        with self.assertRaises(InvariantViolation):
            self.net.set_marking(Marking.of(1))
        with self.assertRaises(InvariantViolation):
            self.net.set_marking(Marking.of(1, 0, 0))
        self.assertEqual(self.net.marking(), Marking.of(1, 0))

    def test_negative_entry(self) -> None:
        with self.assertRaises(InvariantViolation):
            self.net.apply([-1, 2])
        self.assertEqual(self.net.marking(), Marking.of(1, 0))

    def test_non_integer_entry(self) -> None:
        with self.assertRaises(InvariantViolation):
            self.net.apply([0.5, 1])
        self.assertEqual(self.net.marking(), Marking.of(1, 0))

    def test_reset_to_initial(self) -> None:
        self.net.fire("t1")
        self.assertEqual(self.net.reset_to_initial(), Marking.of(1, 0))
        self.assertEqual(self.net.marking(), Marking.of(1, 0))

    def test_reset_without_initial_marking(self) -> None:
        net = PetriNet()
        net.add_place("p1")
        with self.assertRaises(InvariantViolation):
            net.reset_to_initial()


class TestStructure(unittest.TestCase):
    def test_incidence_matrix(self) -> None:
        net = build_mutex_net()
        C = net.incidence_matrix()
        self.assertEqual(C.shape, (2, 2))
        self.assertTrue(np.array_equal(C, np.array([[-1, 1], [1, -1]])))

    def test_incidence_matches_firing(self) -> None:
        net = build_mutex_net()
        before = np.array(list(net.marking()))
        after = np.array(list(net.fire("t1")))
        self.assertTrue(np.array_equal(after - before, net.incidence_matrix()[:, 0]))

    def test_copy_is_independent(self) -> None:
        net = build_mutex_net()
        clone = net.copy()
        clone.fire("t1")
        clone.set_name("p1", "changed")
        self.assertEqual(net.marking(), Marking.of(1, 0))
        self.assertEqual(net.place("p1").name, "unnamed")
        self.assertEqual(clone.initial_marking, net.initial_marking)

    def test_describe(self) -> None:
        text = build_mutex_net().describe()
        self.assertIn("Places:\t\t\t2", text)
        self.assertIn("Arcs:\t\t\t4", text)
        self.assertIn("[p1] unnamed", text)
        self.assertIn("(1|0)", text)


if __name__ == "__main__":
    unittest.main()
