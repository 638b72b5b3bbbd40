import unittest

import networkx as nx

from petrikit.PN.marking import Marking
from petrikit.PN.Reachability.graph import ReachabilityGraph
from petrikit.PN.Reachability.vertex import StateVertex


def v(n: int, tag=None) -> StateVertex:
    return StateVertex(Marking.of(n), tag)


def build_diamond_graph() -> ReachabilityGraph:
    """
    (0) -t1-> (1) -t4-> (3)
    (0) -t2-> (2) -t3-> (4) -t5-> (3)
    """
    g = ReachabilityGraph(v(0))
    g.add_arc(v(0), v(1, "t1"))
    g.add_arc(v(0), v(2, "t2"))
    g.add_arc(v(1), v(3, "t4"))
    g.add_arc(v(2), v(4, "t3"))
    g.add_arc(v(4), v(3, "t5"))
    return g


class TestStateVertex(unittest.TestCase):
    def test_equality_ignores_tag(self) -> None:
        self.assertEqual(v(1, "t1"), v(1, "t2"))
        self.assertEqual(hash(v(1, "t1")), hash(v(1)))
        self.assertNotEqual(v(1), v(2))

    def test_str(self) -> None:
        self.assertEqual(str(v(3, "t1")), "(3)")


class TestConstruction(unittest.TestCase):
    def test_initial_vertex(self) -> None:
        g = ReachabilityGraph(Marking.of(0))
        self.assertEqual(g.initial, v(0))
        self.assertIn(Marking.of(0), g)
        self.assertEqual(g.count_string(), "1 / 0")

    def test_add_vertex_idempotent(self) -> None:
        g = ReachabilityGraph(v(0))
        self.assertTrue(g.add_vertex(v(1, "t1")))
        self.assertFalse(g.add_vertex(v(1, "t2")))
        self.assertEqual(len(g), 2)
        self.assertEqual(g.vertex(Marking.of(1)).reached_from, "t1")

    def test_add_arc_idempotent(self) -> None:
        g = ReachabilityGraph(v(0))
        self.assertTrue(g.add_arc(v(0), v(1, "t1")))
        self.assertFalse(g.add_arc(v(0), v(1, "t2")))
        self.assertEqual(g.arc_count, 1)
        self.assertEqual(g.successors(v(0))[0].reached_from, "t1")

    def test_add_arc_inserts_both_endpoints(self) -> None:
        g = ReachabilityGraph(v(0))
        g.add_arc(v(5), v(6, "t1"))
        self.assertIn(v(5), g)
        self.assertIn(v(6), g)
        self.assertEqual(g.vertex_count, 3)

    def test_self_loop(self) -> None:
        g = ReachabilityGraph(v(1))
        g.add_arc(v(1), v(1, "t1"))
        self.assertEqual(g.count_string(), "1 / 1")

    def test_insertion_order(self) -> None:
        g = build_diamond_graph()
        self.assertEqual([str(x) for x in g.vertices()], ["(0)", "(1)", "(2)", "(3)", "(4)"])
        self.assertEqual([s.reached_from for s in g.successors(v(0))], ["t1", "t2"])

    def test_unknown_vertex(self) -> None:
        with self.assertRaises(KeyError):
            ReachabilityGraph(v(0)).vertex(Marking.of(9))

    def test_set_initial(self) -> None:
        g = ReachabilityGraph(v(0))
        g.set_initial(Marking.of(7))
        self.assertEqual(g.initial, v(7))
        self.assertEqual(len(g), 2)


class TestSearch(unittest.TestCase):
    def setUp(self) -> None:
        self.g = build_diamond_graph()

    def test_has_path(self) -> None:
        self.assertTrue(self.g.has_path(v(0), v(3)))
        self.assertTrue(self.g.has_path(v(2), v(2)))
        self.assertFalse(self.g.has_path(v(3), v(0)))
        self.assertFalse(self.g.has_path(v(0), v(9)))

    def test_dfs_path(self) -> None:
        self.assertEqual(self.g.transition_path(v(0), v(3)), ["t2", "t3", "t5"])

    def test_bfs_path_is_shortest(self) -> None:
        self.assertEqual(self.g.transition_path(v(0), v(3), strategy="bfs"), ["t1", "t4"])

    def test_path_excludes_source(self) -> None:
        path = self.g.find_path(v(0), v(1))
        self.assertEqual(path, [v(1)])
        self.assertEqual(path[0].reached_from, "t1")

    def test_empty_paths(self) -> None:
        self.assertEqual(self.g.find_path(v(0), v(0)), [])
        self.assertEqual(self.g.find_path(v(3), v(0)), [])
        self.assertEqual(self.g.find_path(v(3), v(0), strategy="bfs"), [])
        self.assertEqual(self.g.find_path(v(0), v(9)), [])

    def test_invalid_strategy(self) -> None:
        with self.assertRaises(ValueError):
            self.g.find_path(v(0), v(3), strategy="astar")


class TestCopy(unittest.TestCase):
    def test_copy_is_independent(self) -> None:
        g = build_diamond_graph()
        clone = g.copy()
        clone.add_arc(v(3), v(8, "t9"))
        self.assertEqual(g.count_string(), "5 / 5")
        self.assertEqual(clone.count_string(), "6 / 6")
        self.assertEqual(clone.initial, g.initial)

    def test_to_networkx(self) -> None:
        G = build_diamond_graph().to_networkx()
        self.assertIsInstance(G, nx.DiGraph)
        self.assertEqual(G.edges[Marking.of(0), Marking.of(2)]["transition"], "t2")


if __name__ == "__main__":
    unittest.main()
