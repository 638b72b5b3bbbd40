from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

import pandas as pd

from .exceptions import PetriNetError
from .io import NetDescription, load
from .net import PetriNet
from .Reachability.coverability import CoverabilityChecker, Witness
from .Reachability.explorer import StateSpaceExplorer

LOGGER = logging.getLogger(__name__)

FRAME_COLUMNS = [
    "name",
    "bounded",
    "vertices",
    "arcs",
    "path_length",
    "path",
    "m",
    "m_prime",
    "error",
]


@dataclass
class AnalysisResult:
    """
    Boundedness verdict for one net.

    For a bounded net the vertex and arc counts describe the complete
    reachability graph; for an unbounded net they describe the part explored
    before the covering pair was found, and ``witness`` is set. If the net
    could not be loaded or explored, ``bounded`` is ``None`` and ``error``
    holds the message.
    """

    name: str
    bounded: Optional[bool] = None
    vertex_count: int = 0
    arc_count: int = 0
    witness: Optional[Witness] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def row(self) -> Tuple[str, str, str, str, str]:
        """
        The five display fields: name, ``"Yes"``/``"No"``, ``"V / E"`` or
        the witness path, ``"m,"`` and ``m'``.
        """
        if self.error is not None:
            return (self.name, "Error", self.error, "", "")
        if self.bounded:
            return (self.name, "Yes", f"{self.vertex_count} / {self.arc_count}", "", "")
        return (
            self.name,
            "No",
            self.witness.format_path(),
            f"{self.witness.m},",
            str(self.witness.m_prime),
        )


def analyze(
    net: PetriNet,
    name: str = "unnamed",
    *,
    covering: str = "unit",
    path_strategy: str = "dfs",
    max_states: Optional[int] = None,
) -> AnalysisResult:
    """
    Explore a copy of ``net`` from its initial marking and report
    boundedness.

    :param net: Net to analyse; left untouched.
    :type net: PetriNet
    :param name: Label for the result (typically the file name).
    :type name: str
    :returns: Verdict with counts or witness.
    :rtype: AnalysisResult
    :raises ExplorationLimitError: If ``max_states`` is exceeded.
    """
    work = net.copy()
    if work.initial_marking is not None:
        work.reset_to_initial()
    checker = CoverabilityChecker(covering=covering, path_strategy=path_strategy)
    result = StateSpaceExplorer(work, checker=checker, max_states=max_states).explore()
    analysis = AnalysisResult(
        name=name,
        bounded=result.bounded,
        vertex_count=result.graph.vertex_count,
        arc_count=result.graph.arc_count,
        witness=result.witness,
    )
    LOGGER.info("Analysed %s: %s", name, analysis.row())
    return analysis


def analyze_many(
    descriptions: Iterable[NetDescription],
    *,
    allow_duplicate_arcs: bool = False,
    **options,
) -> List[AnalysisResult]:
    """
    Load and analyse several nets.

    A net that fails to load or to explore is logged and reported with its
    error; the remaining nets are still analysed.

    :param descriptions: Net documents, analysed in order.
    :type descriptions: Iterable[NetDescription]
    :param options: Forwarded to :func:`analyze`.
    :returns: One result per description.
    :rtype: List[AnalysisResult]
    """
    results: List[AnalysisResult] = []
    for i, description in enumerate(descriptions, start=1):
        try:
            net = load(description, allow_duplicate_arcs=allow_duplicate_arcs)
            results.append(analyze(net, description.name, **options))
        except PetriNetError as exc:
            LOGGER.error(
                "File %d: error while analysing %s: %s", i, description.name, exc
            )
            results.append(AnalysisResult(name=description.name, error=str(exc)))
    return results


def results_to_frame(results: Iterable[AnalysisResult]) -> pd.DataFrame:
    """
    Tabulate results, one row per net.

    :returns: Frame with columns ``name``, ``bounded``, ``vertices``,
        ``arcs``, ``path_length``, ``path``, ``m``, ``m_prime`` and ``error``.
    :rtype: pandas.DataFrame
    """
    records = []
    for r in results:
        w = r.witness
        records.append(
            {
                "name": r.name,
                "bounded": r.bounded,
                "vertices": r.vertex_count,
                "arcs": r.arc_count,
                "path_length": w.path_length if w is not None else None,
                "path": ",".join(w.path) if w is not None else "",
                "m": str(w.m) if w is not None else "",
                "m_prime": str(w.m_prime) if w is not None else "",
                "error": r.error,
            }
        )
    return pd.DataFrame.from_records(records, columns=FRAME_COLUMNS)


def format_report(
    results: Iterable[AnalysisResult],
    *,
    width_name: Optional[int] = None,
    width_bounded: int = 10,
    width_path: int = 35,
    width_state: int = 15,
) -> str:
    """
    Fixed-width text table of :meth:`AnalysisResult.row` values.

    :param width_name: Width of the name column; defaults to the longest
        name (at least 8).
    :returns: Header, separator and one line per result.
    :rtype: str
    """
    results = list(results)
    if width_name is None:
        width_name = max([8] + [len(r.name) for r in results])

    def line(name: str, bounded: str, path: str, m: str, m_prime: str) -> str:
        return (
            f"{name:<{width_name}} | {bounded:<{width_bounded}} | "
            f"{path:<{width_path}} {m:<{width_state}} {m_prime:<{width_state}}"
        ).rstrip()

    lines = [
        line("", "", "Nodes / Edges", "", ""),
        line("Filename", "bounded", "Path length; m, m'", "", ""),
        "-" * (width_name + 1)
        + "|"
        + "-" * (width_bounded + 2)
        + "|"
        + "-" * (width_path + 2 * width_state),
    ]
    lines.extend(line(*r.row()) for r in results)
    return "\n".join(lines)
