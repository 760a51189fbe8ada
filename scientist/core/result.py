"""Classification of candidate observations against the control."""

from typing import TYPE_CHECKING, Any, Dict, List

from scientist.core.observation import Observation

if TYPE_CHECKING:
    from scientist.core.experiment import Experiment


class Result:
    """
    Outcome of one experiment run.

    Candidates are partitioned into ``ignored``, ``matched`` and
    ``mismatched``; ignoring takes priority over comparison. The context is a
    snapshot taken at construction.
    """

    def __init__(self, experiment: "Experiment", control: Observation, candidates: List[Observation]):
        self.experiment = experiment
        self.context: Dict[str, Any] = dict(experiment.context())
        self.control = control
        self.candidates = list(candidates)

        self.ignored = [c for c in self.candidates if control.ignores(c)]
        comparable = [c for c in self.candidates if c not in self.ignored]
        self.matched = [c for c in comparable if control.matches(c)]
        self.mismatched = [c for c in comparable if c not in self.matched]

    @property
    def matched_all(self) -> bool:
        """True when no comparable candidate mismatched."""
        return not self.mismatched

    def __repr__(self) -> str:
        return (
            f"<Result {self.experiment.name!r} matched={len(self.matched)} "
            f"mismatched={len(self.mismatched)} ignored={len(self.ignored)}>"
        )