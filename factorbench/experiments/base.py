"""
Base experiment interface.
Every experiment builds inputs from input factors and executes algorithm variants on them.
"""

from abc import ABC, abstractmethod
from typing import Any, List, Optional, Sequence, Tuple

from ..benchmark.validation import Expected
from ..factors.base import AlgFactors, InputFactors


class Experiment(ABC):
    """
    Abstract base class for factorial experiments.

    An experiment analyzes the impact of algorithm factors (parameter
    settings) on solution time over inputs defined by input factors.

    ``input`` is called once per input-level and its result is shared by all
    algorithm variants; building it is never timed. ``execute`` is the code
    under analysis. ``expected_output`` and ``validate_output`` are called once
    per treatment, outside of timing.

    Example:
        class SearchExperiment(Experiment):
            name = "search"

            def input(self, input_levels):
                return list(range(input_levels["len"]))

            def execute(self, alg_levels, input):
                return input.index(7) if 7 in input else None

            def expected_output(self, input_levels, input):
                return Expected(7 if input_levels["len"] > 7 else None)
    """

    # Experiment identification
    name: str = "experiment"
    display_name: str = "Experiment"
    description: str = ""

    @abstractmethod
    def input(self, input_levels: InputFactors) -> Any:
        """
        Create the input defined by the given input-level.

        Args:
            input_levels: Input factor levels

        Returns:
            Input instance shared by all algorithm variants
        """
        pass

    @abstractmethod
    def execute(self, alg_levels: AlgFactors, input: Any) -> Any:
        """
        Execute the algorithm variant on the input.

        Args:
            alg_levels: Algorithm factor levels selecting the variant
            input: Input instance created by ``input``

        Returns:
            Output, comparable with ``==``
        """
        pass

    def expected_output(self, input_levels: InputFactors, input: Any) -> Optional[Expected]:
        """
        Expected output for the input, shared by all algorithm variants.

        Default returns None and the equality check is skipped. Overriding it
        assumes every variant deterministically produces the same output;
        randomized variants should keep the default and rely on
        ``validate_output`` instead.
        """
        return None

    def validate_output(self, input_levels: InputFactors, input: Any, output: Any) -> None:
        """
        Additional checks on an output; raise (e.g. AssertionError) if invalid.

        Default does nothing.
        """
        pass

    def default_levels(self) -> Tuple[List[InputFactors], List[AlgFactors]]:
        """Input-levels and algorithm-levels used when running from the CLI."""
        raise NotImplementedError(f"{self.__class__.__name__} does not define default levels")

    def bench(
        self,
        input_levels: Sequence[InputFactors],
        alg_levels: Sequence[AlgFactors],
        harness: Any = None,
        name: Optional[str] = None,
    ):
        """
        Run the full factorial experiment and return its ExperimentResult.

        Shortcut for ``ExperimentRunner(self, harness).run(...)``.
        """
        from ..benchmark.runner import ExperimentRunner

        runner = ExperimentRunner(self, harness=harness)
        return runner.run(input_levels, alg_levels, name=name)

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}(name={self.name})>"
