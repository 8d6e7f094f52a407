"""
Analysis Protocols — Abstract base classes for pluggable argument classifiers.

WHAT THIS IS:
The contract every argument classifier satisfies. The rest of the analysis
pipeline (clash identification, scoring, speech generation) only ever talks
to this interface, so the keyword classifier and the model-backed one are
interchangeable.

WHY ASYNC:
The keyword classifier does no I/O, but a model-backed classifier does.
Keeping `classify` async means callers never have to know which one they
were handed.

USAGE:
    class MyClassifier(BaseArgumentClassifier):
        @property
        def backend_name(self) -> str:
            return "mine"

        async def classify(self, text, source_role, types=None):
            ...
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable

from app.services.analysis.models import ArgumentSignal


class BaseArgumentClassifier(ABC):
    """
    Abstract base class for argument classifiers.

    The default KeywordArgumentClassifier in classifier.py implements this
    interface; OpenAIArgumentClassifier in llm_classifier.py wraps it.
    """

    @property
    @abstractmethod
    def backend_name(self) -> str:
        """Short identifier used in logs ("rules", "openai")."""
        pass

    @abstractmethod
    async def classify(
        self,
        text: str,
        source_role: str,
        types: Iterable[str] | None = None,
    ) -> list[ArgumentSignal]:
        """
        Classify the arguments made in a piece of text.

        Args:
            text: Speech transcript or prep notes
            source_role: Role code of whoever produced the text
            types: Restrict output to these argument types (all types if None)

        Returns:
            At most one ArgumentSignal per argument type, in taxonomy order
        """
        pass
