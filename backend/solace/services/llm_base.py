"""
Solace Backend — Abstract Advice Generator Interface
=====================================================

What:  Abstract base class defining the contract for AI advice generation.
Why:   ProblemService depends on this interface, not on OpenRouter, so the
       provider can change and tests can hand in a fake generator.
How:   Concrete implementations inherit from AdviceGenerator and implement
       generate_advice().
"""

from abc import ABC, abstractmethod
from typing import Sequence


class AdviceGenerator(ABC):
    """
    Contract:
        - generate_advice() returns one natural-language advice message
        - No retries: a failed call raises immediately and the caller may
          retry the whole operation
        - Provider errors are wrapped in LLMServiceError; an expired
          client-side timeout raises OperationTimeoutError

    Implementations:
        - OpenRouterService: OpenRouter chat completions over HTTPS
    """

    @abstractmethod
    async def generate_advice(self, problem_description: str, verses: Sequence[str]) -> str:
        """
        Synthesize advice for a problem from supporting verses.

        Args:
            problem_description: The problem text, included verbatim in the prompt.
            verses: Ordered verse citations with their text, e.g.
                "Jeremiah 29:11 - For I know the plans I have for you ...".
                They are numbered 1..N in the prompt.

        Returns:
            str: The advice text. Never empty.

        Raises:
            LLMServiceError: Network/endpoint failure or no content produced.
            OperationTimeoutError: The endpoint did not answer in time.
        """
        ...
