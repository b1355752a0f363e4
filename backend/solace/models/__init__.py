"""
Solace Backend — ORM Models
============================

Importing this package registers every table with `Base.metadata`, which the
foreign keys between them rely on.
"""

from solace.models.feedback import AdviceFeedback
from solace.models.problem import Problem
from solace.models.reading_plan import ReadingPlan, ReadingPlanItem
from solace.models.user import User
from solace.models.verse import Verse

__all__ = ["User", "Problem", "ReadingPlan", "ReadingPlanItem", "Verse", "AdviceFeedback"]
