"""
Types here are instantiated as subclasses of pydantic's `BaseModel`.
This means we get runtime deserialization and validation for free just by using type declarations
and a couple of pydantic helpers.

Use these in your code as python objects, then serialize to json with `.model_dump()`
"""

from rewarder.models.Claim import *
from rewarder.models.Config import *
from rewarder.models.Distribution import *
from rewarder.models.Root import *
from rewarder.models.Shares import *
from rewarder.models.Tree import *
from rewarder.models.types import *
