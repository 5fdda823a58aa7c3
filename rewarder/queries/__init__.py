from rewarder.queries.common import *
from rewarder.queries.shares import *
