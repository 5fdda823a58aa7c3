import os
from dotenv import load_dotenv
from rewarder.errors import MissingEnvironmentVariableException

load_dotenv()


def env_var(accessor: str) -> str:
    """
    Attempt to fetch an environment variable and throw
    an error if not found
    """
    var = os.environ.get(accessor)
    if not var:
        raise MissingEnvironmentVariableException(accessor)
    return var


class SUBGRAPHS:
    """
    Subgraph endpoints are resolved on access so the package can be imported
    (and tested) without a populated environment
    """

    @staticmethod
    def lp_shares() -> str:
        return env_var("SUBGRAPH_LP_SHARES")
