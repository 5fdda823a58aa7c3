class InvalidAmountError(Exception):
    """Raise if a distribution would escrow nothing"""

    pass


class InvalidDurationError(Exception):
    """Raise if a distribution window does not line up with epoch boundaries"""

    pass


class NotWhitelistedError(Exception):
    """Raise if the reward token is not on the reward token whitelist"""

    pass


class StaleStartError(Exception):
    """Raise if a distribution starts before the current epoch"""

    pass


class UnknownDistributionError(Exception):
    pass


class EmptyShareTableError(Exception):
    """Raise if there is nobody (or no share weight) to apportion rewards to"""

    pass


class ZeroDisputePeriodError(Exception):
    """Raise if a root is proposed before the dispute period is configured"""

    pass


class InvalidProofError(Exception):
    """Raise if a merkle proof does not reconstruct the governing root"""

    pass


class NothingToClaimError(Exception):
    """Raise if the cumulative amount has already been paid out"""

    pass


class InsufficientBalanceError(Exception):
    pass


class MissingSnapshotError(Exception):
    """Raise if no stored tree matches the requested root"""

    pass


class EmptyRootError(Exception):
    """Raise if the all-zero root is proposed, it can never verify a claim"""

    pass


class LeafNotFoundError(Exception):
    pass


class BadConfigException(Exception):
    pass


class MissingEnvironmentVariableException(Exception):
    pass


class EmptyQueryError(Exception):
    """Raise if GraphQL Query returns no results"""

    pass


class TooManyLoopsError(Exception):
    """Raise if a loop runs too many times"""

    pass
