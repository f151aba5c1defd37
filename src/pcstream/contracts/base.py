"""Base contract enforcement utilities.

The require() function is the single enforcement mechanism for all contracts.
"""

from pcstream.contracts.failure import ContractViolation


def require(condition: bool, message: str) -> None:
    """Enforce a pipeline contract.

    Parameters
    ----------
    condition : bool
        The invariant that must be true. If False, ContractViolation is raised.

    message : str
        Error message explaining the contract violation (for debugging).

    Raises
    ------
    ContractViolation
        If condition is False. This indicates a bug in pipeline logic.

    Examples
    --------
    >>> require(stage.state is StageState.PREPARED, "Stage contract: not prepared")
    >>> require(n <= buffer.capacity, "Buffer contract: capacity exceeded")
    """
    if not condition:
        raise ContractViolation(message)
