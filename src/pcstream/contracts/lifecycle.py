"""Stage lifecycle contract.

Enforces the Uninitialized → Prepared → Iterating → Done ordering.
"""

from typing import TYPE_CHECKING

from pcstream.contracts.base import require

if TYPE_CHECKING:
    from pcstream.stages.base import Stage, StageState


def assert_state(stage: "Stage", *allowed: "StageState", action: str = "use") -> None:
    """Enforce that ``stage`` is in one of the ``allowed`` states.

    Parameters
    ----------
    stage : Stage
        Stage about to be used.

    *allowed : StageState
        States in which ``action`` is legal.

    action : str, optional
        Verb describing the attempted operation, used in the message.

    Raises
    ------
    ContractViolation
        If the stage is in any other state.
    """
    names = ", ".join(state.value for state in allowed)
    require(
        stage.state in allowed,
        f"Stage contract violated: cannot {action} '{stage.stage_id}' "
        f"in state '{stage.state.value}' (expected one of: {names})"
    )
