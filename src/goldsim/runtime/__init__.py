"""Runtime context exports."""

from goldsim.runtime.context import RunContext, create_run_context, make_run_id

__all__ = ["RunContext", "create_run_context", "make_run_id"]
