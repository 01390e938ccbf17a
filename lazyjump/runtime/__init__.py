"""Interactive terminal runtime."""

from .loop import JumpApp, run_main_loop

__all__ = ["JumpApp", "run_main_loop"]
