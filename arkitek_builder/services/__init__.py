# Services package

from .boot_script_generator import BootScriptGenerator
from .diagnostics import run_benchmark, run_until_fail

__all__ = ["BootScriptGenerator", "run_benchmark", "run_until_fail"]
