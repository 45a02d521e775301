"""
Dependency edge maps and the dependency list resolver.

The resolver lives in deps.deplist and the in-memory graph in deps.graph;
they are not imported here since has! expressions build edge maps too.
"""

from .info import ModuleDepInfo
from .moduledeps import ModuleDeps
