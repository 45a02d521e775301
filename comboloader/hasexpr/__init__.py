"""
Ternary 'feature?ifTrue:ifFalse' expressions of the has! loader plugin.
"""

from .node import HasNode

from .parse import parse
