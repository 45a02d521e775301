"""
Server-side AMD module aggregator core.

Subpackages:
    logic     -- boolean literal/term/formula model and DNF minimizer
    hasexpr   -- 'has!' plugin ternary expressions
    deps      -- dependency edge maps and the dependency list resolver
    cachekey  -- cache key generators for aggregated builds
"""

__version__ = '0.1'
