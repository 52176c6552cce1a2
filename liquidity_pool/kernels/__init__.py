"""
Kernel layer.

Pure, integer-only functions that define the pool's rounding and overflow
semantics. Everything above this layer delegates its arithmetic here.
"""
