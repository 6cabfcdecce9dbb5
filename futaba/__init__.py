"""Futaba: a minimal language where every value is applied to the next one.

For reference:
- "pure": the value representation and the apply protocol, the whole evaluation core
- "lang": everything needed to get Futaba source text to that core, plus the native operator library

Basic program flow:
    1. Parser: reads one sentence at a time, resolving names in the environment and building Values directly
        - There is no syntax tree: a parsed sentence is a chain of DeferredCalls, ready to run
    2. Evaluation: every sentence is applied to the terminal continuation end
        - Nothing else ever happens: values apply each other until end is reached
"""

__version__ = "0.1.0"
