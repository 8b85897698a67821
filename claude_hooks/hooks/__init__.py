"""Hook runtime: input decoding, the handler pipeline, and host output.

Modules here import only the standard library and :mod:`claude_hooks.core`
at module level; feature modules are loaded on demand by the dispatcher.
"""
