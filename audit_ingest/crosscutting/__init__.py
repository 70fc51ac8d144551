"""
Crosscutting concerns: config, logging, errors, metrics, middleware, timing.
"""
