"""
Terminal host for the drill engine.
"""
