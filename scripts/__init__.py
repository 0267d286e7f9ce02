"""
TokenCraft operational scripts.
"""
