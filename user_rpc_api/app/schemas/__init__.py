"""
Pydantic schema definitions for procedure inputs and outputs.
"""
