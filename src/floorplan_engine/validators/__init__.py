"""Plan validation before export.

- floorplan: wall, opening and room consistency checks
"""
