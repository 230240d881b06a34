"""Export helpers.

- schedule: wall / opening / room tables with engineering metadata
"""
