"""
The MODEL layer contains pure data structures and business logic.
It has NO knowledge of the GUI, the painting layer or the page exporter.
It deals with Units, Viewports and Axis ranges.
"""
