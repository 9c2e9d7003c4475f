"""
The MODEL layer contains pure data structures.
It has NO knowledge of the GUI (Qt) or the frame loop.
It deals with Sections, navigator state and Ripples.
"""
