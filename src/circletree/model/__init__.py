"""
The MODEL layer contains pure data structures and business logic.
It has NO knowledge of the GUI (Qt): the shell forwards pointer positions
already converted to model space and listens to a Monitor.
It deals with Geometry, the Decision Tree, the Navigation Engine and I/O.
"""
