"""Settings package for the amenity booking service.

`base.py` contains configuration common to every environment; `dev.py`,
`prod.py` and `test.py` override it.
"""
