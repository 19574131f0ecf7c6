"""FlowForge - recording intelligence for browser test generation.

Turns a raw recorded browser session into cleaned actions, stable
locators, business flows, names, assertion suggestions and extracted
test data, and scores the code generated from them.
"""

__version__ = "0.3.0"

__all__ = ["__version__"]
