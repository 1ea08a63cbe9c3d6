__author__ = "Daniele Pantaleone, Mathias Van Malderen"
__version__ = "0.2.0"

version = f"^2(orion) ^3v{__version__}"

confdir = None


def getVersionString():
    """
    Return the Orion version as a string.
    """
    import re

    return re.sub(r"\^[0-9a-z]", "", version)
