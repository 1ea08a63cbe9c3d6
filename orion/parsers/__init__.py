import orion.functions

__author__ = 'Daniele Pantaleone'
__version__ = '1.0'


def getVariant(name):
    """
    Return the parser variant defined in orion.parsers.<name>.
    :param name: The variant module name (ie: urt42)
    :raise ImportError: If there is no such variant
    """
    module = orion.functions.getModule(f"orion.parsers.{name}")
    try:
        return module.variant
    except AttributeError:
        raise ImportError(f"orion.parsers.{name} does not define a parser variant") from None
