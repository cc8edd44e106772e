class CatduError(ValueError):
    """Base class for errors that abort a report run."""


class DecodeError(CatduError):
    pass


class FormatError(CatduError):
    pass


class UnitParseError(CatduError):
    pass


class CatalogError(CatduError):
    pass


class ConfigError(CatduError):
    pass
