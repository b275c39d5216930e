'''
Exceptions for the oplplayer library
'''


class OplPlayerException(Exception):
    """
    Generic base class for oplplayer exceptions
    """
    pass


class OplPlayerValueError(OplPlayerException, ValueError):
    """
    Value error
    """
    pass


class OplPlayerFormatError(OplPlayerException):
    """
    Format error (bad magic, unsupported version or feature, unknown opcode)
    """
    pass


class OplPlayerContentError(OplPlayerException):
    """
    Content error (such as commands out of time order)
    """
    pass


class OplPlayerNotImplemented(OplPlayerException):
    """
    Not implemented error
    """
    pass
