class EffError(Exception):
    pass

class BadSignature(EffError):
    pass

class TruncatedInput(EffError):
    pass

class OutOfBounds(TruncatedInput):
    def __init__(self, pos, length, size):
        TruncatedInput.__init__(self,
            "read of %d bytes at 0x%x runs past end of buffer (0x%x)" % (length, pos, size))
        self.pos = pos
        self.length = length
        self.size = size

class InvalidHeader(EffError):
    pass

class InvalidString(EffError):
    pass

class UnresolvedReference(EffError):
    pass

class MalformedStructuredInput(EffError):
    def __init__(self, path, message):
        EffError.__init__(self, "%s: %s" % (path or "<document>", message))
        self.path = path
        self.message = message

__all__ = [
    "EffError", "BadSignature", "TruncatedInput", "OutOfBounds", "InvalidHeader",
    "InvalidString", "UnresolvedReference", "MalformedStructuredInput",
]
