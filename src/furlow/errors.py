## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import lark


class FurlowError(Exception):
    def __init__(self, message: str = "", *, furlow_op=None, furlow_token=None):
        """Base class for all errors raised by the shell, the bridge or the machine."""
        super().__init__(message)
        self.furlow_op: object = furlow_op
        self.furlow_token: str = furlow_token

class FurlowParseError(FurlowError):
    def __init__(self, message, *, filename=None, line=None, column=None, token=None):
        super().__init__(message)
        self.filename = filename
        self.line = line
        self.column = column
        self.token = token

class FurlowIncompleteParse(FurlowParseError, lark.exceptions.ParseError):
    def __init__(self, message, *, filename=None, line=None, column=None, token=None):
        super().__init__(message, filename=filename, line=line, column=column, token=token)

class FurlowAssemblyError(FurlowError, ValueError):
    pass

class FurlowCommandError(FurlowError, LookupError):
    pass

class FurlowTypeMissing(FurlowError, TypeError):
    """Registration-time problems with the annotations of a native function."""
    pass


class FurlowRuntimeError(FurlowError, RuntimeError):
    """Fatal errors; the shell's policy decides whether they end the session."""
    pass

class FurlowStackUnderflow(FurlowRuntimeError, IndexError):
    pass

class FurlowNameError(FurlowRuntimeError, NameError):
    pass

class FurlowValueError(FurlowRuntimeError, ValueError):
    pass

class FurlowZeroDivision(FurlowRuntimeError, ZeroDivisionError):
    pass


class FurlowTypeMismatch(FurlowRuntimeError, TypeError):
    def __init__(self, message: str = "", *, expected=None, found=None, furlow_op=None, furlow_token=None):
        super().__init__(message, furlow_op=furlow_op, furlow_token=furlow_token)
        self.expected = expected
        self.found = found

class FurlowArityMismatch(FurlowRuntimeError, TypeError):
    def __init__(self, message: str = "", *, expected=None, found=None, furlow_op=None, furlow_token=None):
        super().__init__(message, furlow_op=furlow_op, furlow_token=furlow_token)
        self.expected = expected
        self.found = found
