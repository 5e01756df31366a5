"""
Error-handling policies for FlagSet.parse().

A policy is handed to the FlagSet constructor and called with the flag set and
the fault (a FlagSetException or the HelpRequested signal) whenever a parse
fails. Three policies are provided:

- ContinueOnError  re-raise the fault to the caller, printing nothing.
- ExitOnError      print the fault and the usage text, then exit (status 2 by
                   default). The exit callable is injectable for tests.
- PanicOnError     print like ExitOnError, then raise Panic from the fault.

Any callable with the same signature can be used instead.
"""
import sys
from abc import ABC, abstractmethod

from .faults import HelpRequested, Panic


class ErrorHandling(ABC):
    @abstractmethod
    def __call__(self, flagset, fault, /):
        ...

    def report(self, flagset, fault, /):
        """print the fault (help only prints the usage) on the flag set's console."""
        if not isinstance(fault, HelpRequested):
            flagset.print_fault(fault)
        flagset.print_usage()

    def __repr__(self):
        return "%s()" % type(self).__name__


class ContinueOnError(ErrorHandling):
    def __call__(self, flagset, fault, /):
        raise fault


class ExitOnError(ErrorHandling):
    def __init__(self, status=2, /, exit=sys.exit):
        if not isinstance(status, int):
            raise TypeError("ExitOnError() status must be an integer")
        if not callable(exit):
            raise TypeError("ExitOnError() exit must be callable")
        self.status = status
        self.exit = exit

    def __call__(self, flagset, fault, /):
        self.report(flagset, fault)
        self.exit(self.status)

    def __repr__(self):
        return "ExitOnError(%d)" % self.status


class PanicOnError(ErrorHandling):
    def __call__(self, flagset, fault, /):
        self.report(flagset, fault)
        raise Panic(fault) from fault


__all__ = (
    "ErrorHandling",
    "ContinueOnError",
    "ExitOnError",
    "PanicOnError",
)
