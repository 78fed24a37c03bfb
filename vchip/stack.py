#!/usr/bin/env python3

"""
Stack Emulator

It is unnecessary to include the CPU call stack as part of system RAM, because
there is no specified location for it.  There is also no stack pointer (SP)
register exposed to the running program.  This means we can simply wrap lists
to fully (and quickly) emulate it.

The stack holds return addresses only, and has a fixed depth.  Pushing onto a
full stack or popping an empty one raises, leaving the stack untouched.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"


class StackError(Exception):
    pass


class StackOverflowError(StackError):
    pass


class StackUnderflowError(StackError):
    pass


class Stack:
    def __init__(self, size):
        self.items = []
        self.size = size

    def push(self, item):
        # Fetching the stack size with 'len' should be immediate, so no slow loop
        if len(self.items) >= self.size:
            raise StackOverflowError("Stack overflow")

        self.items.append(item)

    def pop(self):
        try:
            return self.items.pop()
        except IndexError:
            raise StackUnderflowError("Stack underflow") from None

    def get_pointer(self):
        return len(self.items)

    def get_items(self):
        # For debugging
        return self.items

    def clear(self):
        self.items.clear()
